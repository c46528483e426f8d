"""
Tests for cron expression validation.
"""

import pytest

from aegis.core.services.cron import cron_error, expand_macro, is_valid_cron


class TestCronValidation:
    @pytest.mark.parametrize(
        "expression",
        [
            "0 2 * * *",
            "*/15 * * * *",
            "30 3 * * 1-5",
            "0 0 1 * *",
            "0 4 * * 7",
            "0 4 * * 0-7",
            "0 4 * * 5,7",
            "0 4 * * 1-7/2",
            "@daily",
            "@reboot",
        ],
    )
    def test_valid(self, expression: str):
        assert is_valid_cron(expression)

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "0 2 * *",
            "0 2 * * * *",
            "60 * * * *",
            "0 25 * * *",
            "0 4 * * 8",
            "@fortnightly",
            "every day",
        ],
    )
    def test_invalid(self, expression: str):
        assert not is_valid_cron(expression)

    def test_error_names_field_count(self):
        assert "Expected 5 cron fields, got 4" in cron_error("0 2 * *")

    def test_empty_message(self):
        assert cron_error("   ") == "Cron expression is empty"

    def test_expand_macro(self):
        assert expand_macro("@hourly") == "0 * * * *"
        assert expand_macro(" 5 4 * * * ") == "5 4 * * *"

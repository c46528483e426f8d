"""
Variant resolution — shared machinery for the backend and provider resolvers.

A resolver is a closed set of keys with a human label each. Selection
shows the labels as a menu and maps the answer back to its key;
configuration dispatches on the key through a handler table that must
cover the whole set. Coverage is checked when the resolver module is
imported, so a missing handler fails the program at startup rather
than at the moment an operator picks that variant.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from aegis.adapters.base import Prompter
from aegis.core.errors import SelectionInvalid, UnsupportedVariant, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def select_variant(prompter: Prompter, label: str, choices: Mapping[str, str]) -> str:
    """Show ``choices`` (key → label) as a menu and return the chosen key.

    Raises:
        PromptAborted: The operator cancelled (raised by the prompter).
        SelectionInvalid: The answer matches no known label.
    """
    picked = prompter.select(label, list(choices.values()))
    for key, text in choices.items():
        if text == picked:
            logger.debug("%s → %s", label, key)
            return key
    raise SelectionInvalid(f"Unknown selection {picked!r} for: {label}")


def check_exhaustive(kind: str, keys: Iterable[str], handlers: Mapping[str, Any]) -> None:
    """Fail fast unless ``handlers`` has exactly one entry per key."""
    expected = {str(k) for k in keys}
    present = {str(k) for k in handlers}
    missing = sorted(expected - present)
    unknown = sorted(present - expected)
    if missing or unknown:
        raise UnsupportedVariant(
            f"{kind} handlers out of sync: missing={missing} unknown={unknown}"
        )


def dispatch(kind: str, key: str, handlers: Mapping[str, Callable[..., Any]]) -> Callable[..., Any]:
    """Look up the handler for ``key``.

    Unreachable failure once ``check_exhaustive`` passed for the table.
    """
    handler = handlers.get(key)
    if handler is None:
        raise UnsupportedVariant(f"No {kind} handler for {key!r}")
    return handler


def build_variant(model: type[M], **fields: Any) -> M:
    """Construct a model from prompt answers, reporting bad ones as ValidationError."""
    try:
        return model(**fields)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid {model.__name__}: {problems}") from e


def ask_secret(prompter: Prompter, label: str) -> str:
    """Ask for a non-empty hidden value."""
    value = prompter.text(label, secret=True)
    if not value:
        raise ValidationError(f"{label} must not be empty")
    return value


def ask_required(prompter: Prompter, label: str, default: str | None = None) -> str:
    """Ask for a non-empty visible value."""
    value = prompter.text(label, default=default)
    if not value:
        raise ValidationError(f"{label} must not be empty")
    return value

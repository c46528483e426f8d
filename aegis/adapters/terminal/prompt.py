"""
Terminal prompter — click-driven menus and questions.
"""

from __future__ import annotations

import click

from aegis.adapters.base import Prompter
from aegis.core.errors import PromptAborted


class ClickPrompter(Prompter):
    """Prompt the operator on the controlling terminal.

    ``click.Abort`` (Ctrl-C, EOF) is translated to ``PromptAborted``.
    With ``err=True`` everything is written to stderr, keeping stdout
    free for machine-readable output.
    """

    def __init__(self, err: bool = False):
        self._err = err

    def select(self, label: str, options: list[str]) -> str:
        click.secho(f"\n{label}", fg="cyan", bold=True, err=self._err)
        for number, option in enumerate(options, start=1):
            click.echo(f"  {number}) {option}", err=self._err)
        try:
            choice = click.prompt("Choice", type=click.IntRange(1, len(options)), err=self._err)
        except click.Abort as e:
            raise PromptAborted(f"Selection cancelled: {label}") from e
        return options[choice - 1]

    def text(self, label: str, default: str | None = None, secret: bool = False) -> str:
        try:
            value = click.prompt(
                label,
                default=default,
                hide_input=secret,
                confirmation_prompt=secret,
                show_default=not secret,
                err=self._err,
            )
        except click.Abort as e:
            raise PromptAborted(f"Prompt cancelled: {label}") from e
        return str(value).strip()

    def confirm(self, label: str, default: bool = False) -> bool:
        try:
            return click.confirm(label, default=default, err=self._err)
        except click.Abort as e:
            raise PromptAborted(f"Prompt cancelled: {label}") from e

    def integer(self, label: str, default: int = 0, minimum: int = 0, maximum: int | None = None) -> int:
        try:
            return click.prompt(
                label,
                default=default,
                type=click.IntRange(minimum, maximum),
                err=self._err,
            )
        except click.Abort as e:
            raise PromptAborted(f"Prompt cancelled: {label}") from e

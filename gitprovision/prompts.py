"""
Interactive prompt engine.

The resolver only talks to the `Prompter` protocol; `ClickPrompter` is the
terminal implementation built on click.
"""

from collections.abc import Callable, Sequence
from typing import Protocol

import click

from gitprovision.exceptions import (
    PromptCancelledError,
    RepositoryNameRequiredError,
    ValidationRejectedError,
)

# A validator accepts a value by returning and rejects it by raising one of
# REJECTION_ERRORS; the error message is shown before re-prompting. Any other
# error raised by a validator propagates out of the prompt.
Validator = Callable[[str], None]

REJECTION_ERRORS = (ValidationRejectedError, RepositoryNameRequiredError)


class Prompter(Protocol):
    """Renders questions to a human and returns validated answers."""

    def ask(
        self,
        question: str,
        default: str = "",
        validator: Validator | None = None,
        hide_input: bool = False,
    ) -> str:
        """
        Ask a free-text question, re-asking until validator accepts the answer.

        Raises:
            PromptCancelledError: If the user aborts
        """
        ...

    def choose(self, question: str, options: Sequence[str], default: str | None = None) -> str:
        """
        Ask the user to pick one of options.

        Raises:
            PromptCancelledError: If the user aborts
        """
        ...

    def echo(self, message: str) -> None:
        """Show an informational message."""
        ...


class ClickPrompter:
    """Prompter reading from the terminal via click."""

    def __init__(self, err: bool = True) -> None:
        """
        Args:
            err: Write prompts and messages to stderr, keeping stdout for results
        """
        self.err = err

    def ask(
        self,
        question: str,
        default: str = "",
        validator: Validator | None = None,
        hide_input: bool = False,
    ) -> str:
        def value_proc(value: str) -> str:
            if validator is not None:
                try:
                    validator(value)
                except REJECTION_ERRORS as e:
                    # click re-prompts on UsageError subclasses
                    raise click.BadParameter(e.message) from e
            return value

        try:
            return click.prompt(
                question,
                default=default or None,
                value_proc=value_proc,
                hide_input=hide_input,
                err=self.err,
            )
        except (click.Abort, KeyboardInterrupt, EOFError):
            raise PromptCancelledError() from None

    def choose(self, question: str, options: Sequence[str], default: str | None = None) -> str:
        try:
            return click.prompt(
                question,
                type=click.Choice(list(options)),
                default=default,
                show_choices=True,
                err=self.err,
            )
        except (click.Abort, KeyboardInterrupt, EOFError):
            raise PromptCancelledError() from None

    def echo(self, message: str) -> None:
        click.echo(message, err=self.err)

"""Interactive prompts."""

from typing import Protocol

import click


class Prompter(Protocol):
    """Reads answers from the user."""

    def prompt_visible(self, label: str) -> str:
        ...

    def prompt_hidden(self, label: str) -> str:
        ...


class TerminalPrompter:
    """Prompts on the terminal. Labels are shown exactly as given."""

    def prompt_visible(self, label: str) -> str:
        return self._prompt(label, hide_input=False).strip()

    def prompt_hidden(self, label: str) -> str:
        return self._prompt(label, hide_input=True)

    def _prompt(self, label: str, hide_input: bool) -> str:
        # An empty answer is valid, it declines y/[n] questions
        return click.prompt(
            label,
            default="",
            show_default=False,
            hide_input=hide_input,
            prompt_suffix="",
        )

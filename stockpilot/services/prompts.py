from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

"""User prompts: a yes/no decision before writing, notices afterwards."""

YES_ANSWERS = frozenset({"y", "yes", "o", "oui"})


class Prompter(Protocol):
    def confirm(self, message: str) -> bool:
        """Block until the user answers; True means go ahead."""
        ...

    def notify(self, message: str) -> None:
        ...


class ConsolePrompter:
    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self._input = input_func
        self._output = output_func

    def confirm(self, message: str) -> bool:
        self._output(message)
        try:
            answer = self._input("Continue? [y/N] ")
        except (EOFError, KeyboardInterrupt):
            self._output("")
            return False
        return answer.strip().lower() in YES_ANSWERS

    def notify(self, message: str) -> None:
        self._output(message)


class AutoConfirmPrompter:
    """Answers yes without asking (``--yes``); notices are still shown."""

    def __init__(self, output_func: Callable[[str], None] = print) -> None:
        self._output = output_func
        self.confirmations: list[str] = []

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return True

    def notify(self, message: str) -> None:
        self._output(message)

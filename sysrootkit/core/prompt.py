"""
Interactive prompt capability.

Components that need to ask the user something receive a :class:`Prompt`
instead of reading from stdin themselves, so scripted answers can be supplied
in tests and non-interactive runs.
"""

import sys
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TextIO

YES_ANSWERS = ("y", "yes")


class Prompt(ABC):
    """Abstract source of user answers."""

    @abstractmethod
    def ask(self, message: str) -> Optional[str]:
        """
        Ask a free-form question.

        Args:
            message: Question text

        Returns:
            The answer, or None if input ended (EOF)
        """
        pass

    @abstractmethod
    def show(self, text: str) -> None:
        """Display informational text to the user."""
        pass

    def confirm(self, message: str, default: bool = False) -> bool:
        """
        Ask a yes/no question.

        Args:
            message: Question text without the ``(y/N)`` suffix
            default: Answer used for empty input or EOF

        Returns:
            True for yes, False for no
        """
        suffix = "(Y/n)" if default else "(y/N)"
        answer = self.ask(f"{message} {suffix}: ")
        if answer is None or not answer.strip():
            return default
        return answer.strip().lower() in YES_ANSWERS


class ConsolePrompt(Prompt):
    """
    Prompt on the terminal.

    Questions are written to stderr so that stdout can carry shell code
    when the CLI runs in ``--eval`` mode.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stderr

    def ask(self, message: str) -> Optional[str]:
        self.stdout.write(message)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\n")

    def show(self, text: str) -> None:
        print(text, file=self.stdout)


class ScriptedPrompt(Prompt):
    """
    Prompt that replays a fixed list of answers.

    Attributes:
        questions: Every question asked so far
        shown: Every piece of informational text displayed so far
    """

    def __init__(self, answers: Iterable[Optional[str]] = ()):
        self._answers: List[Optional[str]] = list(answers)
        self.questions: List[str] = []
        self.shown: List[str] = []

    def ask(self, message: str) -> Optional[str]:
        self.questions.append(message)
        if not self._answers:
            return None
        return self._answers.pop(0)

    def show(self, text: str) -> None:
        self.shown.append(text)

"""
Confirmation providers for shellkit.

Overwrite prompts go through a ConfirmationProvider so file transfers never
talk to the terminal directly. The console provider asks the user; the
callback and scripted providers let callers and tests answer instead.
"""

from typing import Callable, Iterable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape


DEFAULT_ACCEPT = ("y", "yes")


class ConfirmationProvider:
    """
    Answers yes/no questions.

    Subclasses implement ask(); confirm() applies the accepted-answer set.
    """

    def __init__(self, accept: Optional[Iterable[str]] = None):
        """
        Args:
            accept: Answers counted as "yes" (case-insensitive)
        """
        self.accept = tuple(a.strip().lower() for a in (accept or DEFAULT_ACCEPT))

    def ask(self, question: str) -> str:
        raise NotImplementedError

    def confirm(self, question: str) -> bool:
        """
        Ask a question and report whether the answer is affirmative.

        Anything outside the accepted set, including an empty answer,
        counts as "no".
        """
        answer = self.ask(question)
        return answer.strip().lower() in self.accept


class ConsoleConfirmation(ConfirmationProvider):
    """Prompt on the terminal through a rich Console."""

    def __init__(self, console: Optional[Console] = None, accept: Optional[Iterable[str]] = None):
        super().__init__(accept)
        self.console = console or Console()

    def ask(self, question: str) -> str:
        try:
            return self.console.input(escape(f"{question} [y/N] "))
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return "n"


class CallbackConfirmation(ConfirmationProvider):
    """Delegate the decision to a callable taking the question text."""

    def __init__(self, callback: Callable[[str], bool]):
        super().__init__()
        self._callback = callback

    def ask(self, question: str) -> str:
        return "y" if self._callback(question) else "n"


class ScriptedConfirmation(ConfirmationProvider):
    """
    Replay canned answers in order.

    Questions asked are recorded in ``questions``. Once the script runs out
    every further question is answered "n".
    """

    def __init__(self, answers: Sequence[str] = (), accept: Optional[Iterable[str]] = None):
        super().__init__(accept)
        self._answers: List[str] = list(answers)
        self.questions: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self._answers:
            return "n"
        return self._answers.pop(0)

"""Confirmation prompts and one-way notifications.

The state layer only talks to the :class:`ConfirmationPrompt` protocol. The
terminal session uses :class:`TerminalPrompt`; scripted callers (one-shot CLI
commands, tests) use :class:`ScriptedPrompt`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import sys
from typing import Callable, List, Optional, Protocol, TextIO, Tuple


class PromptKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    QUESTION = "question"
    INFO = "info"


_KIND_MARKERS = {
    PromptKind.SUCCESS: "[ok]",
    PromptKind.ERROR: "[error]",
    PromptKind.WARNING: "[!]",
    PromptKind.QUESTION: "[?]",
    PromptKind.INFO: "[i]",
}


class ConfirmationPrompt(Protocol):
    def ask(
        self,
        title: str,
        text: str,
        kind: PromptKind,
        *,
        confirmable: bool = True,
        confirm_label: str = "OK",
        cancel_label: str = "Cancel",
    ) -> bool:
        ...

    def notify(self, title: str, text: str, kind: PromptKind) -> None:
        ...


class TerminalPrompt:
    """Yes/no questions and notices on a text terminal."""

    def __init__(
        self,
        *,
        input_fn: Optional[Callable[[str], str]] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._input = input_fn or input
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def ask(
        self,
        title: str,
        text: str,
        kind: PromptKind,
        *,
        confirmable: bool = True,
        confirm_label: str = "OK",
        cancel_label: str = "Cancel",
    ) -> bool:
        print(f"\n{_KIND_MARKERS[kind]} {title}", file=self.stream)
        print(text, file=self.stream)
        if not confirmable:
            try:
                self._input(f"[{cancel_label}] > ")
            except EOFError:
                pass
            return False

        confirm_key = confirm_label[:1].lower()
        cancel_key = cancel_label[:1].lower()
        if confirm_key == cancel_key:
            confirm_key, cancel_key = "y", "n"

        while True:
            try:
                answer = self._input(
                    f"[{confirm_key}] {confirm_label}  [{cancel_key}] {cancel_label} > "
                ).strip().lower()
            except EOFError:
                return False
            if answer in {confirm_key, confirm_label.lower()}:
                return True
            if answer in {"", cancel_key, cancel_label.lower()}:
                return False
            print("Please answer with one of the listed keys.", file=self.stream)

    def notify(self, title: str, text: str, kind: PromptKind) -> None:
        print(f"{_KIND_MARKERS[kind]} {title}: {text}", file=self.stream)


@dataclass
class ScriptedPrompt:
    """Answers every question with a fixed reply and records the exchange."""

    answer: bool = True
    echo: Optional[TextIO] = None
    questions: List[Tuple[str, str, PromptKind]] = field(default_factory=list)
    notices: List[Tuple[str, str, PromptKind]] = field(default_factory=list)

    def ask(
        self,
        title: str,
        text: str,
        kind: PromptKind,
        *,
        confirmable: bool = True,
        confirm_label: str = "OK",
        cancel_label: str = "Cancel",
    ) -> bool:
        self.questions.append((title, text, kind))
        return self.answer and confirmable

    def notify(self, title: str, text: str, kind: PromptKind) -> None:
        self.notices.append((title, text, kind))
        if self.echo is not None:
            print(f"{_KIND_MARKERS[kind]} {title}: {text}", file=self.echo)

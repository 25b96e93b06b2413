"""Presenters receive the rendered status text and show it somewhere."""

from typing import List, Optional, Protocol
import click


class Presenter(Protocol):
    """Anything that can display one line of text."""

    def set_display_text(self, text: str) -> None:
        ...


class ConsolePresenter:
    """
    Writes the status line to the terminal.

    In the default mode the line is rewritten in place; with ``line_mode``
    every change is printed on its own line. Unchanged text is not rewritten.
    """

    def __init__(self, line_mode: bool = False):
        self.line_mode = line_mode
        self._last: Optional[str] = None

    def set_display_text(self, text: str) -> None:
        if text == self._last:
            return
        if self.line_mode:
            click.echo(text)
        else:
            width = len(self._last) if self._last else 0
            click.echo("\r" + text.ljust(width), nl=False)
        self._last = text


class RecordingPresenter:
    """Keeps every text it is given."""

    def __init__(self):
        self.texts: List[str] = []

    def set_display_text(self, text: str) -> None:
        self.texts.append(text)

    @property
    def current(self) -> Optional[str]:
        return self.texts[-1] if self.texts else None

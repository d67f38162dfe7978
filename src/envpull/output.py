"""Terminal output helpers."""

from __future__ import annotations

import time
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

EMOJI: dict[str, str] = {
    "link": "🔗",
    "success": "✅",
    "tip": "💡",
    "warning": "❗️",
}

# All user-facing messages go to stderr; stdout stays free for piping.
console = Console(stderr=True, highlight=False)


def emoji(label: str) -> str:
    return EMOJI.get(label, "")


def prepend_emoji(message: str, label: str | None) -> str:
    icon = emoji(label) if label else ""
    return f"{icon}  {message}" if icon else message


def stamp() -> Callable[[], str]:
    """Start a timer; calling the result renders the elapsed time, e.g. `[312ms]`."""

    start = time.monotonic()

    def elapsed() -> str:
        ms = int((time.monotonic() - start) * 1000)
        if ms < 1000:
            return f"[{ms}ms]"
        return f"[{ms / 1000:.1f}s]"

    return elapsed


def success(message: str, out: Console | None = None) -> None:
    (out or console).print(escape(prepend_emoji(message, "success")))


def error(message: str, out: Console | None = None) -> None:
    (out or console).print(f"[bold red]Error:[/bold red] {escape(message)}")


def log(message: str, out: Console | None = None) -> None:
    (out or console).print(f"[grey50]>[/grey50] {escape(message)}")

"""
Protocols for the palette's host collaborators.

These protocols define the interface that host applications must implement
to display a palette session and run the command it resolves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from cmdwin.config.settings import WindowOptions
    from cmdwin.palette.keys import KeyEvent


@runtime_checkable
class PresentationSink(Protocol):
    """Displays palette lines. Event-driven hosts push keys themselves."""

    def render(self, lines: Sequence[str]) -> None:
        """Replace the displayed lines."""
        ...

    def close(self) -> None:
        """Tear down the panel and release its backing resources."""
        ...


@runtime_checkable
class BlockingPresentationSink(PresentationSink, Protocol):
    """A sink that can also be polled for keys by the blocking loop."""

    def get_next_key(self) -> KeyEvent:
        """
        Block until the next key press.

        Raises:
            KeyReadError: If no key can be delivered
        """
        ...


@runtime_checkable
class CommandHost(Protocol):
    """Receives the invocation of a committed command."""

    def execute(self, invocation: str) -> None:
        """Run the invocation. Fire-and-forget: the palette never inspects a result."""
        ...


SinkFactory = Callable[["WindowOptions"], PresentationSink]
Scheduler = Callable[[Callable[[], None]], object]

"""
Pure search-and-select logic for the command palette.

Every function here takes a SessionState and returns a new one; nothing
touches the host. The session in session.py owns the current state and
pushes render_lines() output to the presentation sink.
"""

from dataclasses import dataclass, replace
from enum import Enum

from cmdwin.config.constants import (
    DEFAULT_PROMPT,
    DEFAULT_SELECTED_MARKER,
    DEFAULT_SEPARATOR,
    DEFAULT_UNSELECTED_MARKER,
)

from .registry import CommandRegistry


class Direction(Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class SessionState:
    """Search state of one palette session.

    cursor is 1-based into filtered, and 0 exactly when filtered is empty.
    """

    query: str = ""
    filtered: tuple[str, ...] = ()
    cursor: int = 0
    open: bool = False

    @property
    def selected(self) -> str | None:
        """Name under the cursor, if any."""
        if self.cursor == 0 or self.cursor > len(self.filtered):
            return None
        return self.filtered[self.cursor - 1]


@dataclass(frozen=True)
class PaletteStyle:
    """Strings used when projecting state into display lines."""

    prompt: str = DEFAULT_PROMPT
    separator: str = DEFAULT_SEPARATOR
    selected_marker: str = DEFAULT_SELECTED_MARKER
    unselected_marker: str = DEFAULT_UNSELECTED_MARKER


def filter_commands(query: str, registry: CommandRegistry) -> tuple[str, ...]:
    """
    Names whose lowercase form contains the lowercase query.

    Args:
        query: Search text; empty matches every command
        registry: Commands to search

    Returns:
        Matching names sorted ascending by their original case
    """
    needle = query.lower()
    return tuple(sorted(name for name in registry.names if needle in name.lower()))


def _first_cursor(filtered: tuple[str, ...]) -> int:
    return 1 if filtered else 0


def open_state(registry: CommandRegistry) -> SessionState:
    """Fresh state for a palette that has just opened."""
    filtered = filter_commands("", registry)
    return SessionState(query="", filtered=filtered, cursor=_first_cursor(filtered), open=True)


def closed_state() -> SessionState:
    return SessionState()


def with_query(state: SessionState, query: str, registry: CommandRegistry) -> SessionState:
    """Replace the query, refilter from scratch and select the first match."""
    filtered = filter_commands(query, registry)
    return replace(state, query=query, filtered=filtered, cursor=_first_cursor(filtered))


def append_char(state: SessionState, char: str, registry: CommandRegistry) -> SessionState:
    return with_query(state, state.query + char, registry)


def erase_char(state: SessionState, registry: CommandRegistry) -> SessionState:
    """Drop the last query character. An empty query is left as is, cursor included."""
    if not state.query:
        return state
    return with_query(state, state.query[:-1], registry)


def navigate(state: SessionState, direction: Direction) -> SessionState:
    """Move the cursor one step, wrapping around both ends."""
    count = len(state.filtered)
    if count == 0:
        return state

    if direction is Direction.DOWN:
        cursor = state.cursor + 1
        if cursor > count:
            cursor = 1
    else:
        cursor = state.cursor - 1
        if cursor < 1:
            cursor = count

    return replace(state, cursor=cursor)


def render_lines(state: SessionState, style: PaletteStyle | None = None) -> list[str]:
    """Project state into display lines: prompt, separator, then one line per match."""
    style = style or PaletteStyle()
    lines = [
        f"{style.prompt}{state.query}",
        style.separator,
    ]
    for position, name in enumerate(state.filtered, start=1):
        marker = style.selected_marker if position == state.cursor else style.unselected_marker
        lines.append(f"{marker}{name}")
    return lines

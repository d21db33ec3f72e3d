"""
Command Palette Screen - modal overlay for a palette session.

The screen only draws the lines it is given and forwards every key press
to the controller; all search and selection logic lives in
cmdwin.palette.
"""

import logging
from typing import Callable, Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

from cmdwin.config.settings import BorderStyle, WindowOptions, WindowPosition
from cmdwin.palette.keys import KeyEvent

logger = logging.getLogger(__name__)

# Textual border types for each configured border style
BORDER_TYPES = {
    BorderStyle.SINGLE: "solid",
    BorderStyle.DOUBLE: "double",
    BorderStyle.ROUNDED: "round",
    BorderStyle.SOLID: "thick",
    BorderStyle.SHADOW: "tall",
}

VERTICAL_ALIGN = {
    WindowPosition.CENTER: "middle",
    WindowPosition.TOP: "top",
    WindowPosition.BOTTOM: "bottom",
}

BORDER_COLOR = "#0178D4"


class PaletteScreen(ModalScreen[None]):
    """Modal overlay showing the prompt, a separator and the matches."""

    DEFAULT_CSS = """
    PaletteScreen {
        align: center middle;
    }

    #palette-container {
        width: 60;
        height: 10;
        background: $surface;
        overflow-y: auto;
    }

    #palette-prompt {
        height: 1;
        text-style: bold;
    }

    #palette-separator {
        height: 1;
        color: $text-muted;
    }

    #palette-results {
        height: auto;
    }
    """

    def __init__(
        self,
        window: Optional[WindowOptions] = None,
        on_key_event: Optional[Callable[[KeyEvent], object]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.window = window or WindowOptions()
        self._on_key_event = on_key_event
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def compose(self) -> ComposeResult:
        with Vertical(id="palette-container"):
            yield Static(id="palette-prompt")
            yield Static(id="palette-separator")
            yield Static(id="palette-results")

    def on_mount(self) -> None:
        self._apply_window()
        self._refresh_lines()

    def show_lines(self, lines: Sequence[str]) -> None:
        """Display lines; before mount they are kept until on_mount."""
        self._lines = list(lines)
        if self.is_mounted:
            self._refresh_lines()

    def _refresh_lines(self) -> None:
        prompt = self._lines[0] if self._lines else ""
        separator = self._lines[1] if len(self._lines) > 1 else ""
        results = self._lines[2:]

        # Text, not markup: command names are user data
        self.query_one("#palette-prompt", Static).update(Text(prompt))
        self.query_one("#palette-separator", Static).update(Text(separator))
        self.query_one("#palette-results", Static).update(Text("\n".join(results)))

    def _apply_window(self) -> None:
        window = self.window
        self.styles.align = ("center", VERTICAL_ALIGN[window.position])

        container = self.query_one("#palette-container", Vertical)
        container.styles.width = window.width
        container.styles.height = window.height
        container.styles.padding = window.padding
        if window.border is not BorderStyle.NONE:
            container.styles.border = (BORDER_TYPES[window.border], BORDER_COLOR)

    def on_key(self, event: events.Key) -> None:
        """Every key belongs to the palette while it is open."""
        event.stop()
        event.prevent_default()
        if self._on_key_event is None:
            return
        self._on_key_event(KeyEvent(key=event.key, character=event.character))


class ScreenSink:
    """Presentation sink backed by a pushed PaletteScreen."""

    def __init__(self, app: App, screen: PaletteScreen):
        self.app = app
        self.screen = screen
        self.closed = False

    def render(self, lines: Sequence[str]) -> None:
        self.screen.show_lines(lines)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.app.screen is self.screen:
            self.app.pop_screen()
        else:
            logger.debug("Palette screen is not on top, leaving screen stack alone")

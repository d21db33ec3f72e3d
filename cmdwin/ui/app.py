"""
Textual application hosting the command palette.

The app is the event-driven host: it owns the PaletteController, opens
the palette on the configured toggle key and runs committed invocations.
"""

import logging
import subprocess
from typing import Callable, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.widgets import RichLog, Static

from cmdwin.config.settings import PaletteConfig, WindowOptions
from cmdwin.palette.keys import KeyEvent
from cmdwin.palette.session import PaletteController

from .palette_screen import PaletteScreen, ScreenSink

logger = logging.getLogger(__name__)


def run_detached(invocation: str) -> None:
    """Start an invocation through the shell without waiting for it."""
    subprocess.Popen(
        invocation,
        shell=True,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


class PaletteApp(App[Optional[str]]):
    """
    Host for the palette.

    With ``once=True`` the palette opens on mount and the app exits with
    the committed invocation, or None when the palette is cancelled.
    Otherwise the app stays up and hands each invocation to ``executor``.
    """

    TITLE = "cmdwin"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layout: vertical;
    }

    #palette-hint {
        height: 1;
        color: $text-muted;
        padding: 0 1;
    }

    #palette-log {
        height: 1fr;
    }
    """

    def __init__(
        self,
        config: PaletteConfig,
        *,
        once: bool = False,
        executor: Optional[Callable[[str], None]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.config = config
        self.once = once
        self.executor = executor or run_detached
        # Resources are released one tick later, before any invocation runs
        self.controller = PaletteController(
            config, self._create_sink, self, schedule=self.call_later
        )

    def compose(self) -> ComposeResult:
        toggle = self.config.keymap.toggle
        yield Static(f"{toggle} palette │ ctrl+q quit", id="palette-hint")
        yield RichLog(id="palette-log", markup=False)

    def on_mount(self) -> None:
        if self.once:
            self.action_toggle_palette()

    def on_key(self, event: events.Key) -> None:
        # Keys only reach the app while the palette screen is closed
        if event.key == self.config.keymap.toggle:
            event.stop()
            self.action_toggle_palette()

    def action_toggle_palette(self) -> None:
        if isinstance(self.screen, PaletteScreen) and not self.controller.is_open:
            # Previous palette is still being torn down
            return
        self.controller.toggle()

    def _create_sink(self, window: WindowOptions) -> ScreenSink:
        screen = PaletteScreen(window, on_key_event=self._on_palette_key)
        self.push_screen(screen)
        return ScreenSink(self, screen)

    def _on_palette_key(self, event: KeyEvent) -> None:
        session = self.controller.session
        self.controller.dispatch(event)
        if (
            self.once
            and session is not None
            and not session.is_open
            and session.last_invocation is None
        ):
            self.call_later(self.exit, None)

    # ── CommandHost ──

    def execute(self, invocation: str) -> None:
        """Run after the palette's teardown, which was scheduled first."""
        self.call_later(self._run_invocation, invocation)

    def _run_invocation(self, invocation: str) -> None:
        if self.once:
            self.exit(invocation)
            return

        log = self.query_one("#palette-log", RichLog)
        try:
            self.executor(invocation)
        except OSError as e:
            logger.error(f"Failed to run {invocation!r}: {e}")
            log.write(Text(f"failed: {invocation} ({e})", style="red"))
            return
        log.write(Text(f"ran: {invocation}"))

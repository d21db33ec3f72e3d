"""
Palette session state machine and the controller that owns it.

A PaletteSession lives from one open to one close. It turns key events
into new SessionStates, pushes rendered lines to its sink and, on commit,
hands the resolved invocation to the host after the overlay is torn down.

PaletteController owns the toggle command. It keeps at most one live
session and gives every new session a fresh sink.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from cmdwin.exceptions import KeyReadError, PaletteError
from cmdwin.ui.protocols import (
    BlockingPresentationSink,
    CommandHost,
    PresentationSink,
    Scheduler,
    SinkFactory,
)

from .engine import (
    Direction,
    PaletteStyle,
    SessionState,
    append_char,
    closed_state,
    erase_char,
    navigate,
    open_state,
    render_lines,
)
from .keys import KeyAction, KeyEvent, PaletteKeymap
from .registry import CommandRegistry

if TYPE_CHECKING:
    from cmdwin.config.settings import PaletteConfig

logger = logging.getLogger(__name__)

# Failures of the host's key source that close the palette without a commit
KEY_READ_FAILURES = (KeyReadError, EOFError, OSError, KeyboardInterrupt)


class SessionPhase(Enum):
    CLOSED = "closed"
    OPEN = "open"


class PaletteSession:
    """
    One open palette.

    Teardown happens in two phases: mark_closed() resets state right away,
    release_resources() closes the sink and may be deferred through
    ``schedule`` (e.g. Textual's ``call_later``). A released session cannot
    be reopened.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        sink: PresentationSink,
        host: CommandHost,
        *,
        keymap: Optional[PaletteKeymap] = None,
        style: Optional[PaletteStyle] = None,
        schedule: Optional[Scheduler] = None,
    ):
        self.registry = registry
        self.sink = sink
        self.host = host
        self.keymap = keymap or PaletteKeymap()
        self.style = style or PaletteStyle()
        self._schedule = schedule
        self._state = closed_state()
        self._phase = SessionPhase.CLOSED
        self._released = False
        self.last_invocation: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_open(self) -> bool:
        return self._phase is SessionPhase.OPEN

    @property
    def released(self) -> bool:
        return self._released

    # ── Lifecycle ──

    def open(self) -> None:
        """Reset the search and show every command with the first selected."""
        if self.is_open:
            return
        if self._released:
            raise PaletteError("Palette session was already released; start a new one")

        self._state = open_state(self.registry)
        self._phase = SessionPhase.OPEN
        logger.debug(f"Palette opened with {len(self._state.filtered)} commands")
        self._render()

    def toggle(self) -> None:
        if self.is_open:
            self.cancel()
        else:
            self.open()

    def cancel(self) -> None:
        """Close without running anything."""
        if not self.is_open:
            return
        logger.debug(f"Palette cancelled (query={self._state.query!r})")
        self.close()

    def close(self) -> None:
        self.mark_closed()
        if self._schedule is not None:
            self._schedule(self.release_resources)
        else:
            self.release_resources()

    def mark_closed(self) -> None:
        """Synchronously discard the search state and leave the OPEN phase."""
        self._phase = SessionPhase.CLOSED
        self._state = closed_state()

    def release_resources(self) -> None:
        """Close the sink. Safe to call any number of times."""
        if self._released:
            return
        self._released = True
        self.sink.close()
        logger.debug("Palette resources released")

    # ── Key dispatch ──

    def dispatch(self, event: KeyEvent) -> bool:
        """
        Apply one key event.

        Returns:
            True while the palette stays open
        """
        if not self.is_open:
            logger.debug(f"Ignoring key {event.key!r} for closed palette")
            return False

        action = self.keymap.classify(event)

        if action in (KeyAction.TOGGLE, KeyAction.CANCEL):
            self.cancel()
        elif action is KeyAction.COMMIT:
            self.commit()
        elif action is KeyAction.ERASE:
            self._update(erase_char(self._state, self.registry))
        elif action is KeyAction.UP:
            self._update(navigate(self._state, Direction.UP))
        elif action is KeyAction.DOWN:
            self._update(navigate(self._state, Direction.DOWN))
        elif action is KeyAction.INSERT:
            self._update(append_char(self._state, event.character, self.registry))

        return self.is_open

    def commit(self) -> Optional[str]:
        """
        Run the selected command.

        With no match selected the palette stays open. The overlay is
        closed before the host sees the invocation.

        Returns:
            The invocation handed to the host, or None
        """
        if not self.is_open:
            return None

        name = self._state.selected
        if name is None:
            logger.debug(f"Commit ignored, no match for {self._state.query!r}")
            return None

        invocation = self.registry.lookup(name)
        if invocation is None:
            logger.warning(f"Selected command {name!r} is not registered, ignoring commit")
            return None

        self.close()
        self.last_invocation = invocation
        logger.info(f"Running palette command {name!r}")
        self.host.execute(invocation)
        return invocation

    def run(self) -> Optional[str]:
        """
        Blocking read-eval loop for sinks that deliver keys.

        Opens the session if needed and returns once it closes.

        Returns:
            The committed invocation, or None if the palette was cancelled
        """
        if not isinstance(self.sink, BlockingPresentationSink):
            raise PaletteError(
                "Presentation sink cannot be polled for keys",
                sink=type(self.sink).__name__,
            )

        self.open()
        while self.is_open:
            try:
                event = self.sink.get_next_key()
            except KEY_READ_FAILURES as e:
                logger.debug(f"Key read failed, cancelling palette: {e!r}")
                self.cancel()
                break
            self.dispatch(event)

        return self.last_invocation

    def _update(self, state: SessionState) -> None:
        self._state = state
        self._render()

    def _render(self) -> None:
        self.sink.render(render_lines(self._state, self.style))


class PaletteController:
    """
    Owns the palette toggle command.

    Only one session is open at a time: toggling while open closes the
    live session instead of starting another.
    """

    def __init__(
        self,
        config: PaletteConfig,
        sink_factory: SinkFactory,
        host: CommandHost,
        *,
        schedule: Optional[Scheduler] = None,
    ):
        self.config = config
        self.sink_factory = sink_factory
        self.host = host
        self._schedule = schedule
        self._session: Optional[PaletteSession] = None
        # Closed sessions whose sink may not have been released yet
        self._unreleased: list[PaletteSession] = []

    @property
    def session(self) -> Optional[PaletteSession]:
        """The live session, if the palette is open."""
        if self._session is not None and self._session.is_open:
            return self._session
        return None

    @property
    def is_open(self) -> bool:
        return self.session is not None

    def toggle(self) -> Optional[PaletteSession]:
        """
        Open a new session, or close the live one.

        Returns:
            The new session, or None if the palette was closed
        """
        live = self.session
        if live is not None:
            live.cancel()
            self._session = None
            return None

        self._unreleased = [s for s in self._unreleased if not s.released]
        sink = self.sink_factory(self.config.window)
        if any(s.sink is sink for s in self._unreleased):
            raise PaletteError("Sink factory returned a sink that is still being released")

        session = PaletteSession(
            self.config.registry,
            sink,
            self.host,
            keymap=self.config.keymap,
            style=self.config.style,
            schedule=self._schedule,
        )
        session.open()
        self._session = session
        self._unreleased.append(session)
        return session

    def dispatch(self, event: KeyEvent) -> bool:
        """Forward a key from an event-driven host to the live session."""
        session = self.session
        if session is None:
            return False
        return session.dispatch(event)

    def run_once(self) -> Optional[str]:
        """Open the palette and drive it with the blocking loop until it closes."""
        session = self.toggle()
        if session is None:
            return None
        return session.run()

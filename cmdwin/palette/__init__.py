"""
Command Palette - search-and-select core.

Provides:
- CommandRegistry: Immutable name -> invocation map
- PaletteSession: State machine for one open palette
- PaletteController: Owner of the toggle command
"""

from .engine import Direction, PaletteStyle, SessionState, filter_commands, navigate, render_lines
from .keys import KeyAction, KeyEvent, PaletteKeymap, normalize_key
from .registry import CommandRegistry
from .session import PaletteController, PaletteSession, SessionPhase

__all__ = [
    "CommandRegistry",
    "Direction",
    "KeyAction",
    "KeyEvent",
    "PaletteController",
    "PaletteKeymap",
    "PaletteSession",
    "PaletteStyle",
    "SessionPhase",
    "SessionState",
    "filter_commands",
    "navigate",
    "normalize_key",
    "render_lines",
]

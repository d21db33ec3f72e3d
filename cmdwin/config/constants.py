"""
Centralized constants for cmdwin.

Defaults for the palette's keys, style strings and window placement live
here so the config loader, the core and the Textual host agree on them.
"""

import os
from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

CMDWIN_CONFIG_DIR = Path.home() / ".config" / "cmdwin"
CONFIG_ENV_VAR = "CMDWIN_CONFIG"
DEFAULT_CONFIG_FILENAME = "palette.yaml"
LOG_FILENAME = "cmdwin.log"


def get_default_config_path() -> Path:
    """Get the config file path, respecting the CMDWIN_CONFIG environment variable."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CMDWIN_CONFIG_DIR / DEFAULT_CONFIG_FILENAME


# =============================================================================
# KEYS (canonical Textual-style names)
# =============================================================================

DEFAULT_TOGGLE_KEY = "ctrl+p"
DEFAULT_UP_KEYS = ("ctrl+k", "up")
DEFAULT_DOWN_KEYS = ("ctrl+j", "down")

COMMIT_KEYS = frozenset({"enter"})
CANCEL_KEYS = frozenset({"escape"})
ERASE_KEYS = frozenset({"backspace"})

# =============================================================================
# STYLE
# =============================================================================

DEFAULT_PROMPT = "> "
SEPARATOR_WIDTH = 30
DEFAULT_SEPARATOR = "-" * SEPARATOR_WIDTH
DEFAULT_SELECTED_MARKER = "> "
DEFAULT_UNSELECTED_MARKER = "  "

# =============================================================================
# WINDOW
# =============================================================================

DEFAULT_WINDOW_WIDTH = 60
DEFAULT_WINDOW_HEIGHT = 10
DEFAULT_WINDOW_POSITION = "center"
DEFAULT_WINDOW_BORDER = "rounded"

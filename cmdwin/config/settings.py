"""
Palette configuration loader.

Loads the command map, keys, style strings and window placement from
~/.config/cmdwin/palette.yaml (or $CMDWIN_CONFIG). Everything is validated
once, at setup; any problem raises ConfigurationError and the palette is
never registered.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from cmdwin.config.constants import (
    COMMIT_KEYS,
    CANCEL_KEYS,
    DEFAULT_DOWN_KEYS,
    DEFAULT_TOGGLE_KEY,
    DEFAULT_UP_KEYS,
    DEFAULT_WINDOW_BORDER,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_POSITION,
    DEFAULT_WINDOW_WIDTH,
    ERASE_KEYS,
    get_default_config_path,
)
from cmdwin.exceptions import ConfigurationError
from cmdwin.palette.engine import PaletteStyle
from cmdwin.palette.keys import PaletteKeymap, normalize_key, normalize_keys
from cmdwin.palette.registry import CommandRegistry

logger = logging.getLogger(__name__)

# Example config content for new users
EXAMPLE_CONFIG = """# cmdwin palette configuration
#
# Keys accept any of these forms:
#   "ctrl+k"   Textual key name
#   "<C-k>"    Vim notation
#   "\\x0b"     a single raw control character
#
# Key that opens and closes the palette
keymap: ctrl+p

# Move the selection (a single key or a list of keys)
navigation:
  up: [ctrl+k, up]
  down: [ctrl+j, down]

# Strings used to draw the palette
style:
  prompt: "> "
  separator: "------------------------------"
  selected: "> "
  unselected: "  "

# Placement of the palette window
#   position: center | top | bottom
#   border:   none | single | double | rounded | solid | shadow
#   padding:  one number, or [top, right, bottom, left]
window:
  position: center
  width: 60
  height: 10
  padding: [0, 1, 0, 1]
  border: rounded

# Display name -> command run when it is selected
commands:
  "List Files": "ls -la"
  "Git Status": "git status"
  "Disk Usage": "df -h"
"""

_KNOWN_SECTIONS = {"keymap", "navigation", "style", "window", "commands"}
_STYLE_FIELDS = {
    "prompt": "prompt",
    "separator": "separator",
    "selected": "selected_marker",
    "unselected": "unselected_marker",
}
_PADDING_EDGES = ("top", "right", "bottom", "left")


class WindowPosition(str, Enum):
    """Where the palette window sits on screen."""

    CENTER = "center"
    TOP = "top"
    BOTTOM = "bottom"


class BorderStyle(str, Enum):
    """Border drawn around the palette window."""

    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    ROUNDED = "rounded"
    SOLID = "solid"
    SHADOW = "shadow"


@dataclass(frozen=True)
class WindowOptions:
    """Window placement handed through to the presentation sink."""

    position: WindowPosition = WindowPosition(DEFAULT_WINDOW_POSITION)
    width: int = DEFAULT_WINDOW_WIDTH
    height: int = DEFAULT_WINDOW_HEIGHT
    padding: tuple[int, int, int, int] = (0, 0, 0, 0)  # top, right, bottom, left
    border: BorderStyle = BorderStyle(DEFAULT_WINDOW_BORDER)


@dataclass(frozen=True)
class PaletteConfig:
    """Validated palette setup."""

    registry: CommandRegistry
    keymap: PaletteKeymap = field(default_factory=PaletteKeymap)
    style: PaletteStyle = field(default_factory=PaletteStyle)
    window: WindowOptions = field(default_factory=WindowOptions)
    source: Optional[Path] = None


def load_config(path: Path) -> PaletteConfig:
    """
    Load and validate a palette config file.

    Args:
        path: YAML file to read

    Returns:
        Validated PaletteConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigurationError("Config file not found", path=str(path))

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError("Config file is not valid YAML", path=str(path)) from e
    except OSError as e:
        raise ConfigurationError("Could not read config file", path=str(path)) from e

    config = parse_config(data, source=path)
    logger.info(f"Loaded {len(config.registry)} palette commands from {path}")
    return config


def load_default_config() -> PaletteConfig:
    """Load the default config file, or an empty palette when there is none."""
    path = get_default_config_path()
    if not path.exists():
        logger.info(f"No palette config at {path}, using defaults")
        return parse_config(None)
    return load_config(path)


def write_example_config(path: Optional[Path] = None, force: bool = False) -> bool:
    """
    Save the example config file.

    Returns:
        True if the file was written, False if it already exists
    """
    path = Path(path).expanduser() if path else get_default_config_path()

    if path.exists() and not force:
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(EXAMPLE_CONFIG)
    logger.info(f"Created example palette config at {path}")
    return True


def parse_config(data: Optional[Mapping[str, Any]], source: Optional[Path] = None) -> PaletteConfig:
    """
    Validate raw config data into a PaletteConfig.

    Args:
        data: Parsed YAML mapping (None means all defaults)
        source: File the data came from, for error messages

    Raises:
        ConfigurationError: On the first invalid setting
    """
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError("Config must be a mapping", type=type(data).__name__)

    for section in data:
        if section not in _KNOWN_SECTIONS:
            logger.warning(f"Unknown config section {section!r} ignored")

    commands = data.get("commands")
    registry = CommandRegistry({} if commands is None else commands)
    keymap = _parse_keymap(data.get("keymap"), data.get("navigation"))
    style = _parse_style(data.get("style"))
    window = _parse_window(data.get("window"))

    return PaletteConfig(
        registry=registry,
        keymap=keymap,
        style=style,
        window=window,
        source=source,
    )


def _normalize(setting: str, spec: Any) -> Any:
    try:
        if isinstance(spec, (list, tuple)):
            return normalize_keys(spec)
        return normalize_key(spec)
    except ValueError as e:
        raise ConfigurationError(str(e), setting=setting) from e


def _parse_keymap(toggle_spec: Any, navigation: Any) -> PaletteKeymap:
    toggle = DEFAULT_TOGGLE_KEY if toggle_spec is None else _normalize("keymap", toggle_spec)
    if not isinstance(toggle, str):
        raise ConfigurationError("Toggle key must be a single key", setting="keymap")

    up, down = DEFAULT_UP_KEYS, DEFAULT_DOWN_KEYS
    if navigation is not None:
        if not isinstance(navigation, Mapping):
            raise ConfigurationError("Navigation must be a mapping with up/down", setting="navigation")
        for name in navigation:
            if name not in ("up", "down"):
                logger.warning(f"Unknown navigation key {name!r} ignored")
        if navigation.get("up") is not None:
            up = _as_tuple(_normalize("navigation.up", navigation["up"]))
        if navigation.get("down") is not None:
            down = _as_tuple(_normalize("navigation.down", navigation["down"]))

    reserved = COMMIT_KEYS | CANCEL_KEYS | ERASE_KEYS
    if toggle in reserved:
        raise ConfigurationError("Toggle key is reserved", setting="keymap", key=toggle)
    for setting, keys in (("navigation.up", up), ("navigation.down", down)):
        clash = (set(keys) & reserved) | ({toggle} & set(keys))
        if clash:
            raise ConfigurationError(
                "Navigation key is already bound", setting=setting, keys=sorted(clash)
            )
    overlap = set(up) & set(down)
    if overlap:
        raise ConfigurationError(
            "Same key bound to up and down", setting="navigation", keys=sorted(overlap)
        )

    return PaletteKeymap(toggle=toggle, up=up, down=down)


def _as_tuple(keys: Any) -> tuple[str, ...]:
    return keys if isinstance(keys, tuple) else (keys,)


def _parse_style(raw: Any) -> PaletteStyle:
    if raw is None:
        return PaletteStyle()
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Style must be a mapping", setting="style")

    values: dict[str, str] = {}
    for name, value in raw.items():
        field_name = _STYLE_FIELDS.get(name)
        if field_name is None:
            logger.warning(f"Unknown style option {name!r} ignored")
            continue
        if not isinstance(value, str):
            raise ConfigurationError("Style values must be strings", setting=f"style.{name}")
        values[field_name] = value

    return PaletteStyle(**values)


def _parse_window(raw: Any) -> WindowOptions:
    if raw is None:
        return WindowOptions()
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Window must be a mapping", setting="window")

    options: dict[str, Any] = {}

    if "position" in raw:
        options["position"] = _parse_enum(WindowPosition, raw["position"], "window.position")
    if "border" in raw:
        options["border"] = _parse_enum(BorderStyle, raw["border"], "window.border")
    for dimension in ("width", "height"):
        if dimension in raw:
            value = raw[dimension]
            if not _is_int(value) or value <= 0:
                raise ConfigurationError(
                    "Window size must be a positive integer",
                    setting=f"window.{dimension}",
                    value=value,
                )
            options[dimension] = value
    if "padding" in raw:
        options["padding"] = _parse_padding(raw["padding"])

    return WindowOptions(**options)


def _parse_enum(enum_cls: type[Enum], value: Any, setting: str) -> Any:
    try:
        return enum_cls(str(value).lower())
    except ValueError as e:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Expected one of: {choices}", setting=setting, value=value
        ) from e


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_padding(raw: Any) -> tuple[int, int, int, int]:
    """Accept CSS-like padding: n, [v, h], [top, right, bottom, left] or a mapping."""
    if _is_int(raw):
        values = [raw] * 4
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        values = [raw[0], raw[1], raw[0], raw[1]]
    elif isinstance(raw, (list, tuple)) and len(raw) == 4:
        values = list(raw)
    elif isinstance(raw, Mapping):
        unknown = set(raw) - set(_PADDING_EDGES)
        if unknown:
            raise ConfigurationError(
                "Unknown padding edge", setting="window.padding", edges=sorted(unknown)
            )
        values = [raw.get(edge, 0) for edge in _PADDING_EDGES]
    else:
        raise ConfigurationError(
            "Padding must be a number, a list of 2 or 4 numbers, or a mapping",
            setting="window.padding",
        )

    if not all(_is_int(v) and v >= 0 for v in values):
        raise ConfigurationError(
            "Padding values must be non-negative integers", setting="window.padding"
        )
    return tuple(values)

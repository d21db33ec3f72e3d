"""
Key handling for the command palette.

Every key the palette sees, whether it comes from a configuration file, a
raw terminal read or a Textual ``Key`` event, is reduced to one canonical
form: Textual-style key names such as ``"a"``, ``"ctrl+k"``, ``"escape"``
or ``"enter"``.

Accepted configuration forms:
- a single raw character (``"\\x0b"`` -> ``"ctrl+k"``)
- Vim notation (``"<C-k>"``, ``"<Esc>"``, ``"<S-Tab>"``)
- Textual names (``"ctrl+k"``, ``"Ctrl+K"``)
"""

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from cmdwin.config.constants import (
    CANCEL_KEYS,
    COMMIT_KEYS,
    DEFAULT_DOWN_KEYS,
    DEFAULT_TOGGLE_KEY,
    DEFAULT_UP_KEYS,
    ERASE_KEYS,
)


class KeyAction(Enum):
    """What a key means to an open palette."""

    TOGGLE = "toggle"
    CANCEL = "cancel"
    COMMIT = "commit"
    ERASE = "erase"
    UP = "up"
    DOWN = "down"
    INSERT = "insert"
    IGNORE = "ignore"


# Raw control characters with a dedicated key name
_RAW_NAMED = {
    "\x00": "ctrl+@",
    "\t": "tab",
    "\r": "enter",
    "\x08": "backspace",
    "\x1b": "escape",
    "\x1c": "ctrl+backslash",
    "\x1d": "ctrl+right_square_bracket",
    "\x1e": "ctrl+circumflex_accent",
    "\x1f": "ctrl+underscore",
    "\x7f": "backspace",
    " ": "space",
}

_VIM_NAMED = {
    "esc": "escape",
    "escape": "escape",
    "cr": "enter",
    "return": "enter",
    "enter": "enter",
    "nl": "ctrl+j",
    "bs": "backspace",
    "backspace": "backspace",
    "tab": "tab",
    "space": "space",
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
    "home": "home",
    "end": "end",
    "pageup": "pageup",
    "pagedown": "pagedown",
    "del": "delete",
    "delete": "delete",
    "insert": "insert",
    "lt": "<",
    "bar": "|",
    "bslash": "\\",
}

_NAMED_ALIASES = {
    "esc": "escape",
    "return": "enter",
    "bs": "backspace",
    "del": "delete",
}

_VIM_MODIFIERS = {"c": "ctrl", "a": "alt", "m": "alt", "s": "shift"}
_NAMED_MODIFIERS = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "alt": "alt",
    "meta": "alt",
    "shift": "shift",
}
_MODIFIER_ORDER = ("ctrl", "alt", "shift")

_FUNCTION_KEY = re.compile(r"^f\d{1,2}$")

# Multi-character key names accepted after normalization
_KNOWN_NAMES = frozenset(
    name.split("+")[-1]
    for name in (*_RAW_NAMED.values(), *_VIM_NAMED.values())
    if len(name.split("+")[-1]) > 1
)


def is_printable_character(char: Optional[str]) -> bool:
    """True for a single character that may be appended to the query."""
    if not char or len(char) != 1:
        return False
    if char in ("\n", "\r"):
        return False
    return unicodedata.category(char) != "Cc"


def normalize_key(spec: str) -> str:
    """
    Convert a configured or raw key into its canonical name.

    Args:
        spec: Raw character, Vim notation or Textual-style key name

    Returns:
        Canonical key name

    Raises:
        ValueError: If the spec cannot be understood
    """
    if not isinstance(spec, str) or not spec:
        raise ValueError(f"Key must be a non-empty string, got {spec!r}")

    if len(spec) == 1:
        return _normalize_raw(spec)

    if spec.startswith("<") and spec.endswith(">") and len(spec) > 2:
        return _normalize_vim(spec[1:-1])

    return _normalize_named(spec)


def normalize_keys(specs: "str | Iterable[str]") -> tuple[str, ...]:
    """Normalize one key spec or a list of them, dropping duplicates."""
    if isinstance(specs, str):
        specs = [specs]

    keys: list[str] = []
    for spec in specs:
        key = normalize_key(spec)
        if key not in keys:
            keys.append(key)

    if not keys:
        raise ValueError("At least one key is required")
    return tuple(keys)


def _normalize_raw(char: str) -> str:
    if char in _RAW_NAMED:
        return _RAW_NAMED[char]

    code = ord(char)
    if 1 <= code <= 26:
        return f"ctrl+{chr(code + 96)}"

    if unicodedata.category(char) == "Cc":
        raise ValueError(f"Unsupported control character {char!r}")

    return char


def _join(modifiers: Iterable[str], name: str) -> str:
    ordered = [m for m in _MODIFIER_ORDER if m in set(modifiers)]
    return "+".join([*ordered, name])


def _normalize_vim(inner: str) -> str:
    parts = inner.split("-")
    if inner == "-":
        modifier_parts, key = [], "-"
    elif inner.endswith("--"):
        # <C--> binds the minus key itself
        modifier_parts, key = parts[:-2], "-"
    else:
        modifier_parts, key = parts[:-1], parts[-1]

    modifiers = []
    for part in modifier_parts:
        modifier = _VIM_MODIFIERS.get(part.lower())
        if modifier is None:
            raise ValueError(f"Unknown modifier {part!r} in <{inner}>")
        modifiers.append(modifier)

    lowered = key.lower()
    if lowered in _VIM_NAMED:
        name = _VIM_NAMED[lowered]
        if "+" in name:
            # <NL> is already a modified key
            return name if not modifiers else _join(modifiers, name.split("+")[-1])
    elif len(key) == 1:
        name = lowered if "ctrl" in modifiers or "alt" in modifiers else key
    elif _FUNCTION_KEY.match(lowered):
        name = lowered
    else:
        raise ValueError(f"Unknown key <{inner}>")

    return _join(modifiers, name)


def _normalize_named(spec: str) -> str:
    if any(ch.isspace() for ch in spec) or "<" in spec or ">" in spec:
        raise ValueError(f"Unknown key {spec!r}")

    parts = spec.split("+")
    if spec.endswith("++"):
        # "ctrl++" binds the plus key
        modifier_parts, key = parts[:-2], "+"
    else:
        modifier_parts, key = parts[:-1], parts[-1]

    modifiers = []
    for part in modifier_parts:
        modifier = _NAMED_MODIFIERS.get(part.lower())
        if modifier is None:
            raise ValueError(f"Unknown modifier {part!r} in {spec!r}")
        modifiers.append(modifier)

    if not key:
        raise ValueError(f"Missing key name in {spec!r}")

    if len(key) == 1:
        name = key.lower() if modifiers else key
    else:
        name = key.lower()
        name = _NAMED_ALIASES.get(name, name)
        if name not in _KNOWN_NAMES and not _FUNCTION_KEY.match(name):
            raise ValueError(f"Unknown key name {key!r} in {spec!r}")

    return _join(modifiers, name)


@dataclass(frozen=True)
class KeyEvent:
    """A single key press, as delivered by a presentation sink."""

    key: str  # Canonical key name, e.g. "ctrl+k" or "a"
    character: Optional[str] = None  # Text the key would insert, if any

    @classmethod
    def from_raw(cls, char: str) -> "KeyEvent":
        """Build an event from a raw character read from a terminal."""
        return cls(
            key=normalize_key(char),
            character=char if is_printable_character(char) else None,
        )

    @property
    def is_printable(self) -> bool:
        return is_printable_character(self.character)


@dataclass(frozen=True)
class PaletteKeymap:
    """Keys the palette reacts to while open.

    Toggle and navigation keys come from configuration; commit, cancel and
    erase are fixed.
    """

    toggle: str = DEFAULT_TOGGLE_KEY
    up: tuple[str, ...] = DEFAULT_UP_KEYS
    down: tuple[str, ...] = DEFAULT_DOWN_KEYS
    commit: frozenset[str] = COMMIT_KEYS
    cancel: frozenset[str] = CANCEL_KEYS
    erase: frozenset[str] = ERASE_KEYS

    def classify(self, event: KeyEvent) -> KeyAction:
        """Map a key event to the palette action it triggers.

        Configured keys win over their printable meaning, so binding "j"
        to down means "j" can no longer be typed into the query.
        """
        if _matches(event, (self.toggle,)):
            return KeyAction.TOGGLE
        if _matches(event, self.cancel):
            return KeyAction.CANCEL
        if _matches(event, self.commit):
            return KeyAction.COMMIT
        if _matches(event, self.erase):
            return KeyAction.ERASE
        if _matches(event, self.up):
            return KeyAction.UP
        if _matches(event, self.down):
            return KeyAction.DOWN
        if event.is_printable:
            return KeyAction.INSERT
        return KeyAction.IGNORE


def _matches(event: KeyEvent, keys: Iterable[str]) -> bool:
    keys = set(keys)
    if event.key in keys:
        return True
    return event.character is not None and event.character in keys

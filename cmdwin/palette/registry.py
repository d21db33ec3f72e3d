"""
Command registry for the command palette.

Maps display names to the invocation strings handed back to the host.
The registry is validated once at construction and never changes after.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from cmdwin.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Immutable registry of commands available in the palette."""

    def __init__(self, commands: Optional[Mapping[Any, Any]] = None):
        commands = {} if commands is None else commands
        if not isinstance(commands, Mapping):
            raise ConfigurationError(
                "Command map must be a mapping of 'command name' to 'command value'",
                setting="commands",
                type=type(commands).__name__,
            )

        # Validate everything before keeping anything
        for name, invocation in commands.items():
            _validate_entry(name, invocation)

        self._commands: Mapping[str, str] = MappingProxyType(dict(commands))
        self._names: tuple[str, ...] = tuple(sorted(self._commands))
        logger.debug(f"Registered {len(self._names)} palette commands")

    @property
    def commands(self) -> Mapping[str, str]:
        """Read-only view of name -> invocation."""
        return self._commands

    @property
    def names(self) -> tuple[str, ...]:
        """All command names, sorted ascending."""
        return self._names

    def lookup(self, name: str) -> Optional[str]:
        """Get the invocation for a command name, or None if unknown."""
        return self._commands.get(name)

    def items(self):
        return self._commands.items()

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return f"CommandRegistry({len(self)} commands)"


def _validate_entry(name: Any, invocation: Any) -> None:
    if not isinstance(name, str) or not isinstance(invocation, str):
        raise ConfigurationError(
            "Command map must be in format { 'command_name': 'command_value' }",
            setting="commands",
            name=name,
            value=invocation,
        )
    if not name:
        raise ConfigurationError("Command names must not be empty", setting="commands")
    if not invocation:
        raise ConfigurationError(
            "Command values must not be empty", setting="commands", name=name
        )

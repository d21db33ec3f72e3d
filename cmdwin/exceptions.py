"""Exception hierarchy for cmdwin.

Exception Hierarchy:
    CmdwinError (base)
    ├── ConfigurationError - invalid command map, key spec or window option
    ├── PaletteError - palette lifecycle misuse (e.g. reusing a sink)
    └── KeyReadError - the host failed to deliver a key event

Usage:
    from cmdwin.exceptions import ConfigurationError

    try:
        config = load_config(path)
    except yaml.YAMLError as e:
        raise ConfigurationError("Config file is not valid YAML", path=str(path)) from e
"""

from typing import Any, Optional


class CmdwinError(Exception):
    """Base exception for all cmdwin errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., setting names, paths)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(CmdwinError):
    """Configuration or settings error. Fatal at setup time."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


class PaletteError(CmdwinError):
    """The palette lifecycle was driven into an invalid state."""

    pass


class KeyReadError(CmdwinError):
    """The presentation sink could not deliver the next key."""

    def __init__(self, message: str = "Failed to read key", **context: Any) -> None:
        super().__init__(message, **context)

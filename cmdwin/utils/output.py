"""Shared console output utilities."""

from rich.console import Console

# Shared console instance for all CLI output
console = Console()

# Errors go to stderr so piped invocations stay clean
err_console = Console(stderr=True)

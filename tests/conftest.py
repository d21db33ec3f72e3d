"""Shared pytest fixtures for cmdwin tests."""

import pytest

from cmdwin.palette.registry import CommandRegistry
from cmdwin.ui.testing import MockPresentationSink, RecordingHost

SAMPLE_COMMANDS = {
    "Find File": "cmd:find",
    "Format": "cmd:fmt",
    "Git Status": "cmd:git",
}


@pytest.fixture
def registry():
    """The three-command registry used throughout the palette tests."""
    return CommandRegistry(SAMPLE_COMMANDS)


@pytest.fixture
def empty_registry():
    return CommandRegistry({})


@pytest.fixture
def sink():
    return MockPresentationSink()


@pytest.fixture
def host():
    return RecordingHost()

"""
Testing helpers for the palette.

Mocks stand in for a real host so sessions can be driven without Textual.
"""

from .mocks import MockPresentationSink, RecordingHost

__all__ = ["MockPresentationSink", "RecordingHost"]

"""Custom exception classes for Blinky.

Fuse faults (missing / broken) are *not* exceptions: the classifier returns
them as values.  The types below cover the failure domains around that
pipeline.
"""


class BlinkyError(Exception):
    """Base exception for all Blinky errors."""


class FuseRecordError(BlinkyError):
    """Raised when a fuse status record cannot be parsed into a valid record."""


class BlinkCancelled(BlinkyError):
    """Raised when a blink sequence is stopped by its cancel signal."""

    def __init__(self, emitted: int, total: int):
        super().__init__(f"Blink sequence cancelled after {emitted}/{total} pulses")
        self.emitted = emitted
        self.total = total


class DiagnosticError(BlinkyError):
    """Raised when the diagnostic loop is driven outside its state machine."""


class ConfigError(BlinkyError):
    """Raised when a configuration value is present but malformed."""

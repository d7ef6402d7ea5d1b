"""Exceptions raised by Note Sight.

Every error derives from ``NoteSightError`` and from the closest builtin
exception, so callers can catch either family.
"""


class NoteSightError(Exception):
    """Base class for all Note Sight errors."""


class NoteParseError(NoteSightError, ValueError):
    """A note string could not be parsed (e.g. 'H2' or 'C#')."""

    def __init__(self, text, reason: str = "malformed note") -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse note {text!r}: {reason}")


class CapturePermissionError(NoteSightError, PermissionError):
    """Access to the capture device was denied by the environment."""


class UnsupportedEnvironmentError(NoteSightError, RuntimeError):
    """The audio capabilities required for capture are not available."""

"""Error types raised by the ranking engine."""

from __future__ import annotations


class LinkRankError(Exception):
    """Base class for every error the engine raises."""


class MalformedInputError(LinkRankError, ValueError):
    """A corpus record or document could not be parsed.

    These point at corpus-authoring mistakes (bad field counts, non-integer
    ids) rather than at engine bugs.
    """

    def __init__(self, message: str, *, source: str | None = None, line_number: int | None = None) -> None:
        self.source = source
        self.line_number = line_number
        location = ""
        if source is not None and line_number is not None:
            location = f"{source}:{line_number}: "
        elif source is not None:
            location = f"{source}: "
        super().__init__(f"{location}{message}")


class InvariantViolationError(LinkRankError, RuntimeError):
    """The link graph broke one of its structural invariants."""


class ConfigurationError(LinkRankError, ValueError):
    """An engine configuration value is out of range."""


class EngineStateError(LinkRankError, RuntimeError):
    """An operation was attempted before its prerequisites ran."""

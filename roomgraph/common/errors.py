from __future__ import annotations


class RoomGraphError(Exception):
    """Base class for every error raised by roomgraph."""


class ConfigurationError(RoomGraphError):
    """Builder parameters cannot produce a valid graph."""


class DiscoveryError(RoomGraphError):
    """No graph directory matched the configured prefix."""


class ParseError(RoomGraphError):
    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class StorageError(RoomGraphError, OSError):
    """A required file could not be created, read or written."""


class InvalidInputError(RoomGraphError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name!r} is not a connection of the current room")


class SessionFinishedError(RoomGraphError):
    """A move was attempted after the END room was reached."""

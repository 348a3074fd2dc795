"""Error taxonomy shared by the archive core and the HTTP layer."""


class ArchiveError(Exception):
    """Base class for recoverable archive failures."""


class TransportError(ArchiveError):
    """Network or remote API failure; the operation was abandoned."""


class NotFound(ArchiveError):
    """Referenced message or media no longer exists."""


class InvalidInput(ArchiveError):
    """Malformed cursor or size parameter that cannot be clamped."""

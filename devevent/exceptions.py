"""Error hierarchy for the devevent data-access layer."""


class DevEventError(Exception):
    """Base exception for devevent errors."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ConfigurationMissingError(DevEventError):
    """Required configuration value is not set."""

    pass


class ConnectionFailedError(DevEventError):
    """Connecting to MongoDB failed. The next acquire retries."""

    pass


class RecordError(DevEventError):
    """Base exception for errors that abort a write."""

    pass


class ValidationFailedError(RecordError):
    """A field failed a schema rule (required, type, enum, pattern, empty list)."""

    pass


class NormalizationFailedError(RecordError):
    """A field could not be normalized (unparsable date, malformed time)."""

    pass


class ReferenceNotFoundError(RecordError):
    """A referenced record does not exist."""

    pass


class DuplicateRecordError(RecordError):
    """A unique index rejected the write."""

    pass

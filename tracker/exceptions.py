"""Exceptions raised by the tracker app."""


class TrackerError(Exception):
    """Base exception for tracker errors."""


class ConfigError(TrackerError):
    """The migration config file is missing or malformed."""


class LegacyReadError(TrackerError):
    """A top-level query against the legacy store failed."""

    def __init__(self, table, cause):
        self.table = table
        self.cause = cause
        super().__init__(f"Failed to read legacy table {table}: {cause}")


class MigrationError(TrackerError):
    """The migration driver aborted.

    ``step`` names the entity kind that was running and ``stats`` holds the
    counters collected up to the failure.
    """

    def __init__(self, message, step=None, stats=None):
        self.step = step
        self.stats = stats
        super().__init__(message)

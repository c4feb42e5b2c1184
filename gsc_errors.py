"""
Exceptions raised by the search-console reporting tool.

Every error is terminal: the command line entry point prints it and exits
with status 1.
"""


class GSCError(Exception):
    """Base class for all errors reported by the tool."""


class UsageError(GSCError):
    """Malformed or missing command line arguments."""


class CredentialsError(GSCError):
    """No usable credentials file could be found or loaded."""


class ServiceError(GSCError):
    """A Google Search Console API call failed."""


class InvalidDateError(GSCError):
    """A date argument or date range could not be resolved."""


class DateParseError(GSCError):
    """An analytics row carries a date that is not YYYY-MM-DD."""

    def __init__(self, value):
        super().__init__(f"date key is not YYYY-MM-DD: {value}")
        self.value = value


class EmptyKeysError(GSCError):
    """An analytics row with clicks has no date key."""


class ExportError(GSCError):
    """Report rows could not be written to disk."""

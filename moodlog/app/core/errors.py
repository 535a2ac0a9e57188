"""Error kinds raised by the store and export collaborators.

The analytics, streak and filter engines are total and never raise.
"""

from __future__ import annotations


class JournalError(Exception):
    """Base class for moodlog failures."""


class StorageUnavailable(JournalError):
    """The embedded store could not be initialized or queried."""


class IOFailure(JournalError):
    """Writing an export to disk failed."""


class NotFound(JournalError):
    """The requested record does not exist."""


class InvalidArgument(JournalError):
    """A store operation received an out-of-domain argument."""


__all__ = [
    "IOFailure",
    "InvalidArgument",
    "JournalError",
    "NotFound",
    "StorageUnavailable",
]

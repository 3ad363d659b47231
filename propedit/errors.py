# propedit/errors.py
"""
Error taxonomy for the metadata round-trip.

Every error is terminal for the operation that raised it: nothing is retried,
and the editor's state is left as it was before the call.
"""
from __future__ import annotations


class PropEditError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArchiveCorrupt(PropEditError):
    """The input buffer is not a readable ZIP archive."""


class EntryNotFound(PropEditError):
    def __init__(self, entry_path: str):
        super().__init__(f'File "{entry_path}" not found in archive.')
        self.entry_path = entry_path


class MalformedXml(PropEditError):
    """The target entry does not parse as XML."""


class NoActiveSession(PropEditError):
    def __init__(self, message: str = "No document loaded. Load a file before saving."):
        super().__init__(message)


class InvalidFieldValue(PropEditError, ValueError):
    """An edit that cannot be applied."""


class UnknownField(InvalidFieldValue):
    def __init__(self, key: str):
        super().__init__(f"Unknown metadata field: {key!r}")
        self.key = key


class InvalidTimestamp(InvalidFieldValue):
    def __init__(self, value: str):
        super().__init__(f"Invalid timestamp: {value!r}")
        self.value = value

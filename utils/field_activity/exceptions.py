# utils/field_activity/exceptions.py
"""
Error types raised at the data boundary of the field activity module.

The aggregation and query functions never raise for bad data; these are
for the store layer and the pages that call it.
"""


class FieldActivityError(Exception):
    """Base class for field activity errors."""


class FetchError(FieldActivityError):
    """Loading activity logs or role records failed."""


class UpdateError(FieldActivityError):
    """Persisting a role record failed (including not found)."""


class MalformedRecord(FieldActivityError):
    """A raw record is missing a required field."""

    def __init__(self, message: str, record: dict = None):
        super().__init__(message)
        self.record = record or {}

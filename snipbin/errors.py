"""
Error definitions for the paste store.

Every failure of the storage core is signalled with one of these exceptions.
The core never logs; callers decide what is worth a log line.
"""
from typing import Optional


class PasteError(Exception):
    """Base class for paste store errors."""

    code = "paste_error"

    def __init__(self, message: str, paste_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.paste_id = paste_id


class InvalidTTLError(PasteError):
    """TTL label is not in the registry."""

    code = "invalid_ttl"

    def __init__(self, ttl: str):
        super().__init__(f"Invalid TTL: {ttl!r}")
        self.ttl = ttl


class WriteFailureError(PasteError):
    """Writing or syncing a paste file failed. Wraps the underlying OSError."""

    code = "write_failure"


class PasteNotFoundError(PasteError):
    """No stored record matches the identifier."""

    code = "not_found"

    def __init__(self, paste_id: str, message: str = "Paste not found"):
        super().__init__(message, paste_id)


class PasteExpiredError(PasteNotFoundError):
    """
    The record existed but its TTL had elapsed; it has been removed.

    Subclass of PasteNotFoundError so callers treating every miss alike
    can catch a single type.
    """

    code = "expired"

    def __init__(self, paste_id: str):
        super().__init__(paste_id, "Paste expired")


class CorruptRecordError(PasteError):
    """A stored file exists but its name or content cannot be parsed."""

    code = "corrupt_record"

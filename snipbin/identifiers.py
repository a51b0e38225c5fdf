"""
Paste identifier generation and validation.
"""
import secrets

ID_BYTES = 8
ID_LENGTH = ID_BYTES * 2
_HEX_DIGITS = frozenset("0123456789abcdef")


def generate_id() -> str:
    """
    Generate a fresh paste identifier.

    Draws 8 bytes from the OS CSPRNG and hex-encodes them. No check is made
    against existing storage.

    Returns:
        16 lowercase hex characters
    """
    return secrets.token_hex(ID_BYTES)


def is_valid_id(value) -> bool:
    """Check that value is exactly 16 lowercase hex characters."""
    if not isinstance(value, str) or len(value) != ID_LENGTH:
        return False
    return all(c in _HEX_DIGITS for c in value)

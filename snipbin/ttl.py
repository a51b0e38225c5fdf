"""
TTL registry: the fixed set of paste lifetimes.
"""
from types import MappingProxyType

TTL_HOURS = MappingProxyType({
    "1h": 1,
    "3h": 3,
    "6h": 6,
    "12h": 12,
    "24h": 24,
    "3d": 72,
    "7d": 168,
})

DEFAULT_TTL = "6h"


def is_valid_ttl(label: str) -> bool:
    return label in TTL_HOURS


def expires_at(created_at: float, label: str) -> float:
    """
    Compute the expiry timestamp of a paste.

    Args:
        created_at: Creation time in epoch seconds (the file mtime)
        label: Registry TTL label

    Returns:
        Expiry time in epoch seconds

    Raises:
        KeyError: If label is not a registry key
    """
    return created_at + TTL_HOURS[label] * 3600


def is_expired(created_at: float, label: str, now: float) -> bool:
    return now > expires_at(created_at, label)

"""Per-item completion flags keyed by a truncated SHA-256 of (code, item)."""

import hashlib
import logging

import db

log = logging.getLogger(__name__)

# 12 bytes -> 24 hex characters
KEY_BYTES = 12


def completion_key(code: str, item: str) -> str:
    digest = hashlib.sha256(f"{code}::{item}".encode("utf-8")).digest()
    return digest[:KEY_BYTES].hex()


def is_checked(checked: dict[str, bool], code: str, item: str) -> bool:
    return checked.get(completion_key(code, item)) is True


async def toggle(code: str, item: str) -> bool:
    """Flip the stored flag for (code, item) and return the new value."""
    key = completion_key(code, item)
    current = await db.get_value(key)
    new_value = not (current is True)
    await db.set_value(key, new_value)
    log.debug("Toggled %s (%s / %s) -> %s", key, code, item, new_value)
    return new_value


async def read_all() -> dict[str, bool]:
    """All stored flags. Anything that is not a real bool reads as False."""
    stored = await db.get_all()
    return {k: v if isinstance(v, bool) else False for k, v in stored.items()}

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiosqlite

from config import settings

log = logging.getLogger(__name__)

ChangeListener = Callable[[str], Awaitable[None]]

_db: aiosqlite.Connection | None = None
_listeners: list[ChangeListener] = []

SCHEMA = """\
CREATE TABLE IF NOT EXISTS preferences (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,     -- JSON-encoded: string for user topics, bool for completions
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


async def init_db() -> None:
    global _db
    _db = await aiosqlite.connect(settings.DB_PATH)
    _db.row_factory = aiosqlite.Row
    await _db.executescript(SCHEMA)
    await _db.commit()


async def get_db() -> aiosqlite.Connection:
    if _db is None:
        raise RuntimeError("Database not initialized — call init_db() first")
    return _db


async def close_db() -> None:
    global _db
    if _db is not None:
        await _db.close()
        _db = None
    _listeners.clear()


def _decode(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        # Written by something other than set_value; hand back the raw text
        return raw


async def get_value(key: str) -> Any:
    """Return the decoded value stored under ``key``, or None if absent."""
    db = await get_db()
    rows = await db.execute_fetchall(
        "SELECT value FROM preferences WHERE key = ?", (key,)
    )
    if not rows:
        return None
    return _decode(rows[0]["value"])


async def get_all() -> dict[str, Any]:
    db = await get_db()
    rows = await db.execute_fetchall("SELECT key, value FROM preferences")
    return {r["key"]: _decode(r["value"]) for r in rows}


async def set_value(key: str, value: Any) -> None:
    """Overwrite ``key`` and notify change listeners once committed."""
    db = await get_db()
    await db.execute(
        "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, datetime('now')) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
        (key, json.dumps(value, ensure_ascii=False)),
    )
    await db.commit()
    await _notify(key)


def add_listener(listener: ChangeListener) -> None:
    _listeners.append(listener)


def remove_listener(listener: ChangeListener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


async def _notify(key: str) -> None:
    for listener in list(_listeners):
        try:
            await listener(key)
        except Exception as e:
            log.error("Change listener failed for key %s: %s", key, e)

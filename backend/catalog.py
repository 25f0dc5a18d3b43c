"""Built-in topics loaded from the bundled shared/ifac_tcs.json."""

import logging
from pathlib import Path

from pydantic import ValidationError

from config import settings
from models import Topic, TopicList

log = logging.getLogger(__name__)


class CatalogError(Exception):
    """The bundled catalog could not be read or parsed."""


def load_catalog(path: str | Path | None = None) -> list[Topic]:
    """Read the catalog resource. Any failure is fatal and raises CatalogError."""
    path = Path(path or settings.CATALOG_PATH)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    try:
        topics = TopicList.model_validate_json(text).tcs
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {path}: {e}") from e

    log.info("Loaded %d catalog topics from %s", len(topics), path)
    return topics


def get_topic_by_code(topics: list[Topic], code: str) -> Topic | None:
    """Look up a topic by code. Returns None if not found."""
    for t in topics:
        if t.code == code:
            return t
    return None

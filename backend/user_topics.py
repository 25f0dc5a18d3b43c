"""User-created topics, stored as one JSON string in the preferences table."""

import logging

from pydantic import ValidationError

import db
from config import settings
from models import Topic, TopicList
from writes import WriteQueue

log = logging.getLogger(__name__)

PLACEHOLDER_ITEMS = ["Example bullet 1", "Example bullet 2"]


def parse_items(text: str) -> list[str]:
    """Split a one-bullet-per-line text block, dropping blank lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def next_user_code(count: int) -> str:
    return f"USER-{count + 1:03d}"


class UserTopics:
    """In-memory user topic list with write-behind persistence.

    Mutations update the list synchronously and queue a full-replace save,
    so consecutive calls always build on each other's result.
    """

    def __init__(self, writes: WriteQueue) -> None:
        self._writes = writes
        self._topics: list[Topic] = []

    @property
    def topics(self) -> list[Topic]:
        return list(self._topics)

    async def load(self) -> list[Topic]:
        """Parse the stored list. Missing, blank or corrupt data gives []."""
        raw = await db.get_value(settings.USER_TCS_KEY)
        if raw is None:
            return []
        if not isinstance(raw, str):
            log.warning("Ignoring non-string user topic entry (%s)", type(raw).__name__)
            return []
        if not raw.strip():
            return []
        try:
            return TopicList.model_validate_json(raw).tcs
        except ValidationError as e:
            log.warning("Ignoring corrupt user topic data: %s", e)
            return []

    async def refresh(self) -> list[Topic]:
        self._topics = await self.load()
        return self.topics

    async def save(self, topics: list[Topic]) -> None:
        payload = TopicList(tcs=topics).model_dump_json()
        await db.set_value(settings.USER_TCS_KEY, payload)
        log.info("Saved %d user topics", len(topics))

    def add_or_replace(
        self,
        code: str = "",
        name: str = "",
        items: list[str] | None = None,
        keywords: str = "",
    ) -> Topic:
        code = code.strip()
        if not code:
            code = next_user_code(len(self._topics))
        name = name.strip()

        topic = Topic(
            code=code,
            name=name if name else f"Custom Topic {code}",
            items=list(items) if items else list(PLACEHOLDER_ITEMS),
            keywords=keywords.strip(),
        )
        self._topics = [t for t in self._topics if t.code != code] + [topic]
        self._save_later()
        return topic

    def append_item(self, code: str, text: str) -> bool:
        """Append ``text`` to the user topic ``code``. Returns False on a no-op."""
        if not text.strip():
            return False

        found = False
        updated = []
        for t in self._topics:
            if t.code == code:
                t = t.model_copy(update={"items": [*t.items, text]})
                found = True
            updated.append(t)

        if not found:
            log.debug("append_item: no user topic with code %s", code)
            return False

        self._topics = updated
        self._save_later()
        return True

    def _save_later(self) -> None:
        snapshot = self.topics
        self._writes.submit("save_user_topics", lambda: self.save(snapshot))

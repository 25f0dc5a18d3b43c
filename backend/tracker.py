"""Single source of truth for the tracker's view state.

The tracker owns the three inputs of the view (merged topics, query,
completion flags), listens for preference changes, and pushes a freshly built
``ViewState`` to its subscribers after every change.
"""

import logging
from collections.abc import Callable

import completion
import db
from catalog import load_catalog
from config import settings
from models import Topic
from user_topics import UserTopics
from view_state import ViewState, build_view_state
from writes import WriteQueue

log = logging.getLogger(__name__)

StateListener = Callable[[ViewState], None]


class Tracker:
    def __init__(self, catalog_path: str | None = None) -> None:
        self._catalog_path = catalog_path
        self.writes = WriteQueue()
        self.user_topics = UserTopics(self.writes)

        self._catalog: list[Topic] = []
        self._user: list[Topic] = []
        self._query = ""
        self._checked: dict[str, bool] = {}
        self._state = ViewState()
        self._listeners: list[StateListener] = []

    # -- lifecycle --

    async def start(self) -> None:
        # Catalog failure propagates: no tracker without its catalog
        self._catalog = load_catalog(self._catalog_path)
        self._user = await self.user_topics.refresh()
        self._checked = await completion.read_all()
        db.add_listener(self._on_store_change)
        self.writes.start()
        self._recompute()
        log.info(
            "Tracker started: %d catalog topics, %d user topics, %d completion entries",
            len(self._catalog), len(self._user), len(self._checked),
        )

    async def stop(self) -> None:
        await self.writes.stop()
        db.remove_listener(self._on_store_change)

    # -- observation --

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def topics(self) -> list[Topic]:
        return self._catalog + self._user

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- actions --

    def set_query(self, query: str) -> ViewState:
        self._query = query
        self._recompute()
        return self._state

    def toggle(self, code: str, item: str) -> str:
        """Queue a flip of the item's flag. Returns its completion key."""
        self.writes.submit(
            f"toggle {code}", lambda: completion.toggle(code, item)
        )
        return completion.completion_key(code, item)

    def add_topic(
        self,
        code: str = "",
        name: str = "",
        items: list[str] | None = None,
        keywords: str = "",
    ) -> Topic:
        topic = self.user_topics.add_or_replace(code, name, items, keywords)
        log.info("Queued user topic %s (%d items)", topic.code, len(topic.items))
        return topic

    def add_item(self, code: str, text: str) -> bool:
        return self.user_topics.append_item(code, text)

    # -- internals --

    async def _on_store_change(self, key: str) -> None:
        if key == settings.USER_TCS_KEY:
            self._user = await self.user_topics.load()
        else:
            self._checked = await completion.read_all()
        self._recompute()

    def _recompute(self) -> None:
        self._state = build_view_state(self.topics, self._query, self._checked)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                log.error("State listener failed: %s", e)

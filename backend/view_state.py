"""Read model combining topics, the search query and completion flags.

Everything here is a pure function of its inputs and is recomputed in full on
every change; topic and item counts are small.
"""

from pydantic import BaseModel

from completion import is_checked
from models import Topic


class TopicProgress(BaseModel):
    code: str
    done: int
    total: int
    progress: float


class ViewState(BaseModel):
    all: list[Topic] = []
    filtered: list[Topic] = []
    checked: dict[str, bool] = {}
    query: str = ""
    overall_progress: float = 0.0
    overall_percent: int = 0
    progress: list[TopicProgress] = []


def matches(topic: Topic, query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    return (
        q in topic.code.lower()
        or q in topic.name.lower()
        or q in topic.keywords.lower()
        or any(q in item.lower() for item in topic.items)
    )


def filter_topics(topics: list[Topic], query: str) -> list[Topic]:
    if not query.strip():
        return list(topics)
    return [t for t in topics if matches(t, query)]


def done_count(topic: Topic, checked: dict[str, bool]) -> int:
    return sum(1 for item in topic.items if is_checked(checked, topic.code, item))


def topic_progress(topic: Topic, checked: dict[str, bool]) -> TopicProgress:
    done = done_count(topic, checked)
    total = len(topic.items)
    return TopicProgress(
        code=topic.code,
        done=done,
        total=total,
        progress=done / total if total else 0.0,
    )


def overall_progress(topics: list[Topic], checked: dict[str, bool]) -> float:
    total = sum(len(t.items) for t in topics)
    if total == 0:
        return 0.0
    return sum(done_count(t, checked) for t in topics) / total


def build_view_state(topics: list[Topic], query: str, checked: dict[str, bool]) -> ViewState:
    filtered = filter_topics(topics, query)
    overall = overall_progress(topics, checked)
    return ViewState(
        all=list(topics),
        filtered=filtered,
        checked=dict(checked),
        query=query,
        overall_progress=overall,
        overall_percent=int(overall * 100),
        progress=[topic_progress(t, checked) for t in filtered],
    )

"""Topic records shared by the bundled catalog and user-created topics."""

from pydantic import BaseModel, ConfigDict


class Topic(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str
    name: str
    items: list[str]
    keywords: str = ""


class TopicList(BaseModel):
    """On-disk wrapper: ``{"tcs": [...]}``."""

    model_config = ConfigDict(extra="ignore")

    tcs: list[Topic]

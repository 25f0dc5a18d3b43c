import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from catalog import get_topic_by_code
from config import settings
from db import init_db, close_db
from models import Topic
from tracker import Tracker
from user_topics import parse_items
from view_state import ViewState, build_view_state, topic_progress

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

_tracker: Tracker | None = None


def get_tracker() -> Tracker:
    if _tracker is None:
        raise RuntimeError("Tracker not started: app lifespan has not run")
    return _tracker


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _tracker
    await init_db()
    log.info("Database initialized")
    tracker = Tracker()
    try:
        await tracker.start()
    except Exception:
        await close_db()
        raise
    _tracker = tracker
    yield
    await tracker.stop()
    _tracker = None
    await close_db()
    log.info("Database closed")


app = FastAPI(title="IFAC Tracker", lifespan=lifespan)


# -- Request models --

class QueryRequest(BaseModel):
    query: str = ""


class ToggleRequest(BaseModel):
    code: str
    item: str


class AddTopicRequest(BaseModel):
    code: str = ""
    name: str = ""
    items: list[str] | None = None
    items_text: str | None = None   # one bullet per line, as typed in a form
    keywords: str = ""


class AddItemRequest(BaseModel):
    text: str


# -- State endpoints --

@app.get("/state")
async def get_state(query: str | None = None) -> ViewState:
    """Current view state. ``query`` filters this response only; PUT /query stores one."""
    tracker = get_tracker()
    if query is None:
        return tracker.state
    return build_view_state(tracker.topics, query, tracker.state.checked)


@app.put("/query")
async def set_query(req: QueryRequest) -> ViewState:
    return get_tracker().set_query(req.query)


@app.get("/events")
async def events():
    tracker = get_tracker()
    updates: asyncio.Queue[ViewState] = asyncio.Queue()

    async def stream():
        tracker.subscribe(updates.put_nowait)
        try:
            yield _sse(tracker.state)
            while True:
                yield _sse(await updates.get())
        finally:
            tracker.unsubscribe(updates.put_nowait)

    return StreamingResponse(
        stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )


def _sse(state: ViewState) -> str:
    return f"event: state\ndata: {state.model_dump_json()}\n\n"


# -- Topic endpoints --

@app.get("/topics")
async def list_topics() -> list[Topic]:
    return get_tracker().topics


@app.get("/topics/{code}")
async def get_topic(code: str):
    tracker = get_tracker()
    topic = get_topic_by_code(tracker.topics, code)
    if topic is None:
        raise HTTPException(status_code=404, detail=f"Unknown topic: {code}")
    return {
        "topic": topic,
        "progress": topic_progress(topic, tracker.state.checked),
    }


@app.post("/topics", status_code=202)
async def add_topic(req: AddTopicRequest) -> Topic:
    items = list(req.items or [])
    if req.items_text:
        items += parse_items(req.items_text)
    return get_tracker().add_topic(
        code=req.code, name=req.name, items=items, keywords=req.keywords
    )


@app.post("/topics/{code}/items", status_code=202)
async def add_item(code: str, req: AddItemRequest):
    queued = get_tracker().add_item(code, req.text)
    return {"code": code, "queued": queued}


# -- Completion endpoint --

@app.post("/toggle", status_code=202)
async def toggle(req: ToggleRequest):
    key = get_tracker().toggle(req.code, req.item)
    return {"code": req.code, "item": req.item, "key": key}


if __name__ == "__main__":
    import os
    reload = os.environ.get("NO_RELOAD", "").lower() not in ("1", "true")
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)

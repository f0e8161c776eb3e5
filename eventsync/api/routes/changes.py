"""Change feed routes: a polling endpoint and a server-sent events stream."""

import json
from typing import AsyncIterator, Awaitable, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ...auth.identity import AuthSession
from ...change_feed import EVENTS_TOPIC, ChangeFeed, QueueListener
from ..dependencies import ServiceContainer, get_current_session, get_services

router = APIRouter(prefix="/changes", tags=["changes"])

KEEPALIVE_SECONDS = 15.0


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


async def notice_stream(
    feed: ChangeFeed,
    topic: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = KEEPALIVE_SECONDS
) -> AsyncIterator[str]:
    """
    Yield server-sent events for every change on ``topic``.

    The first message carries the current revision. The feed subscription
    is released when the client disconnects or the generator is closed.
    """
    listener = QueueListener(feed, topic)
    try:
        yield _sse("ready", {"topic": topic, "revision": feed.revision(topic)})
        while not await is_disconnected():
            notice = await listener.get(timeout=keepalive)
            if notice is None:
                yield ": keepalive\n\n"
                continue
            yield _sse("change", {
                "topic": notice.topic,
                "revision": notice.revision,
                "kind": notice.kind,
                "record_id": notice.record_id,
            })
    finally:
        listener.close()


@router.get("")
def poll_changes(
    since: int = 0,
    session: AuthSession = Depends(get_current_session),
    services: ServiceContainer = Depends(get_services)
):
    """Polling fallback: compare ``since`` with the current revision and re-fetch if it moved."""
    revision = services.feed.revision(EVENTS_TOPIC)
    return {"topic": EVENTS_TOPIC, "revision": revision, "changed": revision > since}


@router.get("/stream")
async def stream_changes(
    request: Request,
    session: AuthSession = Depends(get_current_session),
    services: ServiceContainer = Depends(get_services)
):
    """Push a notice to the client whenever the event store changes."""
    return StreamingResponse(
        notice_stream(services.feed, EVENTS_TOPIC, request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )

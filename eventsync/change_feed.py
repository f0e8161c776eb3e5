"""In-process change feed.

Writers publish a notice after every committed change to a topic (one topic
per table). Subscribers get a callback carrying no payload they can rely on
beyond "something changed on this topic"; they are expected to re-fetch.
Each topic keeps a monotonically increasing revision so clients without a
push channel can poll.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

EVENTS_TOPIC = 'events'


@dataclass(frozen=True)
class ChangeNotice:
    """
    A single change delivered to subscribers.

    Fields:
        topic: Logical topic the change belongs to (e.g. 'events')
        revision: Topic revision after the change
        kind: What happened ('insert', 'update', ...)
        record_id: Identifier of the changed record (optional)
    """
    topic: str
    revision: int
    kind: str
    record_id: Optional[str] = None


Callback = Callable[[ChangeNotice], None]


class Subscription:
    """Handle returned by ``ChangeFeed.subscribe``."""

    def __init__(self, feed: 'ChangeFeed', topic: str, callback: Callback):
        self._feed = feed
        self.topic = topic
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        """Stop further callbacks. Calling it again is a no-op."""
        if not self.active:
            return
        self.active = False
        self._feed._remove(self)


class ChangeFeed:
    """Topic-based fan-out of change notices to registered callbacks."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._revisions: Dict[str, int] = {}

    def subscribe(self, topic: str, callback: Callback) -> Subscription:
        """
        Register ``callback`` for changes on ``topic``.

        Args:
            topic: Topic name (e.g. 'events')
            callback: Called with a ChangeNotice after each change

        Returns:
            Subscription: Handle whose unsubscribe() stops the callbacks
        """
        subscription = Subscription(self, topic, callback)
        with self._lock:
            self._subscriptions.setdefault(topic, []).append(subscription)
        logger.debug(f"New subscription on topic '{topic}'")
        return subscription

    def publish(self, topic: str, kind: str, record_id: Optional[str] = None) -> ChangeNotice:
        """
        Bump the topic revision and notify every live subscriber.

        A callback that raises is logged and skipped; the publisher and the
        remaining subscribers are unaffected.

        Returns:
            ChangeNotice: The notice that was delivered
        """
        with self._lock:
            revision = self._revisions.get(topic, 0) + 1
            self._revisions[topic] = revision
            subscribers = list(self._subscriptions.get(topic, []))

        notice = ChangeNotice(topic=topic, revision=revision, kind=kind, record_id=record_id)
        for subscription in subscribers:
            if not subscription.active:
                continue
            try:
                subscription.callback(notice)
            except Exception as e:
                logger.error(f"Change feed subscriber on '{topic}' failed: {e}")
        return notice

    def revision(self, topic: str) -> int:
        """Current revision of ``topic`` (0 if nothing was published yet)."""
        with self._lock:
            return self._revisions.get(topic, 0)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(topic, []))

    def close(self) -> None:
        """Drop every subscription, e.g. on application shutdown."""
        with self._lock:
            subscriptions = [s for subs in self._subscriptions.values() for s in subs]
            self._subscriptions.clear()
        for subscription in subscriptions:
            subscription.active = False
        logger.info(f"Change feed closed ({len(subscriptions)} subscriptions dropped)")

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscriptions.get(subscription.topic, [])
            if subscription in subscribers:
                subscribers.remove(subscription)


class QueueListener:
    """
    Bridges feed callbacks onto an asyncio queue.

    Writes happen in worker threads, so notices are handed to the event
    loop with ``call_soon_threadsafe``. Always call ``close()`` when the
    consumer goes away.
    """

    def __init__(self, feed: ChangeFeed, topic: str, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self.queue: asyncio.Queue = asyncio.Queue()
        self._subscription = feed.subscribe(topic, self._on_notice)

    def _on_notice(self, notice: ChangeNotice) -> None:
        self._loop.call_soon_threadsafe(self.queue.put_nowait, notice)

    async def get(self, timeout: Optional[float] = None) -> Optional[ChangeNotice]:
        """Wait for the next notice; None if ``timeout`` elapses first."""
        try:
            return await asyncio.wait_for(self.queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def close(self) -> None:
        self._subscription.unsubscribe()

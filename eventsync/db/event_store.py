"""Event store: the single source of truth for event records.

Every read returns detached ``EventSnapshot`` copies. Every committed write
is announced on the change feed after the transaction closes.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional

from ..change_feed import EVENTS_TOPIC, ChangeFeed
from ..errors import NotFoundError, ValidationError
from ..lifecycle.engine import check_invariants
from ..lifecycle.state import EventSnapshot, EventStatus
from ..models.event import DATETIME_FIELDS, IMMUTABLE_FIELDS, UPDATABLE_FIELDS, Event
from ..utils.time_utils import ensure_utc
from .db_core import Database

logger = logging.getLogger(__name__)


def _parse_status(value) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value!r}")


@dataclass(frozen=True)
class EventDraft:
    """
    A new event as submitted, before the store assigns an id.

    Fields:
        title: Event title
        community: Community label
        event_type: Event type label
        description: Free-text description
        start_time: When the event starts
        created_by: User id of the submitter
        end_time: When the event ends (optional)
        poster_url: Public URL of the uploaded poster (optional)
    """
    title: str
    community: str
    event_type: str
    description: str
    start_time: datetime
    created_by: str
    end_time: Optional[datetime] = None
    poster_url: Optional[str] = None


class EventStore:
    """Queryable, durable event records backed by SQLAlchemy."""

    def __init__(self, database: Database, feed: Optional[ChangeFeed] = None, topic: str = EVENTS_TOPIC):
        self.database = database
        self.feed = feed
        self.topic = topic

    def list_events(self, community: Optional[str] = None, status: Optional[EventStatus] = None) -> List[EventSnapshot]:
        """
        Return events ordered by start time, ties broken by insertion order.

        No time filtering happens here: past events are included.

        Args:
            community: Only return events of this community (optional)
            status: Only return events in this state (optional)

        Raises:
            ValidationError: If status is not a known event status
        """
        status = _parse_status(status) if status else None
        with self.database.session() as session:
            query = session.query(Event)
            if community:
                query = query.filter(Event.community == community)
            if status:
                query = query.filter(Event.status == status)
            rows = query.order_by(Event.start_time.asc(), Event.seq.asc()).all()
            return [row.to_snapshot() for row in rows]

    def list_communities(self) -> List[str]:
        """Distinct community labels in use, alphabetically."""
        with self.database.session() as session:
            rows = session.query(Event.community).distinct().order_by(Event.community).all()
            return [community for (community,) in rows if community]

    def get_by_id(self, event_id: str) -> EventSnapshot:
        """
        Fetch one event.

        Raises:
            NotFoundError: If no event has this id
        """
        with self.database.session() as session:
            return self._get_row(session, event_id).to_snapshot()

    def insert(self, draft: EventDraft) -> EventSnapshot:
        """
        Persist a new pending event.

        The store assigns the id; ``created_by`` is fixed from the draft and
        can never be changed afterwards.

        Raises:
            ValidationError: If the draft breaks a record invariant
        """
        if not draft.created_by:
            raise ValidationError("An event must record who created it")

        event_id = str(uuid.uuid4())
        candidate = EventSnapshot(
            id=event_id,
            title=draft.title,
            community=draft.community,
            event_type=draft.event_type,
            description=draft.description or '',
            status=EventStatus.PENDING,
            start_time=ensure_utc(draft.start_time),
            end_time=ensure_utc(draft.end_time),
            poster_url=draft.poster_url,
            created_by=draft.created_by,
        )
        check_invariants(candidate)

        with self.database.session() as session:
            row = Event(
                id=event_id,
                title=candidate.title,
                community=candidate.community,
                event_type=candidate.event_type,
                description=candidate.description,
                status=EventStatus.PENDING,
                start_time=candidate.start_time,
                end_time=candidate.end_time,
                poster_url=candidate.poster_url,
                created_by=candidate.created_by,
            )
            session.add(row)
            session.flush()
            snapshot = row.to_snapshot()

        logger.info(f"Added new event: {snapshot.title} ({snapshot.id})")
        self._announce('insert', snapshot.id)
        return snapshot

    def update_fields(self, event_id: str, changes: Mapping[str, Any]) -> EventSnapshot:
        """
        Write only the supplied fields of one event, atomically.

        The resulting record is checked against the event invariants before
        commit; on failure nothing is written.

        Args:
            event_id: Id of the event to update
            changes: Field name -> new value

        Returns:
            EventSnapshot: The record as committed

        Raises:
            ValidationError: If a field is unknown or immutable, or the result
                would break an invariant
            NotFoundError: If no event has this id
        """
        immutable = IMMUTABLE_FIELDS.intersection(changes)
        if immutable:
            raise ValidationError(f"Fields cannot be changed: {', '.join(sorted(immutable))}")
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown event fields: {', '.join(sorted(unknown))}")

        normalized = {}
        for name, value in changes.items():
            if name in DATETIME_FIELDS:
                value = ensure_utc(value)
            elif name == 'status':
                value = _parse_status(value)
            normalized[name] = value

        with self.database.session() as session:
            row = self._get_row(session, event_id)
            for name, value in normalized.items():
                setattr(row, name, value)
            check_invariants(row.to_snapshot())
            session.flush()
            snapshot = row.to_snapshot()

        logger.info(f"Updated event {event_id}: {', '.join(sorted(normalized))}")
        self._announce('update', event_id)
        return snapshot

    def _get_row(self, session, event_id: str) -> Event:
        row = session.query(Event).filter(Event.id == event_id).first()
        if row is None:
            raise NotFoundError(f"Event {event_id} not found")
        return row

    def _announce(self, kind: str, event_id: str) -> None:
        if self.feed is not None:
            self.feed.publish(self.topic, kind, event_id)

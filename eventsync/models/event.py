"""Event model definition."""

import uuid

from sqlalchemy import Column, DateTime, Enum as SAEnum, Integer, String, Text

from .base import Base
from ..lifecycle.state import EventSnapshot, EventStatus
from ..utils.time_utils import ensure_utc, now_utc

# Columns a caller may never change after insert
IMMUTABLE_FIELDS = frozenset({'id', 'created_by', 'created_at'})

# Columns update_fields accepts
UPDATABLE_FIELDS = frozenset({
    'title',
    'community',
    'event_type',
    'description',
    'status',
    'start_time',
    'end_time',
    'poster_url',
    'suggested_start_time',
    'suggested_end_time',
    'suggestion_reason',
})

DATETIME_FIELDS = frozenset({
    'start_time',
    'end_time',
    'suggested_start_time',
    'suggested_end_time',
    'created_at',
    'updated_at',
})


def _new_event_id() -> str:
    return str(uuid.uuid4())


class Event(Base):
    """
    Persisted event record.

    ``seq`` is an internal insertion counter used to break ties when two
    events share a start time. The public identifier is ``id``.
    """
    __tablename__ = 'events'

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, unique=True, index=True, default=_new_event_id)
    title = Column(String, nullable=False)
    community = Column(String, nullable=False, default='')
    event_type = Column(String, nullable=False, default='')
    description = Column(Text, nullable=False, default='')
    status = Column(
        SAEnum(EventStatus, name='event_status', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EventStatus.PENDING
    )
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True))
    poster_url = Column(String)
    created_by = Column(String(36), nullable=False, index=True)
    suggested_start_time = Column(DateTime(timezone=True))
    suggested_end_time = Column(DateTime(timezone=True))
    suggestion_reason = Column(Text)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    def __init__(self, **kwargs):
        """Initialize Event with the given attributes."""
        # Ensure timezone-aware datetimes
        for name in DATETIME_FIELDS:
            if kwargs.get(name) is not None:
                kwargs[name] = ensure_utc(kwargs[name])
        super().__init__(**kwargs)

    def to_snapshot(self) -> EventSnapshot:
        """Detach the row into an immutable snapshot."""
        return EventSnapshot(
            id=self.id,
            title=self.title,
            community=self.community,
            event_type=self.event_type,
            description=self.description,
            status=EventStatus(self.status),
            start_time=ensure_utc(self.start_time),
            end_time=ensure_utc(self.end_time),
            poster_url=self.poster_url,
            created_by=self.created_by,
            suggested_start_time=ensure_utc(self.suggested_start_time),
            suggested_end_time=ensure_utc(self.suggested_end_time),
            suggestion_reason=self.suggestion_reason,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
        )

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, title={self.title}, status={self.status})"

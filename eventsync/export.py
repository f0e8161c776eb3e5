"""Export helpers for the calendar and report views.

These work on snapshots already fetched from the store. The store itself
never filters by time; the future-only rule lives here.
"""

import csv
import io
from calendar import month_name
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from icalendar import Calendar, Event as ICalEvent

from .lifecycle.state import EventSnapshot, EventStatus
from .utils.time_utils import ensure_utc, now_utc

# iCalendar STATUS values per lifecycle state
ICAL_STATUS = {
    EventStatus.APPROVED: 'CONFIRMED',
    EventStatus.PENDING: 'TENTATIVE',
    EventStatus.REJECTED: 'CANCELLED',
}

CSV_COLUMNS = ['Title', 'Community', 'Type', 'Start', 'End', 'Status', 'Description']


@dataclass
class MonthGroup:
    year: int
    month: int
    events: List[EventSnapshot] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{month_name[self.month]} {self.year}"


def future_events(events: Iterable[EventSnapshot], now: Optional[datetime] = None) -> List[EventSnapshot]:
    """Events starting at or after ``now``, in their original order."""
    now = ensure_utc(now) if now else now_utc()
    return [event for event in events if event.start_time >= now]


def status_summary(events: Iterable[EventSnapshot]) -> Dict[str, int]:
    """Number of events per status, every status included."""
    counts = {status.value: 0 for status in EventStatus}
    for event in events:
        counts[EventStatus(event.status).value] += 1
    return counts


def group_by_month(events: Iterable[EventSnapshot], now: Optional[datetime] = None) -> List[MonthGroup]:
    """
    Group future events into the current and the next calendar month.

    Args:
        events: Events to group, usually as returned by the store
        now: Reference time (defaults to the current time)

    Returns:
        List[MonthGroup]: Exactly two groups, current month first
    """
    now = ensure_utc(now) if now else now_utc()
    next_year, next_month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
    groups = [MonthGroup(now.year, now.month), MonthGroup(next_year, next_month)]

    for event in future_events(events, now):
        for group in groups:
            if (event.start_time.year, event.start_time.month) == (group.year, group.month):
                group.events.append(event)
    return groups


def to_ical(events: Iterable[EventSnapshot], calendar_name: str = 'EventSync') -> bytes:
    """Generate an iCalendar feed of the given events."""
    cal = Calendar()
    cal.add('prodid', '-//EventSync//eventsync//')
    cal.add('version', '2.0')
    cal.add('x-wr-calname', calendar_name)

    for event in events:
        cal_event = ICalEvent()
        cal_event.add('uid', f"{event.id}@eventsync")
        cal_event.add('summary', event.title)
        cal_event.add('dtstart', event.start_time)

        if event.end_time:
            cal_event.add('dtend', event.end_time)

        if event.description:
            cal_event.add('description', event.description)

        if event.community:
            cal_event.add('categories', [event.community])

        cal_event.add('status', ICAL_STATUS[EventStatus(event.status)])
        cal.add_component(cal_event)

    return cal.to_ical()


def to_csv(events: Iterable[EventSnapshot]) -> str:
    """Spreadsheet rows, one per event, with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for event in events:
        writer.writerow([
            event.title,
            event.community,
            event.event_type,
            event.start_time.isoformat(),
            event.end_time.isoformat() if event.end_time else '',
            EventStatus(event.status).value.upper(),
            event.description,
        ])
    return buffer.getvalue()

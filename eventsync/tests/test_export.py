"""Tests for the report and calendar exports."""

import csv
import io

from icalendar import Calendar

from eventsync.export import CSV_COLUMNS, future_events, group_by_month, status_summary, to_csv, to_ical
from eventsync.lifecycle import EventSnapshot, EventStatus

from .helpers import utc

NOW = utc(2025, 3, 5, 12)


def make_event(event_id, start, status=EventStatus.PENDING, **overrides):
    values = dict(
        id=event_id,
        title=f"Event {event_id}",
        community="IEEE",
        event_type="Workshop",
        description="",
        status=status,
        start_time=start,
        created_by="rep-1",
    )
    values.update(overrides)
    return EventSnapshot(**values)


def test_future_only_view_hides_past_events():
    a = make_event("a", utc(2025, 3, 10, 9))
    b = make_event("b", utc(2025, 3, 1, 9))
    c = make_event("c", NOW)

    assert [e.id for e in future_events([a, b, c], now=NOW)] == ["a", "c"]


def test_status_summary_counts_every_status():
    events = [
        make_event("a", utc(2025, 3, 10, 9), EventStatus.APPROVED),
        make_event("b", utc(2025, 3, 11, 9), EventStatus.APPROVED),
        make_event("c", utc(2025, 3, 12, 9)),
    ]

    assert status_summary(events) == {'pending': 1, 'approved': 2, 'rejected': 0}
    assert status_summary([]) == {'pending': 0, 'approved': 0, 'rejected': 0}


def test_group_by_month_covers_current_and_next_month():
    events = [
        make_event("past", utc(2025, 3, 1, 9)),
        make_event("march", utc(2025, 3, 20, 9)),
        make_event("april", utc(2025, 4, 2, 9)),
        make_event("may", utc(2025, 5, 2, 9)),
    ]

    march, april = group_by_month(events, now=NOW)

    assert (march.label, [e.id for e in march.events]) == ("March 2025", ["march"])
    assert (april.label, [e.id for e in april.events]) == ("April 2025", ["april"])


def test_group_by_month_rolls_over_the_year():
    events = [make_event("new-year", utc(2026, 1, 3, 9))]

    december, january = group_by_month(events, now=utc(2025, 12, 15))

    assert (december.year, december.month, december.events) == (2025, 12, [])
    assert (january.year, january.month) == (2026, 1)
    assert [e.id for e in january.events] == ["new-year"]


def test_ical_export_contains_one_vevent_per_event():
    events = [
        make_event("a", utc(2025, 3, 10, 9), EventStatus.APPROVED, end_time=utc(2025, 3, 10, 11),
                   description="Bring a laptop"),
        make_event("b", utc(2025, 3, 11, 9), EventStatus.REJECTED),
    ]

    calendar = Calendar.from_ical(to_ical(events))
    vevents = calendar.walk('VEVENT')

    assert [str(v['uid']) for v in vevents] == ["a@eventsync", "b@eventsync"]
    assert str(vevents[0]['summary']) == "Event a"
    assert str(vevents[0]['status']) == "CONFIRMED"
    assert str(vevents[0]['description']) == "Bring a laptop"
    assert vevents[0].decoded('dtend') == utc(2025, 3, 10, 11)
    assert str(vevents[1]['status']) == "CANCELLED"
    assert 'dtend' not in vevents[1]


def test_csv_export_has_header_and_rows():
    events = [
        make_event("a", utc(2025, 3, 10, 9), EventStatus.APPROVED, end_time=utc(2025, 3, 10, 11),
                   title="Robotics, Advanced"),
        make_event("b", utc(2025, 3, 11, 9)),
    ]

    rows = list(csv.reader(io.StringIO(to_csv(events))))

    assert rows[0] == CSV_COLUMNS
    assert rows[1] == [
        "Robotics, Advanced", "IEEE", "Workshop",
        "2025-03-10T09:00:00+00:00", "2025-03-10T11:00:00+00:00", "APPROVED", "",
    ]
    assert rows[2][4] == ""
    assert rows[2][5] == "PENDING"

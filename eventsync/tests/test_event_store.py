"""Tests for the SQLAlchemy-backed event store."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from eventsync.change_feed import EVENTS_TOPIC
from eventsync.errors import NotFoundError, TransientStoreError, ValidationError
from eventsync.lifecycle import EventStatus

from .helpers import draft, utc


def test_insert_assigns_id_and_pending_status(store):
    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9), utc(2025, 3, 10, 11)))

    assert event.id
    assert event.status == EventStatus.PENDING
    assert event.created_by == "rep-1"
    assert event.start_time == utc(2025, 3, 10, 9)
    assert event.end_time == utc(2025, 3, 10, 11)
    assert not event.has_suggestion
    assert store.get_by_id(event.id) == event


def test_insert_gives_distinct_ids(store):
    first = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))
    second = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))

    assert first.id != second.id


def test_insert_rejects_end_before_start(store):
    with pytest.raises(ValidationError):
        store.insert(draft("rep-1", utc(2025, 3, 10, 9), utc(2025, 3, 10, 8)))

    assert store.list_events() == []


def test_list_orders_by_start_then_insertion(store):
    late = store.insert(draft("rep-1", utc(2025, 5, 1, 9), title="late"))
    tie_a = store.insert(draft("rep-1", utc(2025, 4, 1, 9), title="tie a"))
    early = store.insert(draft("rep-1", utc(2025, 3, 1, 9), title="early"))
    tie_b = store.insert(draft("rep-1", utc(2025, 4, 1, 9), title="tie b"))

    assert [e.id for e in store.list_events()] == [early.id, tie_a.id, tie_b.id, late.id]


def test_list_keeps_past_events(store):
    past = store.insert(draft("rep-1", utc(2001, 1, 1, 9), title="long gone"))

    assert past.id in [e.id for e in store.list_events()]


def test_list_filters_by_status_and_community(store):
    first = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))
    store.insert(draft("rep-1", utc(2025, 3, 11, 9)))
    store.update_fields(first.id, {"status": EventStatus.APPROVED})

    assert [e.id for e in store.list_events(status=EventStatus.APPROVED)] == [first.id]
    assert len(store.list_events(community="IEEE")) == 2
    assert store.list_events(community="GDSC") == []
    assert store.list_communities() == ["IEEE"]


def test_update_fields_only_touches_supplied_fields(store):
    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9), utc(2025, 3, 10, 11)))
    updated = store.update_fields(event.id, {"status": "approved"})

    assert updated.status == EventStatus.APPROVED
    assert updated.title == event.title
    assert updated.start_time == event.start_time
    assert updated.end_time == event.end_time
    assert store.get_by_id(event.id).status == EventStatus.APPROVED


def test_update_unknown_id_raises_not_found(store):
    with pytest.raises(NotFoundError):
        store.update_fields("missing", {"status": EventStatus.APPROVED})


def test_get_unknown_id_raises_not_found(store):
    with pytest.raises(NotFoundError):
        store.get_by_id("missing")


@pytest.mark.parametrize("changes", [
    {"created_by": "someone-else"},
    {"id": "new-id"},
    {"colour": "red"},
    {"status": "bogus"},
])
def test_update_rejects_immutable_and_unknown_fields(store, changes):
    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))

    with pytest.raises(ValidationError):
        store.update_fields(event.id, changes)
    assert store.get_by_id(event.id) == event


@pytest.mark.parametrize("changes", [
    {"end_time": utc(2025, 3, 10, 8)},
    {"suggested_start_time": utc(2025, 3, 12, 9)},
    {"suggestion_reason": "orphan"},
    {
        "suggested_start_time": utc(2025, 3, 12, 9),
        "suggested_end_time": utc(2025, 3, 12, 9),
        "suggestion_reason": "room",
    },
])
def test_update_rejects_invalid_results_and_writes_nothing(store, changes):
    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))

    with pytest.raises(ValidationError):
        store.update_fields(event.id, changes)
    assert store.get_by_id(event.id) == event


def test_writes_are_announced_on_the_feed(store, feed):
    notices = []
    feed.subscribe(EVENTS_TOPIC, notices.append)

    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))
    store.update_fields(event.id, {"status": EventStatus.REJECTED})

    assert [(n.kind, n.record_id) for n in notices] == [("insert", event.id), ("update", event.id)]
    assert feed.revision(EVENTS_TOPIC) == 2


def test_failed_write_is_not_announced(store, feed):
    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))
    revision = feed.revision(EVENTS_TOPIC)

    with pytest.raises(ValidationError):
        store.update_fields(event.id, {"end_time": utc(2025, 3, 1, 9)})
    assert feed.revision(EVENTS_TOPIC) == revision


def test_backend_failure_surfaces_as_transient_error(store, database):
    event = store.insert(draft("rep-1", utc(2025, 3, 10, 9)))
    failure = OperationalError("UPDATE events", {}, Exception("database is locked"))

    with patch("sqlalchemy.orm.Session.flush", side_effect=failure):
        with pytest.raises(TransientStoreError):
            store.update_fields(event.id, {"status": EventStatus.APPROVED})

    assert store.get_by_id(event.id).status == EventStatus.PENDING


def test_list_rejects_unknown_status(store):
    with pytest.raises(ValidationError):
        store.list_events(status="bogus")

"""Tests for event submission and the lifecycle commands end to end."""

import pytest

from eventsync.change_feed import EVENTS_TOPIC
from eventsync.config.categories import COMMUNITIES, CustomCategory, PredefinedCategory, resolve_category
from eventsync.errors import NoActiveSuggestionError, NotFoundError, PermissionDeniedError, ValidationError
from eventsync.event_service import EventService, PosterUpload
from eventsync.lifecycle import Approve, EventStatus, NotificationAction, Reject
from eventsync.storage.assets import AssetStore, AssetUploadError

from .helpers import register, submit, utc


def test_reschedule_negotiation_scenario(service, submitter, approver, dispatcher):
    event = submit(service, submitter, utc(2025, 3, 10, 9))

    suggested = service.propose_new_time(
        approver.to_actor(), event.id, start_time=utc(2025, 3, 12, 9), reason="room conflict"
    ).event

    assert suggested.status == EventStatus.PENDING
    assert suggested.suggested_start_time == utc(2025, 3, 12, 9)
    assert suggested.suggestion_reason == "room conflict"

    accepted = service.accept_suggestion(submitter.to_actor(), event.id).event

    assert accepted.start_time == utc(2025, 3, 12, 9)
    assert accepted.end_time is None
    assert accepted.status == EventStatus.PENDING
    assert accepted.suggested_start_time is None
    assert accepted.suggested_end_time is None
    assert accepted.suggestion_reason is None
    assert service.get_event(event.id) == accepted


def test_accept_without_suggestion_leaves_record_unchanged(service, submitter, feed):
    event = submit(service, submitter, utc(2025, 3, 10, 9))
    revision = feed.revision(EVENTS_TOPIC)

    with pytest.raises(NoActiveSuggestionError):
        service.accept_suggestion(submitter.to_actor(), event.id)

    assert service.get_event(event.id) == event
    assert feed.revision(EVENTS_TOPIC) == revision


def test_approve_is_idempotent(service, submitter, approver):
    event = submit(service, submitter, utc(2025, 3, 10, 9))

    service.approve(approver.to_actor(), event.id)
    second = service.approve(approver.to_actor(), event.id)

    assert second.event.status == EventStatus.APPROVED


def test_approver_can_reopen_and_reject(service, submitter, approver):
    event = submit(service, submitter, utc(2025, 3, 10, 9))
    actor = approver.to_actor()

    service.approve(actor, event.id)
    assert service.mark_pending(actor, event.id).event.status == EventStatus.PENDING
    assert service.reject(actor, event.id).event.status == EventStatus.REJECTED
    assert service.approve(actor, event.id).event.status == EventStatus.APPROVED


def test_concurrent_status_changes_resolve_last_write_wins(service, identity, submitter, approver):
    second_approver = register(identity, "dean@example.edu", "Dean", approver.role)
    event = submit(service, submitter, utc(2025, 3, 10, 9))

    # Both sessions read the same record before either writes
    copy_a = service.get_event(event.id)
    copy_b = service.get_event(event.id)

    first = service.execute(approver.to_actor(), event.id, Approve(), snapshot=copy_a)
    last = service.execute(second_approver.to_actor(), event.id, Reject(), snapshot=copy_b)

    assert first.event.status == EventStatus.APPROVED
    assert last.event.status == EventStatus.REJECTED
    assert service.get_event(event.id).status == EventStatus.REJECTED


def test_commands_on_missing_event_raise_not_found(service, approver):
    with pytest.raises(NotFoundError):
        service.approve(approver.to_actor(), "missing")


def test_submitters_cannot_approve(service, submitter):
    event = submit(service, submitter, utc(2025, 3, 10, 9))

    with pytest.raises(PermissionDeniedError):
        service.approve(submitter.to_actor(), event.id)
    assert service.get_event(event.id).status == EventStatus.PENDING


def test_approvers_cannot_submit(service, approver):
    with pytest.raises(PermissionDeniedError):
        submit(service, approver, utc(2025, 3, 10, 9))


def test_invalid_suggestion_is_rejected_before_any_write(service, submitter, approver):
    event = submit(service, submitter, utc(2025, 3, 10, 9))

    with pytest.raises(ValidationError):
        service.propose_new_time(
            approver.to_actor(), event.id,
            start_time=utc(2025, 3, 12, 9), end_time=utc(2025, 3, 12, 8), reason="room",
        )
    assert service.get_event(event.id) == event


def test_notifications_target_the_creator(service, submitter, approver):
    event = submit(service, submitter, utc(2025, 3, 10, 9))

    approved = service.approve(approver.to_actor(), event.id)
    suggested = service.propose_new_time(
        approver.to_actor(), event.id, start_time=utc(2025, 3, 12, 9), reason="room conflict"
    )
    pending = service.mark_pending(approver.to_actor(), event.id)
    accepted = service.accept_suggestion(submitter.to_actor(), event.id)

    assert approved.notification.action == NotificationAction.APPROVED
    assert approved.notification.recipient_email == submitter.email
    assert approved.notification.event_title == event.title
    assert suggested.notification.action == NotificationAction.SUGGESTED
    assert suggested.notification.message == "room conflict"
    assert pending.notification is None
    assert accepted.notification is None


def test_notify_hands_request_to_dispatcher(service, submitter, approver, dispatcher):
    event = submit(service, submitter, utc(2025, 3, 10, 9))
    result = service.reject(approver.to_actor(), event.id)

    service.notify(result.notification)
    service.notify(None)

    assert dispatcher.sent == [result.notification]


def test_dispatch_failure_does_not_undo_the_transition(store, identity, submitter, approver):
    class ExplodingDispatcher:
        def dispatch(self, request):
            raise RuntimeError("mail relay down")

    service = EventService(store, identity, dispatcher=ExplodingDispatcher())
    event = submit(service, submitter, utc(2025, 3, 10, 9))
    result = service.approve(approver.to_actor(), event.id)

    service.notify(result.notification)

    assert service.get_event(event.id).status == EventStatus.APPROVED


def test_poster_is_uploaded_under_the_submitter(service, submitter, tmp_path):
    event = service.submit_event(
        submitter.to_actor(),
        title="Hackathon",
        community=PredefinedCategory("GDSC"),
        event_type=CustomCategory("Hackathon"),
        description="",
        start_time=utc(2025, 3, 10, 9),
        poster=PosterUpload(filename="poster.PNG", content=b"\x89PNG"),
    )

    assert event.poster_url.startswith(f"http://assets.test/event-posters/{submitter.id}/")
    assert event.poster_url.endswith(".png")
    assert event.event_type == "Hackathon"
    stored = list((tmp_path / "event-posters" / submitter.id).iterdir())
    assert [p.read_bytes() for p in stored] == [b"\x89PNG"]


def test_failed_poster_upload_still_creates_event(store, identity, submitter):
    class BrokenAssets(AssetStore):
        def upload(self, path, data):
            raise AssetUploadError("bucket unavailable")

        def get_public_url(self, path):
            return path

    service = EventService(store, identity, assets=BrokenAssets())
    event = service.submit_event(
        submitter.to_actor(),
        title="Hackathon",
        community=PredefinedCategory("GDSC"),
        event_type=PredefinedCategory("Competition"),
        description="",
        start_time=utc(2025, 3, 10, 9),
        poster=PosterUpload(filename="poster.png", content=b"data"),
    )

    assert event.poster_url is None
    assert store.get_by_id(event.id).title == "Hackathon"


def test_resolve_category_tagged_union():
    assert resolve_category("IEEE", None, COMMUNITIES, "community") == PredefinedCategory("IEEE")
    assert resolve_category("Other", " Robotics Club ", COMMUNITIES, "community") == CustomCategory("Robotics Club")
    assert resolve_category("Other", " Robotics Club ", COMMUNITIES, "community").label == "Robotics Club"
    with pytest.raises(ValidationError):
        resolve_category("Other", "", COMMUNITIES, "community")
    with pytest.raises(ValidationError):
        resolve_category("Chess Club", None, COMMUNITIES, "community")

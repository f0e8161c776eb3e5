"""Tests for the notification dispatcher."""

from unittest.mock import Mock

import pytest
import requests

from eventsync.config.external_services import NotificationConfig
from eventsync.lifecycle import NotificationAction
from eventsync.notifications import NotificationDispatcher, NotificationRequest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('NOTIFICATION_URL', 'NOTIFICATION_API_KEY', 'NOTIFICATION_TIMEOUT', 'NOTIFICATIONS_ENABLED'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def request_():
    return NotificationRequest(
        event_id="evt-1",
        action=NotificationAction.SUGGESTED,
        recipient_email="rep@example.edu",
        event_title="Robotics Workshop",
        message="room conflict",
    )


def make_dispatcher(status_code=200, **config):
    http = Mock()
    http.post.return_value = Mock(status_code=status_code, text="nope")
    config.setdefault('url', "https://notify.test/send")
    return NotificationDispatcher(NotificationConfig(**config), http=http), http


def test_payload_shape(request_):
    assert request_.to_payload() == {
        'eventId': "evt-1",
        'action': "suggested",
        'recipientEmail': "rep@example.edu",
        'eventTitle': "Robotics Workshop",
        'hodMessage': "room conflict",
    }


def test_payload_omits_empty_message():
    request = NotificationRequest("evt-1", NotificationAction.APPROVED, "rep@example.edu", "Robotics Workshop")

    assert 'hodMessage' not in request.to_payload()


def test_dispatch_posts_json_with_bearer_token(request_):
    dispatcher, http = make_dispatcher(api_key="k3y", timeout=2.5)

    assert dispatcher.dispatch(request_) is True

    http.post.assert_called_once_with(
        "https://notify.test/send",
        json=request_.to_payload(),
        headers={'Content-Type': 'application/json', 'Authorization': "Bearer k3y"},
        timeout=2.5,
    )


def test_dispatch_reports_non_success_status(request_, caplog):
    dispatcher, _ = make_dispatcher(status_code=502)

    assert dispatcher.dispatch(request_) is False
    assert "502" in caplog.text


def test_dispatch_swallows_network_errors(request_):
    dispatcher, http = make_dispatcher()
    http.post.side_effect = requests.ConnectionError("connection refused")

    assert dispatcher.dispatch(request_) is False


def test_disabled_dispatcher_sends_nothing(request_):
    dispatcher, http = make_dispatcher(enabled=False)

    assert dispatcher.dispatch(request_) is False
    http.post.assert_not_called()


def test_missing_url_is_a_failed_dispatch(request_):
    dispatcher, http = make_dispatcher(url="")

    assert dispatcher.dispatch(request_) is False
    http.post.assert_not_called()


def test_disabled_by_environment(monkeypatch):
    monkeypatch.setenv('NOTIFICATIONS_ENABLED', 'false')
    monkeypatch.setenv('NOTIFICATION_URL', "https://notify.test/send")

    config = NotificationConfig()

    assert config.enabled is False
    assert config.url == "https://notify.test/send"

"""Shared fixtures: an in-memory database and the services built on it."""

import pytest

from eventsync.auth.identity import DatabaseIdentityProvider
from eventsync.change_feed import ChangeFeed
from eventsync.config.external_services import AssetStorageConfig
from eventsync.db import Database, DatabaseConfig, EventStore
from eventsync.event_service import EventService
from eventsync.lifecycle import Role
from eventsync.storage.assets import LocalAssetStore

from .helpers import RecordingDispatcher, register


@pytest.fixture
def database():
    db = Database(DatabaseConfig(url="sqlite://"))
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def store(database, feed):
    return EventStore(database, feed)


@pytest.fixture
def identity(database):
    return DatabaseIdentityProvider(database, iterations=1000)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def assets(tmp_path):
    return LocalAssetStore(AssetStorageConfig(root_dir=tmp_path, public_base_url="http://assets.test"))


@pytest.fixture
def service(store, identity, dispatcher, assets):
    return EventService(store, identity, dispatcher=dispatcher, assets=assets)


@pytest.fixture
def submitter(identity):
    return register(identity, "rep@example.edu", "Club Rep")


@pytest.fixture
def approver(identity):
    return register(identity, "hod@example.edu", "Head of Department", Role.APPROVER)

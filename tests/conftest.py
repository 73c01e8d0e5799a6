"""Shared fixtures: app with in-memory SQLite, test client, and memory-backed stores."""

import pytest

from config import TestingConfig
from taskboard import create_app, db
from taskboard.errors import StorageError
from taskboard.services import BoardStore, BoardStorage, DatabaseLocalStorage, MemoryLocalStorage


class RecordingLocalStorage(MemoryLocalStorage):
    """Memory backend that counts writes."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    def set_item(self, key, value):
        self.writes += 1
        super().set_item(key, value)


class FailingLocalStorage(MemoryLocalStorage):
    """Memory backend whose writes always fail."""

    def set_item(self, key, value):
        raise StorageError('quota exceeded')


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend():
    return RecordingLocalStorage()


@pytest.fixture
def store(backend):
    return BoardStore(BoardStorage(backend))


@pytest.fixture
def saved_boards(app):
    """Read the persisted collection the way a fresh request would."""
    def load():
        with app.app_context():
            return BoardStorage(DatabaseLocalStorage(), app.config['STORAGE_KEY']).load()
    return load

import pytest

from library_manager import create_app
from library_manager.config import TestingConfig
from library_manager.database import DatabaseConnection
from library_manager.models import db
from library_manager.services import Services


class RecordingConnection:
    """Stands in for ``DatabaseConnection`` and remembers every statement."""

    def __init__(self, rowcount=1, rows=None):
        self.rowcount = rowcount
        self.rows = rows or []
        self.calls = []
        self.last_insert_id = None

    def execute_query(self, statement, params=None):
        self.calls.append((statement, params))
        return list(self.rows)

    def execute_update(self, statement, params=None):
        self.calls.append((statement, params))
        self.last_insert_id = 42
        return self.rowcount


@pytest.fixture()
def recorder() -> RecordingConnection:
    return RecordingConnection()


@pytest.fixture()
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def connection(app) -> DatabaseConnection:
    return DatabaseConnection(db.session)


@pytest.fixture()
def services(connection) -> Services:
    return Services(connection)


@pytest.fixture()
def client(app):
    return app.test_client()

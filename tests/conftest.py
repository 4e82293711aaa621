# tests/conftest.py

import pytest
from datetime import datetime, timedelta

from evoting import create_app, db
from evoting.config import Config
from evoting.elections import registry


@pytest.fixture
def app(tmp_path):
    config = Config(
        database_url=f"sqlite:///{tmp_path / 'evoting.db'}",
        secret_key='test_secret',
        audit_log_dir=str(tmp_path / 'logs'),
        ratelimit_enabled=False,
        testing=True,
    )
    app = create_app(config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def now():
    return datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture
def make_election(app, now):
    """Create an election whose voting window is placed relative to ``now``."""
    def _make(name="General Election", start_offset=-1, end_offset=1):
        start = now + timedelta(days=start_offset)
        end = now + timedelta(days=end_offset)
        result = registry.create_election(name, "National Assembly", start.date().isoformat(),
                                          start.year, start.isoformat(), end.isoformat(), now=now)
        return result.id
    return _make


@pytest.fixture
def make_candidate(app):
    def _make(election_id, name, party="Independent", constituency="NA-125", province="Punjab", age=40):
        return registry.add_candidate(election_id, name, party, "Kite", constituency, province, age).id
    return _make

from __future__ import annotations

import pathlib
import sys

import pytest
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_dependencies():
    from flowlineage import Config, create_app
    from backend.app.extensions import db

    return Config, create_app, db


ConfigBase, create_app, db = _load_dependencies()


class TestConfig(ConfigBase):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite+pysqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    CORS_ALLOWED_ORIGINS = "http://localhost"
    RATELIMIT_ENABLED = False


@pytest.fixture(scope="module")
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    from backend.app.workspace.context import current_store

    return current_store()


@pytest.fixture(autouse=True)
def clean_database(request):
    if "app" not in request.fixturenames:
        yield
        return

    from backend.app.models import Connection, Datasource, ImportLog, Workflow

    yield

    db.session.rollback()
    db.session.query(Connection).delete()
    db.session.query(Datasource).delete()
    db.session.query(Workflow).delete()
    db.session.query(ImportLog).delete()
    db.session.commit()

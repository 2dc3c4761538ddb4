"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from wms.core.auth import AuthComponents, build_components, get_auth
from wms.core.config import TestingConfig
from wms.core.extensions import db as _db  # Flask-SQLAlchemy instance
from wms.factory import create_app  # application factory under test
from wms.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from wms.services._shared.ports.session_store import InMemorySessionStore

TEST_HASH_METHOD = TestingConfig.PASSWORD_HASH_METHOD


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


def _enable_sqlite_savepoints(engine) -> None:
    """Let pysqlite honour BEGIN/SAVEPOINT the way the ORM expects.

    pysqlite defers ``BEGIN`` until the first DML statement, so a SAVEPOINT
    would become the outermost transaction and ``RELEASE`` would commit.
    """

    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Parameters
    ----------
    app: flask.Flask
        Application fixture ensuring the Flask context is available.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        if _db.engine.url.get_backend_name() == "sqlite":
            _enable_sqlite_savepoints(_db.engine)
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection shared by every test transaction.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in an outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; rolled back after each
        test.

    Notes
    -----
    SQLAlchemy 2.0 recipe: ``join_transaction_mode="create_savepoint"`` makes
    every ``commit()``/``rollback()`` issued by application code act on a
    SAVEPOINT, while the outer transaction is discarded at teardown.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
    )
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture(scope="session")
def hasher() -> WerkzeugPasswordHasher:
    """Cheap password hasher matching :class:`TestingConfig`."""
    return WerkzeugPasswordHasher(method=TEST_HASH_METHOD)


@pytest.fixture()
def auth(app, session) -> AuthComponents:
    """Auth components of the test app (SQL session store)."""
    return get_auth()


@pytest.fixture()
def memory_auth(app, session) -> AuthComponents:
    """Auth components wired to an :class:`InMemorySessionStore`."""
    return build_components(app.config, store=InMemorySessionStore())


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield

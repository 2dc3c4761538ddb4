"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData, event
from sqlalchemy.engine import Engine

from wms.core.config import build_engine_options

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe). The session store is the single source of
# truth for refresh sessions, so nothing else is cached here.
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ``ON DELETE`` actions unless each connection opts in."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy and migrations.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. Engine options carrying
        the pool/statement deadlines are derived from the config unless the
        caller already provided ``SQLALCHEMY_ENGINE_OPTIONS``. This call
        imports :mod:`wms.models` so Alembic sees the metadata.
    """
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", build_engine_options(app.config))
    db.init_app(app)

    with app.app_context():
        if db.engine.url.get_backend_name() == "sqlite":
            _enable_sqlite_foreign_keys(db.engine)

    # Ensure models are imported so Alembic sees metadata
    from wms import models as _models  # noqa: F401

    migrate.init_app(app, db)

"""Generic repository base for SQLAlchemy 2.x.

Repositories are persistence-only:

- They never implement use cases or domain policies.
- They never call commit/rollback; Services define the Unit of Work.
- Bulk writes go through :meth:`BaseRepository._bulk_update` so every caller
  gets the affected-row count back (used for compare-and-set updates).
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, delete, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from wms.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``wms.core.extensions``.
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Attach eager-loading options to generic get/list operations."""
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        """Return the model's primary-key attribute (``model.id`` by default)."""
        return getattr(self.model, "id", None)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity for persistence and flush to materialize the PK.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :returns: Entity or ``None``.
        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = self._default_eagerload(select(self.model).where(pk_attr == entity_id))
        result = self.session.execute(stmt).scalars().first()
        return cast(E | None, result)

    def delete(self, instance: E) -> None:
        """Delete an entity and flush changes."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    # ------------------------------ Bulk writes ------------------------------

    def _bulk_update(self, *criteria: ColumnElement[bool], values: dict[str, Any]) -> int:
        """Emit a single ``UPDATE ... WHERE`` and return the affected row count.

        In-session instances matching ``criteria`` are synchronized in Python
        (``evaluate``), so criteria must stay simple column comparisons.

        :param criteria: ``WHERE`` clauses joined with ``AND``.
        :param values: Column values to assign.
        :returns: Number of rows the database reports as changed.
        :rtype: int
        """
        stmt = (
            update(self.model)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

    def _bulk_delete(self, *criteria: ColumnElement[bool]) -> int:
        """Emit a single ``DELETE ... WHERE`` and return the affected row count."""
        stmt = delete(self.model).where(*criteria).execution_options(synchronize_session="evaluate")
        result = self.session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

"""Local KeyValueBackend on SQLite via SQLAlchemy Core.

SQLite is strongly consistent, so every read is a consistent read. Puts
append one row per distinct value. With ``replace=True`` the old rows for
each key are deleted and the new ones inserted in a single transaction,
so a failed replace leaves the previous value in place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import ClassVar

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from attrstore.domain.errors import DomainNotFound
from attrstore.infrastructure.database.engine import init_database
from attrstore.infrastructure.database.schema import attributes as attribute_rows
from attrstore.infrastructure.database.schema import domains

logger = logging.getLogger(__name__)


class SqliteBackend:
    """KeyValueBackend backed by a SQLite file."""

    consistent_reads = True
    native_replace = True
    errors: ClassVar[tuple[type[Exception], ...]] = (SQLAlchemyError,)

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, db_path: Path) -> SqliteBackend:
        """Create (if needed) and open the database at *db_path*."""
        return cls(init_database(db_path))

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def region(self) -> str | None:
        return None

    def close(self) -> None:
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    def domain_exists(self, domain: str, *, consistent: bool = False) -> bool:
        with self._engine.connect() as conn:
            row = conn.execute(select(domains.c.name).where(domains.c.name == domain)).first()
        return row is not None

    def create_domain(self, domain: str) -> None:
        stmt = (
            sqlite_insert(domains)
            .values(name=domain, created=datetime.now(UTC).isoformat())
            .on_conflict_do_nothing(index_elements=["name"])
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def delete_domain(self, domain: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(domains).where(domains.c.name == domain))

    # ------------------------------------------------------------------
    # Items and attributes
    # ------------------------------------------------------------------

    def get_attributes(
        self, domain: str, item: str, *, consistent: bool = False
    ) -> dict[str, list[str]] | None:
        stmt = (
            select(attribute_rows.c.name, attribute_rows.c.value)
            .where(attribute_rows.c.domain == domain, attribute_rows.c.item == item)
            .order_by(attribute_rows.c.id)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        if not rows:
            return None
        result: dict[str, list[str]] = {}
        for row in rows:
            result.setdefault(row.name, []).append(row.value)
        return result

    def put_attributes(
        self, domain: str, item: str, attributes: Mapping[str, str], *, replace: bool = False
    ) -> None:
        if not attributes:
            return
        with self._engine.begin() as conn:
            exists = conn.execute(select(domains.c.name).where(domains.c.name == domain)).first()
            if exists is None:
                raise DomainNotFound(domain)
            if replace:
                conn.execute(
                    delete(attribute_rows).where(
                        attribute_rows.c.domain == domain,
                        attribute_rows.c.item == item,
                        attribute_rows.c.name.in_(list(attributes)),
                    )
                )
            rows = [
                {"domain": domain, "item": item, "name": name, "value": value}
                for name, value in attributes.items()
            ]
            conn.execute(sqlite_insert(attribute_rows).on_conflict_do_nothing(), rows)

    def delete_attributes(self, domain: str, item: str, names: Iterable[str]) -> None:
        names = list(names)
        if not names:
            return
        with self._engine.begin() as conn:
            conn.execute(
                delete(attribute_rows).where(
                    attribute_rows.c.domain == domain,
                    attribute_rows.c.item == item,
                    attribute_rows.c.name.in_(names),
                )
            )

    def delete_item(self, domain: str, item: str) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(
                delete(attribute_rows).where(
                    attribute_rows.c.domain == domain, attribute_rows.c.item == item
                )
            )
        logger.debug("Deleted %d attribute rows for %s/%s", result.rowcount, domain, item)

    def count_items(self, domain: str, *, consistent: bool = False) -> int:
        stmt = select(func.count(func.distinct(attribute_rows.c.item))).where(
            attribute_rows.c.domain == domain
        )
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar() or 0)

    def list_items(self, domain: str, *, consistent: bool = False) -> list[str]:
        stmt = (
            select(attribute_rows.c.item)
            .where(attribute_rows.c.domain == domain)
            .group_by(attribute_rows.c.item)
            .order_by(func.min(attribute_rows.c.id))
        )
        with self._engine.connect() as conn:
            return [row.item for row in conn.execute(stmt)]

# File: app/db/inspection.py

"""
Helpers for looking at what the ORM actually sends to the database.

  - QueryCounter   records every statement executed on an engine
  - explain        returns the planner output for a raw SQL statement
  - list_indexes   reads index definitions back from the live schema
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from sqlalchemy import Engine, event, inspect, text
from sqlalchemy.orm import Session

from app.core.exceptions import UnsupportedDialectError
from app.core.logger import get_logger

logger = get_logger(__name__)

_FROM_TABLE = re.compile(r"\bFROM\s+\"?(\w+)\"?", re.IGNORECASE)


@dataclass
class QueryCounter:
    """
    Context manager that records the SQL statements run on ``engine``.

    Usage:
        with QueryCounter(engine) as counter:
            posts = repo.get_all()
            [p.user.name for p in posts]
        counter.count        # 1 + number of distinct authors
    """

    engine: Engine
    statements: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    _started: float = field(default=0.0, repr=False)

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        self.statements.append(statement)

    def __enter__(self) -> QueryCounter:
        self.statements.clear()
        event.listen(self.engine, "before_cursor_execute", self._before_cursor_execute)
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000
        event.remove(self.engine, "before_cursor_execute", self._before_cursor_execute)
        logger.debug("%d statement(s) in %.2f ms", self.count, self.elapsed_ms)

    @property
    def count(self) -> int:
        return len(self.statements)

    @property
    def selects(self) -> list[str]:
        return [s for s in self.statements if s.lstrip().upper().startswith("SELECT")]

    def selects_on(self, table: str) -> list[str]:
        """SELECT statements whose first FROM target is ``table``."""
        found = []
        for stmt in self.selects:
            match = _FROM_TABLE.search(stmt)
            if match and match.group(1).lower() == table.lower():
                found.append(stmt)
        return found


class IndexInfo(NamedTuple):
    name: str
    columns: tuple[str, ...]
    unique: bool


def explain(session: Session, sql: str, params: dict[str, Any] | None = None) -> list[str]:
    """
    Run the dialect's EXPLAIN for ``sql`` and return the plan as text lines.

    SQLite uses ``EXPLAIN QUERY PLAN`` and returns the ``detail`` column;
    PostgreSQL uses ``EXPLAIN ANALYZE`` and returns its single text column.

    Raises:
        UnsupportedDialectError: For any other backend.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "sqlite":
        rows = session.execute(text(f"EXPLAIN QUERY PLAN {sql}"), params or {}).all()
        # (id, parent, notused, detail)
        plan = [str(row[-1]) for row in rows]
    elif dialect == "postgresql":
        rows = session.execute(text(f"EXPLAIN ANALYZE {sql}"), params or {}).all()
        plan = [str(row[0]) for row in rows]
    else:
        raise UnsupportedDialectError(dialect)

    logger.debug("EXPLAIN %s -> %s", sql, plan)
    return plan


def uses_index(plan: list[str], index_name: str | None = None) -> bool:
    """
    True if the plan reads through an index (``index_name`` if given).
    """
    plan_text = " ".join(plan).upper()
    if index_name is not None:
        return index_name.upper() in plan_text
    return "INDEX" in plan_text


def is_full_scan(plan: list[str]) -> bool:
    """
    True if the plan walks a whole table without an index.

    SQLite prints ``SCAN <table>`` (no ``USING ... INDEX``) and
    PostgreSQL prints ``Seq Scan``.
    """
    for line in plan:
        upper = line.upper()
        if "SEQ SCAN" in upper:
            return True
        if upper.lstrip().startswith("SCAN ") and "INDEX" not in upper:
            return True
    return False


def list_indexes(engine: Engine, table: str) -> list[IndexInfo]:
    """
    Index definitions of ``table`` as reported by the database, sorted by name.
    """
    inspector = inspect(engine)
    indexes = [
        IndexInfo(ix["name"], tuple(c for c in ix["column_names"] if c), bool(ix.get("unique")))
        for ix in inspector.get_indexes(table)
    ]
    return sorted(indexes, key=lambda ix: ix.name)

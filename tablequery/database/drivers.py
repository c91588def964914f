"""
DB-API driver collaborators for the table query layer.

A driver owns one lazily opened connection and exposes the four calls the
table surface relies on:

    describe(table)            -> column names, in table order
    table_exists(table)        -> bool
    execute(sql, params)       -> ExecuteResult(rowcount, lastrowid)
    query(sql, params, shape)  -> rows in the requested ResultShape

plus the `dialect` the builder needs (placeholder, identifier quote, upsert).
Mutating statements are committed as soon as they run; there is no
transaction API at this layer.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..query import MYSQL, SQLITE, Dialect

log = logging.getLogger("tablequery.database")


# ---------------------------------------------------------------------------
# Result shaping
# ---------------------------------------------------------------------------

class ResultShape(str, Enum):
    OBJECT = "OBJECT"      # attribute access rows
    DICT = "ARRAY_A"       # column -> value dicts
    TUPLE = "ARRAY_N"      # plain tuples
    KEYED = "OBJECT_K"     # {first column value: object row}


def shape_rows(
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    shape: Union[ResultShape, str] = ResultShape.OBJECT,
) -> Union[List[Any], Dict[Any, Any]]:
    """
    Convert raw DB-API rows into the requested representation.
    KEYED rows are indexed by their first column; later duplicates win.
    """
    shape = ResultShape(shape)
    if shape == ResultShape.TUPLE:
        return [tuple(r) for r in rows]
    dicts = [dict(zip(columns, r)) for r in rows]
    if shape == ResultShape.DICT:
        return dicts
    objects = [SimpleNamespace(**d) for d in dicts]
    if shape == ResultShape.KEYED:
        return {r[0]: obj for r, obj in zip(rows, objects)}
    return objects


@dataclass
class ExecuteResult:
    rowcount: int
    lastrowid: Any = None


# ---------------------------------------------------------------------------
# Base driver
# ---------------------------------------------------------------------------

class Driver(ABC):
    """
    Wraps a DB-API connection factory.

    Subclasses set `dialect` and implement describe() / table_exists().
    """

    dialect: Dialect = SQLITE

    def __init__(self, connect: Callable[[], Any]):
        self._connect = connect
        self._conn: Optional[Any] = None

    @property
    def connection(self) -> Any:
        if self._conn is None:
            self._conn = self._connect()
        return self._conn

    def _run(self, sql: str, params: Optional[Sequence[Any]] = None):
        cur = self.connection.cursor()
        try:
            cur.execute(sql, tuple(params or ()))
        except Exception as e:
            cur.close()
            log.error("Statement failed: %s | %s", sql, e)
            raise RuntimeError(
                f"DB execute failed: {e} | Query: {sql!r} | Params: {params!r}"
            ) from e
        return cur

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> ExecuteResult:
        cur = self._run(sql, params)
        try:
            self.connection.commit()
            return ExecuteResult(cur.rowcount, getattr(cur, "lastrowid", None))
        finally:
            cur.close()

    def query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        shape: Union[ResultShape, str] = ResultShape.OBJECT,
    ):
        cur = self._run(sql, params)
        try:
            cols = [d[0] for d in cur.description] if cur.description else []
            rows = cur.fetchall() if cur.description else []
        finally:
            cur.close()
        return shape_rows(cols, rows, shape)

    @abstractmethod
    def describe(self, table: str) -> List[str]:
        """Column names of `table`, in table order."""

    @abstractmethod
    def table_exists(self, table: str) -> bool:
        """True when `table` exists in the connected database."""

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


# ---------------------------------------------------------------------------
# Concrete drivers
# ---------------------------------------------------------------------------

class SQLiteDriver(Driver):
    """
    Standard-library sqlite3 driver. ':memory:' keeps the database for the
    lifetime of the driver's single connection.
    """

    dialect = SQLITE

    def __init__(self, path: str = ":memory:"):
        self.path = path
        super().__init__(lambda: sqlite3.connect(path))

    def describe(self, table: str) -> List[str]:
        rows = self.query("SELECT name FROM pragma_table_info(?)", [table], shape=ResultShape.TUPLE)
        return [r[0] for r in rows]

    def table_exists(self, table: str) -> bool:
        rows = self.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            [table],
            shape=ResultShape.TUPLE,
        )
        return bool(rows) and rows[0][0] == table


class MySQLDriver(Driver):
    """
    MySQL/MariaDB over any DB-API module using the 'format' paramstyle;
    pass its connect callable, e.g. functools.partial(pymysql.connect, ...).
    """

    dialect = MYSQL

    def describe(self, table: str) -> List[str]:
        rows = self.query(f"DESCRIBE {table}", shape=ResultShape.TUPLE)
        return [r[0] for r in rows]

    def table_exists(self, table: str) -> bool:
        rows = self.query("SHOW TABLES LIKE %s", [table], shape=ResultShape.TUPLE)
        return bool(rows) and rows[0][0] == table


__all__ = [
    "ResultShape",
    "shape_rows",
    "ExecuteResult",
    "Driver",
    "SQLiteDriver",
    "MySQLDriver",
]

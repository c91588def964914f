"""
Single-table CRUD surface.

    posts = Table(SQLiteDriver("blog.db"), "posts")
    posts.select_row(["id", "title"], {"status": "draft"})
    posts.select_by("*", "id", [1, 2, 3], operator="in", fmt="%d")
    posts.select_where(
        "*",
        conditions={"category": category, "id": post_id},
        fmt={"category": "%s", "id": "%d"},
        order_by="category",
    )
    new_id = posts.insert_one({"title": "text", "status": "draft"})

Column names are fetched once when the handle is built; describe the table
again by building a new handle.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .conditions import DEFAULT_FORMAT, DEFAULT_OPERATOR, resolve_condition
from .database import Driver, ResultShape
from .errors import SchemaError
from .query import (
    SqlFragment,
    build_condition,
    build_conditions,
    build_count,
    build_count_by_column,
    build_create_table,
    build_delete,
    build_delete_in,
    build_insert,
    build_insert_rows,
    build_select,
    build_update,
)
from .validation import check_column, check_limit, check_order

log = logging.getLogger("tablequery.table")

Shape = Union[ResultShape, str]


def _split_custom_columns(columns: Any) -> Tuple[Any, str]:
    """
    A mapping of columns may carry a '_custom' list of raw select
    expressions; they bypass column validation and are appended verbatim.
    """
    if not isinstance(columns, Mapping):
        return columns, ""
    custom = columns.get("_custom") or []
    if isinstance(custom, str):
        custom = [custom]
    plain: List[str] = []
    for key, val in columns.items():
        if key == "_custom":
            continue
        if isinstance(val, str):
            plain.append(val)
        else:
            plain.extend(val)
    return plain, "".join(f",{c}" for c in custom)


class Table:
    def __init__(self, driver: Driver, name: str, *, charset_collate: str = ""):
        self.driver = driver
        self.name = name
        self.charset_collate = charset_collate
        self.last_query = ""
        if driver.table_exists(name):
            self._columns: Tuple[str, ...] = tuple(driver.describe(name))
        else:
            self._columns = ()
        log.debug("Table %s: %d known columns", name, len(self._columns))

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={list(self._columns)!r})"

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._columns

    @property
    def dialect(self):
        return self.driver.dialect

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _require_table(self) -> None:
        if not self.table_exists():
            raise SchemaError(self.name)

    def _query(self, stmt: SqlFragment, shape: Shape = ResultShape.OBJECT):
        self.last_query = stmt.sql
        log.debug("SQL %s | params %r", stmt.sql, stmt.params)
        return self.driver.query(stmt.sql, stmt.params, shape)

    def _execute(self, stmt: SqlFragment):
        self.last_query = stmt.sql
        log.debug("SQL %s | params %r", stmt.sql, stmt.params)
        return self.driver.execute(stmt.sql, stmt.params)

    def _ordering(self, order_by: Optional[str], order: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
        if order_by is None:
            return None, None
        column = check_column(order_by, self._columns)
        return column, (check_order(order) if order is not None else None)

    def _limit(self, limit: Any) -> str:
        return check_limit(limit, offset_keyword=self.dialect.offset_keyword)

    # ------------------------------------------------------------------
    # Table lifecycle
    # ------------------------------------------------------------------

    def table_exists(self) -> bool:
        return bool(self.driver.table_exists(self.name))

    def create_table_if_missing(self, clauses: Optional[Sequence[str]]) -> bool:
        """
        CREATE TABLE from column/constraint clauses unless the table exists.
        Returns True when a table was created. The handle's column set is not
        refreshed; build a new Table to see the new columns.
        """
        if not clauses or self.table_exists():
            return False
        self._execute(build_create_table(self.name, list(clauses), self.charset_collate))
        log.info("Created table %s", self.name)
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select_all(
        self,
        order_by: Optional[str] = None,
        order: Optional[str] = None,
        limit: Any = None,
        shape: Shape = ResultShape.OBJECT,
    ):
        self._require_table()
        order_by, order = self._ordering(order_by, order)
        stmt = build_select(self.name, "*", order_by=order_by, order=order, limit=self._limit(limit))
        return self._query(stmt, shape)

    def select_row(
        self,
        columns: Any,
        conditions: Any,
        operator: Any = DEFAULT_OPERATOR,
        fmt: Any = DEFAULT_FORMAT,
        shape: Shape = ResultShape.OBJECT,
        row_offset: int = 0,
    ):
        """
        One row (the `row_offset`-th match) or None.
        """
        self._require_table()
        where = build_conditions(conditions, operator, fmt, True, self.dialect)
        stmt = build_select(self.name, check_column(columns, self._columns), where=where)
        if ResultShape(shape) == ResultShape.KEYED:
            shape = ResultShape.OBJECT
        rows = self._query(stmt, shape)
        if 0 <= row_offset < len(rows):
            return rows[row_offset]
        return None

    def select_by(
        self,
        columns: Any,
        field: str,
        value: Any,
        operator: Any = DEFAULT_OPERATOR,
        fmt: Any = DEFAULT_FORMAT,
        order_by: Optional[str] = None,
        order: Optional[str] = "ASC",
        shape: Shape = ResultShape.OBJECT,
    ):
        """
        Rows matching a single condition, rendered as 'WHERE <condition>'
        with no leading join.
        """
        self._require_table()
        op, f = resolve_condition(field, 0, operator, fmt)
        where = build_condition(field, value, op, f, False, self.dialect)
        order_by, order = self._ordering(order_by, order)
        stmt = build_select(
            self.name,
            check_column(columns, self._columns),
            where=where,
            baseline=False,
            order_by=order_by,
            order=order,
        )
        return self._query(stmt, shape)

    def select_where(
        self,
        columns: Any = "*",
        join: Optional[str] = None,
        conditions: Any = None,
        operator: Any = DEFAULT_OPERATOR,
        fmt: Any = DEFAULT_FORMAT,
        order_by: Optional[str] = None,
        order: Optional[str] = "ASC",
        limit: Any = None,
        shape: Shape = ResultShape.OBJECT,
    ):
        """
        Rows matching every non-empty condition. `join` is passed through
        verbatim between FROM and WHERE.
        """
        self._require_table()
        columns, custom = _split_custom_columns(columns)
        select_list = check_column(columns, self._columns) + custom
        where = build_conditions(conditions, operator, fmt, True, self.dialect)
        order_by, order = self._ordering(order_by, order)
        stmt = build_select(
            self.name,
            select_list,
            join_clause=join,
            where=where,
            order_by=order_by,
            order=order,
            limit=self._limit(limit),
        )
        return self._query(stmt, shape)

    def select_scalar(
        self,
        column: str,
        conditions: Any,
        operator: Any = DEFAULT_OPERATOR,
        fmt: Any = DEFAULT_FORMAT,
    ):
        """First column of the first matching row, or None."""
        self._require_table()
        where = build_conditions(conditions, operator, fmt, True, self.dialect)
        stmt = build_select(self.name, check_column(column, self._columns), where=where)
        rows = self._query(stmt, ResultShape.TUPLE)
        if rows and rows[0]:
            return rows[0][0]
        return None

    def count(self) -> int:
        self._require_table()
        rows = self._query(build_count(self.name), ResultShape.TUPLE)
        return int(rows[0][0]) if rows else 0

    def count_by_column(self, column: str) -> Dict[Any, int]:
        """
        Row counts per distinct value of `column`, plus the grand total
        under "all". An unknown column only yields the total.
        """
        self._require_table()
        column = check_column(column, self._columns)
        if column == "*":
            return {"all": self.count()}
        totals = self._query(build_count_by_column(self.name, column), ResultShape.DICT)
        out: Dict[Any, int] = {}
        total = 0
        for row in totals:
            n = int(row["count"])
            total += n
            out[row[column]] = n
        out["all"] = total
        return out

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_one(self, data: Mapping[str, Any], fmt: Any = DEFAULT_FORMAT):
        """
        Insert one row. Returns the new row id, or False for empty data.
        """
        if not data:
            log.debug("insert_one on %s rejected: no data", self.name)
            return False
        self._require_table()
        return self._execute(build_insert(self.name, data, fmt, self.dialect)).lastrowid

    def insert_many(self, rows: Sequence[Mapping[str, Any]], update_on_duplicate_key: bool = False):
        """
        Insert several rows in one statement, optionally updating rows whose
        key already exists. Returns the affected row count, or False.
        """
        if not rows:
            log.debug("insert_many on %s rejected: no rows", self.name)
            return False
        self._require_table()
        stmt = build_insert_rows(self.name, list(rows), update_on_duplicate_key, self.dialect)
        return self._execute(stmt).rowcount

    def update_rows(self, data: Mapping[str, Any], conditions: Mapping[str, Any], fmt: Any = DEFAULT_FORMAT):
        if not data or not conditions:
            log.debug("update_rows on %s rejected: empty data or conditions", self.name)
            return False
        self._require_table()
        return self._execute(build_update(self.name, data, conditions, fmt, self.dialect)).rowcount

    def delete_rows(self, conditions: Mapping[str, Any], fmt: Any = DEFAULT_FORMAT):
        if not conditions:
            log.debug("delete_rows on %s rejected: no conditions", self.name)
            return False
        self._require_table()
        return self._execute(build_delete(self.name, conditions, fmt, self.dialect)).rowcount

    def delete_by_field_list(self, field: str, values: Sequence[Any], fmt: Any = DEFAULT_FORMAT):
        """
        DELETE ... WHERE field IN (values). `field` must be a known column.
        """
        if not values:
            log.debug("delete_by_field_list on %s rejected: no values", self.name)
            return False
        if field not in self._columns:
            log.warning("delete_by_field_list on %s rejected: unknown column %r", self.name, field)
            return False
        self._require_table()
        stmt = build_delete_in(self.name, field, list(values), fmt, self.dialect)
        return self._execute(stmt).rowcount


__all__ = ["Table"]

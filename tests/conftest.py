"""Shared test fixtures for tablequery."""

from typing import Any, Sequence

import pytest

from tablequery.database import ExecuteResult, ResultShape, SQLiteDriver, shape_rows
from tablequery.query import SQLITE

POSTS_COLUMNS = ("id", "title", "status", "views")

POSTS_ROWS = [
    (1, "Hello", "draft", 10),
    (2, "World", "published", 25),
    (3, "Third", "draft", 5),
    (4, "Fourth", "published", 0),
    (5, "Fifth", "archived", 40),
]


# ---------------------------------------------------------------------------
# Driver fake
# ---------------------------------------------------------------------------


class FakeDriver:
    """In-memory fake satisfying the driver contract.

    Returns canned rows and records every ``query`` / ``execute`` call.
    """

    dialect = SQLITE

    def __init__(
        self,
        columns: Sequence[str] = ("id", "title", "status"),
        exists: bool = True,
        rows: Sequence[Sequence[Any]] = (),
        result_columns: Sequence[str] | None = None,
        rowcount: int = 1,
        lastrowid: Any = 1,
    ) -> None:
        self.columns = list(columns)
        self.exists = exists
        self.rows = list(rows)
        self.result_columns = list(result_columns or columns)
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.calls: list[tuple[str, str, list[Any]]] = []

    def describe(self, table: str) -> list[str]:
        return list(self.columns)

    def table_exists(self, table: str) -> bool:
        return self.exists

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> ExecuteResult:
        self.calls.append(("execute", sql, list(params or [])))
        return ExecuteResult(self.rowcount, self.lastrowid)

    def query(self, sql: str, params: Sequence[Any] | None = None, shape=ResultShape.OBJECT):
        self.calls.append(("query", sql, list(params or [])))
        return shape_rows(self.result_columns, self.rows, shape)


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_driver() -> FakeDriver:
    """Return a ``FakeDriver`` describing a ``posts(id, title, status)`` table."""
    return FakeDriver()


@pytest.fixture
def sqlite_driver():
    """Return an in-memory ``SQLiteDriver`` with a seeded ``posts`` table."""
    driver = SQLiteDriver(":memory:")
    driver.execute(
        "CREATE TABLE posts ("
        "id INTEGER PRIMARY KEY, title TEXT NOT NULL, status TEXT, views INTEGER DEFAULT 0)"
    )
    for row in POSTS_ROWS:
        driver.execute("INSERT INTO posts (id, title, status, views) VALUES (?, ?, ?, ?)", row)
    yield driver
    driver.close()

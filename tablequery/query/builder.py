from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..conditions import (
    DEFAULT_FORMAT,
    DEFAULT_OPERATOR,
    as_option_spec,
    coerce_value,
    resolve_condition,
    resolve_format,
)
from ..errors import ArityError

# -----------------------------------------------------------------------------
# Dialects
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Dialect:
    """
    What the builder needs to know about the target driver:
      - placeholder: positional marker the driver binds ('?' or '%s')
      - quote_char:  identifier quote (backtick for SQLite/MySQL, '"' for Snowflake)
      - upsert:      'mysql', 'sqlite' or None when the engine has no upsert form
      - offset_keyword: two-part limits render as 'LIMIT n OFFSET m'
    """
    name: str
    placeholder: str = "?"
    quote_char: str = "`"
    upsert: Optional[str] = None
    offset_keyword: bool = False

    def quote(self, name: str) -> str:
        """
        Quote an identifier. Doubles internal quote characters.
        """
        q = self.quote_char
        return f"{q}{str(name).replace(q, q + q)}{q}"

    def placeholders(self, count: int) -> str:
        return ", ".join([self.placeholder] * count)


SQLITE = Dialect("sqlite", placeholder="?", quote_char="`", upsert="sqlite")
MYSQL = Dialect("mysql", placeholder="%s", quote_char="`", upsert="mysql")
SNOWFLAKE = Dialect("snowflake", placeholder="%s", quote_char='"', upsert=None, offset_keyword=True)


# -----------------------------------------------------------------------------
# Fragments
# -----------------------------------------------------------------------------

@dataclass
class SqlFragment:
    """
    SQL text plus the values it binds, in placeholder order.
    """
    sql: str = ""
    params: List[Any] = field(default_factory=list)

    def extend(self, other: "SqlFragment") -> "SqlFragment":
        self.sql += other.sql
        self.params.extend(other.params)
        return self

    def __iter__(self):
        # allows `sql, params = fragment`
        yield self.sql
        yield self.params


def sql_and(join: Any = True) -> str:
    """
    Boolean prefix for one fragment: True -> ' AND', 'OR' (any case) -> ' OR',
    anything else -> ''.
    """
    if join is True:
        return " AND"
    if isinstance(join, str) and join.upper() == "OR":
        return " OR"
    return ""


def _as_values(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


# -----------------------------------------------------------------------------
# Operator-specific generators
#   signature: (column, value, operator, fmt, join, dialect) -> SqlFragment
# -----------------------------------------------------------------------------

FragmentGenerator = Callable[[str, Any, str, str, Any, Dialect], SqlFragment]


def sql_default(column: str, value: Any, operator: str, fmt: str, join: Any, dialect: Dialect) -> SqlFragment:
    return SqlFragment(
        f"{sql_and(join)} {dialect.quote(column)} {operator} {dialect.placeholder}",
        [coerce_value(value, fmt)],
    )


def sql_in(column: str, value: Any, operator: str, fmt: str, join: Any, dialect: Dialect) -> SqlFragment:
    """
    IN / NOT IN: one placeholder per element. An empty sequence yields
    'IN ()', which the database rejects; guarding against it is the caller's job.
    """
    values = _as_values(value)
    return SqlFragment(
        f"{sql_and(join)} {dialect.quote(column)} {operator} ({dialect.placeholders(len(values))})",
        [coerce_value(v, fmt) for v in values],
    )


def sql_between(column: str, value: Any, operator: str, fmt: str, join: Any, dialect: Dialect) -> SqlFragment:
    """
    BETWEEN / NOT BETWEEN over the first two values, in the caller's order.
    """
    values = _as_values(value)
    if len(values) < 2:
        raise ArityError(
            f"Values for {operator} query must be more than one (got {len(values)})"
        )
    ph = dialect.placeholder
    return SqlFragment(
        f"{sql_and(join)} {dialect.quote(column)} {operator} {ph} AND {ph}",
        [coerce_value(values[0], fmt), coerce_value(values[1], fmt)],
    )


def sql_like(column: str, value: Any, operator: str, fmt: str, join: Any, dialect: Dialect) -> SqlFragment:
    # Wildcards are not added: '%foo%' must come from the caller.
    return SqlFragment(
        f"{sql_and(join)} {dialect.quote(column)} {operator} {dialect.placeholder}",
        [coerce_value(value, fmt)],
    )


def sql_custom(column: str, value: Any, operator: str, fmt: str, join: Any, dialect: Dialect) -> SqlFragment:
    """
    Raw SQL escape hatch. Every string in `value` is appended verbatim, with
    no binding and no escaping: never feed it untrusted input.
    """
    raw = [value] if isinstance(value, str) else _as_values(value)
    return SqlFragment("".join(f"{sql_and(join)} {r}" for r in raw))


def dispatch_key(operator: str) -> str:
    return operator.lower().replace(" ", "_")


OPERATOR_HANDLERS: Dict[str, FragmentGenerator] = {
    "in": sql_in,
    "not_in": sql_in,
    "between": sql_between,
    "not_between": sql_between,
    "like": sql_like,
    "not_like": sql_like,
    "custom": sql_custom,
}


def build_condition(
    column: str,
    value: Any,
    operator: str = DEFAULT_OPERATOR,
    fmt: str = DEFAULT_FORMAT,
    join: Any = True,
    dialect: Dialect = SQLITE,
) -> SqlFragment:
    """
    Fragment for a single already-resolved condition.
    """
    handler = OPERATOR_HANDLERS.get(dispatch_key(operator), sql_default)
    return handler(column, value, operator, fmt, join, dialect)


def _iter_conditions(conditions: Any) -> Iterable[Tuple[str, Any]]:
    if conditions is None:
        return ()
    if isinstance(conditions, Mapping):
        return conditions.items()
    return conditions


def build_conditions(
    conditions: Any,
    operator: Any = DEFAULT_OPERATOR,
    fmt: Any = DEFAULT_FORMAT,
    join: Any = True,
    dialect: Dialect = SQLITE,
) -> SqlFragment:
    """
    Turn an ordered set of (field, value) conditions into one WHERE body.

    Falsy values mean "no filter requested": they emit nothing but still
    advance the position, so positional operator/format specs stay aligned
    with the caller's ordering.
    """
    op_spec = as_option_spec(operator)
    fmt_spec = as_option_spec(fmt)

    out = SqlFragment()
    for position, (column, value) in enumerate(_iter_conditions(conditions)):
        if not value:
            continue
        op, f = resolve_condition(column, position, op_spec, fmt_spec)
        out.extend(build_condition(column, value, op, f, join, dialect))
    return out


# -----------------------------------------------------------------------------
# Statement builders
# -----------------------------------------------------------------------------

def _order_clause(order_by: Optional[str], order: Optional[str]) -> str:
    if not order_by or order_by == "*":
        return ""
    return f" ORDER BY {order_by} {order}" if order else f" ORDER BY {order_by}"


def build_select(
    table: str,
    columns: str = "*",
    *,
    join_clause: Optional[str] = None,
    where: Optional[SqlFragment] = None,
    baseline: bool = True,
    order_by: Optional[str] = None,
    order: Optional[str] = None,
    limit: str = "",
) -> SqlFragment:
    """
    Assemble a SELECT around an already built WHERE body.

    With `baseline` the body follows 'WHERE 1=1' and is expected to carry its
    own leading ' AND'; without it the body follows a bare 'WHERE'.
    `columns`, `order_by` and `limit` must already be sanitized.
    """
    sql = f"SELECT {columns} FROM {table}"
    if join_clause:
        sql += f" {join_clause}"
    params: List[Any] = []
    if where is not None:
        sql += (" WHERE 1=1" if baseline else " WHERE") + where.sql
        params.extend(where.params)
    sql += _order_clause(order_by, order)
    if limit:
        sql += f" {limit}"
    return SqlFragment(sql, params)


def build_count(table: str) -> SqlFragment:
    return SqlFragment(f"SELECT COUNT(*) FROM {table}")


def build_count_by_column(table: str, column: str) -> SqlFragment:
    return SqlFragment(f"SELECT {column}, COUNT(*) AS count FROM {table} GROUP BY {column}")


def build_insert(table: str, data: Mapping[str, Any], fmt: Any = DEFAULT_FORMAT, dialect: Dialect = SQLITE) -> SqlFragment:
    fmt_spec = as_option_spec(fmt)
    cols = list(data.keys())
    values = [coerce_value(data[c], resolve_format(c, i, fmt_spec)) for i, c in enumerate(cols)]
    col_sql = ", ".join(dialect.quote(c) for c in cols)
    return SqlFragment(
        f"INSERT INTO {table} ({col_sql}) VALUES ({dialect.placeholders(len(cols))})",
        values,
    )


def _upsert_clause(cols: Sequence[str], dialect: Dialect) -> str:
    if dialect.upsert == "mysql":
        sets = ", ".join(f"{dialect.quote(c)}=VALUES({dialect.quote(c)})" for c in cols)
        return f" ON DUPLICATE KEY UPDATE {sets}"
    if dialect.upsert == "sqlite":
        sets = ", ".join(f"{dialect.quote(c)}=excluded.{dialect.quote(c)}" for c in cols)
        return f" ON CONFLICT DO UPDATE SET {sets}"
    raise ValueError(f"Dialect {dialect.name!r} has no upsert clause")


def build_insert_rows(
    table: str,
    rows: Sequence[Mapping[str, Any]],
    update: bool = False,
    dialect: Dialect = SQLITE,
) -> SqlFragment:
    """
    Multi-row INSERT. Columns come from the first row; later rows are read
    by those keys (missing keys bind NULL).
    """
    cols = list(rows[0].keys())
    group = f"({dialect.placeholders(len(cols))})"
    params: List[Any] = []
    for row in rows:
        params.extend(row.get(c) for c in cols)
    col_sql = ", ".join(dialect.quote(c) for c in cols)
    sql = f"INSERT INTO {table} ({col_sql}) VALUES " + ", ".join([group] * len(rows))
    if update:
        sql += _upsert_clause(cols, dialect)
    return SqlFragment(sql, params)


def _match_all(conditions: Mapping[str, Any], fmt_spec: Any, dialect: Dialect) -> SqlFragment:
    # column = value joined by AND; None matches with IS NULL
    parts: List[str] = []
    params: List[Any] = []
    for i, (c, v) in enumerate(conditions.items()):
        if v is None:
            parts.append(f"{dialect.quote(c)} IS NULL")
            continue
        parts.append(f"{dialect.quote(c)} = {dialect.placeholder}")
        params.append(v if fmt_spec is None else coerce_value(v, resolve_format(c, i, fmt_spec)))
    return SqlFragment(" AND ".join(parts), params)


def build_update(
    table: str,
    data: Mapping[str, Any],
    conditions: Mapping[str, Any],
    fmt: Any = DEFAULT_FORMAT,
    dialect: Dialect = SQLITE,
) -> SqlFragment:
    fmt_spec = as_option_spec(fmt)
    sets = ", ".join(f"{dialect.quote(c)} = {dialect.placeholder}" for c in data)
    params = [coerce_value(data[c], resolve_format(c, i, fmt_spec)) for i, c in enumerate(data)]
    where = _match_all(conditions, None, dialect)
    return SqlFragment(f"UPDATE {table} SET {sets} WHERE {where.sql}", params + where.params)


def build_delete(
    table: str,
    conditions: Mapping[str, Any],
    fmt: Any = DEFAULT_FORMAT,
    dialect: Dialect = SQLITE,
) -> SqlFragment:
    where = _match_all(conditions, as_option_spec(fmt), dialect)
    return SqlFragment(f"DELETE FROM {table} WHERE {where.sql}", where.params)


def build_delete_in(
    table: str,
    column: str,
    values: Sequence[Any],
    fmt: Any = DEFAULT_FORMAT,
    dialect: Dialect = SQLITE,
) -> SqlFragment:
    """
    DELETE ... WHERE column IN (...). `column` must already be checked
    against the table's known columns.
    """
    fmt_spec = as_option_spec(fmt)
    params = [coerce_value(v, resolve_format(column, i, fmt_spec)) for i, v in enumerate(values)]
    return SqlFragment(
        f"DELETE FROM {table} WHERE {column} IN ({dialect.placeholders(len(params))})",
        params,
    )


def build_create_table(table: str, clauses: Sequence[str], charset_collate: str = "") -> SqlFragment:
    sql = f"CREATE TABLE {table} ({','.join(clauses)})"
    if charset_collate:
        sql += f" {charset_collate}"
    return SqlFragment(sql)


__all__ = [
    "Dialect",
    "SQLITE",
    "MYSQL",
    "SNOWFLAKE",
    "SqlFragment",
    "FragmentGenerator",
    "sql_and",
    "sql_default",
    "sql_in",
    "sql_between",
    "sql_like",
    "sql_custom",
    "dispatch_key",
    "OPERATOR_HANDLERS",
    "build_condition",
    "build_conditions",
    "build_select",
    "build_count",
    "build_count_by_column",
    "build_insert",
    "build_insert_rows",
    "build_update",
    "build_delete",
    "build_delete_in",
    "build_create_table",
]

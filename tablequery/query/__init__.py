"""
Query building module for the table query layer.

This module turns resolved conditions into parameterized SQL fragments and
assembles the full statements the table surface sends to a driver.
"""

from .builder import (
    Dialect,
    SQLITE,
    MYSQL,
    SNOWFLAKE,
    SqlFragment,
    OPERATOR_HANDLERS,
    sql_and,
    dispatch_key,
    build_condition,
    build_conditions,
    build_select,
    build_count,
    build_count_by_column,
    build_insert,
    build_insert_rows,
    build_update,
    build_delete,
    build_delete_in,
    build_create_table,
)

__all__ = [
    "Dialect",
    "SQLITE",
    "MYSQL",
    "SNOWFLAKE",
    "SqlFragment",
    "OPERATOR_HANDLERS",
    "sql_and",
    "dispatch_key",
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

"""
Database drivers for the table query layer.

This module handles connections, statement execution and row shaping for
SQLite, MySQL-style engines and Snowflake.
"""

from .drivers import (
    ResultShape,
    shape_rows,
    ExecuteResult,
    Driver,
    SQLiteDriver,
    MySQLDriver,
)
from .snowflake import SnowflakeDriver
from .factory import driver_from_settings

__all__ = [
    "ResultShape",
    "shape_rows",
    "ExecuteResult",
    "Driver",
    "SQLiteDriver",
    "MySQLDriver",
    "SnowflakeDriver",
    "driver_from_settings",
]

"""
tablequery

Single-table query building over DB-API drivers: describe a table once,
then select, count, insert, update and delete with field -> value
conditions and per-field operators and value formats.
"""

from .config import Settings, load_settings, configure_logging
from .errors import SchemaError, ArityError
from .conditions import Operator, Format, Scalar, ByField, ByPosition
from .database import (
    ResultShape,
    Driver,
    SQLiteDriver,
    MySQLDriver,
    SnowflakeDriver,
    driver_from_settings,
)
from .table import Table
from .registry import TableRegistry

__all__ = [
    "Settings",
    "load_settings",
    "configure_logging",
    "SchemaError",
    "ArityError",
    "Operator",
    "Format",
    "Scalar",
    "ByField",
    "ByPosition",
    "ResultShape",
    "Driver",
    "SQLiteDriver",
    "MySQLDriver",
    "SnowflakeDriver",
    "driver_from_settings",
    "Table",
    "TableRegistry",
]

"""
Error types raised by the table query layer.

Malformed operator, format, column and order input is never an error here;
it is normalized to a safe default instead (see tablequery.conditions).
"""


class SchemaError(LookupError):
    """The table an operation needs does not exist in the database."""

    def __init__(self, table: str):
        super().__init__(f"Table for {table} does not exist in the database")
        self.table = table


class ArityError(ValueError):
    """An operator was given fewer values than it consumes (BETWEEN needs two)."""


__all__ = ["SchemaError", "ArityError"]

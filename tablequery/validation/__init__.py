"""
Validation module for the table query layer.

This module sanitizes the identifier-level input that cannot be bound as a
parameter: selected columns, ORDER BY direction and LIMIT values.
"""

from .rules import (
    check_column,
    check_order,
    check_limit,
)

__all__ = [
    "check_column",
    "check_order",
    "check_limit",
]

"""
Condition resolution for the table query layer.

This module decides the effective operator and value format for each
condition, given scalar or per-field/per-position option specs.
"""

from .models import (
    Operator,
    Format,
    DEFAULT_OPERATOR,
    DEFAULT_FORMAT,
    Scalar,
    ByField,
    ByPosition,
    OptionSpec,
    as_option_spec,
    normalize_operator,
    normalize_format,
    resolve_operator,
    resolve_format,
    resolve_condition,
    coerce_value,
)

__all__ = [
    "Operator",
    "Format",
    "DEFAULT_OPERATOR",
    "DEFAULT_FORMAT",
    "Scalar",
    "ByField",
    "ByPosition",
    "OptionSpec",
    "as_option_spec",
    "normalize_operator",
    "normalize_format",
    "resolve_operator",
    "resolve_format",
    "resolve_condition",
    "coerce_value",
]

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Mapping, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Allow-lists
# ---------------------------------------------------------------------------

class Operator(str, Enum):
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    NSEQ = "<=>"
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IN = "IN"
    NOT_IN = "NOT IN"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"
    CUSTOM = "CUSTOM"


class Format(str, Enum):
    STRING = "%s"
    INTEGER = "%d"
    FLOAT = "%f"


DEFAULT_OPERATOR = Operator.EQ.value
DEFAULT_FORMAT = Format.STRING.value

_OPERATORS = {op.value for op in Operator}
_FORMATS = {f.value for f in Format}


def normalize_operator(op: Any) -> str:
    """
    Return `op` upper-cased if it is an allowed operator, '=' otherwise.
    Matching is case-insensitive; running it on its own output is a no-op.
    """
    if isinstance(op, Operator):
        return op.value
    if not isinstance(op, str):
        return DEFAULT_OPERATOR
    candidate = " ".join(op.split()).upper()
    return candidate if candidate in _OPERATORS else DEFAULT_OPERATOR


def normalize_format(fmt: Any) -> str:
    if isinstance(fmt, Format):
        return fmt.value
    return fmt if isinstance(fmt, str) and fmt in _FORMATS else DEFAULT_FORMAT


# ---------------------------------------------------------------------------
# Scalar-or-map option specs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Scalar(Generic[T]):
    """One value applied to every condition."""
    value: T


@dataclass(frozen=True)
class ByField(Generic[T]):
    """
    Per-field values keyed by column name. Integer keys in the caller's
    mapping land in `positions` and are consulted when the name is absent.
    """
    values: Mapping[str, T] = field(default_factory=dict)
    positions: Mapping[int, T] = field(default_factory=dict)


@dataclass(frozen=True)
class ByPosition(Generic[T]):
    """Per-condition values keyed by the condition's ordinal index."""
    values: Sequence[T] = ()


OptionSpec = Union[Scalar, ByField, ByPosition]


def as_option_spec(raw: Any) -> OptionSpec:
    """
    Coerce caller input into an OptionSpec.
      - str / enum / None  -> Scalar
      - list / tuple       -> ByPosition
      - dict               -> ByField (int keys become positional entries)
    """
    if isinstance(raw, (Scalar, ByField, ByPosition)):
        return raw
    if isinstance(raw, Mapping):
        by_name: Dict[str, Any] = {}
        by_pos: Dict[int, Any] = {}
        for k, v in raw.items():
            if isinstance(k, int) and not isinstance(k, bool):
                by_pos[k] = v
            else:
                by_name[str(k)] = v
        return ByField(values=by_name, positions=by_pos)
    if isinstance(raw, (list, tuple)):
        return ByPosition(values=tuple(raw))
    return Scalar(raw)


_MISSING = object()


def _lookup(field_name: str, position: int, spec: OptionSpec) -> Any:
    if isinstance(spec, Scalar):
        return spec.value
    if isinstance(spec, ByField):
        if field_name in spec.values:
            return spec.values[field_name]
        return spec.positions.get(position, _MISSING)
    if 0 <= position < len(spec.values):
        return spec.values[position]
    return _MISSING


def resolve_operator(field_name: str, position: int, spec: Any) -> str:
    found = _lookup(field_name, position, as_option_spec(spec))
    return DEFAULT_OPERATOR if found is _MISSING else normalize_operator(found)


def resolve_format(field_name: str, position: int, spec: Any) -> str:
    found = _lookup(field_name, position, as_option_spec(spec))
    return DEFAULT_FORMAT if found is _MISSING else normalize_format(found)


def resolve_condition(
    field_name: str,
    position: int,
    operator_spec: Any = DEFAULT_OPERATOR,
    format_spec: Any = DEFAULT_FORMAT,
) -> Tuple[str, str]:
    """
    Effective (operator, format) for the condition on `field_name` at `position`.
    Map specs are checked by name first, then by position, then defaulted.
    """
    return (
        resolve_operator(field_name, position, operator_spec),
        resolve_format(field_name, position, format_spec),
    )


# ---------------------------------------------------------------------------
# Format-driven value coercion
# ---------------------------------------------------------------------------

def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def coerce_value(value: Any, fmt: str = DEFAULT_FORMAT) -> Any:
    """
    Shape a bound value by its format hint, sprintf-style:
    unparseable numbers become 0 / 0.0 and None stays NULL.
    '%s' binds the value as given.
    """
    if value is None:
        return None
    fmt = normalize_format(fmt)
    if fmt == Format.INTEGER.value:
        return _to_int(value)
    if fmt == Format.FLOAT.value:
        return _to_float(value)
    return value


__all__ = [
    "Operator",
    "Format",
    "DEFAULT_OPERATOR",
    "DEFAULT_FORMAT",
    "normalize_operator",
    "normalize_format",
    "Scalar",
    "ByField",
    "ByPosition",
    "OptionSpec",
    "as_option_spec",
    "resolve_operator",
    "resolve_format",
    "resolve_condition",
    "coerce_value",
]

import logging
from typing import Any, Iterable, List, Sequence, Union

log = logging.getLogger("tablequery.validation")

_ORDERS = ("ASC", "DESC")


def check_column(
    columns: Union[str, Iterable[str], None],
    known: Sequence[str],
    *,
    as_list: bool = False,
) -> Union[str, List[str]]:
    """
    Keep only the requested columns the table actually has.

    Column names cannot be bound as parameters, so this allow-list is what
    keeps caller text out of the SELECT list. Unknown names are dropped;
    when nothing survives the result is '*'.
    """
    if columns is None or columns == "" or columns == "*":
        return ["*"] if as_list else "*"

    if isinstance(columns, str):
        if columns in known:
            return [columns] if as_list else columns
        log.debug("Dropping unknown column %r", columns)
        return ["*"] if as_list else "*"

    kept: List[str] = []
    for c in columns:
        if isinstance(c, str) and c in known:
            kept.append(c)
        else:
            log.debug("Dropping unknown column %r", c)
    if not kept:
        return ["*"] if as_list else "*"
    return kept if as_list else ",".join(kept)


def check_order(order: Any = "ASC") -> str:
    if isinstance(order, str) and order.strip().upper() in _ORDERS:
        return order.strip().upper()
    return "ASC"


def _limit_part(v: Any) -> Union[int, None]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v if v >= 0 else None
    if isinstance(v, str) and v.strip().isdigit():
        return int(v.strip())
    return None


def check_limit(limit: Any, *, offset_keyword: bool = False) -> str:
    """
    Render a LIMIT clause from an int or a [count] / [offset, count] sequence.
    Entries that are not non-negative integers are dropped.

    With `offset_keyword` the two-part form is written 'LIMIT count OFFSET offset'
    (Snowflake) instead of 'LIMIT offset,count'.
    """
    if limit is None:
        return ""
    raw = list(limit) if isinstance(limit, (list, tuple)) else [limit]
    parts = [p for p in (_limit_part(v) for v in raw[:2]) if p is not None]
    if not parts:
        return ""
    if len(parts) == 2 and offset_keyword:
        return f"LIMIT {parts[1]} OFFSET {parts[0]}"
    return "LIMIT " + ",".join(str(p) for p in parts)

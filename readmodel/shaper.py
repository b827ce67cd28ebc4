"""Result shaper: turns flat pipeline rows into the public nested shape"""
from typing import Any, Dict, Iterable, List, Mapping

from readmodel.pipeline import INTERNAL_FIELDS, NEST


def _collapse(value: Any) -> Any:
    """A nested object whose members are all null (outer join miss) becomes None"""
    if isinstance(value, dict):
        value = {k: _collapse(v) for k, v in value.items()}
        if value and all(v is None for v in value.values()):
            return None
    return value


def shape_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Nest `a__b` keys into {"a": {"b": ...}} and strip internal-only fields.

    Args:
        row: Flat mapping as returned by Store.run_pipeline

    Returns:
        dict: Nested row; password hashes and refresh tokens never survive
    """
    shaped: Dict[str, Any] = {}
    for key, value in row.items():
        path = key.split(NEST)
        if any(part in INTERNAL_FIELDS for part in path):
            continue

        node = shaped
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = value

    return {k: _collapse(v) for k, v in shaped.items()}


def shape_rows(rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [shape_row(row) for row in rows]

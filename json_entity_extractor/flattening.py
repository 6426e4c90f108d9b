from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Sequence

from .models import Entity
from .naming import to_camel_case


def flatten_value(val: Any) -> Any:
    """Collapse scalar lists into one delimited string, the way their column is typed."""
    if isinstance(val, list):
        if all(isinstance(v, (str, int, float, bool)) or v is None for v in val):
            return ", ".join(["" if v is None else str(v) for v in val])
        try:
            return json.dumps(val, ensure_ascii=False)
        except TypeError:
            return str(val)
    return val


def flatten_record(entity: Entity, record: Mapping[str, Any]) -> Dict[str, Any]:
    """Project one example record onto an entity's flat fields."""
    by_key = {to_camel_case(k): v for k, v in record.items()}
    row: Dict[str, Any] = {}
    for key in entity.fields:
        val = by_key.get(key)
        if isinstance(val, dict):
            val = None
        row[key] = flatten_value(val)
    return row


def flatten_records_for_preview(
    entity: Entity,
    records: Sequence[Any],
    limit: int = 3,
) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        rows.append(flatten_record(entity, record))
        if len(rows) >= max(1, int(limit)):
            break
    return rows

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from . import config
from .classifier import classify
from .models import PROTECTED_TAGS, WEAK_TAGS, AssociationContribution, FieldSpec, TypeTag
from .naming import to_camel_case

logger = logging.getLogger(__name__)

FieldMap = Dict[str, FieldSpec]


def resolve_type(current: Optional[TypeTag], observed: Optional[TypeTag]) -> TypeTag:
    """Pick the stored type for a field given its current tag and a new observation.

    - protected tags (unbounded strings) are never replaced
    - missing/weak observations never erase a stronger known type
    - a structured observation never erases a known scalar type
    - otherwise the newer observation wins
    """
    if current is None:
        return observed if observed is not None else TypeTag.UNKNOWN

    if current in PROTECTED_TAGS or observed is None:
        return current

    if observed in WEAK_TAGS:
        if current is TypeTag.UNKNOWN and observed is TypeTag.NULL:
            return observed
        return current

    if observed is TypeTag.STRUCTURED and current not in WEAK_TAGS:
        return current

    return observed


def is_mixed_shape(current: TypeTag, observed: Optional[TypeTag]) -> bool:
    if observed is None or observed is current:
        return False
    if TypeTag.STRUCTURED not in (current, observed):
        return False
    return current not in WEAK_TAGS and observed not in WEAK_TAGS


def merge_field(fields: FieldMap, key: str, original_key: str, observed: Optional[TypeTag]) -> FieldMap:
    existing = fields.get(key)
    if existing is None:
        fields[key] = FieldSpec(type=resolve_type(None, observed), original_key=original_key)
        return fields

    resolved = resolve_type(existing.type, observed)
    if is_mixed_shape(existing.type, observed):
        logger.warning(
            f"Field '{original_key}' is both nested and scalar across examples; "
            f"keeping {resolved.value} alongside the association"
        )

    if resolved is not existing.type:
        fields[key] = FieldSpec(type=resolved, original_key=original_key)
    return fields


def fold_record(
    fields: FieldMap,
    record: Mapping[str, Any],
    long_string_threshold: int = config.LONG_STRING_THRESHOLD,
) -> List[AssociationContribution]:
    """Merge one record's key/value pairs into `fields`.

    Returns the association contributions found in the record, in key order.
    """
    contributions: List[AssociationContribution] = []
    for original_key, value in record.items():
        key = to_camel_case(original_key)

        existing = fields.get(key)
        if existing is not None and existing.type in PROTECTED_TAGS:
            continue

        tag, contribution = classify(value, original_key, long_string_threshold)
        if contribution is not None:
            contributions.append(contribution)
        merge_field(fields, key, original_key, tag)
    return contributions


def strip_structured(fields: FieldMap) -> FieldMap:
    """Drop fields that only ever held nested data; those live on as associations."""
    return {key: spec for key, spec in fields.items() if spec.type is not TypeTag.STRUCTURED}


def merge_entity_fields(into: FieldMap, other: FieldMap) -> FieldMap:
    """Fold another entity's field map into `into` using the same override policy."""
    for key, spec in other.items():
        merge_field(into, key, spec.original_key, spec.type)
    return into


def unknown_fields(fields: FieldMap) -> List[str]:
    return [key for key, spec in fields.items() if spec.type is TypeTag.UNKNOWN]

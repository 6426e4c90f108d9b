from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional, Tuple

from dateutil import parser as date_parser

from . import config
from .models import AssociationContribution, Cardinality, TypeTag

# Plain integer or decimal literal; these parse as dates in dateutil ('0012', '1.5') but are not.
_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)\s*$")
_HAS_DIGIT = re.compile(r"\d")

# Two fallbacks differing in year, month and day
_DEFAULT_A = datetime(1999, 1, 1)
_DEFAULT_B = datetime(2004, 2, 2)

Classification = Tuple[Optional[TypeTag], Optional[AssociationContribution]]


def is_structured(value: Any) -> bool:
    return isinstance(value, (dict, list))


def looks_like_datetime(value: str) -> bool:
    """True only when the string itself spells out a full calendar date.

    dateutil fills missing parts from `default`, so parsing against two
    different defaults exposes partial dates ('May', '5th', '3 pm'). The year
    must also appear literally, which rules out version strings like '1.2.3'.
    """
    if _NUMERIC_STRING.match(value) or not _HAS_DIGIT.search(value):
        return False
    try:
        first = date_parser.parse(value, default=_DEFAULT_A)
        second = date_parser.parse(value, default=_DEFAULT_B)
    except (ValueError, OverflowError, TypeError):
        return False
    if first.date() != second.date():
        return False
    return str(first.year) in value


def classify_string(value: str, long_string_threshold: int = config.LONG_STRING_THRESHOLD) -> TypeTag:
    if looks_like_datetime(value):
        return TypeTag.DATETIME
    if len(value) > long_string_threshold:
        return TypeTag.UNBOUNDED_STRING
    return TypeTag.BOUNDED_STRING


def classify(
    value: Any,
    key: str,
    long_string_threshold: int = config.LONG_STRING_THRESHOLD,
) -> Classification:
    """Infer the field type of a single value.

    Returns `(tag, contribution)`. `contribution` is only set when the value is
    structured (a nested object or an array of objects); the caller owns the
    accumulation of those examples into child entities. An array of scalars is
    collapsed into an unbounded string column (its items are joined into one
    delimited value on export) instead of becoming an entity.
    """
    if value is None:
        return TypeTag.NULL, None

    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return TypeTag.BOOLEAN, None

    if isinstance(value, int):
        return TypeTag.INTEGER, None

    if isinstance(value, float):
        return (TypeTag.INTEGER if value.is_integer() else TypeTag.FLOAT), None

    if isinstance(value, str):
        return classify_string(value, long_string_threshold), None

    if isinstance(value, list):
        if value and not is_structured(value[0]):
            return TypeTag.UNBOUNDED_STRING, None
        contribution = AssociationContribution(
            key=key,
            cardinality=Cardinality.ONE_TO_MANY,
            examples=list(value),
        )
        return TypeTag.STRUCTURED, contribution

    if isinstance(value, dict):
        contribution = AssociationContribution(
            key=key,
            cardinality=Cardinality.ONE_TO_ONE,
            examples=[value],
        )
        return TypeTag.STRUCTURED, contribution

    return None, None

from __future__ import annotations

import re
from pathlib import Path
from typing import List

_WORD_SPLIT = re.compile(r"[\W_]+")

_ES_ENDINGS = ("sses", "xes", "zes", "ches", "shes")
_KEEP_S_ENDINGS = ("ss", "us", "is")


def split_words(key: str) -> List[str]:
    if not isinstance(key, str):
        key = str(key)
    return [part for part in _WORD_SPLIT.split(key) if part]


def to_camel_case(key: str) -> str:
    """Canonicalize a raw key: 'first_name', 'First Name' and 'first-name' all become 'firstName'.

    Words written entirely in capitals are lowered first, so 'ID' becomes 'id'
    and 'USER_ID' becomes 'userId'. Keys without any letters or digits are
    returned unchanged so they still get a (unique) field.
    """
    words = split_words(key)
    if not words:
        return key if isinstance(key, str) else str(key)

    out: List[str] = []
    for idx, word in enumerate(words):
        if word.isupper():
            word = word.lower()
        if idx == 0:
            out.append(word[:1].lower() + word[1:])
        else:
            out.append(word[:1].upper() + word[1:])
    return ''.join(out)


def singularize(name: str) -> str:
    """Best-effort English singular used for one-to-many target entities ('orders' -> 'order')."""
    lower = name.lower()
    if len(name) <= 3:
        return name
    if lower.endswith("ies"):
        return name[:-3] + ("Y" if name[-3].isupper() else "y")
    if lower.endswith(_ES_ENDINGS):
        return name[:-2]
    if lower.endswith("s") and not lower.endswith(_KEEP_S_ENDINGS):
        return name[:-1]
    return name


def canonical_entity_name(key: str, one_to_many: bool = False) -> str:
    name = to_camel_case(key)
    if one_to_many:
        name = singularize(name)
    return name


def entity_name_from_path(path) -> str:
    """Derive a root entity name from an example file path ('data/orders.json' -> 'orders')."""
    return Path(str(path)).stem

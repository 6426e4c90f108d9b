from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class TypeTag(str, Enum):
    NULL = "Null"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    FLOAT = "Float"
    DATETIME = "DateTime"
    BOUNDED_STRING = "BoundedString"
    UNBOUNDED_STRING = "UnboundedString"
    UNKNOWN = "Unknown"
    # Only exists while a job is being folded; stripped before the Entity is built.
    STRUCTURED = "Structured"


# Tags that never overwrite a stronger observation.
WEAK_TAGS = frozenset({TypeTag.NULL, TypeTag.UNKNOWN})

# Tags that, once stored, ignore every later observation.
PROTECTED_TAGS = frozenset({TypeTag.UNBOUNDED_STRING})


class Cardinality(str, Enum):
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"


@dataclass
class FieldSpec:
    type: TypeTag
    original_key: str


@dataclass
class Entity:
    name: str
    fields: Dict[str, FieldSpec] = field(default_factory=dict)


@dataclass(frozen=True)
class AssociationEdge:
    source: str
    target: str
    cardinality: Cardinality
    source_key: str = ""

    @property
    def pair(self) -> Tuple[str, str]:
        return (self.source.casefold(), self.target.casefold())


@dataclass
class AssociationContribution:
    """What one classified value adds to a pending association."""

    key: str
    cardinality: Cardinality
    examples: List[Any] = field(default_factory=list)


@dataclass
class DecompositionJob:
    entity_name: str
    examples: List[Any] = field(default_factory=list)
    depth: int = 0
    ancestors: Tuple[str, ...] = ()


@dataclass
class DecompositionResult:
    entity: Entity
    edges: List[AssociationEdge] = field(default_factory=list)
    jobs: List[DecompositionJob] = field(default_factory=list)


@dataclass
class SchemaGraph:
    entities: Dict[str, Entity] = field(default_factory=dict)
    edges: List[AssociationEdge] = field(default_factory=list)
    declaration_order: List[str] = field(default_factory=list)
    roots: List[str] = field(default_factory=list)
    collisions: List[str] = field(default_factory=list)

    def get(self, name: str) -> Optional[Entity]:
        return self.entities.get(name.casefold())

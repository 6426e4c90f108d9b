from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

from .models import AssociationEdge, Cardinality, Entity, SchemaGraph


def render_entity(entity: Entity) -> Dict[str, Any]:
    """Field listing of one entity, in merged insertion order."""
    return {
        "name": entity.name,
        "fields": [
            {"name": key, "type": spec.type.value, "field": spec.original_key}
            for key, spec in entity.fields.items()
        ],
    }


def render_entity_json(entity: Entity, indent: int = 2) -> str:
    return json.dumps(render_entity(entity), indent=indent, ensure_ascii=False) + "\n"


def relation_statements(edge: AssociationEdge) -> Tuple[str, str]:
    """The from-side and to-side statements for one association."""
    if edge.cardinality is Cardinality.ONE_TO_MANY:
        from_side = f"{edge.source}.has_many({edge.target})"
    else:
        from_side = f"{edge.source}.has_one({edge.target})"
    return from_side, f"{edge.target}.belongs_to({edge.source})"


def render_manifest(graph: SchemaGraph) -> Dict[str, Any]:
    associations: List[Dict[str, Any]] = []
    for edge in graph.edges:
        associations.append({
            "source": edge.source,
            "target": edge.target,
            "cardinality": edge.cardinality.value,
            "key": edge.source_key,
            "statements": list(relation_statements(edge)),
        })
    return {"entities": list(graph.declaration_order), "associations": associations}


def render_manifest_json(graph: SchemaGraph, indent: int = 2) -> str:
    return json.dumps(render_manifest(graph), indent=indent, ensure_ascii=False) + "\n"


def render_all(graph: SchemaGraph) -> Dict[str, str]:
    """Rendered bodies keyed by entity name, in declaration order."""
    return {name: render_entity_json(graph.get(name)) for name in graph.declaration_order}

from __future__ import annotations

import logging
import warnings
from typing import Dict, Iterable, List, Sequence, Tuple

from .errors import NameCollisionWarning
from .merger import merge_entity_fields, unknown_fields
from .models import AssociationEdge, DecompositionResult, Entity, SchemaGraph

logger = logging.getLogger(__name__)

RootResults = Tuple[str, Sequence[DecompositionResult]]


def add_entity(graph: SchemaGraph, entity: Entity) -> Entity:
    key = entity.name.casefold()
    existing = graph.entities.get(key)
    if existing is None:
        stored = Entity(name=entity.name, fields=dict(entity.fields))
        graph.entities[key] = stored
        return stored
    logger.debug(f"Merging repeated entity '{entity.name}' into '{existing.name}'")
    merge_entity_fields(existing.fields, entity.fields)
    return existing


def add_edge(graph: SchemaGraph, edge: AssociationEdge, seen: Dict[Tuple[str, str], AssociationEdge]) -> None:
    kept = seen.get(edge.pair)
    if kept is None:
        seen[edge.pair] = edge
        graph.edges.append(edge)
        return
    if kept.cardinality is edge.cardinality:
        return

    message = (
        f"Association {kept.source} -> {kept.target} found as both {kept.cardinality.value} "
        f"and {edge.cardinality.value}; keeping first-seen {kept.cardinality.value}"
    )
    logger.warning(message)
    graph.collisions.append(message)
    warnings.warn(message, NameCollisionWarning, stacklevel=3)


def declaration_order(graph: SchemaGraph) -> List[str]:
    """Roots in input order, each followed (pre-order) by targets not yet placed."""
    targets: Dict[str, List[str]] = {}
    for edge in graph.edges:
        targets.setdefault(edge.source.casefold(), []).append(edge.target.casefold())

    order: List[str] = []
    placed = set()

    def visit(start: str) -> None:
        stack = [start]
        while stack:
            key = stack.pop()
            if key in placed or key not in graph.entities:
                continue
            placed.add(key)
            order.append(graph.entities[key].name)
            stack.extend(reversed([t for t in targets.get(key, []) if t not in placed]))

    for root in graph.roots:
        visit(root.casefold())
    for key in list(graph.entities):
        visit(key)
    return order


def assemble(roots: Iterable[RootResults]) -> SchemaGraph:
    """Merge every root's decomposition results into one SchemaGraph."""
    graph = SchemaGraph()
    seen: Dict[Tuple[str, str], AssociationEdge] = {}

    for root_name, results in roots:
        if root_name.casefold() not in {r.casefold() for r in graph.roots}:
            graph.roots.append(root_name)
        for result in results:
            add_entity(graph, result.entity)
            for edge in result.edges:
                add_edge(graph, edge, seen)

    # Targets cut off by the cycle guard still need an entity.
    for edge in graph.edges:
        if edge.target.casefold() not in graph.entities:
            add_entity(graph, Entity(name=edge.target))

    for entity in graph.entities.values():
        for key in unknown_fields(entity.fields):
            logger.warning(f"Field '{key}' of '{entity.name}' never had a classifiable value; keeping it as Unknown")

    graph.declaration_order = declaration_order(graph)
    logger.info(f"Assembled {len(graph.entities)} entities and {len(graph.edges)} associations")
    return graph

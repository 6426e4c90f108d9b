from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from . import config
from .errors import InputShapeError
from .merger import fold_record, strip_structured
from .models import (
    AssociationContribution,
    AssociationEdge,
    Cardinality,
    DecompositionJob,
    DecompositionResult,
    Entity,
)
from .naming import canonical_entity_name, to_camel_case

logger = logging.getLogger(__name__)


def validate_records(name: str, records: Any) -> List[Mapping[str, Any]]:
    """Ensure a root collection is a list of JSON objects."""
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise InputShapeError(
            f"Examples for '{name}' must be a list of objects, got {type(records).__name__}."
        )
    for idx, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise InputShapeError(
                f"Example #{idx} for '{name}' is {type(record).__name__}, expected an object."
            )
    return list(records)


def accumulate(pending: Dict[str, AssociationContribution], contribution: AssociationContribution) -> None:
    key = to_camel_case(contribution.key)
    existing = pending.get(key)
    if existing is None:
        pending[key] = AssociationContribution(
            key=contribution.key,
            cardinality=contribution.cardinality,
            examples=list(contribution.examples),
        )
        return
    existing.examples.extend(contribution.examples)
    # An array of objects anywhere makes the whole association one-to-many.
    if contribution.cardinality is Cardinality.ONE_TO_MANY:
        existing.cardinality = Cardinality.ONE_TO_MANY


def group_by_target(pending: Dict[str, AssociationContribution]) -> Dict[str, AssociationContribution]:
    """Key pending associations by their target entity name.

    Two keys may resolve to the same target (e.g. 'order' and 'orders'); their
    examples are pooled so one edge links the pair.
    """
    grouped: Dict[str, AssociationContribution] = {}
    names: Dict[str, str] = {}
    for contribution in pending.values():
        one_to_many = contribution.cardinality is Cardinality.ONE_TO_MANY
        target = canonical_entity_name(contribution.key, one_to_many=one_to_many)
        folded = target.casefold()
        if folded not in grouped:
            names[folded] = target
            grouped[folded] = AssociationContribution(
                key=contribution.key,
                cardinality=contribution.cardinality,
                examples=list(contribution.examples),
            )
            continue
        logger.debug(f"Keys '{grouped[folded].key}' and '{contribution.key}' both map to entity '{target}'")
        grouped[folded].examples.extend(contribution.examples)
        if one_to_many:
            grouped[folded].cardinality = Cardinality.ONE_TO_MANY
    return {names[folded]: contribution for folded, contribution in grouped.items()}


def decompose(job: DecompositionJob, long_string_threshold: int = config.LONG_STRING_THRESHOLD) -> DecompositionResult:
    """Turn one batch of examples into an Entity, its edges and the child jobs."""
    fields: Dict = {}
    pending: Dict[str, AssociationContribution] = {}

    for record in job.examples:
        if not isinstance(record, Mapping):
            if job.depth == 0:
                raise InputShapeError(
                    f"Example for '{job.entity_name}' is {type(record).__name__}, expected an object."
                )
            logger.debug(f"Skipping non-object example of type {type(record).__name__} for '{job.entity_name}'")
            continue
        for contribution in fold_record(fields, record, long_string_threshold):
            accumulate(pending, contribution)

    entity = Entity(name=job.entity_name, fields=strip_structured(fields))
    result = DecompositionResult(entity=entity)

    ancestors = job.ancestors + (job.entity_name,)
    for target, contribution in group_by_target(pending).items():
        result.edges.append(
            AssociationEdge(
                source=job.entity_name,
                target=target,
                cardinality=contribution.cardinality,
                source_key=contribution.key,
            )
        )
        result.jobs.append(
            DecompositionJob(
                entity_name=target,
                examples=contribution.examples,
                depth=job.depth + 1,
                ancestors=ancestors,
            )
        )
    return result


def decompose_all(
    entity_name: str,
    records: Any,
    max_depth: Optional[int] = config.MAX_DEPTH,
    long_string_threshold: int = config.LONG_STRING_THRESHOLD,
) -> List[DecompositionResult]:
    """Decompose a root collection and every nested entity it reveals.

    Results are flattened depth-first in discovery order, root first. A job
    whose entity is already one of its own ancestors is not expanded again;
    its edge is kept, pointing back up the branch. Jobs deeper than
    `max_depth` become empty anchor entities.
    """
    records = validate_records(entity_name, records)
    logger.info(f"Found {len(records)} examples for model: {entity_name}")

    results: List[DecompositionResult] = []
    stack = [DecompositionJob(entity_name=entity_name, examples=records)]
    while stack:
        job = stack.pop()
        if job.entity_name.casefold() in {name.casefold() for name in job.ancestors}:
            logger.info(f"Not expanding '{job.entity_name}' again below itself ({' -> '.join(job.ancestors)})")
            continue
        if max_depth is not None and job.depth > max_depth:
            logger.info(f"Depth limit {max_depth} reached at '{job.entity_name}', emitting empty entity")
            results.append(DecompositionResult(entity=Entity(name=job.entity_name)))
            continue

        logger.debug(f"Decomposing '{job.entity_name}' from {len(job.examples)} examples")
        result = decompose(job, long_string_threshold)
        results.append(result)
        stack.extend(reversed(result.jobs))
    return results

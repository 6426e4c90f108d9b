from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Set, Tuple

from . import config
from .assembler import assemble
from .decomposer import decompose_all
from .emitter import render_all, render_manifest_json
from .io_utils import load_example_collection, run_formatter, write_artifact
from .models import Cardinality, SchemaGraph
from .naming import entity_name_from_path, singularize, to_camel_case

logger = logging.getLogger(__name__)

NamedCollection = Tuple[str, Any]


def one_to_many_targets(roots) -> Set[str]:
    return {
        edge.target.casefold()
        for _, results in roots
        for result in results
        for edge in result.edges
        if edge.cardinality is Cardinality.ONE_TO_MANY
    }


def infer_schema_graph(
    collections: Sequence[NamedCollection],
    max_depth: Optional[int] = config.MAX_DEPTH,
    long_string_threshold: int = config.LONG_STRING_THRESHOLD,
) -> SchemaGraph:
    """Decompose each named collection, in order, and assemble one graph.

    A root named in the plural ('orders') whose singular is also reached
    through an array of objects elsewhere is decomposed under that singular
    name, so both sources describe one entity.
    """
    roots = []
    for name, records in collections:
        root_name = to_camel_case(name)
        logger.info(f"Generating model: {root_name}")
        roots.append((root_name, decompose_all(root_name, records, max_depth, long_string_threshold)))

    targets = one_to_many_targets(roots)
    for idx, (root_name, _) in enumerate(roots):
        singular = singularize(root_name)
        if singular == root_name or singular.casefold() not in targets:
            continue
        logger.info(f"Merging root '{root_name}' into one-to-many entity '{singular}'")
        records = collections[idx][1]
        roots[idx] = (singular, decompose_all(singular, records, max_depth, long_string_threshold))
    return assemble(roots)


def load_collections(model_name: str, input_path, other_paths: Sequence = ()) -> List[NamedCollection]:
    """Load the main collection under `model_name`; other files are named after their stem."""
    collections = [(model_name, load_example_collection(input_path, model_name))]
    for path in other_paths:
        name = entity_name_from_path(path)
        collections.append((name, load_example_collection(path, name)))
    return collections


def write_schema_graph(graph: SchemaGraph, output_dir, manifest_name: str = config.MANIFEST_NAME) -> List[Path]:
    paths = []
    for name, body in render_all(graph).items():
        paths.append(write_artifact(output_dir, name, body))
    paths.append(write_artifact(output_dir, manifest_name, render_manifest_json(graph)))
    return paths


def generate_models(
    collections: Sequence[NamedCollection],
    output_dir=config.DEFAULT_OUTPUT_DIR,
    formatter: Optional[str] = config.DEFAULT_FORMATTER,
    max_depth: Optional[int] = config.MAX_DEPTH,
    long_string_threshold: int = config.LONG_STRING_THRESHOLD,
) -> Tuple[SchemaGraph, List[Path]]:
    graph = infer_schema_graph(collections, max_depth, long_string_threshold)
    paths = write_schema_graph(graph, output_dir)
    run_formatter(formatter, output_dir)
    logger.info(f"Finished generating {len(graph.entities)} models in {output_dir}")
    return graph, paths

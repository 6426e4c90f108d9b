from __future__ import annotations

import logging
import os
import tempfile
from typing import Any, Dict, List, Optional
from uuid import uuid4

import gradio as gr

from . import config
from .emitter import render_entity, render_manifest
from .errors import ExtractorError
from .flattening import flatten_records_for_preview
from .io_utils import has_json_extension, load_example_collection, upload_path
from .naming import entity_name_from_path
from .pipeline import infer_schema_graph, write_schema_graph

logger = logging.getLogger(__name__)


def normalize_uploads(file_objs) -> List[Any]:
    if file_objs is None:
        return []
    if not isinstance(file_objs, (list, tuple)):
        return [file_objs]
    return [f for f in file_objs if f is not None]


def prepare_collections(file_objs, model_name: Optional[str]):
    """Load uploads as named collections: the first under `model_name`, the rest by file stem."""
    uploads = normalize_uploads(file_objs)
    if not uploads:
        raise ValueError("No file uploaded.")

    collections = []
    for idx, file_obj in enumerate(uploads):
        path = upload_path(file_obj)
        if not has_json_extension(path):
            raise ValueError(f"{os.path.basename(path)} does not have the necessary {config.INPUT_EXTENSION} extension.")
        name = entity_name_from_path(path)
        if idx == 0 and model_name and model_name.strip():
            name = model_name.strip()
        collections.append((name or config.DEFAULT_MODEL_NAME, load_example_collection(file_obj, name)))
    return collections


def infer_schema_handler(file_objs, model_name):
    """Infer the entity graph from the uploads and export its artifacts for download."""
    empty = (None, None, None, None, gr.update(choices=[], value=None))
    try:
        collections = prepare_collections(file_objs, model_name)
        graph = infer_schema_graph(collections)
    except (ExtractorError, ValueError) as e:
        logger.warning(f"Schema inference failed: {e}")
        return (*empty, f"Error: {str(e)}")

    entities: Dict[str, Any] = {name: render_entity(graph.get(name)) for name in graph.declaration_order}
    manifest = render_manifest(graph)

    _, root_records = collections[0]
    root_entity = graph.get(graph.roots[0]) if graph.roots else None
    preview = flatten_records_for_preview(root_entity, root_records) if root_entity else []

    output_dir = os.path.join(tempfile.gettempdir(), f"entities_{uuid4().hex}")
    try:
        paths = [str(p) for p in write_schema_graph(graph, output_dir)]
    except OSError as e:
        return (entities, manifest, preview or None, None, gr.update(choices=[], value=None), f"Error writing schema files: {str(e)}")

    status = f"Inferred {len(graph.entities)} entities and {len(graph.edges)} associations from {len(collections)} file(s)."
    if graph.collisions:
        status += f" {len(graph.collisions)} conflicting association(s), see manifest."
        manifest["collisions"] = list(graph.collisions)

    selector = gr.update(choices=list(graph.declaration_order), value=graph.declaration_order[0] if graph.declaration_order else None)
    return entities, manifest, preview or None, paths, selector, status


def show_entity_handler(entities, entity_name):
    if not entities or not entity_name:
        return None
    return entities.get(entity_name)

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any, List, Mapping, Optional

from . import config
from .decomposer import validate_records
from .errors import ParseError

logger = logging.getLogger(__name__)


def read_json_content(file_obj):
    """Read JSON content from an uploaded file or file path."""
    if file_obj is None:
        raise ValueError("No file uploaded.")

    try:
        if hasattr(file_obj, 'read'):
            if hasattr(file_obj, 'seek'):
                file_obj.seek(0)
            content = file_obj.read()
            if isinstance(content, bytes):
                content = content.decode('utf-8')
            return json.loads(content)

        path = file_obj.name if hasattr(file_obj, 'name') else file_obj
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc


def upload_path(file_obj) -> str:
    return str(file_obj.name if hasattr(file_obj, 'name') else file_obj)


def load_example_collection(file_obj, name: str) -> List[Mapping[str, Any]]:
    """Load one named example collection; it must be a JSON list of objects."""
    data = read_json_content(file_obj)
    return validate_records(name, data)


def has_json_extension(path) -> bool:
    return Path(str(path)).suffix.lower() == config.INPUT_EXTENSION


def ensure_directory(directory) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_artifact(directory, name: str, body: str, suffix: str = config.ARTIFACT_SUFFIX) -> Path:
    """Write one rendered artifact; errors propagate to the caller."""
    path = ensure_directory(directory) / f"{name}{suffix}"
    with open(path, 'w', encoding='utf-8') as f:
        f.write(body)
    logger.debug(f"Wrote {path}")
    return path


def run_formatter(command: Optional[str], directory) -> bool:
    """Run an external formatter over the output directory; failures only warn."""
    if not command:
        return True

    args = shlex.split(command) + [str(directory)]
    try:
        subprocess.run(args, check=True, capture_output=True, timeout=config.FORMATTER_TIMEOUT)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning(f"Formatter '{command}' failed, you might want to check the generated files: {exc}")
        return False
    return True

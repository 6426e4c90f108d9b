from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from . import config
from .errors import ExtractorError
from .io_utils import has_json_extension
from .pipeline import generate_models, load_collections

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-entity-extractor",
        description=(
            "Infer entity schemas and their associations from JSON example files. "
            "The first file is loaded as MODEL_NAME; every further file is named after its stem."
        ),
    )
    parser.add_argument("model_name", help="Name of the main entity.")
    parser.add_argument("input_path", help="JSON file holding a list of example records.")
    parser.add_argument("other_paths", nargs="*", help="More example files, one root entity each.")
    parser.add_argument(
        "-o", "--output-dir",
        default=str(config.DEFAULT_OUTPUT_DIR),
        help="Directory for the rendered schemas and manifest (default: %(default)s).",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=config.MAX_DEPTH,
        help="Stop expanding nested entities below this depth.",
    )
    parser.add_argument(
        "--string-threshold",
        type=int,
        default=config.LONG_STRING_THRESHOLD,
        help="Strings longer than this are typed UnboundedString (default: %(default)s).",
    )
    parser.add_argument(
        "--formatter",
        default=config.DEFAULT_FORMATTER,
        help="Command run on the output directory afterwards, e.g. 'npx prettier --write'.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def check_extensions(parser: argparse.ArgumentParser, paths: Sequence[str]) -> None:
    for path in paths:
        if not has_json_extension(path):
            parser.error(f"file '{path}' does not have the necessary {config.INPUT_EXTENSION} file extension")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    check_extensions(parser, [args.input_path, *args.other_paths])

    try:
        collections = load_collections(args.model_name, args.input_path, args.other_paths)
        _, paths = generate_models(
            collections,
            output_dir=Path(args.output_dir),
            formatter=args.formatter,
            max_depth=args.max_depth,
            long_string_threshold=args.string_threshold,
        )
    except (ExtractorError, OSError) as exc:
        logger.error(str(exc))
        return 1

    print(f"Finished generating {len(paths) - 1} models in {args.output_dir}")
    return 0

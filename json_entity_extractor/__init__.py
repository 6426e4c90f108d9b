"""Core logic for JSON Entity Extractor.

The Gradio UI lives in `app.py` and the command line in `cli.py`. This package
contains pure functions that:
- classify example values into field types
- decompose nested objects/arrays into related entities
- assemble the entity graph and its declaration order
- render entity schemas and the association manifest
"""

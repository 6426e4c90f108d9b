from __future__ import annotations


class ExtractorError(Exception):
    """Base class for errors raised while loading or decomposing examples."""


class ParseError(ExtractorError, ValueError):
    """Example data is not valid JSON."""


class InputShapeError(ExtractorError, ValueError):
    """An example collection is not a list of JSON objects."""


class NameCollisionWarning(UserWarning):
    """Two jobs disagree on the cardinality of the same association."""

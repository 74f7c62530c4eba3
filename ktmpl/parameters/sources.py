"""Parameter value sources.

Each source produces a :data:`~ktmpl.parameters.models.ParameterValues`
mapping:

- :func:`values_from_pairs` - ``NAME=VALUE`` strings from the command line
- :func:`values_from_env` - the process environment
- :class:`ParameterFile` - a YAML parameter file, nested keys flattened
- :func:`merge_values` - combine sources, later ones winning
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from ktmpl.errors import TemplateError
from ktmpl.parameters.models import Encoded, ParameterValue, ParameterValues, Plain

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Command line and environment
# ---------------------------------------------------------------------------


def values_from_pairs(pairs: Iterable[str], encoded: bool = False) -> ParameterValues:
    """Parse ``NAME=VALUE`` strings.

    Values are tagged :class:`Encoded` when *encoded* is true, otherwise
    :class:`Plain`.  Only the first ``=`` separates name from value.
    """
    values: ParameterValues = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise TemplateError(
                f'Parameters must be formatted as NAME=VALUE, got "{pair}".'
            )
        values[name] = Encoded(value) if encoded else Plain(value)
    return values


def values_from_env(environ: Optional[Mapping[str, str]] = None) -> ParameterValues:
    """Expose every environment variable as a :class:`Plain` value."""
    if environ is None:
        environ = os.environ
    return {key: Plain(value) for key, value in environ.items()}


def merge_values(*sources: Mapping[str, ParameterValue]) -> ParameterValues:
    """Merge value mappings; a name in a later source overrides earlier ones."""
    merged: ParameterValues = {}
    for source in sources:
        merged.update(source)
    return merged


# ---------------------------------------------------------------------------
# Parameter files
# ---------------------------------------------------------------------------


def _leaf_text(value: Any) -> Optional[str]:
    """Text of a supported leaf value, ``None`` for unsupported ones."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    return None


def flatten_document(doc: Any, prefix: str = "") -> ParameterValues:
    """Flatten one parameter-file document.

    Nested mapping keys are joined to their parent with ``_``, so
    ``{database: {user: x}}`` yields ``database_user``.  Sequences, nulls
    and non-string keys are skipped.
    """
    values: ParameterValues = {}

    if isinstance(doc, str):
        values[prefix] = Plain(doc)
        return values
    if not isinstance(doc, dict):
        return values

    for key, value in doc.items():
        if not isinstance(key, str):
            logger.debug("Skipping non-string parameter file key %r", key)
            continue
        name = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            values.update(flatten_document(value, name))
            continue
        text = _leaf_text(value)
        if text is None:
            logger.debug("Skipping unsupported value for %s", name)
            continue
        values[name] = Plain(text)
    return values


class ParameterFile(BaseModel):
    """A parsed parameter file.

    Attributes:
        filename: Source path, empty when parsed from a string.
        doc_str: Raw file contents.
        parameters: Flattened values from every document in the file.
    """

    filename: str = ""
    doc_str: str = ""
    parameters: Dict[str, ParameterValue] = Field(default_factory=dict)

    @classmethod
    def from_str(cls, doc_str: str, filename: str = "") -> "ParameterFile":
        """Parse parameter-file contents."""
        try:
            docs = list(yaml.safe_load_all(doc_str))
        except yaml.YAMLError as exc:
            where = filename or "parameter file"
            raise TemplateError(f"Invalid YAML in {where}: {exc}") from exc

        parameters: ParameterValues = {}
        for doc in docs:
            parameters.update(flatten_document(doc))

        logger.debug(
            "Loaded %d parameter value(s) from %s",
            len(parameters),
            filename or "string",
        )
        return cls(filename=filename, doc_str=doc_str, parameters=parameters)

    @classmethod
    def from_file(cls, path: str | Path) -> "ParameterFile":
        """Read and parse a parameter file from disk."""
        path = Path(path)
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateError(f"Cannot read parameter file {path}: {exc}") from exc
        return cls.from_str(contents, filename=str(path))

"""Placeholder interpolation over a parsed YAML node tree.

Two placeholder forms are recognised inside string scalars:

* ``$(NAME)`` - replaced in place; the node stays a string
* ``$((NAME))`` - replaced, then the resulting text is typed as a plain
  YAML core-schema scalar, so ``"$((PORT))"`` with ``PORT=27017`` becomes
  the integer ``27017``

The literal form is tried first.  Only when it changes nothing is the
string form applied.  Unknown names are left verbatim; a declared
parameter without a value is replaced by ``~``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Set

from ktmpl.parameters.models import ParamMap

logger = logging.getLogger(__name__)

#: Spelling substituted for a declared parameter that resolved to no value.
NULL_LITERAL = "~"

# YAML 1.2 core schema.  Only the bare text is classified; comments,
# anchors, quotes, sexagesimal numbers and ``yes``/``no`` stay strings.
_NULL_SPELLINGS = frozenset({"~", "null", "Null", "NULL"})
_BOOL_SPELLINGS = {
    "true": True, "True": True, "TRUE": True,
    "false": False, "False": False, "FALSE": False,
}
_DECIMAL_RX = re.compile(r"[-+]?[0-9]+")
_OCTAL_RX = re.compile(r"0o[0-7]+")
_HEX_RX = re.compile(r"0x[0-9a-fA-F]+")
_FLOAT_RX = re.compile(r"[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?")
_INF_RX = re.compile(r"[-+]?\.(?:inf|Inf|INF)")
_NAN_RX = re.compile(r"\.(?:nan|NaN|NAN)")


def infer_scalar(text: str) -> Any:
    """Return *text* as the core-schema scalar it spells.

    Null, bool, int and float spellings are converted; anything else is
    returned unchanged as a string.  Decimal integers keep leading zeros
    as base 10 (``0755`` is ``755``).
    """
    if text in _NULL_SPELLINGS:
        return None
    if text in _BOOL_SPELLINGS:
        return _BOOL_SPELLINGS[text]
    if _DECIMAL_RX.fullmatch(text):
        return int(text, 10)
    if _OCTAL_RX.fullmatch(text):
        return int(text[2:], 8)
    if _HEX_RX.fullmatch(text):
        return int(text[2:], 16)
    if _FLOAT_RX.fullmatch(text):
        return float(text)
    if _INF_RX.fullmatch(text):
        return float("-inf") if text.startswith("-") else float("inf")
    if _NAN_RX.fullmatch(text):
        return float("nan")
    return text


class Interpolator:
    """Rewrites string scalars in a node tree using resolved parameters.

    The compiled patterns belong to the instance; one interpolator is built
    per template run.  Containers shared through YAML aliases are visited
    once per run.
    """

    def __init__(self, parameters: ParamMap) -> None:
        self._parameters = parameters
        self._literal: re.Pattern[str] = re.compile(r"\$\(\(([^()]+)\)\)")
        self._string: re.Pattern[str] = re.compile(r"\$\(([^()]+)\)")
        self._seen: Set[int] = set()

    def process(self, node: Any) -> Any:
        """Interpolate *node* depth-first and return it.

        Sequences and mappings are rewritten in place and returned as the
        same object.  Strings come back as the replacement node, which is
        the original object when nothing matched.  Mapping keys are never
        interpolated.
        """
        if isinstance(node, (list, dict)):
            if id(node) in self._seen:
                return node
            self._seen.add(id(node))
        if isinstance(node, list):
            for index, child in enumerate(node):
                node[index] = self.process(child)
        elif isinstance(node, dict):
            for key in node:
                node[key] = self.process(node[key])
        elif isinstance(node, str):
            return self.interpolate(node)
        return node

    def interpolate(self, text: str) -> Any:
        """Substitute the placeholders in a single string scalar."""
        replaced = self._literal.sub(self._lookup, text)
        if replaced != text:
            logger.debug("Literal substitution: %r -> %r", text, replaced)
            return infer_scalar(replaced)

        replaced = self._string.sub(self._lookup, text)
        if replaced != text:
            logger.debug("String substitution: %r -> %r", text, replaced)
            return replaced
        return text

    def _lookup(self, match: re.Match[str]) -> str:
        parameter = self._parameters.get(match.group(1))
        if parameter is None:
            return match.group(0)
        if parameter.value is None:
            return NULL_LITERAL
        return parameter.value

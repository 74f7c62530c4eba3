"""Pydantic models for template parameters.

Defines the data structures for:
- Supplied parameter values, either ``Plain`` text or already ``Encoded``
- The declared ``parameterType`` of a parameter
- A declared parameter with its resolved value
"""

from __future__ import annotations

import base64
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from ktmpl.errors import TemplateError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Supplied values
# ---------------------------------------------------------------------------


class Plain(BaseModel):
    """A plain text parameter value, Base64 encoded when the type demands it."""

    model_config = ConfigDict(frozen=True)

    value: str

    def __init__(self, value: str, **data: Any) -> None:
        super().__init__(value=value, **data)


class Encoded(BaseModel):
    """A parameter value that is already Base64 encoded."""

    model_config = ConfigDict(frozen=True)

    value: str

    def __init__(self, value: str, **data: Any) -> None:
        super().__init__(value=value, **data)


ParameterValue = Union[Plain, Encoded]

#: Parameter names mapped to user-supplied values.
ParameterValues = Dict[str, ParameterValue]


# ---------------------------------------------------------------------------
# ParameterType
# ---------------------------------------------------------------------------


class ParameterType(str, Enum):
    """Valid values of a declaration's ``parameterType`` field."""

    BASE64 = "base64"
    BOOL = "bool"
    INT = "int"
    STRING = "string"

    @classmethod
    def parse(cls, raw: str) -> "ParameterType":
        """Parse *raw* exactly (case-sensitive)."""
        for member in cls:
            if member.value == raw:
                return member
        raise TemplateError(
            f'invalid parameterType "{raw}": '
            "parameterType must be base64, bool, int, or string."
        )

    @property
    def phrase(self) -> str:
        """How the type reads in a "must be ..." error message."""
        return _TYPE_PHRASES[self]


_TYPE_PHRASES = {
    ParameterType.BASE64: "base64",
    ParameterType.BOOL: "a bool",
    ParameterType.INT: "an int",
    ParameterType.STRING: "a string",
}

_ANY_TYPE_PHRASE = "base64, bool, int, or string"


# ---------------------------------------------------------------------------
# Parameter
# ---------------------------------------------------------------------------


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def maybe_base64_encode(
    parameter_type: Optional[ParameterType], supplied: ParameterValue
) -> str:
    """Return the stored form of a supplied value.

    Only a ``Plain`` value for a ``base64`` parameter is encoded; an
    ``Encoded`` value, or any value for another type, passes through.
    """
    if parameter_type is ParameterType.BASE64 and isinstance(supplied, Plain):
        return _b64(supplied.value)
    return supplied.value


def _inline_default(raw: Any) -> Optional[str]:
    """Text form of a declaration's inline ``value``, if it has a usable one."""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, str)):
        return str(raw)
    return None


def _optional_str(decl: Mapping[Any, Any], key: str) -> Optional[str]:
    raw = decl.get(key)
    return raw if isinstance(raw, str) else None


class Parameter(BaseModel):
    """One declared template parameter.

    Attributes:
        name: Placeholder name, unique within a template.
        description: Free text from the declaration, if any.
        display_name: Human name used in error messages.
        parameter_type: Declared ``parameterType`` or ``None``.
        required: Whether a value must be resolvable.
        value: Resolved value in its final string form, ``None`` when the
            parameter resolved to no value.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    display_name: Optional[str] = None
    parameter_type: Optional[ParameterType] = None
    required: bool = False
    value: Optional[str] = None

    @classmethod
    def from_declaration(
        cls, decl: Any, supplied: Mapping[str, ParameterValue]
    ) -> "Parameter":
        """Build a parameter from a ``parameters`` entry and supplied values.

        Value priority: supplied value, then inline ``value``, then an error
        if ``required``, else no value.

        Raises
        ------
        TemplateError
            On a missing ``name``, an invalid ``parameterType`` or an
            unresolvable required parameter.
        """
        if not isinstance(decl, dict):
            decl = {}

        name = decl.get("name")
        if not isinstance(name, str):
            raise TemplateError('Parameters must have a "name" field.')

        description = _optional_str(decl, "description")
        display_name = _optional_str(decl, "displayName")

        parameter_type = None
        raw_type = decl.get("parameterType")
        if isinstance(raw_type, str):
            parameter_type = ParameterType.parse(raw_type)

        required = decl.get("required")
        if not isinstance(required, bool):
            required = False

        if name in supplied:
            value: Optional[str] = maybe_base64_encode(parameter_type, supplied[name])
            logger.debug("Parameter %s: using supplied value", name)
        else:
            value = _inline_default(decl.get("value"))
            if value is not None:
                logger.debug("Parameter %s: using declared default", name)
            elif required:
                expected = parameter_type.phrase if parameter_type else _ANY_TYPE_PHRASE
                raise TemplateError(
                    f"Parameter {display_name or name} required and must be {expected}"
                )
            else:
                logger.debug("Parameter %s: no value", name)

        return cls(
            name=name,
            description=description,
            display_name=display_name,
            parameter_type=parameter_type,
            required=required,
            value=value,
        )


#: Parameter names mapped to declared parameters.
ParamMap = Dict[str, Parameter]


def build_param_map(
    declarations: Any, supplied: Mapping[str, ParameterValue]
) -> ParamMap:
    """Resolve every declaration in document order.

    The first failing declaration aborts the whole map.
    """
    param_map: ParamMap = {}
    for decl in declarations:
        parameter = Parameter.from_declaration(decl, supplied)
        param_map[parameter.name] = parameter
    return param_map

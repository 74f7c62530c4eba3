"""Parameter declarations, supplied values, and value sources."""

from ktmpl.parameters.models import (
    Encoded,
    ParamMap,
    Parameter,
    ParameterType,
    ParameterValue,
    ParameterValues,
    Plain,
    build_param_map,
    maybe_base64_encode,
)
from ktmpl.parameters.sources import (
    ParameterFile,
    flatten_document,
    merge_values,
    values_from_env,
    values_from_pairs,
)

__all__ = [
    "Encoded",
    "ParamMap",
    "Parameter",
    "ParameterFile",
    "ParameterType",
    "ParameterValue",
    "ParameterValues",
    "Plain",
    "build_param_map",
    "flatten_document",
    "maybe_base64_encode",
    "merge_values",
    "values_from_env",
    "values_from_pairs",
]

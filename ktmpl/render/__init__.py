"""Template interpolation, secret encoding and serialization."""

from ktmpl.render.interpolator import NULL_LITERAL, Interpolator, infer_scalar
from ktmpl.render.secrets import (
    DEFAULT_NAMESPACE,
    Secret,
    SecretEncoder,
    encode_secret_data,
    secrets_from_pairs,
)
from ktmpl.render.template import Template, dump_objects

__all__ = [
    "DEFAULT_NAMESPACE",
    "Interpolator",
    "NULL_LITERAL",
    "Secret",
    "SecretEncoder",
    "Template",
    "dump_objects",
    "encode_secret_data",
    "infer_scalar",
    "secrets_from_pairs",
]

"""ktmpl - Kubernetes manifest templates.

Renders a parameterized ``Template`` manifest (an ``objects`` list plus a
``parameters`` list) into ready-to-apply resource documents:

- ``$(NAME)`` placeholders are replaced inside string fields
- ``$((NAME))`` placeholders are replaced and the field takes the value's
  natural YAML type
- selected ``Secret`` resources get their ``data`` values Base64 encoded
  after interpolation
"""

from ktmpl.errors import TemplateError
from ktmpl.parameters.models import (
    Encoded,
    Parameter,
    ParameterType,
    ParameterValue,
    Plain,
)
from ktmpl.render.secrets import Secret
from ktmpl.render.template import Template

try:
    from importlib.metadata import version

    __version__ = version("ktmpl")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = [
    "Encoded",
    "Parameter",
    "ParameterType",
    "ParameterValue",
    "Plain",
    "Secret",
    "Template",
    "TemplateError",
    "__version__",
]

"""Template manifest parsing and processing.

A template is a single YAML document::

    kind: Template
    apiVersion: v1
    metadata:
      name: example
    objects:
      - kind: Service
        metadata:
          name: "$(DATABASE_SERVICE_NAME)"
    parameters:
      - name: DATABASE_SERVICE_NAME
        required: true

:class:`Template` validates the document and resolves the parameters on
construction; :meth:`Template.process` interpolates every object, encodes
the requested secrets and serializes the objects back to YAML.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

import yaml

from ktmpl.errors import TemplateError
from ktmpl.parameters.models import ParamMap, ParameterValue, build_param_map
from ktmpl.render.interpolator import Interpolator
from ktmpl.render.secrets import Secret, SecretEncoder

logger = logging.getLogger(__name__)


def dump_objects(objects: List[Any], *, document_markers: bool = False) -> str:
    """Serialize *objects* in order, separated by a blank line.

    Mapping keys are emitted sorted.  With *document_markers* each object
    starts with ``---``.
    """
    blocks = []
    for obj in objects:
        try:
            blocks.append(
                yaml.safe_dump(
                    obj,
                    default_flow_style=False,
                    explicit_start=document_markers,
                    allow_unicode=True,
                    sort_keys=True,
                )
            )
        except (yaml.YAMLError, TypeError) as exc:
            raise TemplateError(f"Failed to serialize processed template: {exc}") from exc
    return "\n".join(blocks)


class Template:
    """A Kubernetes manifest template and the values of its parameters.

    Parameters
    ----------
    template_contents:
        The YAML template text.
    parameter_values:
        User-supplied values, by parameter name.
    secrets:
        Secrets whose ``data`` values are Base64 encoded after
        interpolation.  Every one of them must appear in the template.

    Raises
    ------
    TemplateError
        If the text is not exactly one YAML document, ``objects`` or
        ``parameters`` is missing or not a list, or a parameter declaration
        is invalid or unresolvable.
    """

    def __init__(
        self,
        template_contents: str,
        parameter_values: Optional[Mapping[str, ParameterValue]] = None,
        secrets: Optional[Iterable[Secret]] = None,
    ) -> None:
        try:
            docs = list(yaml.safe_load_all(template_contents))
        except yaml.YAMLError as exc:
            raise TemplateError(f"Invalid YAML in template: {exc}") from exc

        if len(docs) != 1:
            raise TemplateError("Only one YAML document can be present in the template.")
        doc = docs[0]
        if not isinstance(doc, dict):
            doc = {}

        objects = doc.get("objects")
        if not isinstance(objects, list):
            raise TemplateError('Key "objects" must be present and must be an array.')

        parameter_specs = doc.get("parameters")
        if not isinstance(parameter_specs, list):
            raise TemplateError('Key "parameters" must be present and must be an array.')

        self.objects: List[Any] = objects
        self.param_map: ParamMap = build_param_map(parameter_specs, parameter_values or {})
        self.secrets = frozenset(secrets) if secrets is not None else None
        self._processed = False

        logger.debug(
            "Parsed template: %d object(s), %d parameter(s)",
            len(self.objects),
            len(self.param_map),
        )

    @property
    def processed(self) -> bool:
        return self._processed

    def process(self, *, document_markers: bool = False) -> str:
        """Interpolate parameters and return the rendered objects as YAML.

        The template's objects are rewritten in place, so a template can be
        processed only once.

        Raises
        ------
        TemplateError
            If a requested secret is malformed or missing, or the result
            cannot be serialized.
        """
        if self._processed:
            raise TemplateError("Template has already been processed.")
        self._processed = True

        interpolator = Interpolator(self.param_map)
        encoder = SecretEncoder(self.secrets) if self.secrets is not None else None

        for index, obj in enumerate(self.objects):
            self.objects[index] = interpolator.process(obj)
            if encoder is not None:
                encoder.maybe_encode(self.objects[index])

        if encoder is not None:
            encoder.check_complete()

        logger.info("Processed %d object(s)", len(self.objects))
        return dump_objects(self.objects, document_markers=document_markers)

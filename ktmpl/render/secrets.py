"""Base64 encoding of selected ``Secret`` resources.

After interpolation, every top-level ``Secret`` object whose
``metadata.name``/``metadata.namespace`` matches a requested
:class:`Secret` identity has each value of its ``data`` map Base64
encoded.  Every requested identity must be found in the template.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterable, Optional, Set

from pydantic import BaseModel, ConfigDict

from ktmpl.errors import TemplateError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


class Secret(BaseModel):
    """A Kubernetes secret selected for data encoding.

    Attributes:
        name: ``metadata.name`` of the secret.
        namespace: ``metadata.namespace``; resources without one are in
            ``default``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str = DEFAULT_NAMESPACE


def secrets_from_pairs(pairs: Iterable[str]) -> Set[Secret]:
    """Parse ``NAME=NAMESPACE`` (or bare ``NAME``) command line values."""
    secrets: Set[Secret] = set()
    for pair in pairs:
        name, _, namespace = pair.partition("=")
        if not name:
            raise TemplateError(
                f'Secrets must be formatted as NAME=NAMESPACE, got "{pair}".'
            )
        secrets.add(Secret(name=name, namespace=namespace or DEFAULT_NAMESPACE))
    return secrets


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _secret_identity(obj: dict) -> Optional[Secret]:
    """Identity of a ``Secret`` resource, ``None`` for any other kind."""
    if "kind" not in obj:
        raise TemplateError('Encountered a resource without a "kind" field.')
    kind = obj["kind"]
    if not isinstance(kind, str):
        raise TemplateError(
            'Encountered a resource with a non-string value for the "kind" field.'
        )
    if kind != "Secret":
        return None

    if "metadata" not in obj:
        raise TemplateError('Encountered a resource without a "metadata" field.')
    metadata = obj["metadata"]
    if not isinstance(metadata, dict):
        raise TemplateError('Encountered a resource with a non-hash "metadata" field.')

    if "name" not in metadata:
        raise TemplateError('Encountered a resource without a "metadata.name" field.')
    name = metadata["name"]
    if not isinstance(name, str):
        raise TemplateError(
            'Encountered a resource with a non-string "metadata.name" field.'
        )

    namespace = metadata.get("namespace", DEFAULT_NAMESPACE)
    if not isinstance(namespace, str):
        raise TemplateError(
            'Encountered a resource with a non-string "metadata.namespace" field.'
        )

    return Secret(name=name, namespace=namespace)


def encode_secret_data(data: dict) -> None:
    """Base64 encode every value of a secret's ``data`` map in place."""
    for key, value in data.items():
        if not isinstance(value, str):
            raise TemplateError("Encountered non-string secret data value.")
        data[key] = _b64(value)


class SecretEncoder:
    """Encodes matching secrets and tracks which identities were found."""

    def __init__(self, secrets: Iterable[Secret]) -> None:
        self.secrets = frozenset(secrets)
        self.encoded: Set[Secret] = set()
        self._encoded_data: Set[int] = set()

    def maybe_encode(self, obj: Any) -> bool:
        """Encode *obj* if it is a requested secret.

        Returns ``True`` when the object's data was encoded.
        """
        if not isinstance(obj, dict):
            return False

        identity = _secret_identity(obj)
        if identity is None or identity not in self.secrets:
            return False

        if "data" not in obj:
            logger.debug("Secret %s/%s has no data", identity.namespace, identity.name)
            return False
        data = obj["data"]
        if not isinstance(data, dict):
            raise TemplateError('Encountered secret with non-hash "data" field.')

        # A data map shared through a YAML alias is encoded once.
        if id(data) not in self._encoded_data:
            encode_secret_data(data)
            self._encoded_data.add(id(data))
        self.encoded.add(identity)
        logger.debug(
            "Encoded %d data value(s) of secret %s/%s",
            len(data),
            identity.namespace,
            identity.name,
        )
        return True

    def check_complete(self) -> None:
        """Fail unless every requested identity was encoded."""
        if len(self.encoded) != len(self.secrets):
            missing = sorted(
                f"{s.namespace}/{s.name}" for s in self.secrets - self.encoded
            )
            logger.debug("Secrets not found: %s", ", ".join(missing))
            raise TemplateError("Not all secrets specified were found.")

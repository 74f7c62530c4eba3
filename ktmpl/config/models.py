"""Pydantic models for a single ktmpl run.

Defines:
- :class:`RenderOptions` - every input of one render, as gathered by the CLI
- Environment toggles that change a run's defaults
"""

from __future__ import annotations

import os
from typing import List, Optional

from pydantic import BaseModel, Field

#: Read from ``-`` means standard input; write to ``None`` means stdout.
STDIN_MARKER = "-"

ENV_DEBUG = "KTMPL_DEBUG"
ENV_USE_ENV = "KTMPL_USE_ENV"


class RenderOptions(BaseModel):
    """Inputs of one template render.

    Attributes:
        template: Template path, or ``-`` for standard input.
        parameters: ``NAME=VALUE`` plain values.
        base64_parameters: ``NAME=VALUE`` values that are already encoded.
        parameter_files: YAML parameter files, applied in order.
        secrets: ``NAME[=NAMESPACE]`` secrets to encode.
        use_env: Take parameter values from the environment as well.
        output: Output path; ``None`` writes to stdout.
        document_markers: Start every rendered object with ``---``.
    """

    template: str
    parameters: List[str] = Field(default_factory=list)
    base64_parameters: List[str] = Field(default_factory=list)
    parameter_files: List[str] = Field(default_factory=list)
    secrets: List[str] = Field(default_factory=list)
    use_env: bool = False
    output: Optional[str] = None
    document_markers: bool = True

    @property
    def reads_stdin(self) -> bool:
        return self.template == STDIN_MARKER


def _flag(name: str) -> bool:
    return os.environ.get(name, "") == "1"


def is_debug_enabled() -> bool:
    """Check if ``KTMPL_DEBUG`` is set to ``"1"``."""
    return _flag(ENV_DEBUG)


def is_env_source_enabled() -> bool:
    """Check if ``KTMPL_USE_ENV`` is set to ``"1"``."""
    return _flag(ENV_USE_ENV)

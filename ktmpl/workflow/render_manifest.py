"""End-to-end template rendering for the command line.

Execution order:

1. Gather parameter values (environment, parameter files, ``--parameter``,
   ``--base64-parameter``; later sources win).
2. Read the template text from a file or standard input.
3. Build the :class:`~ktmpl.render.template.Template` and process it.
4. Write the rendered manifests to stdout or ``--output``.

Any failure stops the run; partial output is never written.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional, TextIO

from ktmpl import ui
from ktmpl.config.models import RenderOptions, is_env_source_enabled
from ktmpl.errors import TemplateError
from ktmpl.parameters.models import ParameterValues
from ktmpl.parameters.sources import (
    ParameterFile,
    merge_values,
    values_from_env,
    values_from_pairs,
)
from ktmpl.render.secrets import secrets_from_pairs
from ktmpl.render.template import Template

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_TEMPLATE_ERROR = 1
EXIT_INPUT_ERROR = 2


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


def gather_values(
    options: RenderOptions,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ParameterValues:
    """Collect parameter values from every source named in *options*.

    Precedence, lowest first: environment, parameter files in the order
    given, ``--parameter``, ``--base64-parameter``.
    """
    sources = []
    if options.use_env or is_env_source_enabled():
        sources.append(values_from_env(environ if environ is not None else os.environ))
    for path in options.parameter_files:
        sources.append(ParameterFile.from_file(path).parameters)
    sources.append(values_from_pairs(options.parameters))
    sources.append(values_from_pairs(options.base64_parameters, encoded=True))

    values = merge_values(*sources)
    logger.debug("Gathered %d parameter value(s)", len(values))
    return values


def read_template(options: RenderOptions, *, stdin: Optional[TextIO] = None) -> str:
    """Return the template text.

    Raises
    ------
    OSError
        If the template file cannot be read.
    UnicodeDecodeError
        If the template is not valid UTF-8.
    """
    if options.reads_stdin:
        return (stdin if stdin is not None else sys.stdin).read()
    return Path(options.template).read_text(encoding="utf-8")


def write_output(
    text: str, options: RenderOptions, *, stdout: Optional[TextIO] = None
) -> None:
    """Write rendered manifests to ``options.output`` or stdout."""
    if not text.endswith("\n"):
        text += "\n"
    if options.output:
        Path(options.output).write_text(text, encoding="utf-8")
        return
    stream = stdout if stdout is not None else sys.stdout
    stream.write(text)
    stream.flush()


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def render(
    options: RenderOptions,
    *,
    stdin: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Render the template described by *options* and return the YAML text.

    Raises
    ------
    TemplateError
        On any template, parameter or secret problem.
    OSError
        If the template file cannot be read.
    UnicodeDecodeError
        If the template is not valid UTF-8.
    """
    values = gather_values(options, environ=environ)
    secrets = secrets_from_pairs(options.secrets) if options.secrets else None
    contents = read_template(options, stdin=stdin)

    template = Template(contents, values, secrets)
    return template.process(document_markers=options.document_markers)


def run_render_workflow(
    options: RenderOptions,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Render and write the template; return a process exit code."""
    source = "standard input" if options.reads_stdin else options.template
    logger.info("Rendering template from %s", source)
    if options.output:
        ui.step(f"Rendering {source} -> {options.output}")

    try:
        rendered = render(options, stdin=stdin, environ=environ)
    except TemplateError as exc:
        logger.error("Template processing failed: %s", exc)
        ui.error_msg(str(exc))
        return EXIT_TEMPLATE_ERROR
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Cannot read template %s: %s", source, exc)
        ui.error_msg(f"Cannot read template {source}: {exc}")
        return EXIT_INPUT_ERROR

    try:
        write_output(rendered, options, stdout=stdout)
    except OSError as exc:
        logger.error("Cannot write output %s: %s", options.output, exc)
        ui.error_msg(f"Cannot write output {options.output}: {exc}")
        return EXIT_INPUT_ERROR

    if options.output:
        ui.ok(f"Wrote {options.output}")
    return EXIT_SUCCESS

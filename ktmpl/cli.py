"""CLI entry point for ktmpl, built on cli-core-yo.

Provides the ``render`` command, which turns a parameterized Kubernetes
manifest template into manifests ready for ``kubectl apply``.

Usage::

    ktmpl --help
    ktmpl render template.yaml -p DATABASE_SERVICE_NAME=mongo
    ktmpl render template.yaml -f params.yaml -s webapp=default
    cat template.yaml | ktmpl render - --env | kubectl apply -f -
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

import typer
from cli_core_yo.app import create_app
from cli_core_yo.runtime import _reset, initialize
from cli_core_yo.spec import CliSpec, XdgSpec

from ktmpl.config.models import ENV_DEBUG, RenderOptions, is_debug_enabled

# ── App specification ────────────────────────────────────────────────────────

spec = CliSpec(
    prog_name="ktmpl",
    app_display_name="ktmpl",
    dist_name="ktmpl",
    root_help="Produce Kubernetes manifests from parameterized templates.",
    xdg=XdgSpec(app_dir_name="ktmpl"),
)

app = create_app(spec)


# ── Root callback (global options) ───────────────────────────────────────────


@app.callback()
def _root_callback(
    json_flag: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON."
    ),
) -> None:
    """Kubernetes manifest templates."""
    _reset()
    debug = os.environ.get("CLI_CORE_YO_DEBUG") == "1" or is_debug_enabled()
    xdg_paths = app._cli_core_yo_xdg_paths  # type: ignore[attr-defined]
    initialize(spec, xdg_paths, json_mode=json_flag, debug=debug)


# ── render command ───────────────────────────────────────────────────────────


@app.command()
def render(
    template: str = typer.Argument(
        ...,
        help="Path to the template file to be processed, or - for standard input.",
    ),
    parameter: Optional[List[str]] = typer.Option(
        None,
        "--parameter",
        "-p",
        help="Parameter value as NAME=VALUE. Can be specified multiple times.",
    ),
    base64_parameter: Optional[List[str]] = typer.Option(
        None,
        "--base64-parameter",
        "-b",
        help=(
            "Same as --parameter, but the value is already Base64 encoded "
            "and is not encoded again for base64 parameters."
        ),
    ),
    parameter_file: Optional[List[str]] = typer.Option(
        None,
        "--parameter-file",
        "-f",
        help="YAML file of parameter values. Can be specified multiple times.",
    ),
    secret: Optional[List[str]] = typer.Option(
        None,
        "--secret",
        "-s",
        help=(
            "Secret whose data values are Base64 encoded after interpolation, "
            "as NAME=NAMESPACE (namespace defaults to 'default')."
        ),
    ),
    use_env: bool = typer.Option(
        False,
        "--env",
        help="Also take parameter values from environment variables.",
    ),
    output_path: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write manifests to this file instead of standard output.",
    ),
    document_markers: bool = typer.Option(
        True,
        "--document-markers/--no-document-markers",
        help="Start each rendered object with a --- document marker.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help=f"Enable debug logging (same as {ENV_DEBUG}=1).",
    ),
) -> None:
    """Render a template into Kubernetes manifests.

    Exits 0 on success, 1 on a template error, 2 on an unreadable template
    or unwritable output.
    """
    from ktmpl.workflow.render_manifest import run_render_workflow

    if debug or is_debug_enabled():
        logging.basicConfig(level=logging.DEBUG)

    options = RenderOptions(
        template=template,
        parameters=parameter or [],
        base64_parameters=base64_parameter or [],
        parameter_files=parameter_file or [],
        secrets=secret or [],
        use_env=use_env,
        output=output_path,
        document_markers=document_markers,
    )
    rc = run_render_workflow(options)
    raise typer.Exit(rc)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())

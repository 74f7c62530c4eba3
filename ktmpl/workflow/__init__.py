"""Command line rendering workflow."""

from ktmpl.workflow.render_manifest import (
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_TEMPLATE_ERROR,
    gather_values,
    read_template,
    render,
    run_render_workflow,
    write_output,
)

__all__ = [
    "EXIT_INPUT_ERROR",
    "EXIT_SUCCESS",
    "EXIT_TEMPLATE_ERROR",
    "gather_values",
    "read_template",
    "render",
    "run_render_workflow",
    "write_output",
]

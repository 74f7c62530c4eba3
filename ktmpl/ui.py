"""Colorized console output for ktmpl runs.

Thin wrapper around :mod:`rich`.  Status messages go to stderr so that
stdout carries nothing but rendered manifests and can be piped straight
into ``kubectl apply -f -``.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# Shared console; force_terminal=None lets Rich decide.
console = Console(stderr=True, force_terminal=None)

# ── Symbols ────────────────────────────────────────────────────────────────

_PASS = "[bold green]✓[/]"
_ARROW = "[bold cyan]›[/]"

# ── Status lines ───────────────────────────────────────────────────────────


def ok(msg: str) -> None:
    """Green checkmark + message."""
    console.print(f"  {_PASS} {escape(msg)}", highlight=False)


def step(msg: str) -> None:
    """Cyan arrow + action message (in-progress)."""
    console.print(f"  {_ARROW} {escape(msg)}", highlight=False)


def error_msg(msg: str) -> None:
    """Bold red ``Error:`` line (not indented)."""
    console.print(f"[bold red]Error:[/] {escape(msg)}", highlight=False)

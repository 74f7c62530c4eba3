"""Error type raised by every stage of template processing."""

from __future__ import annotations


class TemplateError(ValueError):
    """A terminal failure while building or processing a template.

    The message is human-readable and is what the command line prints
    after ``Error:``.
    """

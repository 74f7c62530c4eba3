#!/usr/bin/env python3
"""Example: render a template from Python instead of the command line.

Usage:
    python examples/render_library.py

Equivalent CLI invocation:
    ktmpl render examples/mongodb-template.yaml \\
        -f examples/mongodb-params.yaml \\
        -p MONGODB_PASSWORD=s3cret \\
        -s mongodb-credentials
"""

import logging
import sys
from pathlib import Path

from ktmpl import Plain, Secret, Template, TemplateError
from ktmpl.parameters import ParameterFile, merge_values

HERE = Path(__file__).parent

logging.basicConfig(level=logging.INFO)


def main() -> int:
    params = ParameterFile.from_file(HERE / "mongodb-params.yaml")
    values = merge_values(params.parameters, {"MONGODB_PASSWORD": Plain("s3cret")})
    contents = (HERE / "mongodb-template.yaml").read_text(encoding="utf-8")

    try:
        template = Template(contents, values, {Secret(name="mongodb-credentials")})
        print(template.process(document_markers=True))
    except TemplateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

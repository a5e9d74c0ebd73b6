"""JSON output utilities for CLI commands with machine-parseable output."""

import json
from typing import Any

from glstack.cli.output import machine_output


def emit_json(data: dict[str, Any]) -> None:
    """Output JSON data to stdout for machine consumption.

    Routes JSON through machine_output() so data lands on stdout while human
    messages stay on stderr. For Pydantic models, call
    model.model_dump(mode="json") before passing the result here.
    """
    machine_output(json.dumps(data, indent=2))

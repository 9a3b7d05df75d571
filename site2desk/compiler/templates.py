"""Jinja2 template rendering for generated application sources.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``site2desk/compiler/templates/`` directory and renders them with the
compiler's context.  Every value that lands inside a JavaScript string
literal goes through the ``js`` filter, so user input can never break out of
the generated code.
"""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the ``.j2`` templates that make up a generated application."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["js"] = _js_literal_filter
        self.env.filters["js_number"] = _js_number_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"main.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

_NUMERIC = re.compile(r"^\s*-?(\d+(\.\d*)?|\.\d+)\s*$")


def _js_literal_filter(value: Any) -> str:
    """Render a Python value as a JavaScript literal (JSON is valid JS)."""
    return json.dumps(value)


def _js_number_filter(value: Any) -> str:
    """Render a dimension verbatim.

    Numbers and numeric strings come out as bare numbers; anything else is
    emitted as a string literal so the generated script still parses.
    """
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, str) and _NUMERIC.match(value):
        return value.strip()
    return json.dumps(str(value))

"""
Template rendering for generated documents (HTML coverage report, POM).

Templates live in the package's templates/ directory. Rendering is strict:
an undefined variable is an error, never an empty string. HTML and XML
templates are autoescaped.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

_env = Environment(
    loader=PackageLoader("build_policy", "templates"),
    autoescape=select_autoescape(enabled_extensions=("html", "xml")),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **context: Any) -> str:
    """Render a packaged template with the given context."""
    return _env.get_template(template_name).render(**context)

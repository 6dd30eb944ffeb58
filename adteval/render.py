"""Markdown output for ``adteval reference``.

Templates live in ``adteval/templates`` and are shipped as package data.
Rendering is plain text: values are type and method signatures, so no
HTML escaping is applied.
"""

import os
from typing import Any

import jinja2

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=jinja2.StrictUndefined,
)


def render(template_name: str, **context: Any) -> str:
    """Render a template from ``adteval/templates``.

    A name the template uses but ``context`` lacks raises
    ``jinja2.UndefinedError`` instead of rendering as blank.
    """
    return _ENV.get_template(template_name).render(**context)

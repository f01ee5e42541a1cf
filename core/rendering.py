"""HTML documents returned to the browser."""

from __future__ import annotations

import re

_RESERVED = re.compile(r'["<&]')
_REPLACEMENTS = {'"': "&quot;", "<": "&lt;", "&": "&amp;"}

_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>waybackinator</title>
  </head>
  <body>
   <p>{content}</p>
  </body>
</html>
"""


def escape_for_html(raw: str) -> str:
    """Replace every ``"``, ``<`` and ``&`` with its character reference."""
    return _RESERVED.sub(lambda m: _REPLACEMENTS[m.group(0)], raw)


def render_success(archive_url: str) -> str:
    escaped = escape_for_html(archive_url)
    return _PAGE.format(content=f'<a href="{escaped}">{escaped}</a>')


def render_error(message: str) -> str:
    return _PAGE.format(content=escape_for_html(message))

"""Statement placeholder rewriting.

Statements are written once with ``:name`` placeholders. SQLite binds them
directly; pyformat drivers such as psycopg need ``%(name)s`` and treat every
other ``%`` as a format directive, so those are doubled.
"""

from __future__ import annotations

import re
from functools import lru_cache

_TOKEN = re.compile(
    r"""
    (?P<literal>'(?:[^'\\]|\\.)*')
    | (?P<cast>::)
    | (?<![\w:]):(?P<name>[A-Za-z_]\w*)
    | (?P<percent>%)
    """,
    re.VERBOSE,
)


def normalize_params(sql: str, paramstyle: str) -> str:
    """Rewrite ``:name`` placeholders for a driver's paramstyle.

    Only ``pyformat`` needs rewriting; any other style gets ``sql`` back
    unchanged. Quoted literals and ``::type`` casts are never treated as
    placeholders.
    """
    if paramstyle != "pyformat":
        return sql
    return _to_pyformat(sql)


@lru_cache(maxsize=256)
def _to_pyformat(sql: str) -> str:
    return _TOKEN.sub(_rewrite_token, sql)


def _rewrite_token(match: re.Match[str]) -> str:
    literal = match.group("literal")
    if literal is not None:
        return literal.replace("%", "%%")
    name = match.group("name")
    if name is not None:
        return f"%({name})s"
    if match.group("percent") is not None:
        return "%%"
    return match.group()

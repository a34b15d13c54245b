"""
Placeholder translation for executors whose driver does not speak `$n`.

psycopg expects `%s` (pyformat), DB-API drivers such as the Sybase/ODBC family
expect `?` (qmark). Both styles are positional by appearance, so parameters
are re-ordered to follow the order in which placeholders occur in the text.
"""

from __future__ import annotations

import re
from typing import Any, List, Sequence, Tuple

from hftools.errors import ExecutionError

_DOLLAR = re.compile(r"\$(\d+)")

STYLES = {"pyformat": "%s", "qmark": "?"}


def translate_placeholders(
    sql: str, params: Sequence[Any], style: str = "pyformat"
) -> Tuple[str, List[Any]]:
    """
    Rewrite `$n` placeholders to `style` and order `params` to match.

    Raises
    ------
    ExecutionError
        If the style is unknown or a placeholder references a missing parameter.
    """
    try:
        marker = STYLES[style]
    except KeyError:
        raise ExecutionError(f"unknown placeholder style '{style}'") from None

    ordered: List[Any] = []
    text = sql.replace("%", "%%") if style == "pyformat" else sql

    def _swap(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if not 1 <= index <= len(params):
            raise ExecutionError(
                f"placeholder ${index} has no parameter ({len(params)} supplied)"
            )
        ordered.append(params[index - 1])
        return marker

    return _DOLLAR.sub(_swap, text), ordered


__all__ = ["STYLES", "translate_placeholders"]

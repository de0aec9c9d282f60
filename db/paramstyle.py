"""
Positional placeholder translation.

Requests always bind parameters with `?`. Drivers using the `format`
paramstyle (aiomysql / PyMySQL) expect `%s` and run the whole statement
through `%`-formatting, so literal percent signs must be doubled too.
"""
from __future__ import annotations

from typing import List


QMARK = "qmark"
FORMAT = "format"


def _find_quote_end(query: str, start: int, quote: str) -> int:
    """Return the index just past the closing `quote` for a literal opened at `start`."""
    i = start + 1
    n = len(query)
    while i < n:
        ch = query[i]
        if ch == "\\" and quote != "`":
            i += 2
            continue
        if ch == quote:
            # Doubled quote is an escaped quote inside the literal.
            if i + 1 < n and query[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return n


def _is_dash_comment(query: str, i: int) -> bool:
    # MySQL only treats `--` as a comment when followed by whitespace or end of input.
    if not query.startswith("--", i):
        return False
    return i + 2 >= len(query) or query[i + 2].isspace()


def _find_line_end(query: str, start: int) -> int:
    end = query.find("\n", start)
    return len(query) if end == -1 else end + 1


def _find_block_comment_end(query: str, start: int) -> int:
    end = query.find("*/", start + 2)
    return len(query) if end == -1 else end + 2


def qmark_to_format(query: str) -> str:
    """
    Rewrite `?` placeholders as `%s` and escape `%` as `%%`.

    Placeholders inside string literals, quoted identifiers and comments are
    left alone; percent signs are escaped everywhere since the driver formats
    the entire statement.
    """
    out: List[str] = []
    i = 0
    n = len(query)
    while i < n:
        ch = query[i]
        if ch in ("'", '"', "`"):
            end = _find_quote_end(query, i, ch)
            out.append(query[i:end].replace("%", "%%"))
            i = end
            continue
        if ch == "#" or _is_dash_comment(query, i):
            end = _find_line_end(query, i)
            out.append(query[i:end].replace("%", "%%"))
            i = end
            continue
        if ch == "/" and query.startswith("/*", i):
            end = _find_block_comment_end(query, i)
            out.append(query[i:end].replace("%", "%%"))
            i = end
            continue
        if ch == "?":
            out.append("%s")
        elif ch == "%":
            out.append("%%")
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def translate(query: str, paramstyle: str) -> str:
    if paramstyle == FORMAT:
        return qmark_to_format(query)
    if paramstyle == QMARK:
        return query
    raise ValueError(f"Unsupported paramstyle: {paramstyle}")

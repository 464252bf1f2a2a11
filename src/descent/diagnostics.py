"""Render a ParseError as a caret-annotated diagnostic.

Example for ``2*-3``::

    Invalid syntax at line 1, col 3 (position 2)
      2*-3
        ^
    Unary '-' must be parenthesized after '*'
    Write it as * (-...) instead.
"""

from __future__ import annotations

import traceback
from typing import List, Optional

from .errors import ParseError
from .utils import debug_py_trace_enabled

INDENT = "  "


def source_line(source: str, pos: int) -> tuple[str, int]:
    """Return the line containing ``pos`` and the offset of ``pos`` within it."""
    start = source.rfind("\n", 0, pos) + 1
    end = source.find("\n", pos)
    if end == -1:
        end = len(source)
    return source[start:end], pos - start


def caret_line(line: str, offset: int, width: int) -> str:
    # Keep tabs so the caret lines up with the echoed source.
    pad = "".join("\t" if ch == "\t" else " " for ch in line[:offset])
    return pad + "^" * max(1, width)


def format_diagnostic(source: str, err: ParseError, trace: Optional[bool] = None) -> str:
    token = err.token
    line, offset = source_line(source, token.pos)

    lines: List[str] = [
        f"{err.title} at line {token.line}, col {token.column} (position {token.pos})",
        INDENT + line,
        INDENT + caret_line(line, offset, token.length),
        err.message,
    ]
    if err.continuation:
        lines.append(err.continuation)

    if trace is None:
        trace = debug_py_trace_enabled()
    if trace and err.__traceback__ is not None:
        lines.append("")
        lines.append("Python traceback:")
        lines.append("".join(traceback.format_tb(err.__traceback__)).rstrip("\n"))

    return "\n".join(lines)

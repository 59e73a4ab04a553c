from __future__ import annotations

import click

from .errors import PatternError


def highlight(source: str, start: int, end: int, *, color: bool = False) -> str:
    """
    两行输出：源文本 + 标记行，``^`` 指向出错区间（至少一个）。
    """
    start = max(0, min(start, len(source)))
    end = max(start, min(end, len(source)))
    head, span, tail = source[:start], source[start:end], source[end:]
    markers = "^" * max(1, len(span))
    if color:
        span = click.style(span, fg="red", bold=True) if span else span
        markers = click.style(markers, fg="red", bold=True)
    return f"{head}{span}{tail}\n{' ' * len(head)}{markers}"


def format_error(error: PatternError, source: str, *, color: bool = False) -> str:
    message = click.style(error.message, fg="red") if color else error.message
    if error.start is None:
        return message
    return f"{message}\n\n{highlight(source, error.start, error.end, color=color)}"

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union

from .config import ParseConfig
from .errors import TemplateSyntaxError


@dataclass(frozen=True)
class LiteralToken:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class ChainToken:
    text: str  # raw text between the braces, escapes still in place
    start: int  # position of the opening brace
    end: int  # position after the closing brace


Token = Union[LiteralToken, ChainToken]


def _scan_chain(text: str, open_pos: int, config: ParseConfig) -> int:
    """Return the index of the brace closing the chain opened at ``open_pos``."""
    i = open_pos + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == config.escape:
            if i + 1 >= n:
                raise TemplateSyntaxError("Expected a character after escape", ch, i, i + 1)
            i += 2
            continue
        if ch == config.expr_end:
            return i
        if ch == config.expr_start:
            raise TemplateSyntaxError("Filter chains cannot be nested", ch, i, i + 1)
        i += 1
    raise TemplateSyntaxError(f"Unmatched '{config.expr_start}'", config.expr_start, open_pos, open_pos + 1)


def split(text: str, config: Optional[ParseConfig] = None) -> List[Token]:
    """
    Split template text into literal text and ``{...}`` filter chains.

    Outside a chain a doubled brace (``{{`` / ``}}``) is a literal brace.
    Inside a chain the escape character protects the next character; escapes are
    resolved later by the filter parser.
    """
    config = config or ParseConfig.default()
    tokens: List[Token] = []
    buf: List[str] = []
    lit_start = 0
    i = 0
    n = len(text)

    def flush(end: int) -> None:
        if buf:
            tokens.append(LiteralToken("".join(buf), lit_start, end))
            buf.clear()

    while i < n:
        ch = text[i]
        if ch in (config.expr_start, config.expr_end) and i + 1 < n and text[i + 1] == ch:
            if not buf:
                lit_start = i
            buf.append(ch)
            i += 2
        elif ch == config.expr_start:
            flush(i)
            close = _scan_chain(text, i, config)
            tokens.append(ChainToken(text[i + 1:close], i, close + 1))
            i = close + 1
        elif ch == config.expr_end:
            raise TemplateSyntaxError(f"Unmatched '{config.expr_end}'", ch, i, i + 1)
        else:
            if not buf:
                lit_start = i
            buf.append(ch)
            i += 1
    flush(n)
    return tokens

from __future__ import annotations
import logging
import re
from typing import Callable, Dict, List, NamedTuple, Optional

from .config import ParseConfig
from .errors import PatternError, TemplateSyntaxError, UnknownFilterError
from .lexer import ChainToken, split
from .models import (
    BaseName, Extension, FileName, Filter, FilterChain, Literal, Lowercase, Pad, ParentPath,
    ParsedFilter, RegexMatch, RegexReplace, RemoveNonAscii, Replace, ReplaceEmpty, Segment,
    Substring, Template, ToEnd, ToIndex, ToLength, Transliterate, Trim, Uppercase,
)

logger = logging.getLogger(__name__)

# filter 语法速查（顺序即帮助输出顺序）
FILTER_REFERENCE: Dict[str, str] = {
    "#A-B": "Substring from index A to index B (1-based, negative counts from the end).",
    "#A+L": "Substring from index A of length L.",
    "#A-": "Substring from index A to the end.",
    "#A": "Character at index A.",
    "t": "Trim leading/trailing whitespace.",
    "v": "Transform value to lowercase.",
    "^": "Transform value to uppercase.",
    "i": "Transliterate non-ASCII characters to ASCII.",
    "I": "Remove non-ASCII characters.",
    "d": "Parent path of the value ('root/dir/file.ext' -> 'root/dir').",
    "f": "File name ('file.ext').",
    "b": "Base name, the file name without extension ('file').",
    "e": "Extension ('ext').",
    "E": "Extension with dot ('.ext').",
    "<<M": "Left pad with mask M (up to the mask length).",
    ">>M": "Right pad with mask M (up to the mask length).",
    "<N:M": "Left pad with N characters of repeated mask M.",
    ">N:M": "Right pad with N characters of repeated mask M.",
    "r:X:Y": "Replace first occurrence of X with Y (any delimiter).",
    "R:X:Y": "Replace all occurrences of X with Y (any delimiter).",
    "?D": "Replace empty value with D.",
    "=E": "First match of regular expression E.",
    "s:E:Y": "Replace first match of regular expression E with Y.",
    "S:E:Y": "Replace all matches of regular expression E with Y.",
}

_SUBSTRING_RE = re.compile(r"#(?P<start>-?[0-9]+)(?:(?P<op>[-+])(?P<end>-?[0-9]*))?")
_DIGITS_RE = re.compile(r"[0-9]+")


class _Piece(NamedTuple):
    text: str  # escapes resolved
    positions: List[int]  # source position of each character in text
    start: int
    end: int

    def at(self, index: int) -> int:
        if index < len(self.positions):
            return self.positions[index]
        return self.end

    def error(self, cls, message: str, first: int, last: Optional[int] = None) -> PatternError:
        last = len(self.text) if last is None else last
        return cls(message, self.text[first:last] or self.text, self.at(first), self.at(last))


def _split_chain(token: ChainToken, config: ParseConfig) -> List[_Piece]:
    offset = token.start + 1
    raw = token.text
    pieces: List[_Piece] = []
    chars: List[str] = []
    positions: List[int] = []
    piece_start = offset
    special = (config.escape, config.separator, config.expr_start, config.expr_end)
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == config.escape:
            if i + 1 >= len(raw):
                raise TemplateSyntaxError("Expected a character after escape", ch, offset + i, offset + i + 1)
            nxt = raw[i + 1]
            if nxt in special:
                chars.append(nxt)
                positions.append(offset + i + 1)
            else:
                # 非语法字符前的转义符原样保留（如正则里的 \d）
                chars.extend((ch, nxt))
                positions.extend((offset + i, offset + i + 1))
            i += 2
        elif ch == config.separator:
            pieces.append(_Piece("".join(chars), positions, piece_start, offset + i))
            chars, positions = [], []
            piece_start = offset + i + 1
            i += 1
        else:
            chars.append(ch)
            positions.append(offset + i)
            i += 1
    pieces.append(_Piece("".join(chars), positions, piece_start, offset + len(raw)))
    return pieces


def _parse_index(piece: _Piece, digits: str, first: int, what: str) -> int:
    value = int(digits)
    if value == 0:
        raise piece.error(TemplateSyntaxError, f"{what} must not be zero", first, first + len(digits))
    return value


def _parse_substring(piece: _Piece) -> Filter:
    m = _SUBSTRING_RE.fullmatch(piece.text)
    if not m:
        raise piece.error(TemplateSyntaxError, "Invalid substring range, expected #A, #A-B, #A+L or #A-", 0)
    start_text = m.group("start")
    start = _parse_index(piece, start_text.lstrip("-"), m.start("start") + start_text.startswith("-"), "Index")
    if start_text.startswith("-"):
        start = -start
    op = m.group("op")
    if op is None:
        return Substring(start)

    end_text = m.group("end")
    end_first = m.start("end")
    if op == "+":
        if not end_text:
            raise piece.error(TemplateSyntaxError, "Expected a length after '+'", m.start("op"))
        if end_text.startswith("-"):
            raise piece.error(TemplateSyntaxError, "Length must be positive", end_first)
        return Substring(start, ToLength(_parse_index(piece, end_text, end_first, "Length")))

    if not end_text:
        return Substring(start, ToEnd())
    if end_text == "-":
        raise piece.error(TemplateSyntaxError, "Expected an index after '-'", end_first)
    negative = end_text.startswith("-")
    digits = end_text.lstrip("-")
    end = _parse_index(piece, digits, end_first + negative, "Index")
    # 起点为负数时，未写符号的终点沿用起点方向（从末尾倒数）
    if negative or start < 0:
        end = -end
    return Substring(start, ToIndex(end))


def _fixed(cls, **kwargs) -> Callable[[_Piece], Filter]:
    def parse(piece: _Piece) -> Filter:
        if len(piece.text) > 1:
            raise piece.error(TemplateSyntaxError,
                              f"Unexpected characters after filter '{piece.text[0]}'", 1)
        return cls(**kwargs)

    return parse


def _parse_pad(piece: _Piece) -> Filter:
    symbol = piece.text[0]
    side = "left" if symbol == "<" else "right"
    rest = piece.text[1:]
    if rest.startswith(symbol):
        mask = rest[1:]
        if not mask:
            raise piece.error(TemplateSyntaxError, "Padding mask must not be empty", 0)
        return Pad(side, mask)

    m = _DIGITS_RE.match(rest)
    if not m:
        raise piece.error(TemplateSyntaxError,
                          f"Expected '{symbol}' or a count after '{symbol}'", 1)
    count = int(m.group(0))
    if count == 0:
        raise piece.error(TemplateSyntaxError, "Padding count must be positive", 1, 1 + m.end())
    delim_at = 1 + m.end()
    if delim_at >= len(piece.text):
        raise piece.error(TemplateSyntaxError, "Expected a delimiter after padding count", delim_at)
    mask = piece.text[delim_at + 1:]
    if not mask:
        raise piece.error(TemplateSyntaxError, "Padding mask must not be empty", delim_at)
    return Pad(side, mask, count)


def _split_substitution(piece: _Piece) -> tuple:
    if len(piece.text) < 2:
        raise piece.error(TemplateSyntaxError,
                          f"Expected a delimiter after filter '{piece.text[0]}'", 1)
    delim = piece.text[1]
    body = piece.text[2:]
    if delim in body:
        target, replacement = body.split(delim, 1)
    else:
        target, replacement = body, ""
    if not target:
        raise piece.error(TemplateSyntaxError, "Substitution target must not be empty", 1)
    return target, replacement


def _compile_regex(piece: _Piece, source: str, first: int) -> re.Pattern:
    try:
        return re.compile(source)
    except re.error as e:
        raise piece.error(TemplateSyntaxError, f"Invalid regular expression: {e.msg}",
                          first, first + len(source))


def _parse_replace(piece: _Piece) -> Filter:
    target, replacement = _split_substitution(piece)
    return Replace(target, replacement, all=piece.text[0] == "R")


def _parse_replace_empty(piece: _Piece) -> Filter:
    return ReplaceEmpty(piece.text[1:])


def _parse_regex_match(piece: _Piece) -> Filter:
    if len(piece.text) < 2:
        raise piece.error(TemplateSyntaxError, "Expected a regular expression after '='", 1)
    return RegexMatch(_compile_regex(piece, piece.text[1:], 1))


def _parse_regex_replace(piece: _Piece) -> Filter:
    target, replacement = _split_substitution(piece)
    pattern = _compile_regex(piece, target, 2)
    try:
        # 预先校验替换模板（组引用等），保证求值阶段不会失败
        pattern.sub(replacement, "")
    except (re.error, IndexError) as e:  # 未知组名抛出 IndexError
        first = 3 + len(target)
        reason = getattr(e, "msg", None) or str(e)
        raise piece.error(TemplateSyntaxError, f"Invalid replacement: {reason}", min(first, len(piece.text)))
    return RegexReplace(pattern, replacement, all=piece.text[0] == "S")


_PARSERS: Dict[str, Callable[[_Piece], Filter]] = {
    "#": _parse_substring,
    "t": _fixed(Trim),
    "v": _fixed(Lowercase),
    "^": _fixed(Uppercase),
    "i": _fixed(Transliterate),
    "I": _fixed(RemoveNonAscii),
    "d": _fixed(ParentPath),
    "f": _fixed(FileName),
    "b": _fixed(BaseName),
    "e": _fixed(Extension),
    "E": _fixed(Extension, with_dot=True),
    "<": _parse_pad,
    ">": _parse_pad,
    "r": _parse_replace,
    "R": _parse_replace,
    "?": _parse_replace_empty,
    "=": _parse_regex_match,
    "s": _parse_regex_replace,
    "S": _parse_regex_replace,
}


def parse_filter(piece: _Piece) -> ParsedFilter:
    if not piece.text:
        raise TemplateSyntaxError("Expected a filter", "", piece.start, piece.end)
    parser = _PARSERS.get(piece.text[0])
    if parser is None:
        logger.debug("unknown filter symbol %r at %d", piece.text[0], piece.at(0))
        raise piece.error(UnknownFilterError, f"Unknown filter '{piece.text[0]}'", 0, 1)
    return ParsedFilter(parser(piece), piece.start, piece.end)


def parse_chain(token: ChainToken, config: Optional[ParseConfig] = None) -> FilterChain:
    config = config or ParseConfig.default()
    if not token.text:
        return FilterChain((), token.start, token.end)
    filters = tuple(parse_filter(p) for p in _split_chain(token, config))
    return FilterChain(filters, token.start, token.end)


def parse_filters(text: str, config: Optional[ParseConfig] = None) -> FilterChain:
    """
    Parse the inside of one ``{...}`` group, e.g. ``t|v|#1-3``.
    Positions in the result (and in errors) are relative to ``text``.
    """
    config = config or ParseConfig.default()
    token = ChainToken(text, -1, len(text) + 1)
    return parse_chain(token, config)


def compile_template(text: str, config: Optional[ParseConfig] = None) -> Template:
    config = config or ParseConfig.default()
    segments: List[Segment] = []
    for token in split(text, config):
        if isinstance(token, ChainToken):
            segments.append(parse_chain(token, config))
        else:
            segments.append(Literal(token.text, token.start, token.end))
    return Template(text, tuple(segments))

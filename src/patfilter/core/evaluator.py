from __future__ import annotations
from pathlib import PurePosixPath
from typing import Callable, Dict, Optional, Tuple

from .models import (
    BaseName, EndSpec, Extension, FileName, Filter, Lowercase, Pad, ParentPath, RegexMatch,
    RegexReplace, RemoveNonAscii, Replace, ReplaceEmpty, Side, Substring, ToIndex, ToLength,
    Transliterate, Trim, Uppercase,
)
from .tables import DEFAULT_TABLES, WHITESPACE, CharTables


def effective_position(index: int, length: int) -> int:
    """1-based position of a signed index; ``-1`` is the last character."""
    if index >= 1:
        return index
    return length + index + 1


def _substring_bounds(start: int, end: EndSpec, length: int) -> Tuple[int, int]:
    first = effective_position(start, length)
    if start < 0:
        # 负数起点：范围从起点向字符串开头方向延伸
        if end is None:
            return first, first
        if isinstance(end, ToIndex):
            return effective_position(end.index, length), first
        if isinstance(end, ToLength):
            return first - end.length + 1, first
        return 1, first

    if end is None:
        return first, first
    if isinstance(end, ToIndex):
        return first, effective_position(end.index, length)
    if isinstance(end, ToLength):
        return first, first + end.length - 1
    return first, length


def substring(value: str, start: int, end: EndSpec = None) -> str:
    length = len(value)
    if length == 0:
        return ""
    lo, hi = _substring_bounds(start, end, length)
    lo = min(max(lo, 1), length)
    hi = min(max(hi, 1), length)
    if lo > hi:
        return ""
    return value[lo - 1:hi]


def pad(value: str, side: Side, mask: str, count: Optional[int] = None) -> str:
    if count is None:
        need = max(0, len(mask) - len(value))
    else:
        need = count
    if need <= 0 or not mask:
        return value
    reps = -(-need // len(mask))
    repeated = mask * reps
    if side == "left":
        return repeated[:need] + value
    return value + repeated[len(repeated) - need:]


def remove_non_ascii(value: str) -> str:
    return "".join(ch for ch in value if ord(ch) < 128)


# 路径过滤器只做字符串处理，不访问文件系统
def parent_path(value: str) -> str:
    if "/" not in value:
        return ""
    p = PurePosixPath(value)
    if p.parent == p:
        return ""
    return str(p.parent)


def extension(value: str, with_dot: bool = False) -> str:
    suffix = PurePosixPath(value).suffix
    return suffix if with_dot else suffix[1:]


class Evaluator:
    """Applies single filters to strings. Holds no mutable state."""

    def __init__(self, tables: CharTables = DEFAULT_TABLES):
        self.tables = tables
        self._handlers: Dict[type, Callable[[Filter, str], str]] = {
            Substring: lambda f, v: substring(v, f.start, f.end),
            Trim: lambda f, v: v.strip(WHITESPACE),
            Lowercase: lambda f, v: v.lower(),
            Uppercase: lambda f, v: v.upper(),
            Transliterate: lambda f, v: self.transliterate(v),
            RemoveNonAscii: lambda f, v: remove_non_ascii(v),
            ParentPath: lambda f, v: parent_path(v),
            FileName: lambda f, v: PurePosixPath(v).name,
            BaseName: lambda f, v: PurePosixPath(v).stem,
            Extension: lambda f, v: extension(v, f.with_dot),
            Pad: lambda f, v: pad(v, f.side, f.mask, f.count),
            Replace: self._replace,
            ReplaceEmpty: lambda f, v: v or f.replacement,
            RegexMatch: self._regex_match,
            RegexReplace: lambda f, v: f.pattern.sub(f.replacement, v, count=0 if f.all else 1),
        }

    def transliterate(self, value: str) -> str:
        return "".join(self.tables.to_ascii(ch) for ch in value)

    @staticmethod
    def _replace(f: Replace, value: str) -> str:
        if f.all:
            return value.replace(f.target, f.replacement)
        return value.replace(f.target, f.replacement, 1)

    @staticmethod
    def _regex_match(f: RegexMatch, value: str) -> str:
        m = f.pattern.search(value)
        return m.group(0) if m else ""

    def evaluate(self, flt: Filter, value: str) -> str:
        handler = self._handlers.get(type(flt))
        if handler is None:
            raise TypeError(f"Unsupported filter: {flt!r}")
        return handler(flt, value)


DEFAULT_EVALUATOR = Evaluator()

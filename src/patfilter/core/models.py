from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Literal as TypingLiteral, Optional, Tuple, Union

Side = TypingLiteral["left", "right"]


# ---- substring end specs ----

@dataclass(frozen=True)
class ToIndex:
    index: int  # signed, 1-based, never 0


@dataclass(frozen=True)
class ToLength:
    length: int  # positive


@dataclass(frozen=True)
class ToEnd:
    pass


EndSpec = Optional[Union[ToIndex, ToLength, ToEnd]]  # None: single character at start


# ---- filters ----

@dataclass(frozen=True)
class Substring:
    start: int
    end: EndSpec = None

    @property
    def backward(self) -> bool:
        return self.start < 0

    def describe(self) -> str:
        direction = " (backward)" if self.backward else ""
        first = abs(self.start)
        if self.end is None:
            return f"Character{direction} at {first}"
        if isinstance(self.end, ToIndex):
            last = abs(self.end.index) if self.backward else self.end.index
            return f"Substring{direction} from {first} to {last}"
        if isinstance(self.end, ToLength):
            return f"Substring{direction} from {first} of length {self.end.length}"
        return f"Substring{direction} from {first} to end"


@dataclass(frozen=True)
class Trim:
    def describe(self) -> str:
        return "Trim"


@dataclass(frozen=True)
class Lowercase:
    def describe(self) -> str:
        return "To lowercase"


@dataclass(frozen=True)
class Uppercase:
    def describe(self) -> str:
        return "To uppercase"


@dataclass(frozen=True)
class Transliterate:
    def describe(self) -> str:
        return "To ASCII"


@dataclass(frozen=True)
class RemoveNonAscii:
    def describe(self) -> str:
        return "Remove non-ASCII"


@dataclass(frozen=True)
class ParentPath:
    def describe(self) -> str:
        return "Parent path"


@dataclass(frozen=True)
class FileName:
    def describe(self) -> str:
        return "File name"


@dataclass(frozen=True)
class BaseName:
    def describe(self) -> str:
        return "Base name"


@dataclass(frozen=True)
class Extension:
    with_dot: bool = False

    def describe(self) -> str:
        return "Extension with dot" if self.with_dot else "Extension"


@dataclass(frozen=True)
class Pad:
    side: Side
    mask: str
    count: Optional[int] = None  # None: pad up to len(mask)

    def describe(self) -> str:
        side = "Left" if self.side == "left" else "Right"
        if self.count is None:
            return f"{side} pad with '{self.mask}'"
        return f"{side} pad {self.count} characters of '{self.mask}'"


@dataclass(frozen=True)
class Replace:
    target: str
    replacement: str = ""
    all: bool = False

    def describe(self) -> str:
        which = "all" if self.all else "first"
        return f"Replace {which} '{self.target}' by '{self.replacement}'"


@dataclass(frozen=True)
class ReplaceEmpty:
    replacement: str

    def describe(self) -> str:
        return f"Replace empty with '{self.replacement}'"


@dataclass(frozen=True)
class RegexMatch:
    pattern: re.Pattern

    def describe(self) -> str:
        return f"Regular expression '{self.pattern.pattern}' match"


@dataclass(frozen=True)
class RegexReplace:
    pattern: re.Pattern
    replacement: str = ""
    all: bool = False

    def describe(self) -> str:
        which = "all regular expressions" if self.all else "first regular expression"
        return f"Replace {which} '{self.pattern.pattern}' by '{self.replacement}'"


Filter = Union[
    Substring, Trim, Lowercase, Uppercase, Transliterate, RemoveNonAscii,
    ParentPath, FileName, BaseName, Extension,
    Pad, Replace, ReplaceEmpty, RegexMatch, RegexReplace,
]


@dataclass(frozen=True)
class ParsedFilter:
    filter: Filter
    start: int  # 在模板源文本中的位置
    end: int


# ---- template segments ----

@dataclass(frozen=True)
class Literal:
    text: str
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class FilterChain:
    filters: Tuple[ParsedFilter, ...] = ()
    start: int = 0  # position of the opening brace
    end: int = 0  # position after the closing brace


Segment = Union[Literal, FilterChain]


@dataclass(frozen=True)
class Template:
    source: str
    segments: Tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def chains(self) -> Tuple[FilterChain, ...]:
        return tuple(s for s in self.segments if isinstance(s, FilterChain))

    def filter_count(self) -> int:
        return sum(len(c.filters) for c in self.chains)

from __future__ import annotations
import unicodedata
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# 没有规范分解（NFD 之后仍不是 ASCII）的常见字符
_ASCII_SPECIAL_CASES = {
    "ß": "ss", "ẞ": "SS",
    "Æ": "AE", "æ": "ae",
    "Œ": "OE", "œ": "oe",
    "Ø": "O", "ø": "o",
    "Đ": "D", "đ": "d",
    "Ð": "D", "ð": "d",
    "Ł": "L", "ł": "l",
    "Þ": "TH", "þ": "th",
    "Ħ": "H", "ħ": "h",
    "ı": "i",
    "ﬀ": "ff", "ﬁ": "fi", "ﬂ": "fl", "ﬃ": "ffi", "ﬄ": "ffl",
    "‘": "'", "’": "'", "‚": "'", "‛": "'",
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "«": '"', "»": '"',
    "–": "-", "—": "-", "−": "-",
}

# Unicode White_Space 码点；str.strip() 还会去掉 \x1c-\x1f
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


@dataclass(frozen=True)
class CharTables:
    """
    Read-only character data shared by every evaluator.

    Case mapping uses Python's built-in Unicode database (``str.lower`` /
    ``str.upper``); only transliteration needs extra data.
    """
    ascii_special_cases: Mapping[str, str]

    def to_ascii(self, ch: str) -> str:
        if ord(ch) < 128:
            return ch
        special = self.ascii_special_cases.get(ch)
        if special is not None:
            return special
        # 分解后丢弃组合符号等非 ASCII 部分；无法分解到 ASCII 的字符直接删除
        return "".join(c for c in unicodedata.normalize("NFD", ch) if ord(c) < 128)


def build_tables() -> CharTables:
    return CharTables(ascii_special_cases=MappingProxyType(dict(_ASCII_SPECIAL_CASES)))


DEFAULT_TABLES = build_tables()

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ParseConfig:
    expr_start: str = "{"  # opens a filter chain
    expr_end: str = "}"  # closes a filter chain
    separator: str = "|"  # separates filters inside a chain
    escape: str = "\\"  # makes the next character literal inside a chain

    def __post_init__(self):
        chars = {
            "expr_start": self.expr_start,
            "expr_end": self.expr_end,
            "separator": self.separator,
            "escape": self.escape,
        }
        for name, ch in chars.items():
            if not isinstance(ch, str) or len(ch) != 1:
                raise ValueError(f"{name} must be a single character, got: {ch!r}")
        if len(set(chars.values())) != len(chars):
            raise ValueError(f"syntax characters must be distinct, got: {sorted(chars.values())}")

    @classmethod
    def default(cls) -> "ParseConfig":
        return _DEFAULT


_DEFAULT = ParseConfig()

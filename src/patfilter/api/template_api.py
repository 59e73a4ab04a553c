from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from ..core.config import ParseConfig
from ..core.models import FilterChain, Template
from ..core.parser import compile_template
from ..core.runner import run, run_many

logger = logging.getLogger(__name__)


def compile(text: str, *, config: Optional[ParseConfig] = None) -> Template:
    template = compile_template(text, config)
    logger.debug("compiled template %r: %d segments, %d filters",
                 text, len(template.segments), template.filter_count())
    return template


def apply(template: Template, value: str) -> str:
    return run(template, value)


def apply_all(template: Template, values: Iterable[str]) -> List[str]:
    return run_many(template, values)


def render(text: str, value: str, *, config: Optional[ParseConfig] = None) -> str:
    return apply(compile(text, config=config), value)


def explain(template: Template) -> List[Tuple[str, str]]:
    """
    Describe a compiled template part by part.
    Returns ``(source fragment, description)`` pairs in template order.
    """
    src = template.source
    out: List[Tuple[str, str]] = []
    for seg in template.segments:
        if not isinstance(seg, FilterChain):
            out.append((src[seg.start:seg.end], f"Constant '{seg.text}'"))
        elif not seg.filters:
            out.append((src[seg.start:seg.end], "Input value"))
        else:
            for parsed in seg.filters:
                out.append((src[parsed.start:parsed.end], parsed.filter.describe()))
    return out

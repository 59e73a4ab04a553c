from typing import Iterable, List, Optional

from .evaluator import DEFAULT_EVALUATOR, Evaluator
from .models import FilterChain, Template


def run_chain(chain: FilterChain, value: str, evaluator: Evaluator = DEFAULT_EVALUATOR) -> str:
    for parsed in chain.filters:
        value = evaluator.evaluate(parsed.filter, value)
    return value


def run(template: Template, value: str, evaluator: Optional[Evaluator] = None) -> str:
    evaluator = evaluator or DEFAULT_EVALUATOR
    parts: List[str] = []
    for seg in template.segments:
        if isinstance(seg, FilterChain):
            parts.append(run_chain(seg, value, evaluator))
        else:
            parts.append(seg.text)
    return "".join(parts)


def run_many(template: Template, values: Iterable[str], evaluator: Optional[Evaluator] = None) -> List[str]:
    return [run(template, v, evaluator) for v in values]

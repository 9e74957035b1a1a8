from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union


@dataclass(frozen=True)
class Violation:
    """One failed rule: code, context bag and dotted path to the field."""

    type: str
    context: Dict[str, Any] = field(default_factory=dict)
    path: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "context": dict(self.context), "path": self.path}


RuleResult = Optional[Union[Violation, Iterable[Violation]]]


def flatten(result: RuleResult) -> List[Violation]:
    """Normalize a rule result (None, one violation, or several) to a list."""
    if result is None:
        return []
    if isinstance(result, Violation):
        return [result]
    return [item for item in result if item is not None]

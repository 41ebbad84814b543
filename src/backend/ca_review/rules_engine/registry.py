from __future__ import annotations

from typing import Dict, Iterable, List, Type

from .models import ReviewSection
from .rule import Rule


class RuleRegistry:
    """Rule classes keyed by rule_id, kept in registration order."""

    def __init__(self):
        self._rules: Dict[str, Type[Rule]] = {}

    def register(self, rule_cls: Type[Rule]) -> None:
        rule_id = getattr(rule_cls, "rule_id", None)
        if not rule_id:
            raise ValueError("Rule class missing rule_id")
        if not isinstance(getattr(rule_cls, "section", None), ReviewSection):
            raise ValueError(f"Rule {rule_id} must declare a ReviewSection")
        if rule_id in self._rules:
            raise ValueError(f"Duplicate rule_id registered: {rule_id}")
        self._rules[rule_id] = rule_cls

    def create_all(self) -> list[Rule]:
        return [cls() for cls in self._rules.values()]

    def get(self, rule_id: str) -> Type[Rule]:
        return self._rules[rule_id]

    def ids(self) -> Iterable[str]:
        return self._rules.keys()

    def ids_for_section(self, section: ReviewSection) -> List[str]:
        return [rule_id for rule_id, cls in self._rules.items() if cls.section == section]


registry = RuleRegistry()


def register_rule(rule_cls: Type[Rule]) -> Type[Rule]:
    registry.register(rule_cls)
    return rule_cls

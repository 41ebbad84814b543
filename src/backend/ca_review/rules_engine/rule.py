from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Tuple, Type

from pydantic import BaseModel

from .config import RuleConfigBase
from .context import RuleContext
from .models import DocumentKind, Finding, FindingSeverity, ReviewSection


class Rule(ABC):
    rule_id: str
    rule_title: str
    section: ReviewSection
    # Documents that must be present and valid before the rule is evaluated.
    documents: Tuple[DocumentKind, ...] = ()
    config_model: Type[BaseModel] = RuleConfigBase

    def __init__(self):
        if not getattr(self, "rule_id", None):
            raise ValueError("Rule must define rule_id")

    def config(self, ctx: RuleContext) -> Any:
        return ctx.client_config.get_rule_config(self.rule_id, self.config_model)

    def is_applicable(self, ctx: RuleContext) -> bool:
        return True

    def finding(self, severity: FindingSeverity, message: str, **values: Any) -> Finding:
        return Finding(
            severity=severity,
            message=message,
            origin=self.rule_id,
            section=self.section,
            values=values,
        )

    @abstractmethod
    def evaluate(self, ctx: RuleContext) -> List[Finding]:  # pragma: no cover
        raise NotImplementedError

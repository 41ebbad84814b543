from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field

from .models import FindingSeverity

T = TypeVar("T", bound=BaseModel)


class RuleConfigBase(BaseModel):
    enabled: bool = True


class NegativeAssetBalancesRuleConfig(RuleConfigBase):
    # Accounts whose name or type contains one of these are treated as provisions and skipped.
    provision_markers: List[str] = Field(default_factory=lambda: ["provision"])


class DisallowableExpensesRuleConfig(RuleConfigBase):
    # Added to the keyword list from the reference table, never replacing it.
    extra_keywords: List[str] = Field(default_factory=list)


class RatioAnalysisRuleConfig(RuleConfigBase):
    include_prior_year: bool = True


class GSTReturnsFiledOnTimeRuleConfig(RuleConfigBase):
    flag_name: str = "returns_filed_on_time"
    # Severity when the filing-timeliness flag was not supplied at all.
    missing_flag_severity: FindingSeverity = FindingSeverity.REQUIRES_CLARIFICATION


class ComplianceObligationsRuleConfig(RuleConfigBase):
    # Audit applicability is computed on declared turnover, so it stays provisional until final figures exist.
    flag_provisional_audit: bool = True


class ClientRulesConfig(BaseModel):
    """Client-specific configuration for all rules.

    Rules pull their typed config via `get_rule_config`.
    """

    rules: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    def get_rule_config(
        self,
        rule_id: str,
        model: Type[T],
        default: Optional[T] = None,
    ) -> T:
        if rule_id not in self.rules:
            if default is not None:
                return default
            return model()  # type: ignore[call-arg]
        raw = self.rules.get(rule_id, {})
        return model.model_validate(raw)

from __future__ import annotations

from ..config import DisallowableExpensesRuleConfig
from ..context import POLICY_CATEGORY, RuleContext, format_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class PL_DISALLOWABLE_EXPENSES(Rule):
    rule_id = "PL-DISALLOWABLE-EXPENSES"
    rule_title = "Expenses that may be disallowed for income tax"
    section = ReviewSection.PROFIT_AND_LOSS_REVIEW
    documents = (DocumentKind.PROFIT_AND_LOSS,)
    config_model = DisallowableExpensesRuleConfig

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        keywords = ctx.reference.lookup_str_list(POLICY_CATEGORY, "disallowable_keywords")
        keywords = [k.lower() for k in [*keywords, *cfg.extra_keywords] if k.strip()]

        pl = ctx.document(DocumentKind.PROFIT_AND_LOSS)
        findings: list[Finding] = []
        for item in pl.line_items:
            description = item.description.lower()
            matched = [k for k in keywords if k in description]
            if not matched:
                continue
            findings.append(
                self.finding(
                    FindingSeverity.REQUIRES_CLARIFICATION,
                    f"Potential disallowable expense: {item.description} ({format_amount(item.amount)}).",
                    description=item.description,
                    amount=str(item.amount),
                    keywords=matched,
                )
            )
        return findings

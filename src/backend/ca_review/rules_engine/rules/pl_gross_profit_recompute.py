from __future__ import annotations

from ..context import RuleContext, exceeds_tolerance, format_amount, quantize_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class PL_GROSS_PROFIT_RECOMPUTE(Rule):
    rule_id = "PL-GROSS-PROFIT-RECOMPUTE"
    rule_title = "Gross profit equals revenue less direct costs"
    section = ReviewSection.PROFIT_AND_LOSS_REVIEW
    documents = (DocumentKind.PROFIT_AND_LOSS,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        pl = ctx.document(DocumentKind.PROFIT_AND_LOSS)
        revenue = pl.require("revenue")
        direct_costs = pl.require("direct_costs")
        stated = pl.require("gross_profit")

        calculated = revenue - direct_costs
        difference = stated - calculated
        if not exceeds_tolerance(difference, ctx.tolerance()):
            return []

        return [
            self.finding(
                FindingSeverity.HIGH_RISK,
                f"Gross Profit calculation mismatch: stated {format_amount(stated)}, "
                f"calculated {format_amount(calculated)}.",
                stated_gross_profit=str(stated),
                calculated_gross_profit=str(calculated),
                difference=str(quantize_amount(difference)),
            )
        ]

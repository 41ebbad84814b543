from __future__ import annotations

from ..context import RuleContext, exceeds_tolerance, format_amount, quantize_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class PL_NET_PROFIT_RECOMPUTE(Rule):
    rule_id = "PL-NET-PROFIT-RECOMPUTE"
    rule_title = "Net profit equals gross profit less expenses plus other income"
    section = ReviewSection.PROFIT_AND_LOSS_REVIEW
    documents = (DocumentKind.PROFIT_AND_LOSS,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        pl = ctx.document(DocumentKind.PROFIT_AND_LOSS)
        # Built from the stated gross profit so a gross profit error is not reported twice.
        calculated = (
            pl.require("gross_profit")
            - pl.require("operating_expenses")
            - pl.require("other_expenses")
            + pl.require("other_income")
        )
        stated = pl.require("net_profit")
        difference = stated - calculated
        if not exceeds_tolerance(difference, ctx.tolerance()):
            return []

        return [
            self.finding(
                FindingSeverity.HIGH_RISK,
                f"Net Profit calculation mismatch: stated {format_amount(stated)}, "
                f"calculated {format_amount(calculated)}.",
                stated_net_profit=str(stated),
                calculated_net_profit=str(calculated),
                difference=str(quantize_amount(difference)),
            )
        ]

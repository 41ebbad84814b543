from __future__ import annotations

from ..context import POLICY_CATEGORY, RuleContext, format_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class PL_CASH_PAYMENT_LIMIT(Rule):
    rule_id = "PL-CASH-PAYMENT-LIMIT"
    rule_title = "Cash expense payments above the statutory cash limit"
    section = ReviewSection.PROFIT_AND_LOSS_REVIEW
    documents = (DocumentKind.PROFIT_AND_LOSS,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        limit = ctx.reference.lookup_decimal("income_tax", "cash_payment_limit")
        provision = str(ctx.reference.lookup("income_tax", "cash_payment_section"))
        modes = {m.lower() for m in ctx.reference.lookup_str_list(POLICY_CATEGORY, "cash_payment_modes")}

        pl = ctx.document(DocumentKind.PROFIT_AND_LOSS)
        large = [
            item
            for item in pl.line_items
            if item.payment_mode.strip().lower() in modes and item.amount > limit
        ]
        if not large:
            return []

        count = len(large)
        noun = "payment" if count == 1 else "payments"
        return [
            self.finding(
                FindingSeverity.REQUIRES_CLARIFICATION,
                f"{count} cash {noun} exceeding {format_amount(limit)} found - "
                f"Section {provision} applicable.",
                count=count,
                limit=str(limit),
                section=provision,
                items=[item.description for item in large],
            )
        ]

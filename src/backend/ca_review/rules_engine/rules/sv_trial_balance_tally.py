from __future__ import annotations

from ..context import RuleContext, exceeds_tolerance, format_amount, quantize_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class SV_TRIAL_BALANCE_TALLY(Rule):
    rule_id = "SV-TRIAL-BALANCE-TALLY"
    rule_title = "Trial balance debit total equals credit total"
    section = ReviewSection.STRUCTURAL_VALIDATION
    documents = (DocumentKind.TRIAL_BALANCE,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        tb = ctx.document(DocumentKind.TRIAL_BALANCE)
        total_debit = tb.require("total_debit")
        total_credit = tb.require("total_credit")

        mismatch = total_debit - total_credit
        if not exceeds_tolerance(mismatch, ctx.tolerance()):
            return []

        return [
            self.finding(
                FindingSeverity.HIGH_RISK,
                f"Trial Balance does not tally: Debit ({format_amount(total_debit)}) ≠ "
                f"Credit ({format_amount(total_credit)}), mismatch of {format_amount(abs(mismatch))}.",
                total_debit=str(total_debit),
                total_credit=str(total_credit),
                mismatch=str(quantize_amount(abs(mismatch))),
            )
        ]

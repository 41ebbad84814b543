from __future__ import annotations

from ..context import RuleContext
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class SV_TRIAL_BALANCE_TWO_SIDED_ACCOUNTS(Rule):
    rule_id = "SV-TRIAL-BALANCE-TWO-SIDED-ACCOUNTS"
    rule_title = "Each trial balance account carries either a debit or a credit balance"
    section = ReviewSection.STRUCTURAL_VALIDATION
    documents = (DocumentKind.TRIAL_BALANCE,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        tb = ctx.document(DocumentKind.TRIAL_BALANCE)
        both_sides = [acct for acct in tb.accounts if acct.debit != 0 and acct.credit != 0]
        if not both_sides:
            return []

        count = len(both_sides)
        noun = "account has" if count == 1 else "accounts have"
        return [
            self.finding(
                FindingSeverity.REQUIRES_CLARIFICATION,
                f"{count} {noun} both debit and credit balances.",
                count=count,
                accounts=[acct.name for acct in both_sides],
            )
        ]

from __future__ import annotations

from ..context import RuleContext, exceeds_tolerance, format_amount, quantize_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class SV_BALANCE_SHEET_IDENTITY(Rule):
    rule_id = "SV-BALANCE-SHEET-IDENTITY"
    rule_title = "Balance sheet balances: Assets = Liabilities + Equity"
    section = ReviewSection.STRUCTURAL_VALIDATION
    documents = (DocumentKind.BALANCE_SHEET,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        bs = ctx.document(DocumentKind.BALANCE_SHEET)
        total_assets = bs.require("total_assets")
        total_liabilities = bs.require("total_liabilities")
        equity = bs.require("equity")

        difference = total_assets - (total_liabilities + equity)
        if not exceeds_tolerance(difference, ctx.tolerance()):
            return []

        return [
            self.finding(
                FindingSeverity.HIGH_RISK,
                "Balance Sheet does not balance: Assets ≠ Liabilities + Equity "
                f"(difference {format_amount(abs(difference))}).",
                total_assets=str(total_assets),
                total_liabilities=str(total_liabilities),
                equity=str(equity),
                difference=str(quantize_amount(difference)),
            )
        ]

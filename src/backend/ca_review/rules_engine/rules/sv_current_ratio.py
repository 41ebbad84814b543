from __future__ import annotations

from ..context import RuleContext, round_to, safe_ratio
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class SV_CURRENT_RATIO(Rule):
    rule_id = "SV-CURRENT-RATIO"
    rule_title = "Current ratio is at least 1"
    section = ReviewSection.STRUCTURAL_VALIDATION
    documents = (DocumentKind.BALANCE_SHEET,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        bs = ctx.document(DocumentKind.BALANCE_SHEET)
        current_assets = bs.require("current_assets")
        current_liabilities = bs.require("current_liabilities")

        ratio = safe_ratio(current_assets, current_liabilities)
        if ratio is None:
            return [
                self.finding(
                    FindingSeverity.REQUIRES_CLARIFICATION,
                    "Current ratio is undefined: current liabilities are zero.",
                    current_assets=str(current_assets),
                    current_liabilities=str(current_liabilities),
                    current_ratio=None,
                )
            ]
        if ratio >= 1:
            return []

        rounded = round_to(ratio, 2)
        return [
            self.finding(
                FindingSeverity.REQUIRES_CLARIFICATION,
                f"Low current ratio ({rounded}): Liquidity concern.",
                current_assets=str(current_assets),
                current_liabilities=str(current_liabilities),
                current_ratio=str(rounded),
            )
        ]

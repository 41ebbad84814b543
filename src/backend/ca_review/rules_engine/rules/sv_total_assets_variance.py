from __future__ import annotations

from ..context import POLICY_CATEGORY, RuleContext, percentage_change, round_to
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class SV_TOTAL_ASSETS_VARIANCE(Rule):
    rule_id = "SV-TOTAL-ASSETS-VARIANCE"
    rule_title = "Year-over-year change in total assets"
    section = ReviewSection.STRUCTURAL_VALIDATION
    documents = (DocumentKind.BALANCE_SHEET,)

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        bs = ctx.document(DocumentKind.BALANCE_SHEET)
        if bs.prior_period is None:
            return []
        previous = bs.prior_period.get_figure("total_assets")
        if previous is None:
            return []

        current = bs.require("total_assets")
        change = percentage_change(current, previous)
        if change is None:
            return []

        band = ctx.reference.lookup_decimal(POLICY_CATEGORY, "total_assets_variance_pct")
        if abs(change) <= band:
            return []

        rounded = round_to(change, 1)
        return [
            self.finding(
                FindingSeverity.NORMAL,
                f"Significant change in total assets: {rounded}% YoY.",
                total_assets=str(current),
                previous_total_assets=str(previous),
                change_pct=str(rounded),
            )
        ]

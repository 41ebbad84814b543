from __future__ import annotations

from ..context import RuleContext, exceeds_tolerance, format_amount, quantize_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class GST_ITC_RECONCILES(Rule):
    rule_id = "GST-ITC-RECONCILES"
    rule_title = "Input tax credit claimed in books matches GSTR-2B"
    section = ReviewSection.GST_REVIEW
    documents = (DocumentKind.GST_RECONCILIATION,)

    def is_applicable(self, ctx: RuleContext) -> bool:
        return ctx.compliance.compliance_flags.gst

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        gst = ctx.document(DocumentKind.GST_RECONCILIATION)
        claimed = gst.require("itc_claimed_books")
        gstr2b = gst.require("itc_gstr2b")
        difference = claimed - gstr2b
        if not exceeds_tolerance(difference, ctx.tolerance()):
            return []

        return [
            self.finding(
                FindingSeverity.REQUIRES_CLARIFICATION,
                f"ITC claimed in books ({format_amount(claimed)}) does not match GSTR-2B "
                f"({format_amount(gstr2b)}) - Requires reconciliation.",
                itc_claimed_books=str(claimed),
                itc_gstr2b=str(gstr2b),
                difference=str(quantize_amount(difference)),
            )
        ]

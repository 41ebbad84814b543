from __future__ import annotations

from ..context import RuleContext, exceeds_tolerance, format_amount, quantize_amount
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class GST_TURNOVER_RECONCILES(Rule):
    rule_id = "GST-TURNOVER-RECONCILES"
    rule_title = "Turnover in books reconciles to GSTR-3B"
    section = ReviewSection.GST_REVIEW

    def is_applicable(self, ctx: RuleContext) -> bool:
        return ctx.compliance.compliance_flags.gst

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        gst = ctx.document(DocumentKind.GST_RECONCILIATION)
        if gst is None:
            if DocumentKind.GST_RECONCILIATION in ctx.rejected_documents:
                return []
            return [
                self.finding(
                    FindingSeverity.REQUIRES_CLARIFICATION,
                    "GST reconciliation figures not provided; books turnover cannot be "
                    "reconciled with GSTR-3B.",
                )
            ]

        books = gst.require("books_turnover")
        gstr3b = gst.require("gstr3b_turnover")
        difference = books - gstr3b
        if not exceeds_tolerance(difference, ctx.tolerance()):
            return []

        return [
            self.finding(
                FindingSeverity.HIGH_RISK,
                f"Turnover mismatch: Books {format_amount(books)} vs GSTR-3B {format_amount(gstr3b)} - "
                f"Difference of {format_amount(abs(difference))}.",
                books_turnover=str(books),
                gstr3b_turnover=str(gstr3b),
                difference=str(quantize_amount(abs(difference))),
            )
        ]

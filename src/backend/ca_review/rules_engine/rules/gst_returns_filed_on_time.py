from __future__ import annotations

from ..config import GSTReturnsFiledOnTimeRuleConfig
from ..context import RuleContext
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class GST_RETURNS_FILED_ON_TIME(Rule):
    rule_id = "GST-RETURNS-FILED-ON-TIME"
    rule_title = "GST returns filed within due dates"
    section = ReviewSection.GST_REVIEW
    documents = (DocumentKind.GST_RECONCILIATION,)
    config_model = GSTReturnsFiledOnTimeRuleConfig

    def is_applicable(self, ctx: RuleContext) -> bool:
        return ctx.compliance.compliance_flags.gst

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        gst = ctx.document(DocumentKind.GST_RECONCILIATION)
        filed_on_time = gst.flags.get(cfg.flag_name)

        if filed_on_time is None:
            return [
                self.finding(
                    cfg.missing_flag_severity,
                    "GST filing timeliness not confirmed - obtain return filing dates.",
                    filed_on_time=None,
                )
            ]
        if filed_on_time:
            return [
                self.finding(
                    FindingSeverity.NORMAL,
                    "GST returns filed on time for all periods.",
                    filed_on_time=True,
                )
            ]
        return [
            self.finding(
                FindingSeverity.REQUIRES_CLARIFICATION,
                "One or more GST returns were filed late - late fee and interest exposure to be verified.",
                filed_on_time=False,
            )
        ]

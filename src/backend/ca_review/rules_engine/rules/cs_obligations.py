from __future__ import annotations

from ..config import ComplianceObligationsRuleConfig
from ..context import RuleContext
from ..models import Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class CS_OBLIGATIONS(Rule):
    rule_id = "CS-OBLIGATIONS"
    rule_title = "Statutory obligations for the period"
    section = ReviewSection.COMPLIANCE_STATUS
    config_model = ComplianceObligationsRuleConfig

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        outcome = ctx.compliance
        flags = outcome.compliance_flags
        findings: list[Finding] = []

        if flags.income_tax:
            case = "Audit" if outcome.audit_applicable else "Non-audit"
            due_key = "itr_due_date_audit" if outcome.audit_applicable else "itr_due_date_non_audit"
            due_date = ctx.reference.lookup("income_tax", due_key)
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    f"Income Tax: ITR filing applicable - {case} case, due by {due_date}.",
                    obligation="income_tax",
                    case=case,
                    due_date=str(due_date),
                )
            )
        if flags.gst:
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    "GST: Registration active, monthly/quarterly filing required.",
                    obligation="gst",
                )
            )
        if flags.tds:
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    "TDS: Turnover exceeds the threshold - tax deduction at source and quarterly TDS returns applicable.",
                    obligation="tds",
                )
            )
        if flags.audit:
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    f"Audit: Applicable - {outcome.audit_basis}.",
                    obligation="audit",
                    basis=outcome.audit_basis,
                )
            )
            if cfg.flag_provisional_audit:
                findings.append(
                    self.finding(
                        FindingSeverity.REQUIRES_CLARIFICATION,
                        "Audit: Applicable per declared turnover - verify applicability based on "
                        "final audited figures.",
                        obligation="audit",
                        provisional=True,
                    )
                )
        if flags.mca:
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    "MCA: Annual filing requirements applicable.",
                    obligation="mca",
                )
            )
        return findings

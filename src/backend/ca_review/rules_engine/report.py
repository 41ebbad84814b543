from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from .models import (
    ClientProfile,
    ComplianceOutcome,
    Finding,
    FindingSeverity,
    ReportSection,
    ReviewReport,
    ReviewResult,
)

REPORT_TITLE = "Chartered Accountant Review Report"

DISCLAIMER = (
    "This report is based on rule-based review and publicly available statutory information. "
    "Final decisions must be taken by a qualified Chartered Accountant. "
    "This report does not constitute audit, assurance, or legal opinion."
)

SECTION_TITLES = (
    "1. Executive Summary",
    "2. Key Observations",
    "3. Items Requiring Clarification",
    "4. High-Risk Areas",
    "5. Compliance Status",
    "6. Next Steps",
)

NONE_IDENTIFIED = "None identified."

_DISALLOWANCE_RULES = frozenset({"PL-DISALLOWABLE-EXPENSES", "PL-CASH-PAYMENT-LIMIT"})


# ratio key -> (statement, unit)
_RATIO_STATEMENTS = {
    "gross_profit_pct": ("Gross profit margin is {value}%", "%"),
    "net_profit_pct": ("Net profit margin is {value}%", "%"),
    "current_ratio": ("Current ratio is {value}", ""),
    "debt_equity_ratio": ("Debt-equity ratio is {value}", ""),
    "debtor_days": ("Debtors are realised in {value} days on average", " days"),
    "creditor_days": ("Creditors are paid in {value} days on average", " days"),
}

_OBLIGATION_STATEMENTS = {
    "income_tax": "Income tax return filing is applicable ({case} case) and is due by {due_date}.",
    "gst": "GST registration is active and monthly or quarterly returns must be filed.",
    "tds": "Turnover exceeds the TDS threshold, so tax deduction at source and quarterly TDS returns apply.",
    "audit": "Audit is applicable. {basis}.",
    "mca": "Annual filings with the Ministry of Corporate Affairs are required.",
}


def _as_statement(finding: Finding) -> str:
    """Reword a Normal finding from its label-and-value form into a sentence."""
    values = finding.values
    ratio = _RATIO_STATEMENTS.get(values.get("ratio"))
    if ratio is not None and values.get("value") is not None:
        template, unit = ratio
        text = template.format(value=values["value"])
        if values.get("previous_value") is not None:
            text += f" against {values['previous_value']}{unit} in the previous year"
        return text + "."

    obligation = _OBLIGATION_STATEMENTS.get(values.get("obligation"))
    if obligation is not None:
        try:
            return obligation.format(**values)
        except KeyError:
            return finding.message

    if "change_pct" in values:
        change = Decimal(str(values["change_pct"]))
        direction = "decreased" if change < 0 else "increased"
        return f"Total assets {direction} by {abs(change)}% compared with the previous year."

    if values.get("filed_on_time") is True:
        return "All GST returns for the period were filed on time."

    return finding.message


def _points_or_placeholder(points: List[str]) -> List[str]:
    return points or [NONE_IDENTIFIED]


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def _executive_summary(profile: ClientProfile, review: ReviewResult) -> str:
    high_risk = len(review.by_severity(FindingSeverity.HIGH_RISK))
    clarification = len(review.by_severity(FindingSeverity.REQUIRES_CLARIFICATION))
    text = (
        f"This report presents a rule-based review of financial documents for {profile.client_name} "
        f"for the financial year {profile.financial_year}. The review is based on statutory requirements, "
        "accounting standards, and tax provisions. "
        f"It identified {_plural(high_risk, 'high-risk area', 'high-risk areas')} and "
        f"{_plural(clarification, 'item requiring clarification', 'items requiring clarification')}."
    )
    if review.errors:
        text += (
            f" {_plural(len(review.errors), 'check', 'checks')} could not be completed because "
            "the supplied data was incomplete or unsupported."
        )
    return text


def _compliance_points(compliance: ComplianceOutcome) -> List[str]:
    flags = compliance.compliance_flags
    return [
        f"Tax Audit: {'Applicable' if compliance.audit_applicable else 'Not Applicable'}",
        f"GST Filing: {'Regular' if flags.gst else 'Not Applicable'}",
        "Income Tax Return: Filing required",
        f"TDS Returns: {'Applicable' if flags.tds else 'Not Applicable'}",
        f"MCA Filings: {'Applicable' if flags.mca else 'Not Applicable'}",
    ]


def _next_steps(compliance: ComplianceOutcome, review: ReviewResult) -> List[str]:
    findings = review.findings()
    steps: List[str] = []
    if any(f.severity == FindingSeverity.REQUIRES_CLARIFICATION for f in findings):
        steps.append("Obtain clarifications on flagged items")
    if any(f.severity == FindingSeverity.HIGH_RISK for f in findings):
        steps.append("Resolve high-risk areas before finalising the accounts")
    if compliance.compliance_flags.gst:
        steps.append("Reconcile GST returns with books of accounts")
    if any(f.origin in _DISALLOWANCE_RULES for f in findings):
        steps.append("Compute disallowances under Income Tax Act")
    if compliance.audit_applicable:
        steps.append("Prepare tax audit report")
    if review.errors:
        steps.append("Obtain complete financial statement data for checks that could not be completed")
    steps.append("File returns within statutory due dates")
    return steps


def assemble_report(
    profile: ClientProfile,
    compliance: ComplianceOutcome,
    review: ReviewResult,
    *,
    report_date: Optional[date] = None,
) -> ReviewReport:
    """Build the six-section review report. Deterministic apart from `report_date`."""
    observations = [_as_statement(f) for f in review.by_severity(FindingSeverity.NORMAL)]
    clarifications = [f.message for f in review.by_severity(FindingSeverity.REQUIRES_CLARIFICATION)]
    high_risk = [f.message for f in review.by_severity(FindingSeverity.HIGH_RISK)]

    sections = [
        ReportSection(title=SECTION_TITLES[0], content=_executive_summary(profile, review)),
        ReportSection(title=SECTION_TITLES[1], points=_points_or_placeholder(observations)),
        ReportSection(title=SECTION_TITLES[2], points=_points_or_placeholder(clarifications)),
        ReportSection(title=SECTION_TITLES[3], points=_points_or_placeholder(high_risk)),
        ReportSection(title=SECTION_TITLES[4], points=_compliance_points(compliance)),
        ReportSection(title=SECTION_TITLES[5], points=_next_steps(compliance, review)),
    ]
    return ReviewReport(
        title=REPORT_TITLE,
        client_name=profile.client_name,
        financial_year=profile.financial_year,
        report_date=report_date or date.today(),
        sections=sections,
        disclaimer=DISCLAIMER,
    )

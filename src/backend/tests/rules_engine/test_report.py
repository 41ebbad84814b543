from datetime import date, datetime, timezone

from ca_review.rules_engine.models import Finding, FindingSection, FindingSeverity, ReviewResult, ReviewSection
from ca_review.rules_engine.report import DISCLAIMER, NONE_IDENTIFIED, SECTION_TITLES, assemble_report
from ca_review.rules_engine.runner import validate


def _review(make_profile, make_compliance, statements, reference_table, **profile):
    compliance = make_compliance(**profile)
    return make_profile(**profile), compliance, validate(statements, compliance, reference_table)


def test_report_has_six_sections_and_disclaimer(
    make_profile, make_compliance, make_balance_sheet, make_profit_and_loss, make_trial_balance, reference_table
):
    profile, compliance, review = _review(
        make_profile,
        make_compliance,
        [make_balance_sheet(), make_profit_and_loss(), make_trial_balance()],
        reference_table,
    )
    report = assemble_report(profile, compliance, review, report_date=date(2025, 6, 30))
    assert [s.title for s in report.sections] == list(SECTION_TITLES)
    assert report.disclaimer == DISCLAIMER
    assert report.client_name == "Sharma Traders"
    assert report.report_date == date(2025, 6, 30)

    summary, observations, clarifications, high_risk, compliance_status, next_steps = report.sections
    assert "0 high-risk areas" in summary.content
    assert "Gross profit margin is 30.0%." in observations.points
    assert clarifications.points == [NONE_IDENTIFIED]
    assert high_risk.points == [NONE_IDENTIFIED]
    assert compliance_status.points == [
        "Tax Audit: Not Applicable",
        "GST Filing: Not Applicable",
        "Income Tax Return: Filing required",
        "TDS Returns: Not Applicable",
        "MCA Filings: Not Applicable",
    ]
    assert next_steps.points == ["File returns within statutory due dates"]


def test_findings_are_routed_by_severity(
    make_profile, make_compliance, make_balance_sheet, make_profit_and_loss, make_trial_balance, reference_table
):
    items = [{"description": "Penalty paid", "amount": "2000", "payment_mode": "bank"}]
    profile, compliance, review = _review(
        make_profile,
        make_compliance,
        [make_balance_sheet(equity="399000"), make_profit_and_loss(line_items=items), make_trial_balance()],
        reference_table,
        turnover="15000000",
    )
    report = assemble_report(profile, compliance, review, report_date=date(2025, 6, 30))
    _, _, clarifications, high_risk, compliance_status, next_steps = report.sections

    assert [m for m in high_risk.points] == [f.message for f in review.by_severity(FindingSeverity.HIGH_RISK)]
    assert "Potential disallowable expense: Penalty paid (₹2,000)." in clarifications.points
    assert "Tax Audit: Applicable" in compliance_status.points
    assert next_steps.points == [
        "Obtain clarifications on flagged items",
        "Resolve high-risk areas before finalising the accounts",
        "Compute disallowances under Income Tax Act",
        "Prepare tax audit report",
        "File returns within statutory due dates",
    ]


def test_incomplete_checks_are_mentioned(make_profile, make_compliance, make_balance_sheet, reference_table):
    profile, compliance, review = _review(make_profile, make_compliance, [make_balance_sheet()], reference_table)
    report = assemble_report(profile, compliance, review, report_date=date(2025, 6, 30))
    assert "2 checks could not be completed" in report.sections[0].content
    assert report.sections[5].points[-2].startswith("Obtain complete financial statement data")


def test_report_assembly_is_pure_apart_from_report_date(
    make_profile, make_compliance, make_balance_sheet, make_profit_and_loss, make_trial_balance, reference_table
):
    profile, compliance, review = _review(
        make_profile,
        make_compliance,
        [make_balance_sheet(), make_profit_and_loss(), make_trial_balance()],
        reference_table,
        gst_status="registered",
    )
    first = assemble_report(profile, compliance, review, report_date=date(2025, 6, 30))
    second = assemble_report(profile, compliance, review, report_date=date(2025, 7, 1))
    assert first.model_dump(exclude={"report_date"}) == second.model_dump(exclude={"report_date"})
    assert first.model_dump_json() == assemble_report(
        profile, compliance, review, report_date=date(2025, 6, 30)
    ).model_dump_json()


def test_observations_are_reworded_as_sentences(make_profile, make_compliance):
    def normal(message, origin, section, **values):
        return Finding(severity=FindingSeverity.NORMAL, message=message, origin=origin, section=section, values=values)

    review = ReviewResult(
        run_id="run-1",
        generated_at=datetime(2025, 6, 30, tzinfo=timezone.utc),
        sections=[
            FindingSection(
                title=ReviewSection.STRUCTURAL_VALIDATION,
                findings=[
                    normal(
                        "Significant change in total assets: -22.5% YoY.",
                        "SV-TOTAL-ASSETS-VARIANCE",
                        ReviewSection.STRUCTURAL_VALIDATION,
                        change_pct="-22.5",
                    )
                ],
            ),
            FindingSection(
                title=ReviewSection.RATIO_ANALYSIS,
                findings=[
                    normal(
                        "Gross Profit Margin: 25.0% (Previous Year: 24.0%).",
                        "RA-PROFITABILITY",
                        ReviewSection.RATIO_ANALYSIS,
                        ratio="gross_profit_pct",
                        value="25.0",
                        previous_value="24.0",
                    ),
                    normal(
                        "Debtor Days: 53 days.",
                        "RA-WORKING-CAPITAL-DAYS",
                        ReviewSection.RATIO_ANALYSIS,
                        ratio="debtor_days",
                        value="53",
                        previous_value=None,
                    ),
                ],
            ),
            FindingSection(
                title=ReviewSection.COMPLIANCE_STATUS,
                findings=[
                    normal(
                        "Income Tax: ITR filing applicable - Audit case, due by 2025-10-31.",
                        "CS-OBLIGATIONS",
                        ReviewSection.COMPLIANCE_STATUS,
                        obligation="income_tax",
                        case="Audit",
                        due_date="2025-10-31",
                    ),
                    normal(
                        "Audit: Applicable - Partnership turnover exceeds the tax audit threshold.",
                        "CS-OBLIGATIONS",
                        ReviewSection.COMPLIANCE_STATUS,
                        obligation="audit",
                        basis="Partnership turnover exceeds the tax audit threshold",
                    ),
                    normal("Custom note.", "CUSTOM", ReviewSection.COMPLIANCE_STATUS),
                ],
            ),
        ],
    )
    report = assemble_report(make_profile(), make_compliance(), review, report_date=date(2025, 6, 30))
    assert report.sections[1].points == [
        "Total assets decreased by 22.5% compared with the previous year.",
        "Gross profit margin is 25.0% against 24.0% in the previous year.",
        "Debtors are realised in 53 days on average.",
        "Income tax return filing is applicable (Audit case) and is due by 2025-10-31.",
        "Audit is applicable. Partnership turnover exceeds the tax audit threshold.",
        "Custom note.",
    ]

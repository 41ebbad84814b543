import pytest

from ca_review.rules_engine.models import DocumentKind, FindingSeverity, ReviewSection
from ca_review.rules_engine.rules.gst_itc_reconciles import GST_ITC_RECONCILES
from ca_review.rules_engine.rules.gst_returns_filed_on_time import GST_RETURNS_FILED_ON_TIME
from ca_review.rules_engine.rules.gst_turnover_reconciles import GST_TURNOVER_RECONCILES


@pytest.fixture
def registered(make_compliance):
    return make_compliance(gst_status="registered", turnover="12500000")


def test_gst_rules_not_applicable_when_unregistered(make_gst_reconciliation, make_ctx):
    ctx = make_ctx(documents=[make_gst_reconciliation()])
    assert not GST_TURNOVER_RECONCILES().is_applicable(ctx)
    assert not GST_ITC_RECONCILES().is_applicable(ctx)
    assert not GST_RETURNS_FILED_ON_TIME().is_applicable(ctx)


def test_turnover_mismatch_is_high_risk(registered, make_gst_reconciliation, make_ctx):
    gst = make_gst_reconciliation(gstr3b_turnover="12250000")
    ctx = make_ctx(documents=[gst], compliance=registered)
    assert GST_TURNOVER_RECONCILES().is_applicable(ctx)
    findings = GST_TURNOVER_RECONCILES().evaluate(ctx)
    assert len(findings) == 1
    finding = findings[0]
    assert finding.severity == FindingSeverity.HIGH_RISK
    assert finding.section == ReviewSection.GST_REVIEW
    assert finding.message == (
        "Turnover mismatch: Books ₹1,25,00,000 vs GSTR-3B ₹1,22,50,000 - Difference of ₹2,50,000."
    )
    assert finding.values["difference"] == "250000.00"


def test_turnover_reconciles(registered, make_gst_reconciliation, make_ctx):
    ctx = make_ctx(documents=[make_gst_reconciliation()], compliance=registered)
    assert GST_TURNOVER_RECONCILES().evaluate(ctx) == []


def test_missing_gst_figures_require_clarification(registered, make_ctx):
    findings = GST_TURNOVER_RECONCILES().evaluate(make_ctx(compliance=registered))
    assert len(findings) == 1
    assert findings[0].severity == FindingSeverity.REQUIRES_CLARIFICATION
    assert findings[0].message.startswith("GST reconciliation figures not provided")


def test_rejected_gst_figures_are_left_to_the_error_list(registered, make_ctx):
    ctx = make_ctx(compliance=registered, rejected=[DocumentKind.GST_RECONCILIATION])
    assert GST_TURNOVER_RECONCILES().evaluate(ctx) == []


def test_itc_difference_requires_clarification(registered, make_gst_reconciliation, make_ctx):
    gst = make_gst_reconciliation(itc_gstr2b="165000")
    findings = GST_ITC_RECONCILES().evaluate(make_ctx(documents=[gst], compliance=registered))
    assert len(findings) == 1
    assert findings[0].severity == FindingSeverity.REQUIRES_CLARIFICATION
    assert findings[0].values["difference"] == "15000.00"
    assert "GSTR-2B (₹1,65,000)" in findings[0].message


@pytest.mark.parametrize(
    "flags,severity",
    [
        ({"returns_filed_on_time": True}, FindingSeverity.NORMAL),
        ({"returns_filed_on_time": False}, FindingSeverity.REQUIRES_CLARIFICATION),
        ({}, FindingSeverity.REQUIRES_CLARIFICATION),
    ],
)
def test_returns_filed_on_time(registered, make_gst_reconciliation, make_ctx, flags, severity):
    gst = make_gst_reconciliation(flags=flags)
    findings = GST_RETURNS_FILED_ON_TIME().evaluate(make_ctx(documents=[gst], compliance=registered))
    assert len(findings) == 1
    assert findings[0].severity == severity


def test_missing_filing_flag_severity_is_configurable(registered, make_gst_reconciliation, make_ctx):
    gst = make_gst_reconciliation(flags={})
    ctx = make_ctx(
        documents=[gst],
        compliance=registered,
        client_rules={"GST-RETURNS-FILED-ON-TIME": {"missing_flag_severity": "HighRisk"}},
    )
    assert GST_RETURNS_FILED_ON_TIME().evaluate(ctx)[0].severity == FindingSeverity.HIGH_RISK

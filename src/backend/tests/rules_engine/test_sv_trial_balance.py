from ca_review.rules_engine.models import FindingSeverity
from ca_review.rules_engine.rules.sv_trial_balance_tally import SV_TRIAL_BALANCE_TALLY
from ca_review.rules_engine.rules.sv_trial_balance_two_sided_accounts import (
    SV_TRIAL_BALANCE_TWO_SIDED_ACCOUNTS,
)


def test_trial_balance_tallies(make_trial_balance, make_ctx):
    findings = SV_TRIAL_BALANCE_TALLY().evaluate(make_ctx(documents=[make_trial_balance()]))
    assert findings == []


def test_trial_balance_mismatch_is_high_risk(make_trial_balance, make_ctx):
    tb = make_trial_balance(total_debit="500000", total_credit="499900")
    findings = SV_TRIAL_BALANCE_TALLY().evaluate(make_ctx(documents=[tb]))
    assert len(findings) == 1
    finding = findings[0]
    assert finding.severity == FindingSeverity.HIGH_RISK
    assert finding.message == (
        "Trial Balance does not tally: Debit (₹5,00,000) ≠ Credit (₹4,99,900), mismatch of ₹100."
    )
    assert finding.values["mismatch"] == "100.00"


def test_trial_balance_paise_difference_is_within_tolerance(make_trial_balance, make_ctx):
    tb = make_trial_balance(total_debit="500000.01", total_credit="500000")
    assert SV_TRIAL_BALANCE_TALLY().evaluate(make_ctx(documents=[tb])) == []


def test_accounts_with_both_sides_require_clarification(make_trial_balance, make_ctx):
    tb = make_trial_balance(
        accounts=[
            {"name": "Cash", "debit": "1000", "credit": "0"},
            {"name": "Suspense", "debit": "200", "credit": "50"},
            {"name": "Sundry Debtors", "debit": "300", "credit": "10"},
        ]
    )
    findings = SV_TRIAL_BALANCE_TWO_SIDED_ACCOUNTS().evaluate(make_ctx(documents=[tb]))
    assert len(findings) == 1
    assert findings[0].severity == FindingSeverity.REQUIRES_CLARIFICATION
    assert findings[0].message == "2 accounts have both debit and credit balances."
    assert findings[0].values["accounts"] == ["Suspense", "Sundry Debtors"]


def test_single_sided_accounts_have_no_finding(make_trial_balance, make_ctx):
    tb = make_trial_balance(accounts=[{"name": "Cash", "debit": "1000"}, {"name": "Capital", "credit": "1000"}])
    assert SV_TRIAL_BALANCE_TWO_SIDED_ACCOUNTS().evaluate(make_ctx(documents=[tb])) == []

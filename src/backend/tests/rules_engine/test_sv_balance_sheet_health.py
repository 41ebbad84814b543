from ca_review.rules_engine.models import FindingSeverity
from ca_review.rules_engine.rules.sv_current_ratio import SV_CURRENT_RATIO
from ca_review.rules_engine.rules.sv_negative_asset_balances import SV_NEGATIVE_ASSET_BALANCES
from ca_review.rules_engine.rules.sv_total_assets_variance import SV_TOTAL_ASSETS_VARIANCE


ACCOUNTS = [
    {"name": "Cash in Hand", "account_type": "Current Asset", "balance": "-5000"},
    {"name": "Provision for Doubtful Debts", "account_type": "Current Asset", "balance": "-12000"},
    {"name": "Furniture", "account_type": "Fixed Asset", "balance": "40000"},
    {"name": "Bank Overdraft", "account_type": "Current Liability", "balance": "-9000"},
]


def test_negative_asset_accounts_are_listed(make_balance_sheet, make_ctx):
    bs = make_balance_sheet(accounts=ACCOUNTS)
    findings = SV_NEGATIVE_ASSET_BALANCES().evaluate(make_ctx(documents=[bs]))
    assert len(findings) == 1
    assert findings[0].severity == FindingSeverity.REQUIRES_CLARIFICATION
    assert findings[0].message == "Negative values found in asset accounts: Cash in Hand."
    assert findings[0].values["accounts"] == ["Cash in Hand"]


def test_configured_provision_markers_exclude_accounts(make_balance_sheet, make_ctx):
    bs = make_balance_sheet(accounts=ACCOUNTS)
    ctx = make_ctx(
        documents=[bs],
        client_rules={"SV-NEGATIVE-ASSET-BALANCES": {"provision_markers": ["provision", "cash"]}},
    )
    assert SV_NEGATIVE_ASSET_BALANCES().evaluate(ctx) == []


def test_low_current_ratio(make_balance_sheet, make_ctx):
    bs = make_balance_sheet(current_assets="75000", current_liabilities="150000")
    findings = SV_CURRENT_RATIO().evaluate(make_ctx(documents=[bs]))
    assert len(findings) == 1
    assert findings[0].severity == FindingSeverity.REQUIRES_CLARIFICATION
    assert findings[0].message == "Low current ratio (0.50): Liquidity concern."


def test_current_ratio_at_one_is_acceptable(make_balance_sheet, make_ctx):
    bs = make_balance_sheet(current_assets="150000", current_liabilities="150000")
    assert SV_CURRENT_RATIO().evaluate(make_ctx(documents=[bs])) == []


def test_zero_current_liabilities_is_flagged_not_raised(make_balance_sheet, make_ctx):
    bs = make_balance_sheet(current_liabilities="0")
    findings = SV_CURRENT_RATIO().evaluate(make_ctx(documents=[bs]))
    assert len(findings) == 1
    assert findings[0].message == "Current ratio is undefined: current liabilities are zero."
    assert findings[0].values["current_ratio"] is None


def test_total_assets_variance_above_band(make_balance_sheet, make_summary, make_ctx):
    prior = make_summary("balance_sheet", {"total_assets": "800000"})
    bs = make_balance_sheet(prior_period=prior)
    findings = SV_TOTAL_ASSETS_VARIANCE().evaluate(make_ctx(documents=[bs]))
    assert len(findings) == 1
    assert findings[0].severity == FindingSeverity.NORMAL
    assert findings[0].message == "Significant change in total assets: 25.0% YoY."


def test_total_assets_variance_within_band(make_balance_sheet, make_summary, make_ctx):
    prior = make_summary("balance_sheet", {"total_assets": "900000"})
    bs = make_balance_sheet(prior_period=prior)
    assert SV_TOTAL_ASSETS_VARIANCE().evaluate(make_ctx(documents=[bs])) == []


def test_total_assets_variance_skipped_without_prior_year(make_balance_sheet, make_ctx):
    assert SV_TOTAL_ASSETS_VARIANCE().evaluate(make_ctx(documents=[make_balance_sheet()])) == []

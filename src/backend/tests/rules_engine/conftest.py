import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import ca_review...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from decimal import Decimal

import pytest

from ca_review.rules_engine.compliance import derive
from ca_review.rules_engine.config import ClientRulesConfig
from ca_review.rules_engine.context import RuleContext
from ca_review.rules_engine.models import (
    AccountLine,
    ClientProfile,
    DocumentKind,
    FinancialStatementSummary,
    LineItem,
)
from ca_review.rules_engine.reference import default_reference_table


BALANCE_SHEET_FIGURES = {
    "total_assets": "1000000",
    "total_liabilities": "600000",
    "equity": "400000",
    "current_assets": "300000",
    "current_liabilities": "150000",
}

PROFIT_AND_LOSS_FIGURES = {
    "revenue": "2000000",
    "direct_costs": "1400000",
    "gross_profit": "600000",
    "operating_expenses": "300000",
    "other_expenses": "50000",
    "other_income": "20000",
    "net_profit": "270000",
}

TRIAL_BALANCE_FIGURES = {"total_debit": "500000", "total_credit": "500000"}

GST_FIGURES = {
    "books_turnover": "12500000",
    "gstr3b_turnover": "12500000",
    "itc_claimed_books": "180000",
    "itc_gstr2b": "180000",
}


@pytest.fixture
def reference_table():
    return default_reference_table()


@pytest.fixture
def make_profile():
    def _make(**overrides) -> ClientProfile:
        data = {
            "client_name": "Sharma Traders",
            "entity_type": "proprietorship",
            "business_nature": "Wholesale trading",
            "financial_year": "2024-25",
            "turnover": "3000000",
            "gst_status": "unregistered",
            "accounting_method": "accrual",
            "previous_year_available": False,
        }
        data.update(overrides)
        return ClientProfile.model_validate(data)

    return _make


@pytest.fixture
def make_compliance(make_profile, reference_table):
    def _make(**profile_overrides):
        return derive(make_profile(**profile_overrides), reference_table)

    return _make


@pytest.fixture
def make_summary():
    def _make(
        kind: str,
        figures: dict | None = None,
        *,
        line_items=(),
        accounts=(),
        flags=None,
        prior_period=None,
        **overrides,
    ) -> FinancialStatementSummary:
        merged = dict(figures or {})
        merged.update(overrides)
        return FinancialStatementSummary(
            kind=kind,
            figures={k: Decimal(str(v)) for k, v in merged.items()},
            line_items=tuple(
                item if isinstance(item, LineItem) else LineItem.model_validate(item) for item in line_items
            ),
            accounts=tuple(
                acct if isinstance(acct, AccountLine) else AccountLine.model_validate(acct) for acct in accounts
            ),
            flags=flags or {},
            prior_period=prior_period,
        )

    return _make


@pytest.fixture
def make_balance_sheet(make_summary):
    def _make(*, accounts=(), prior_period=None, **overrides) -> FinancialStatementSummary:
        return make_summary(
            DocumentKind.BALANCE_SHEET.value,
            BALANCE_SHEET_FIGURES,
            accounts=accounts,
            prior_period=prior_period,
            **overrides,
        )

    return _make


@pytest.fixture
def make_profit_and_loss(make_summary):
    def _make(*, line_items=(), prior_period=None, **overrides) -> FinancialStatementSummary:
        return make_summary(
            DocumentKind.PROFIT_AND_LOSS.value,
            PROFIT_AND_LOSS_FIGURES,
            line_items=line_items,
            prior_period=prior_period,
            **overrides,
        )

    return _make


@pytest.fixture
def make_trial_balance(make_summary):
    def _make(*, accounts=(), **overrides) -> FinancialStatementSummary:
        return make_summary(
            DocumentKind.TRIAL_BALANCE.value,
            TRIAL_BALANCE_FIGURES,
            accounts=accounts,
            **overrides,
        )

    return _make


@pytest.fixture
def make_gst_reconciliation(make_summary):
    def _make(*, flags=None, **overrides) -> FinancialStatementSummary:
        return make_summary(
            DocumentKind.GST_RECONCILIATION.value,
            GST_FIGURES,
            flags={"returns_filed_on_time": True} if flags is None else flags,
            **overrides,
        )

    return _make


@pytest.fixture
def make_ctx(reference_table, make_compliance):
    def _make(
        *,
        documents=(),
        compliance=None,
        client_rules: dict | None = None,
        reference=None,
        rejected=(),
    ) -> RuleContext:
        return RuleContext(
            compliance=compliance or make_compliance(),
            reference=reference or reference_table,
            documents={DocumentKind(doc.kind): doc for doc in documents},
            rejected_documents=frozenset(rejected),
            client_config=ClientRulesConfig(rules=client_rules or {}),
        )

    return _make

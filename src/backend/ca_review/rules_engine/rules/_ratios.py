from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..context import round_to, safe_ratio
from ..models import FinancialStatementSummary

HUNDRED = Decimal("100")


def describe(label: str, value: Decimal, prior: Optional[Decimal], *, places: int, suffix: str = "") -> str:
    text = f"{label}: {round_to(value, places)}{suffix}"
    if prior is not None:
        text += f" (Previous Year: {round_to(prior, places)}{suffix})"
    return text


def margin(summary: Optional[FinancialStatementSummary], key: str) -> Optional[Decimal]:
    """`key` as a percentage of revenue, or None when either figure is unavailable."""
    if summary is None:
        return None
    revenue = summary.get_figure("revenue")
    figure = summary.get_figure(key)
    if revenue is None or figure is None:
        return None
    ratio = safe_ratio(figure, revenue)
    return None if ratio is None else ratio * HUNDRED


def current_ratio(summary: Optional[FinancialStatementSummary]) -> Optional[Decimal]:
    if summary is None:
        return None
    assets = summary.get_figure("current_assets")
    liabilities = summary.get_figure("current_liabilities")
    if assets is None or liabilities is None:
        return None
    return safe_ratio(assets, liabilities)


def debt_equity_ratio(summary: Optional[FinancialStatementSummary]) -> Optional[Decimal]:
    if summary is None:
        return None
    debt = summary.get_figure("total_debt")
    if debt is None:
        debt = summary.get_figure("total_liabilities")
    equity = summary.get_figure("equity")
    if debt is None or equity is None:
        return None
    return safe_ratio(debt, equity)


def days_outstanding(
    balance_sheet: Optional[FinancialStatementSummary],
    balance_key: str,
    profit_and_loss: Optional[FinancialStatementSummary],
    flow_keys: tuple[str, ...],
    days_in_year: Decimal,
) -> Optional[Decimal]:
    if balance_sheet is None or profit_and_loss is None:
        return None
    balance = balance_sheet.get_figure(balance_key)
    if balance is None:
        return None
    for key in flow_keys:
        flow = profit_and_loss.get_figure(key)
        if flow is not None:
            ratio = safe_ratio(balance, flow)
            return None if ratio is None else ratio * days_in_year
    return None

# Import order is registration order, which fixes finding order within each section.
from .sv_balance_sheet_identity import SV_BALANCE_SHEET_IDENTITY
from .sv_trial_balance_tally import SV_TRIAL_BALANCE_TALLY
from .sv_trial_balance_two_sided_accounts import SV_TRIAL_BALANCE_TWO_SIDED_ACCOUNTS
from .sv_negative_asset_balances import SV_NEGATIVE_ASSET_BALANCES
from .sv_current_ratio import SV_CURRENT_RATIO
from .sv_total_assets_variance import SV_TOTAL_ASSETS_VARIANCE
from .pl_gross_profit_recompute import PL_GROSS_PROFIT_RECOMPUTE
from .pl_net_profit_recompute import PL_NET_PROFIT_RECOMPUTE
from .pl_disallowable_expenses import PL_DISALLOWABLE_EXPENSES
from .pl_cash_payment_limit import PL_CASH_PAYMENT_LIMIT
from .ra_profitability import RA_PROFITABILITY
from .ra_liquidity_leverage import RA_LIQUIDITY_LEVERAGE
from .ra_working_capital_days import RA_WORKING_CAPITAL_DAYS
from .gst_turnover_reconciles import GST_TURNOVER_RECONCILES
from .gst_itc_reconciles import GST_ITC_RECONCILES
from .gst_returns_filed_on_time import GST_RETURNS_FILED_ON_TIME
from .cs_obligations import CS_OBLIGATIONS

__all__ = [
    "SV_BALANCE_SHEET_IDENTITY",
    "SV_TRIAL_BALANCE_TALLY",
    "SV_TRIAL_BALANCE_TWO_SIDED_ACCOUNTS",
    "SV_NEGATIVE_ASSET_BALANCES",
    "SV_CURRENT_RATIO",
    "SV_TOTAL_ASSETS_VARIANCE",
    "PL_GROSS_PROFIT_RECOMPUTE",
    "PL_NET_PROFIT_RECOMPUTE",
    "PL_DISALLOWABLE_EXPENSES",
    "PL_CASH_PAYMENT_LIMIT",
    "RA_PROFITABILITY",
    "RA_LIQUIDITY_LEVERAGE",
    "RA_WORKING_CAPITAL_DAYS",
    "GST_TURNOVER_RECONCILES",
    "GST_ITC_RECONCILES",
    "GST_RETURNS_FILED_ON_TIME",
    "CS_OBLIGATIONS",
]

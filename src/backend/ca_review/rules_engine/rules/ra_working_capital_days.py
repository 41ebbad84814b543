from __future__ import annotations

from ..config import RatioAnalysisRuleConfig
from ..context import POLICY_CATEGORY, RuleContext, round_to
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule
from ._ratios import days_outstanding, describe


@register_rule
class RA_WORKING_CAPITAL_DAYS(Rule):
    rule_id = "RA-WORKING-CAPITAL-DAYS"
    rule_title = "Debtor days and creditor days"
    section = ReviewSection.RATIO_ANALYSIS
    documents = (DocumentKind.BALANCE_SHEET, DocumentKind.PROFIT_AND_LOSS)
    config_model = RatioAnalysisRuleConfig

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        days_in_year = ctx.reference.lookup_decimal(POLICY_CATEGORY, "days_in_year")
        bs = ctx.document(DocumentKind.BALANCE_SHEET)
        pl = ctx.document(DocumentKind.PROFIT_AND_LOSS)
        prior_bs = bs.prior_period if cfg.include_prior_year else None
        prior_pl = pl.prior_period if cfg.include_prior_year else None

        findings: list[Finding] = []
        for label, key, balance_key, flow_keys in (
            ("Debtor Days", "debtor_days", "trade_receivables", ("revenue",)),
            ("Creditor Days", "creditor_days", "trade_payables", ("purchases", "direct_costs")),
        ):
            value = days_outstanding(bs, balance_key, pl, flow_keys, days_in_year)
            if value is None:
                continue
            prior_value = days_outstanding(prior_bs, balance_key, prior_pl, flow_keys, days_in_year)
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    describe(label, value, prior_value, places=0, suffix=" days") + ".",
                    ratio=key,
                    value=str(round_to(value, 0)),
                    previous_value=None if prior_value is None else str(round_to(prior_value, 0)),
                )
            )
        return findings

from __future__ import annotations

from ..config import RatioAnalysisRuleConfig
from ..context import RuleContext, round_to
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule
from ._ratios import current_ratio, debt_equity_ratio, describe


@register_rule
class RA_LIQUIDITY_LEVERAGE(Rule):
    rule_id = "RA-LIQUIDITY-LEVERAGE"
    rule_title = "Current ratio and debt-equity ratio"
    section = ReviewSection.RATIO_ANALYSIS
    documents = (DocumentKind.BALANCE_SHEET,)
    config_model = RatioAnalysisRuleConfig

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        bs = ctx.document(DocumentKind.BALANCE_SHEET)
        prior = bs.prior_period if cfg.include_prior_year else None

        findings: list[Finding] = []
        for label, key, compute in (
            ("Current Ratio", "current_ratio", current_ratio),
            ("Debt-Equity Ratio", "debt_equity_ratio", debt_equity_ratio),
        ):
            value = compute(bs)
            if value is None:
                continue
            prior_value = compute(prior)
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    describe(label, value, prior_value, places=2) + ".",
                    ratio=key,
                    value=str(round_to(value, 2)),
                    previous_value=None if prior_value is None else str(round_to(prior_value, 2)),
                )
            )
        return findings

from __future__ import annotations

from ..config import RatioAnalysisRuleConfig
from ..context import RuleContext, round_to
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule
from ._ratios import describe, margin


@register_rule
class RA_PROFITABILITY(Rule):
    rule_id = "RA-PROFITABILITY"
    rule_title = "Gross and net profit margins"
    section = ReviewSection.RATIO_ANALYSIS
    documents = (DocumentKind.PROFIT_AND_LOSS,)
    config_model = RatioAnalysisRuleConfig

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        pl = ctx.document(DocumentKind.PROFIT_AND_LOSS)
        prior = pl.prior_period if cfg.include_prior_year else None

        findings: list[Finding] = []
        for label, key in (("Gross Profit Margin", "gross_profit"), ("Net Profit Margin", "net_profit")):
            value = margin(pl, key)
            if value is None:
                continue
            prior_value = margin(prior, key)
            findings.append(
                self.finding(
                    FindingSeverity.NORMAL,
                    describe(label, value, prior_value, places=1, suffix="%") + ".",
                    ratio=key.replace("_profit", "_profit_pct"),
                    value=str(round_to(value, 1)),
                    previous_value=None if prior_value is None else str(round_to(prior_value, 1)),
                )
            )
        return findings

from __future__ import annotations

from ..config import NegativeAssetBalancesRuleConfig
from ..context import RuleContext
from ..models import DocumentKind, Finding, FindingSeverity, ReviewSection
from ..registry import register_rule
from ..rule import Rule


@register_rule
class SV_NEGATIVE_ASSET_BALANCES(Rule):
    rule_id = "SV-NEGATIVE-ASSET-BALANCES"
    rule_title = "No negative balances in asset accounts (provisions excepted)"
    section = ReviewSection.STRUCTURAL_VALIDATION
    documents = (DocumentKind.BALANCE_SHEET,)
    config_model = NegativeAssetBalancesRuleConfig

    def evaluate(self, ctx: RuleContext) -> list[Finding]:
        cfg = self.config(ctx)
        markers = [m.lower() for m in cfg.provision_markers]
        bs = ctx.document(DocumentKind.BALANCE_SHEET)

        negative = []
        for acct in bs.accounts:
            if not acct.is_asset:
                continue
            label = f"{acct.name} {acct.account_type}".lower()
            if any(marker in label for marker in markers):
                continue
            if acct.closing_balance < 0:
                negative.append(acct.name)

        if not negative:
            return []
        return [
            self.finding(
                FindingSeverity.REQUIRES_CLARIFICATION,
                f"Negative values found in asset accounts: {', '.join(negative)}.",
                accounts=negative,
            )
        ]

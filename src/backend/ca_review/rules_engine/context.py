from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, FrozenSet, Optional

from .config import ClientRulesConfig
from .models import ComplianceOutcome, DocumentKind, FinancialStatementSummary
from .reference import ReferenceTable

POLICY_CATEGORY = "review_policy"


@dataclass(frozen=True)
class RuleContext:
    compliance: ComplianceOutcome
    reference: ReferenceTable
    documents: Dict[DocumentKind, FinancialStatementSummary] = field(default_factory=dict)
    # Supplied but failed required-figure checks; distinct from "not supplied".
    rejected_documents: FrozenSet[DocumentKind] = frozenset()
    client_config: ClientRulesConfig = field(default_factory=ClientRulesConfig)

    def document(self, kind: DocumentKind) -> Optional[FinancialStatementSummary]:
        return self.documents.get(kind)

    def tolerance(self) -> Decimal:
        return self.reference.lookup_decimal(POLICY_CATEGORY, "tolerance")


def exceeds_tolerance(difference: Decimal, tolerance: Decimal) -> bool:
    return abs(difference) > tolerance


def _quantize(value: Decimal, exponent: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize() must hold every digit down to the target exponent.
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.as_tuple().exponent + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def quantize_amount(value: Decimal, quantize: Optional[Decimal] = Decimal("0.01")) -> Decimal:
    if quantize is None:
        return value
    return _quantize(value, quantize)


def round_to(value: Decimal, places: int) -> Decimal:
    return _quantize(value, Decimal(1).scaleb(-places))


def percentage_change(current: Decimal, previous: Decimal) -> Optional[Decimal]:
    if previous == 0:
        return None
    return (current - previous) / abs(previous) * Decimal("100")


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Optional[Decimal]:
    if denominator == 0:
        return None
    return numerator / denominator


def format_amount(value: Decimal) -> str:
    """Format a currency amount with Indian digit grouping, e.g. ₹2,50,000 or ₹1,234.50."""
    amount = quantize_amount(value)
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    whole = int(amount)
    fraction = amount - whole

    digits = str(whole)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    if fraction:
        cents = str(fraction.quantize(Decimal("0.01")))[2:]
        return f"{sign}₹{digits}.{cents}"
    return f"{sign}₹{digits}"

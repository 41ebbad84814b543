from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import ReferenceDataMissing, UnknownReferenceSource


class ReferenceCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    as_of: date
    values: Dict[str, Any] = Field(default_factory=dict)


class ReferenceTable(BaseModel):
    """Statutory thresholds keyed by (category, key).

    Values change every fiscal year, so the table is passed into the deriver and
    validator rather than compiled into them. Each category carries the date it
    became effective.
    """

    model_config = ConfigDict(frozen=True)

    version: str = ""
    categories: Dict[str, ReferenceCategory] = Field(default_factory=dict)

    def category(self, category: str) -> ReferenceCategory:
        found = self.categories.get(category)
        if found is None:
            raise ReferenceDataMissing(category)
        return found

    def lookup(self, category: str, key: str) -> Any:
        values = self.category(category).values
        if key not in values or values[key] is None:
            raise ReferenceDataMissing(category, key)
        return values[key]

    def lookup_decimal(self, category: str, key: str) -> Decimal:
        raw = self.lookup(category, key)
        try:
            value = Decimal(str(raw))
        except InvalidOperation as exc:
            raise ReferenceDataMissing(category, key) from exc
        if not value.is_finite():
            raise ReferenceDataMissing(category, key)
        return value

    def lookup_str_list(self, category: str, key: str) -> List[str]:
        raw = self.lookup(category, key)
        if isinstance(raw, str):
            return [raw]
        return [str(item) for item in raw]

    def as_of(self, category: str) -> date:
        return self.category(category).as_of

    def categories_for(self, source: str) -> Dict[str, Dict[str, Any]]:
        names = STATUTORY_SOURCES.get((source or "").strip().lower())
        if names is None:
            raise UnknownReferenceSource(f"Unauthorized statutory data source '{source}'.", field="source")
        out: Dict[str, Dict[str, Any]] = {}
        for name in names:
            category = self.categories.get(name)
            if category is None:
                continue
            out[name] = {"as_of": category.as_of.isoformat(), **category.values}
        return out


# Statutory sources exposed to the shell, mapped to the categories they publish.
STATUTORY_SOURCES: Mapping[str, tuple[str, ...]] = {
    "income-tax": ("audit_thresholds", "income_tax", "tds"),
    "gst": ("gst",),
    "mca": ("mca",),
}


DEFAULT_REFERENCE_DATA: Dict[str, Any] = {
    "version": "FY2024-25",
    "categories": {
        "audit_thresholds": {
            "as_of": "2024-04-01",
            "values": {
                "business_turnover": "10000000",
                "profession_receipts": "5000000",
                "partnership_turnover": "10000000",
                "llp_turnover": "4000000",
                "llp_contribution": "2500000",
                "presumptive_44ad_turnover": "20000000",
            },
        },
        "document_thresholds": {
            "as_of": "2024-04-01",
            "values": {"bank_statements_turnover": "5000000"},
        },
        "tds": {
            "as_of": "2024-04-01",
            "values": {
                "applicability_turnover": "10000000",
                "salary": "30% above ₹10L",
                "contractor_individual": "1%",
                "contractor_company": "2%",
                "professional_fees": "10%",
                "rent": "10%",
            },
        },
        "income_tax": {
            "as_of": "2024-04-01",
            "values": {
                "cash_payment_limit": "10000",
                "cash_payment_section": "40A(3)",
                "itr_due_date_non_audit": "2025-07-31",
                "itr_due_date_audit": "2025-10-31",
                "itr_due_date_transfer_pricing": "2025-11-30",
            },
        },
        "gst": {
            "as_of": "2024-04-01",
            "values": {
                "registration_goods": "4000000",
                "registration_services": "2000000",
                "registration_special_category": "1000000",
                "GSTR-1": "Outward supplies",
                "GSTR-3B": "Summary return",
                "GSTR-9": "Annual return",
                "GSTR-9C": "Reconciliation statement",
            },
        },
        "mca": {
            "as_of": "2024-04-01",
            "values": {
                "Form AOC-4": "Financial statements - Annual",
                "Form MGT-7": "Annual return",
                "Form ADT-1": "Appointment of auditor",
                "Form DIR-3 KYC": "Director KYC",
                "Form 8": "LLP statement of account - Annual",
                "Form 11": "LLP annual return",
            },
        },
        "review_policy": {
            "as_of": "2024-04-01",
            "values": {
                "tolerance": "0.01",
                "total_assets_variance_pct": "20",
                "disallowable_keywords": ["personal", "penalty", "fine", "political donation"],
                "cash_payment_modes": ["cash"],
                "days_in_year": "365",
            },
        },
    },
}


def default_reference_table() -> ReferenceTable:
    return ReferenceTable.model_validate(DEFAULT_REFERENCE_DATA)

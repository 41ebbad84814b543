from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidDocumentData


class EntityType(str, Enum):
    INDIVIDUAL = "individual"
    PROPRIETORSHIP = "proprietorship"
    PARTNERSHIP = "partnership"
    LLP = "llp"
    PRIVATE_COMPANY = "private"
    PUBLIC_COMPANY = "public"
    OTHER = "other"


COMPANY_ENTITY_TYPES = frozenset({EntityType.PRIVATE_COMPANY, EntityType.PUBLIC_COMPANY})
MCA_ENTITY_TYPES = frozenset({EntityType.PRIVATE_COMPANY, EntityType.PUBLIC_COMPANY, EntityType.LLP})


class GSTStatus(str, Enum):
    REGISTERED = "registered"
    UNREGISTERED = "unregistered"


class DocumentKind(str, Enum):
    BALANCE_SHEET = "balance_sheet"
    PROFIT_AND_LOSS = "profit_and_loss"
    TRIAL_BALANCE = "trial_balance"
    GST_RECONCILIATION = "gst_reconciliation"
    GST_RETURNS = "gst_returns"
    BANK_STATEMENTS = "bank_statements"
    PREVIOUS_YEAR_FINANCIALS = "previous_year_financials"
    AUDIT_REPORT = "audit_report"


MANDATORY_DOCUMENTS: Tuple[DocumentKind, ...] = (
    DocumentKind.BALANCE_SHEET,
    DocumentKind.PROFIT_AND_LOSS,
    DocumentKind.TRIAL_BALANCE,
)

# Document kinds the validator accepts numeric summaries for.
VALIDATED_DOCUMENTS: Tuple[DocumentKind, ...] = MANDATORY_DOCUMENTS + (DocumentKind.GST_RECONCILIATION,)

REQUIRED_FIGURES: Dict[DocumentKind, Tuple[str, ...]] = {
    DocumentKind.BALANCE_SHEET: (
        "total_assets",
        "total_liabilities",
        "equity",
        "current_assets",
        "current_liabilities",
    ),
    DocumentKind.PROFIT_AND_LOSS: (
        "revenue",
        "direct_costs",
        "gross_profit",
        "operating_expenses",
        "other_expenses",
        "other_income",
        "net_profit",
    ),
    DocumentKind.TRIAL_BALANCE: ("total_debit", "total_credit"),
    DocumentKind.GST_RECONCILIATION: (
        "books_turnover",
        "gstr3b_turnover",
        "itc_claimed_books",
        "itc_gstr2b",
    ),
}


class FindingSeverity(str, Enum):
    NORMAL = "Normal"
    REQUIRES_CLARIFICATION = "RequiresClarification"
    HIGH_RISK = "HighRisk"


class ReviewSection(str, Enum):
    STRUCTURAL_VALIDATION = "Structural Validation"
    PROFIT_AND_LOSS_REVIEW = "P&L Review"
    RATIO_ANALYSIS = "Ratio Analysis"
    GST_REVIEW = "GST Review"
    COMPLIANCE_STATUS = "Compliance Status"


SECTION_ORDER: Tuple[ReviewSection, ...] = tuple(ReviewSection)

# Statement amounts are rupees; magnitudes of 10^18 or more are extraction errors.
MAX_AMOUNT_EXPONENT = 18


def amount_in_range(value: Decimal) -> bool:
    return value.is_finite() and (value.is_zero() or value.adjusted() < MAX_AMOUNT_EXPONENT)


def _require_finite_non_negative(value: Optional[Decimal], name: str) -> Optional[Decimal]:
    if value is None:
        return value
    if not value.is_finite():
        raise ValueError(f"{name} must be a finite number")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


class ClientProfile(BaseModel):
    """Facts about one reviewed entity for one financial period.

    Frozen: re-profiling a client creates a new profile and a new review cycle.
    """

    model_config = ConfigDict(frozen=True)

    client_name: str
    entity_type: EntityType
    business_nature: str = ""
    financial_year: str
    turnover: Decimal
    contribution: Optional[Decimal] = None
    gst_status: GSTStatus = GSTStatus.UNREGISTERED
    accounting_method: str = "accrual"
    previous_year_available: bool = False
    profile_date: Optional[datetime] = None

    @field_validator("turnover")
    @classmethod
    def _turnover_finite(cls, value: Decimal) -> Decimal:
        return _require_finite_non_negative(value, "turnover")

    @field_validator("contribution")
    @classmethod
    def _contribution_finite(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return _require_finite_non_negative(value, "contribution")

    @property
    def is_profession(self) -> bool:
        return "profession" in (self.business_nature or "").lower()


class ConditionalDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DocumentKind
    name: str
    reason: str


class RequiredDocuments(BaseModel):
    model_config = ConfigDict(frozen=True)

    mandatory: Tuple[DocumentKind, ...] = MANDATORY_DOCUMENTS
    conditional: Tuple[ConditionalDocument, ...] = ()

    @field_validator("mandatory")
    @classmethod
    def _mandatory_is_fixed(cls, value: Tuple[DocumentKind, ...]) -> Tuple[DocumentKind, ...]:
        if tuple(value) != MANDATORY_DOCUMENTS:
            raise ValueError("mandatory documents are always balance sheet, profit and loss and trial balance")
        return value

    def all_kinds(self) -> Tuple[DocumentKind, ...]:
        return self.mandatory + tuple(doc.kind for doc in self.conditional)


class ComplianceFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    gst: bool = False
    income_tax: bool = True
    tds: bool = False
    audit: bool = False
    mca: bool = False


class ComplianceOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    audit_applicable: bool
    audit_basis: str = ""
    required_documents: RequiredDocuments = Field(default_factory=RequiredDocuments)
    compliance_flags: ComplianceFlags = Field(default_factory=ComplianceFlags)
    reference_version: str = ""


class UploadMetadata(BaseModel):
    """Lightweight upload facts kept for the audit trail; file contents are never stored."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: int = 0
    mime_type: str = ""
    last_modified: Optional[datetime] = None


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    amount: Decimal
    payment_mode: str = ""


class AccountLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    account_type: str = ""
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    balance: Optional[Decimal] = None

    @property
    def is_asset(self) -> bool:
        return "asset" in self.account_type.lower()

    @property
    def is_provision(self) -> bool:
        text = f"{self.name} {self.account_type}".lower()
        return "provision" in text

    @property
    def closing_balance(self) -> Decimal:
        if self.balance is not None:
            return self.balance
        return self.debit - self.credit


class FinancialStatementSummary(BaseModel):
    """Numeric aggregates for one document kind, produced by upstream extraction."""

    model_config = ConfigDict(frozen=True)

    kind: str
    figures: Dict[str, Decimal] = Field(default_factory=dict)
    line_items: Tuple[LineItem, ...] = ()
    accounts: Tuple[AccountLine, ...] = ()
    flags: Dict[str, bool] = Field(default_factory=dict)
    prior_period: Optional["FinancialStatementSummary"] = None
    upload: Optional[UploadMetadata] = None

    def get_figure(self, key: str) -> Optional[Decimal]:
        value = self.figures.get(key)
        if value is None:
            return None
        if not value.is_finite():
            raise InvalidDocumentData(
                f"Figure '{key}' on {self.kind} is not a finite number.",
                document=self.kind,
                field=key,
            )
        if not amount_in_range(value):
            raise InvalidDocumentData(
                f"Figure '{key}' on {self.kind} is outside the supported amount range.",
                document=self.kind,
                field=key,
            )
        return value

    def require(self, key: str) -> Decimal:
        value = self.get_figure(key)
        if value is None:
            raise InvalidDocumentData(
                f"Required figure '{key}' is missing from {self.kind}.",
                document=self.kind,
                field=key,
            )
        return value

    def ensure_required_figures(self) -> None:
        for key in REQUIRED_FIGURES.get(DocumentKind(self.kind), ()):
            self.require(key)
        for key in self.figures:
            self.get_figure(key)
        for idx, item in enumerate(self.line_items):
            if not amount_in_range(item.amount):
                raise InvalidDocumentData(
                    f"Line item '{item.description}' on {self.kind} has an unusable amount.",
                    document=self.kind,
                    field=f"line_items[{idx}].amount",
                )
        for idx, account in enumerate(self.accounts):
            for name in ("debit", "credit", "balance"):
                value = getattr(account, name)
                if value is not None and not amount_in_range(value):
                    raise InvalidDocumentData(
                        f"Account '{account.name}' on {self.kind} has an unusable {name}.",
                        document=self.kind,
                        field=f"accounts[{idx}].{name}",
                    )


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: FindingSeverity
    message: str
    origin: str
    section: ReviewSection
    values: Dict[str, Any] = Field(default_factory=dict)


class FindingSection(BaseModel):
    title: ReviewSection
    findings: List[Finding] = Field(default_factory=list)


class EngineErrorRecord(BaseModel):
    kind: str
    message: str
    document: Optional[str] = None
    field: Optional[str] = None
    rule_id: Optional[str] = None


class ReviewResult(BaseModel):
    run_id: str
    generated_at: datetime

    sections: List[FindingSection] = Field(default_factory=list)
    errors: List[EngineErrorRecord] = Field(default_factory=list)
    totals: Dict[FindingSeverity, int] = Field(default_factory=dict)

    def findings(self) -> List[Finding]:
        return [finding for section in self.sections for finding in section.findings]

    def by_severity(self, severity: FindingSeverity) -> List[Finding]:
        return [finding for finding in self.findings() if finding.severity == severity]

    def by_origin(self, origin: str) -> List[Finding]:
        return [finding for finding in self.findings() if finding.origin == origin]

    def section(self, title: ReviewSection) -> Optional[FindingSection]:
        for section in self.sections:
            if section.title == title:
                return section
        return None


class ReportSection(BaseModel):
    title: str
    content: Optional[str] = None
    points: Optional[List[str]] = None


class ReviewReport(BaseModel):
    title: str
    client_name: str
    financial_year: str
    report_date: date
    sections: List[ReportSection] = Field(default_factory=list)
    disclaimer: str

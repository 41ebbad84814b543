"""Derives audit applicability, required documents and compliance flags from a client profile.

Pure: the same profile and reference table always give the same outcome.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import List, Tuple

import structlog

from .errors import InvalidProfile
from .models import (
    COMPANY_ENTITY_TYPES,
    MCA_ENTITY_TYPES,
    ClientProfile,
    ComplianceFlags,
    ComplianceOutcome,
    ConditionalDocument,
    DocumentKind,
    EntityType,
    GSTStatus,
    RequiredDocuments,
)
from .reference import ReferenceTable

logger = structlog.get_logger(__name__)

AUDIT_CATEGORY = "audit_thresholds"


def _amount(value: object, field: str, label: str) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidProfile(f"{label} must be a finite, non-negative amount.", field=field) from exc
    if isinstance(value, bool) or not amount.is_finite() or amount < 0:
        raise InvalidProfile(f"{label} must be a finite, non-negative amount.", field=field)
    return amount


def _check_profile(profile: ClientProfile) -> ClientProfile:
    # Profiles built with model_construct() bypass field validation.
    if not isinstance(profile.entity_type, EntityType):
        try:
            EntityType(profile.entity_type)
        except ValueError as exc:
            raise InvalidProfile(
                f"Unknown entity type '{profile.entity_type}'.", field="entity_type"
            ) from exc
    turnover = _amount(profile.turnover, "turnover", "Turnover")
    contribution = profile.contribution
    if contribution is not None:
        contribution = _amount(contribution, "contribution", "Capital contribution")
    if turnover is profile.turnover and contribution is profile.contribution:
        return profile
    return profile.model_copy(update={"turnover": turnover, "contribution": contribution})


def determine_audit_applicability(profile: ClientProfile, table: ReferenceTable) -> Tuple[bool, str]:
    """Return (applicable, basis). First matching rule wins; thresholds are strict."""
    entity_type = EntityType(profile.entity_type)
    turnover = profile.turnover

    if entity_type in COMPANY_ENTITY_TYPES:
        return True, "Companies Act audit is mandatory for companies"

    if entity_type == EntityType.LLP:
        turnover_limit = table.lookup_decimal(AUDIT_CATEGORY, "llp_turnover")
        contribution_limit = table.lookup_decimal(AUDIT_CATEGORY, "llp_contribution")
        contribution = profile.contribution or Decimal("0")
        if turnover > turnover_limit:
            return True, "LLP turnover exceeds the statutory audit threshold"
        if contribution > contribution_limit:
            return True, "LLP capital contribution exceeds the statutory audit threshold"
        return False, "LLP turnover and contribution are within audit thresholds"

    if entity_type == EntityType.PARTNERSHIP:
        limit = table.lookup_decimal(AUDIT_CATEGORY, "partnership_turnover")
        if turnover > limit:
            return True, "Partnership turnover exceeds the tax audit threshold"
        return False, "Partnership turnover is within the tax audit threshold"

    # Tax audit under section 44AB.
    if profile.is_profession:
        limit = table.lookup_decimal(AUDIT_CATEGORY, "profession_receipts")
        if turnover > limit:
            return True, "Gross receipts from profession exceed the tax audit threshold"
        return False, "Gross receipts from profession are within the tax audit threshold"

    limit = table.lookup_decimal(AUDIT_CATEGORY, "business_turnover")
    if turnover > limit:
        return True, "Business turnover exceeds the tax audit threshold"
    return False, "Business turnover is within the tax audit threshold"


def determine_required_documents(
    profile: ClientProfile,
    table: ReferenceTable,
    *,
    audit_applicable: bool,
) -> RequiredDocuments:
    conditional: List[ConditionalDocument] = []

    if profile.gst_status == GSTStatus.REGISTERED:
        conditional.append(
            ConditionalDocument(
                kind=DocumentKind.GST_RETURNS,
                name="GST Returns (GSTR-1, GSTR-3B)",
                reason="GST registered entity",
            )
        )

    bank_limit = table.lookup_decimal("document_thresholds", "bank_statements_turnover")
    if profile.turnover > bank_limit:
        conditional.append(
            ConditionalDocument(
                kind=DocumentKind.BANK_STATEMENTS,
                name="Bank Statements",
                reason=f"Turnover exceeds {_lakhs(bank_limit)}",
            )
        )

    if profile.previous_year_available:
        conditional.append(
            ConditionalDocument(
                kind=DocumentKind.PREVIOUS_YEAR_FINANCIALS,
                name="Previous Year Financials",
                reason="For comparative analysis",
            )
        )

    if audit_applicable:
        conditional.append(
            ConditionalDocument(
                kind=DocumentKind.AUDIT_REPORT,
                name="Audit Report",
                reason="Audit applicable",
            )
        )

    return RequiredDocuments(conditional=tuple(conditional))


def determine_compliance_flags(
    profile: ClientProfile,
    table: ReferenceTable,
    *,
    audit_applicable: bool,
) -> ComplianceFlags:
    tds_limit = table.lookup_decimal("tds", "applicability_turnover")
    return ComplianceFlags(
        gst=profile.gst_status == GSTStatus.REGISTERED,
        income_tax=True,
        tds=profile.turnover > tds_limit,
        audit=audit_applicable,
        mca=EntityType(profile.entity_type) in MCA_ENTITY_TYPES,
    )


def derive(profile: ClientProfile, table: ReferenceTable) -> ComplianceOutcome:
    profile = _check_profile(profile)

    audit_applicable, audit_basis = determine_audit_applicability(profile, table)
    outcome = ComplianceOutcome(
        audit_applicable=audit_applicable,
        audit_basis=audit_basis,
        required_documents=determine_required_documents(
            profile, table, audit_applicable=audit_applicable
        ),
        compliance_flags=determine_compliance_flags(
            profile, table, audit_applicable=audit_applicable
        ),
        reference_version=table.version,
    )
    logger.debug(
        "compliance.derived",
        client=profile.client_name,
        financial_year=profile.financial_year,
        audit_applicable=audit_applicable,
        conditional_documents=[doc.kind.value for doc in outcome.required_documents.conditional],
    )
    return outcome


def _lakhs(amount: Decimal) -> str:
    lakhs = amount / Decimal("100000")
    if lakhs == lakhs.to_integral_value():
        return f"₹{int(lakhs)} lakhs"
    return f"₹{lakhs.normalize()} lakhs"

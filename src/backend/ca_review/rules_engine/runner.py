from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

import structlog

from .config import ClientRulesConfig
from .context import RuleContext
from .errors import InvalidDocumentData, ReferenceDataMissing, UnsupportedDocumentType
from .models import (
    MANDATORY_DOCUMENTS,
    SECTION_ORDER,
    VALIDATED_DOCUMENTS,
    ComplianceOutcome,
    DocumentKind,
    EngineErrorRecord,
    FinancialStatementSummary,
    Finding,
    FindingSection,
    FindingSeverity,
    ReviewResult,
    ReviewSection,
)
from .reference import ReferenceTable
from .registry import registry

logger = structlog.get_logger(__name__)

Summaries = Union[Iterable[FinancialStatementSummary], Mapping[str, FinancialStatementSummary]]


class RulesRunner:
    def __init__(self, rules: Optional[Iterable] = None):
        self._rules = list(rules) if rules is not None else registry.create_all()

    def run(
        self,
        summaries: Summaries,
        compliance: ComplianceOutcome,
        reference: ReferenceTable,
        *,
        client_config: Optional[ClientRulesConfig] = None,
        rule_ids: Optional[set[str]] = None,
        document_errors: Sequence[InvalidDocumentData] = (),
    ) -> ReviewResult:
        """Evaluate registered rules.

        `document_errors` are failures raised while converting upstream payloads; the documents
        they name are treated as supplied-but-invalid.
        """
        run_id = str(uuid.uuid4())
        errors: List[EngineErrorRecord] = [
            EngineErrorRecord.model_validate(exc.to_record()) for exc in document_errors
        ]
        documents, rejected = self._accept_documents(summaries, errors)
        for exc in document_errors:
            kind = _document_kind(exc.document)
            if kind is not None and kind not in documents:
                rejected.add(kind)

        self._missing_mandatory(documents, rejected, errors)

        ctx = RuleContext(
            compliance=compliance,
            reference=reference,
            documents=documents,
            rejected_documents=frozenset(rejected),
            client_config=client_config or ClientRulesConfig(),
        )

        by_section: Dict[ReviewSection, List[Finding]] = {section: [] for section in SECTION_ORDER}
        for rule in self._rules:
            if rule_ids is not None and rule.rule_id not in rule_ids:
                continue
            if not rule.config(ctx).enabled:
                continue
            if not rule.is_applicable(ctx):
                continue
            if any(kind not in documents for kind in rule.documents):
                continue
            try:
                findings = rule.evaluate(ctx)
            except (InvalidDocumentData, ReferenceDataMissing) as exc:
                errors.append(EngineErrorRecord.model_validate(exc.to_record(rule_id=rule.rule_id)))
                logger.warning(
                    "review.rule_failed",
                    run_id=run_id,
                    rule_id=rule.rule_id,
                    kind=exc.kind,
                    field=exc.field,
                )
                continue
            by_section[rule.section].extend(findings)

        sections = [
            FindingSection(title=section, findings=by_section[section])
            for section in SECTION_ORDER
            if section != ReviewSection.GST_REVIEW or compliance.compliance_flags.gst
        ]

        totals: dict[FindingSeverity, int] = {}
        for section in sections:
            for finding in section.findings:
                totals[finding.severity] = totals.get(finding.severity, 0) + 1

        logger.info(
            "review.completed",
            run_id=run_id,
            findings=sum(totals.values()),
            errors=len(errors),
        )
        return ReviewResult(
            run_id=run_id,
            generated_at=datetime.now(timezone.utc),
            sections=sections,
            errors=errors,
            totals=totals,
        )

    def _accept_documents(
        self,
        summaries: Summaries,
        errors: List[EngineErrorRecord],
    ) -> tuple[Dict[DocumentKind, FinancialStatementSummary], Set[DocumentKind]]:
        if isinstance(summaries, Mapping):
            summaries = list(summaries.values())

        documents: Dict[DocumentKind, FinancialStatementSummary] = {}
        rejected: Set[DocumentKind] = set()
        for summary in summaries:
            kind = _document_kind(summary.kind)
            if kind is None or kind not in VALIDATED_DOCUMENTS:
                exc = UnsupportedDocumentType(
                    f"Document kind '{summary.kind}' cannot be validated.",
                    document=str(summary.kind),
                )
                errors.append(EngineErrorRecord.model_validate(exc.to_record()))
                logger.warning("review.document_unsupported", document=str(summary.kind))
                continue
            if kind in documents or kind in rejected:
                exc = InvalidDocumentData(
                    f"{kind.value} was supplied more than once; only the first copy is checked.",
                    document=kind.value,
                )
                errors.append(EngineErrorRecord.model_validate(exc.to_record()))
                continue
            try:
                summary.ensure_required_figures()
            except InvalidDocumentData as exc:
                rejected.add(kind)
                errors.append(EngineErrorRecord.model_validate(exc.to_record()))
                logger.warning("review.document_invalid", document=kind.value, field=exc.field)
                continue
            documents[kind] = summary

        return documents, rejected

    def _missing_mandatory(self, documents, rejected, errors: List[EngineErrorRecord]) -> None:
        for kind in MANDATORY_DOCUMENTS:
            if kind not in documents and kind not in rejected:
                exc = InvalidDocumentData(f"{kind.value} was not provided.", document=kind.value)
                errors.append(EngineErrorRecord.model_validate(exc.to_record()))


def _document_kind(value: object) -> Optional[DocumentKind]:
    try:
        return DocumentKind(value)
    except ValueError:
        return None


def validate(
    summaries: Summaries,
    compliance: ComplianceOutcome,
    reference: ReferenceTable,
    *,
    client_config: Optional[ClientRulesConfig] = None,
    document_errors: Sequence[InvalidDocumentData] = (),
) -> ReviewResult:
    """Run every registered check over the supplied statement summaries."""
    return RulesRunner().run(
        summaries,
        compliance,
        reference,
        client_config=client_config,
        document_errors=document_errors,
    )

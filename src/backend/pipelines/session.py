from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import structlog

from ca_review.rules_engine.compliance import derive
from ca_review.rules_engine.config import ClientRulesConfig
from ca_review.rules_engine.errors import InvalidDocumentData, UnsupportedDocumentType
from ca_review.rules_engine.models import (
    MANDATORY_DOCUMENTS,
    ClientProfile,
    ComplianceOutcome,
    DocumentKind,
    FinancialStatementSummary,
    ReviewReport,
    ReviewResult,
    UploadMetadata,
)
from ca_review.rules_engine.reference import ReferenceTable
from ca_review.rules_engine.report import assemble_report
from ca_review.rules_engine.runner import validate

from .settings import APP_VERSION, DEFAULT_RETENTION_DAYS, DEFAULT_USAGE_LIMIT
from .storage import StoragePort

logger = structlog.get_logger(__name__)

PROFILE_KEY = "client_profile"
COMPLIANCE_KEY = "compliance"
UPLOADS_KEY = "uploaded_documents"
USAGE_KEY = "usage_count"
LATEST_REVIEW_KEY = "latest_review"
INSTALL_DATE_KEY = "install_date"
VERSION_KEY = "version"
# Per-run review results live under `review_<run_id>` and expire after the retention period.
REVIEW_PREFIX = "review_"


class SessionError(RuntimeError):
    pass


class ProfileRequired(SessionError):
    pass


class ReviewRequired(SessionError):
    pass


class UploadsRequired(SessionError):
    pass


class UsageLimitExceeded(SessionError):
    pass


@dataclass(frozen=True)
class UsageStatus:
    current: int
    max: int
    remaining: int
    exceeded: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class ReviewSession:
    """Sequences profile -> uploads -> review -> report for one client over a storage port.

    The rule engine itself never touches storage or the usage counter; this class owns both.
    """

    def __init__(
        self,
        storage: StoragePort,
        reference: ReferenceTable,
        *,
        usage_limit: int = DEFAULT_USAGE_LIMIT,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._reference = reference
        self._usage_limit = usage_limit
        self._retention = timedelta(days=retention_days)
        self._clock = clock

    @property
    def reference(self) -> ReferenceTable:
        return self._reference

    def initialize(self) -> bool:
        """Seed defaults on first install. Returns True when storage was initialised."""
        if USAGE_KEY in self._storage.get([USAGE_KEY]):
            return False
        self._storage.set(
            {
                USAGE_KEY: 0,
                INSTALL_DATE_KEY: self._clock().isoformat(),
                VERSION_KEY: APP_VERSION,
            }
        )
        logger.info("session.initialized", version=APP_VERSION)
        return True

    # Profile

    def save_profile(self, profile: ClientProfile) -> ComplianceOutcome:
        compliance = derive(profile, self._reference)
        # A new profile starts a new review cycle.
        self._storage.set(
            {
                PROFILE_KEY: profile.model_dump(mode="json"),
                COMPLIANCE_KEY: compliance.model_dump(mode="json"),
                UPLOADS_KEY: {},
                LATEST_REVIEW_KEY: None,
            }
        )
        logger.info(
            "session.profile_saved",
            client=profile.client_name,
            financial_year=profile.financial_year,
            audit_applicable=compliance.audit_applicable,
        )
        return compliance

    def load_profile(self) -> Optional[ClientProfile]:
        raw = self._storage.get([PROFILE_KEY]).get(PROFILE_KEY)
        return ClientProfile.model_validate(raw) if raw else None

    def load_compliance(self) -> Optional[ComplianceOutcome]:
        raw = self._storage.get([COMPLIANCE_KEY]).get(COMPLIANCE_KEY)
        return ComplianceOutcome.model_validate(raw) if raw else None

    def _require_profile(self) -> tuple[ClientProfile, ComplianceOutcome]:
        profile = self.load_profile()
        compliance = self.load_compliance()
        if profile is None or compliance is None:
            raise ProfileRequired("Complete client profiling first.")
        return profile, compliance

    # Uploads

    def record_upload(self, kind: DocumentKind | str, metadata: UploadMetadata) -> None:
        _, compliance = self._require_profile()
        try:
            document = DocumentKind(kind)
        except ValueError as exc:
            raise UnsupportedDocumentType(f"Unknown document kind '{kind}'.", document=str(kind)) from exc
        if document not in compliance.required_documents.all_kinds():
            raise UnsupportedDocumentType(
                f"{document.value} is not required for this client.", document=document.value
            )
        uploads = dict(self._storage.get([UPLOADS_KEY]).get(UPLOADS_KEY) or {})
        uploads[document.value] = metadata.model_dump(mode="json")
        self._storage.set({UPLOADS_KEY: uploads})

    def uploaded_documents(self) -> Dict[str, UploadMetadata]:
        raw = self._storage.get([UPLOADS_KEY]).get(UPLOADS_KEY) or {}
        return {kind: UploadMetadata.model_validate(meta) for kind, meta in raw.items()}

    def mandatory_documents_uploaded(self) -> bool:
        return self.load_compliance() is not None and not self.missing_mandatory_uploads()

    def missing_mandatory_uploads(self) -> List[str]:
        compliance = self.load_compliance()
        if compliance is None:
            return [kind.value for kind in MANDATORY_DOCUMENTS]
        uploaded = self.uploaded_documents()
        return [kind.value for kind in compliance.required_documents.mandatory if kind.value not in uploaded]

    # Usage

    def check_usage_limit(self) -> UsageStatus:
        current = int(self._storage.get([USAGE_KEY]).get(USAGE_KEY) or 0)
        return UsageStatus(
            current=current,
            max=self._usage_limit,
            remaining=max(self._usage_limit - current, 0),
            exceeded=current >= self._usage_limit,
        )

    def _require_usage_available(self) -> UsageStatus:
        status = self.check_usage_limit()
        if status.exceeded:
            raise UsageLimitExceeded(f"Usage limit reached ({status.current}/{status.max}).")
        return status

    # Review and report

    def run_review(
        self,
        summaries: Iterable[FinancialStatementSummary],
        *,
        client_config: Optional[ClientRulesConfig] = None,
        document_errors: Sequence[InvalidDocumentData] = (),
    ) -> ReviewResult:
        _, compliance = self._require_profile()
        missing = self.missing_mandatory_uploads()
        if missing:
            raise UploadsRequired(f"Upload all mandatory documents first (missing: {', '.join(missing)}).")
        self._require_usage_available()

        result = validate(
            list(summaries),
            compliance,
            self._reference,
            client_config=client_config,
            document_errors=document_errors,
        )
        payload = result.model_dump(mode="json")
        self._storage.set(
            {
                LATEST_REVIEW_KEY: payload,
                f"{REVIEW_PREFIX}{result.run_id}": {
                    "timestamp": _epoch_ms(self._clock()),
                    "result": payload,
                },
            }
        )
        return result

    def latest_review(self) -> Optional[ReviewResult]:
        raw = self._storage.get([LATEST_REVIEW_KEY]).get(LATEST_REVIEW_KEY)
        return ReviewResult.model_validate(raw) if raw else None

    def generate_report(self, *, report_date: Optional[date] = None) -> ReviewReport:
        self._require_usage_available()
        profile, compliance = self._require_profile()
        review = self.latest_review()
        if review is None:
            raise ReviewRequired("Process documents before generating a report.")

        report = assemble_report(profile, compliance, review, report_date=report_date)

        usage = self.check_usage_limit().current + 1
        self._storage.set({USAGE_KEY: usage})
        logger.info(
            "session.report_generated",
            client=profile.client_name,
            run_id=review.run_id,
            usage=usage,
            usage_limit=self._usage_limit,
        )
        return report

    # Housekeeping

    def cleanup_stale_reviews(self, now: Optional[datetime] = None) -> List[str]:
        cutoff = _epoch_ms((now or self._clock()) - self._retention)
        stale: List[str] = []
        for key, value in self._storage.get().items():
            if not key.startswith(REVIEW_PREFIX) or not isinstance(value, dict):
                continue
            timestamp: Any = value.get("timestamp")
            if isinstance(timestamp, (int, float)) and timestamp < cutoff:
                stale.append(key)
        if stale:
            self._storage.remove(stale)
            logger.info("session.cleanup", removed=len(stale))
        return stale

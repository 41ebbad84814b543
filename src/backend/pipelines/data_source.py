from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from adapters.extraction import (
    client_profile_from_form,
    statement_summary_from_payload,
    upload_metadata_from_payload,
)
from ca_review.rules_engine.errors import InvalidDocumentData
from ca_review.rules_engine.models import ClientProfile, FinancialStatementSummary, UploadMetadata

STATEMENT_FILES = (
    "balance_sheet.json",
    "profit_and_loss.json",
    "trial_balance.json",
    "gst_reconciliation.json",
)


@dataclass(frozen=True)
class ReviewInputs:
    profile: ClientProfile
    summaries: tuple[FinancialStatementSummary, ...] = ()
    # Payloads that could not be converted; passed to the validator so sibling documents still run.
    document_errors: tuple[InvalidDocumentData, ...] = ()
    uploads: dict[str, UploadMetadata] = field(default_factory=dict)


class DataSource(Protocol):
    def build_review_inputs(self, *, client_id: str, financial_year: str) -> ReviewInputs:
        """Return canonical inputs for the rules runner."""
        ...


def get_data_source(name: str) -> DataSource:
    """Resolve a data source implementation by name (only `fixtures` today)."""
    source = (name or "").strip().lower()
    if source in ("fixtures", ""):
        return FixturesDataSource()
    raise ValueError(f"Unknown data source '{name}' (expected 'fixtures').")


def _load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def build_fixture_review_inputs(fixtures_dir: Path) -> ReviewInputs:
    """Read profile.json, statement summaries and optional uploads.json from one directory."""
    profile = client_profile_from_form(_load_json(fixtures_dir / "profile.json"))

    summaries: list[FinancialStatementSummary] = []
    errors: list[InvalidDocumentData] = []
    for name in STATEMENT_FILES:
        path = fixtures_dir / name
        if not path.exists():
            continue
        kind = path.stem
        try:
            summaries.append(statement_summary_from_payload(_load_json(path), kind=kind))
        except InvalidDocumentData as exc:
            if exc.document is None:
                exc.document = kind
            errors.append(exc)

    uploads: dict[str, UploadMetadata] = {}
    uploads_path = fixtures_dir / "uploads.json"
    if uploads_path.exists():
        for kind, payload in (_load_json(uploads_path) or {}).items():
            metadata = upload_metadata_from_payload(payload)
            if metadata is not None:
                uploads[kind] = metadata

    return ReviewInputs(
        profile=profile,
        summaries=tuple(summaries),
        document_errors=tuple(errors),
        uploads=uploads,
    )


class FixturesDataSource:
    def __init__(self, *, fixtures_root: Path | None = None) -> None:
        self._fixtures_root = fixtures_root or _default_fixtures_root()

    def build_review_inputs(self, *, client_id: str, financial_year: str) -> ReviewInputs:
        return build_fixture_review_inputs(self._fixtures_root / client_id / financial_year)


def _default_fixtures_root() -> Path:
    return Path(__file__).resolve().parents[1] / "tests" / "fixtures"

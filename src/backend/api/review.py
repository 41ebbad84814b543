from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException

from adapters.extraction import (
    client_profile_from_form,
    statement_summary_from_payload,
    upload_metadata_from_payload,
)
from adapters.extraction.statements import normalize_document_type
from ca_review.rules_engine.errors import (
    InvalidDocumentData,
    ReferenceDataMissing,
    ReviewEngineError,
    UnknownReferenceSource,
    UnsupportedDocumentType,
)
from pipelines.reference_data import resolve_reference_table
from pipelines.session import (
    ProfileRequired,
    ReviewRequired,
    ReviewSession,
    UploadsRequired,
    UsageLimitExceeded,
)
from pipelines.settings import get_settings
from pipelines.storage import LocalJsonStorage


router = APIRouter(prefix="/review", tags=["review"])


def get_session() -> ReviewSession:
    settings = get_settings()
    session = ReviewSession(
        LocalJsonStorage(settings.store_path),
        resolve_reference_table(settings),
        usage_limit=settings.usage_limit,
        retention_days=settings.retention_days,
    )
    session.initialize()
    return session


def _engine_error(exc: ReviewEngineError, status_code: int = 422) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"kind": exc.kind, "document": exc.document, "field": exc.field, "message": exc.message},
    )


@router.get("/statutory/{source}")
def review_statutory_data(source: str, session: ReviewSession = Depends(get_session)):
    try:
        return session.reference.categories_for(source)
    except UnknownReferenceSource as exc:
        raise _engine_error(exc, status_code=403) from exc


@router.post("/profile")
def review_save_profile(
    form: dict[str, Any] = Body(...),
    session: ReviewSession = Depends(get_session),
):
    try:
        profile = client_profile_from_form(form)
        compliance = session.save_profile(profile)
    except ReferenceDataMissing as exc:
        raise _engine_error(exc, status_code=503) from exc
    except ReviewEngineError as exc:
        raise _engine_error(exc) from exc
    return compliance.model_dump(mode="json")


@router.post("/uploads/{kind}")
def review_record_upload(
    kind: str,
    metadata: dict[str, Any] = Body(...),
    session: ReviewSession = Depends(get_session),
):
    upload = upload_metadata_from_payload(metadata)
    if upload is None:
        raise HTTPException(status_code=422, detail="Upload metadata must include a file name.")
    try:
        session.record_upload(normalize_document_type(kind), upload)
    except ProfileRequired as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except UnsupportedDocumentType as exc:
        raise _engine_error(exc) from exc
    return _uploads_payload(session)


@router.get("/uploads")
def review_uploads(session: ReviewSession = Depends(get_session)):
    return _uploads_payload(session)


def _uploads_payload(session: ReviewSession) -> dict[str, Any]:
    return {
        "uploaded": {kind: meta.model_dump(mode="json") for kind, meta in session.uploaded_documents().items()},
        "missing_mandatory": session.missing_mandatory_uploads(),
    }


@router.post("/validate")
def review_validate_documents(
    documents: list[dict[str, Any]] = Body(..., embed=True),
    session: ReviewSession = Depends(get_session),
):
    summaries = []
    errors: list[InvalidDocumentData] = []
    for payload in documents:
        try:
            summaries.append(statement_summary_from_payload(payload))
        except InvalidDocumentData as exc:
            errors.append(exc)
    try:
        result = session.run_review(summaries, document_errors=errors)
    except (ProfileRequired, UploadsRequired) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except UsageLimitExceeded as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return result.model_dump(mode="json")


@router.post("/report")
def review_generate_report(
    report_date: date | None = Body(None, embed=True),
    session: ReviewSession = Depends(get_session),
):
    try:
        report = session.generate_report(report_date=report_date)
    except (ProfileRequired, ReviewRequired) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except UsageLimitExceeded as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return report.model_dump(mode="json")


@router.get("/usage")
def review_usage(session: ReviewSession = Depends(get_session)):
    return asdict(session.check_usage_limit())


def create_app() -> FastAPI:
    app = FastAPI(title="CA Review Engine")
    app.include_router(router)
    return app

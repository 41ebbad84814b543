from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from ca_review.rules_engine.errors import InvalidDocumentData
from ca_review.rules_engine.models import (
    REQUIRED_FIGURES,
    AccountLine,
    FinancialStatementSummary,
    LineItem,
    UploadMetadata,
)

from ._parse import parse_datetime, parse_decimal, snake_case

DOCUMENT_TYPE_ALIASES = {
    "balancesheet": "balance_sheet",
    "balance_sheet": "balance_sheet",
    "profitloss": "profit_and_loss",
    "profit_loss": "profit_and_loss",
    "profit_and_loss": "profit_and_loss",
    "trialbalance": "trial_balance",
    "trial_balance": "trial_balance",
    "gstreconciliation": "gst_reconciliation",
    "gst_reconciliation": "gst_reconciliation",
}

_KNOWN_FIGURES = {name for names in REQUIRED_FIGURES.values() for name in names}

_STRUCTURAL_KEYS = {
    "type",
    "kind",
    "expenses",
    "line_items",
    "accounts",
    "previous_year",
    "prior_period",
    "file",
    "upload",
    "flags",
}


def normalize_document_type(value: Any) -> str:
    text = str(value or "").strip()
    return DOCUMENT_TYPE_ALIASES.get(text.lower(), DOCUMENT_TYPE_ALIASES.get(snake_case(text), text))


def _amount(value: Any, *, document: str, field: str):
    try:
        return parse_decimal(value)
    except ValueError as exc:
        raise InvalidDocumentData(f"{field} on {document}: {exc}", document=document, field=field) from exc


def _line_items(rows: Any, document: str) -> tuple[LineItem, ...]:
    if not isinstance(rows, list):
        return ()
    items = []
    for idx, row in enumerate(rows):
        if not isinstance(row, Mapping):
            continue
        amount = _amount(row.get("amount"), document=document, field=f"line_items[{idx}].amount")
        if amount is None:
            raise InvalidDocumentData(
                f"Line item {idx} on {document} has no amount.",
                document=document,
                field=f"line_items[{idx}].amount",
            )
        items.append(
            LineItem(
                description=str(row.get("description") or ""),
                amount=amount,
                payment_mode=str(row.get("paymentMode") or row.get("payment_mode") or ""),
            )
        )
    return tuple(items)


def _accounts(rows: Any, document: str) -> tuple[AccountLine, ...]:
    if not isinstance(rows, list):
        return ()
    accounts = []
    for idx, row in enumerate(rows):
        if not isinstance(row, Mapping):
            continue
        debit = _amount(row.get("debit"), document=document, field=f"accounts[{idx}].debit")
        credit = _amount(row.get("credit"), document=document, field=f"accounts[{idx}].credit")
        balance = _amount(row.get("balance"), document=document, field=f"accounts[{idx}].balance")
        accounts.append(
            AccountLine(
                name=str(row.get("name") or ""),
                account_type=str(row.get("type") or row.get("accountType") or row.get("account_type") or ""),
                debit=debit if debit is not None else 0,
                credit=credit if credit is not None else 0,
                balance=balance,
            )
        )
    return tuple(accounts)


def upload_metadata_from_payload(payload: Any) -> UploadMetadata | None:
    if not isinstance(payload, Mapping) or not payload.get("name"):
        return None
    size = payload.get("size")
    return UploadMetadata(
        name=str(payload["name"]),
        size=int(size) if isinstance(size, (int, float)) and not isinstance(size, bool) else 0,
        mime_type=str(payload.get("type") or payload.get("mime_type") or ""),
        last_modified=parse_datetime(payload.get("lastModified") or payload.get("last_modified")),
    )


def statement_summary_from_payload(
    payload: Mapping[str, Any],
    *,
    kind: str | None = None,
) -> FinancialStatementSummary:
    """Convert one extracted statement (camelCase aggregates) into a FinancialStatementSummary.

    Numeric top-level keys become figures, boolean keys become flags. The document kind is
    normalized but not checked here; unsupported kinds are reported by the validator.
    """
    if not isinstance(payload, Mapping):
        raise InvalidDocumentData("Statement payload must be an object.", document=kind)
    document = normalize_document_type(kind or payload.get("type") or payload.get("kind"))

    figures = {}
    flags = {}
    for key, value in payload.items():
        name = snake_case(str(key))
        if name in _STRUCTURAL_KEYS:
            continue
        if isinstance(value, bool):
            flags[name] = value
            continue
        if isinstance(value, str) and name not in _KNOWN_FIGURES:
            try:
                amount = parse_decimal(value)
            except ValueError:
                # Descriptive text such as currency or entity name.
                continue
        elif isinstance(value, (int, float, str)) or value is None:
            amount = _amount(value, document=document, field=name)
        else:
            continue
        if amount is not None:
            figures[name] = amount
    if isinstance(payload.get("flags"), Mapping):
        flags.update({snake_case(str(k)): bool(v) for k, v in payload["flags"].items()})

    prior_payload = payload.get("previousYear") or payload.get("prior_period")
    prior = None
    if isinstance(prior_payload, Mapping):
        prior = statement_summary_from_payload(prior_payload, kind=document)

    try:
        return FinancialStatementSummary(
            kind=document,
            figures=figures,
            line_items=_line_items(payload.get("expenses") or payload.get("lineItems") or payload.get("line_items"), document),
            accounts=_accounts(payload.get("accounts"), document),
            flags=flags,
            prior_period=prior,
            upload=upload_metadata_from_payload(payload.get("file") or payload.get("upload")),
        )
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidDocumentData(f"Invalid {document} data: {first.get('msg')}", document=document, field=field) from exc

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from ca_review.rules_engine.errors import InvalidProfile
from ca_review.rules_engine.models import ClientProfile

from ._parse import parse_datetime, parse_decimal, snake_case

_FIELD_ALIASES = {
    "client_name": "client_name",
    "name": "client_name",
    "entity_type": "entity_type",
    "business_nature": "business_nature",
    "nature_of_business": "business_nature",
    "financial_year": "financial_year",
    "turnover": "turnover",
    "contribution": "contribution",
    "capital_contribution": "contribution",
    "gst_status": "gst_status",
    "accounting_method": "accounting_method",
    "previous_year_available": "previous_year_available",
    "profile_date": "profile_date",
}


def client_profile_from_form(form: Mapping[str, Any]) -> ClientProfile:
    """Build a ClientProfile from profiling-form data (camelCase or snake_case keys)."""
    if not isinstance(form, Mapping):
        raise InvalidProfile("Client profile must be an object.")

    data: dict[str, Any] = {}
    for key, value in form.items():
        target = _FIELD_ALIASES.get(snake_case(str(key)))
        if target is not None:
            data[target] = value

    for amount_field in ("turnover", "contribution"):
        if amount_field in data:
            try:
                data[amount_field] = parse_decimal(data[amount_field])
            except ValueError as exc:
                raise InvalidProfile(f"{amount_field} {exc}", field=amount_field) from exc
            if data[amount_field] is None:
                data.pop(amount_field)
    if isinstance(data.get("entity_type"), str):
        data["entity_type"] = data["entity_type"].strip().lower()
    if isinstance(data.get("gst_status"), str):
        data["gst_status"] = data["gst_status"].strip().lower()
    if "profile_date" in data:
        data["profile_date"] = parse_datetime(data["profile_date"])

    try:
        return ClientProfile.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidProfile(f"Invalid client profile: {first.get('msg')}", field=field) from exc

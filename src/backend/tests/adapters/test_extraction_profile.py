from datetime import datetime, timezone
from decimal import Decimal

import pytest

from adapters.extraction import client_profile_from_form
from ca_review.rules_engine.errors import InvalidProfile
from ca_review.rules_engine.models import EntityType, GSTStatus


def test_profiling_form_with_camel_case_keys():
    profile = client_profile_from_form(
        {
            "clientName": "Mehta & Associates",
            "entityType": "Partnership",
            "businessNature": "Chartered consultancy",
            "financialYear": "2024-25",
            "turnover": "1,20,00,000",
            "gstStatus": "Registered",
            "accountingMethod": "accrual",
            "previousYearAvailable": True,
            "profileDate": 1719792000000,
        }
    )
    assert profile.client_name == "Mehta & Associates"
    assert profile.entity_type == EntityType.PARTNERSHIP
    assert profile.gst_status == GSTStatus.REGISTERED
    assert profile.turnover == Decimal("12000000")
    assert profile.previous_year_available is True
    assert profile.profile_date == datetime(2024, 7, 1, tzinfo=timezone.utc)


def test_blank_contribution_is_omitted():
    profile = client_profile_from_form(
        {"client_name": "A LLP", "entity_type": "llp", "financial_year": "2024-25", "turnover": 100, "contribution": ""}
    )
    assert profile.contribution is None


@pytest.mark.parametrize(
    "form,field",
    [
        ({"clientName": "X", "entityType": "trust", "financialYear": "2024-25", "turnover": "1"}, "entity_type"),
        ({"clientName": "X", "entityType": "llp", "financialYear": "2024-25", "turnover": "lots"}, "turnover"),
        ({"clientName": "X", "entityType": "llp", "financialYear": "2024-25", "turnover": "-5"}, "turnover"),
        ({"clientName": "X", "entityType": "llp", "financialYear": "2024-25"}, "turnover"),
    ],
)
def test_invalid_forms_raise_invalid_profile(form, field):
    with pytest.raises(InvalidProfile) as excinfo:
        client_profile_from_form(form)
    assert excinfo.value.field == field


def test_non_mapping_form_is_rejected():
    with pytest.raises(InvalidProfile):
        client_profile_from_form(["not", "a", "form"])

import json

import pytest
import yaml

from ca_review.rules_engine.catalog import build_catalog, main
from ca_review.rules_engine.models import ReviewSection
from ca_review.rules_engine.registry import RuleRegistry
from ca_review.rules_engine.rules.sv_current_ratio import SV_CURRENT_RATIO


def test_catalog_lists_rules_in_registration_order():
    entries = build_catalog()
    ids = [e.rule_id for e in entries]
    assert len(ids) == 17
    assert ids[0] == "SV-BALANCE-SHEET-IDENTITY"
    assert ids[-1] == "CS-OBLIGATIONS"
    sections = [ReviewSection(e.section) for e in entries]
    assert sections == sorted(sections, key=list(ReviewSection).index)


def test_catalog_filters_by_section():
    entries = build_catalog(ReviewSection.GST_REVIEW)
    assert [e.rule_id for e in entries] == [
        "GST-TURNOVER-RECONCILES",
        "GST-ITC-RECONCILES",
        "GST-RETURNS-FILED-ON-TIME",
    ]
    assert entries[1].documents == ["gst_reconciliation"]
    assert entries[0].documents == []


def test_catalog_includes_config_schema():
    by_id = {e.rule_id: e for e in build_catalog()}
    schema = by_id["PL-DISALLOWABLE-EXPENSES"].config_schema
    assert "extra_keywords" in schema["properties"]


def test_catalog_cli_outputs_json_and_yaml(capsys):
    main(["--format", "json", "--section", "P&L Review"])
    rows = json.loads(capsys.readouterr().out)
    assert {row["section"] for row in rows} == {"P&L Review"}

    main([])
    rows = yaml.safe_load(capsys.readouterr().out)
    assert len(rows) == 17


def test_registry_rejects_duplicates_and_missing_section():
    reg = RuleRegistry()
    reg.register(SV_CURRENT_RATIO)
    with pytest.raises(ValueError):
        reg.register(SV_CURRENT_RATIO)

    class NoSection(SV_CURRENT_RATIO):
        rule_id = "X-NO-SECTION"
        section = "Structural Validation"

    with pytest.raises(ValueError):
        reg.register(NoSection)

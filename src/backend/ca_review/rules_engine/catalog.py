from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from .models import ReviewSection
from .registry import registry

# Ensure built-in rules are imported/registered when generating a catalog.
from . import rules as _builtin_rules  # noqa: F401


class RuleCatalogEntry(BaseModel):
    rule_id: str
    rule_title: str
    section: str
    documents: List[str] = Field(default_factory=list)

    module: str
    class_name: str

    config_model: str
    config_schema: Dict[str, Any]


def build_catalog(section: Optional[ReviewSection] = None) -> List[RuleCatalogEntry]:
    """List registered rules in registration order (the order findings are emitted in)."""
    rule_ids = registry.ids() if section is None else registry.ids_for_section(section)
    entries: List[RuleCatalogEntry] = []
    for rule_id in rule_ids:
        rule_cls = registry.get(rule_id)
        cfg_model = rule_cls.config_model
        entries.append(
            RuleCatalogEntry(
                rule_id=rule_id,
                rule_title=rule_cls.rule_title,
                section=rule_cls.section.value,
                documents=[kind.value for kind in rule_cls.documents],
                module=rule_cls.__module__,
                class_name=rule_cls.__name__,
                config_model=cfg_model.__name__,
                config_schema=cfg_model.model_json_schema(),
            )
        )
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(catalog, sort_keys=True, allow_unicode=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a rules catalog from the registry.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    parser.add_argument(
        "--section",
        choices=[s.value for s in ReviewSection],
        default=None,
        help="Only list rules reporting into this section.",
    )
    args = parser.parse_args(argv)

    section = ReviewSection(args.section) if args.section else None
    catalog = [e.model_dump(mode="json") for e in build_catalog(section)]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()

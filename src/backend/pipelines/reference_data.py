from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from ca_review.rules_engine.reference import ReferenceTable, default_reference_table

from .settings import ReviewSettings

logger = structlog.get_logger(__name__)


def load_reference_table(path: Path) -> ReferenceTable:
    """Load a reference-table snapshot from a .json, .yaml or .yml file."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        raw: Any = yaml.safe_load(text)
    elif path.suffix.lower() == ".json":
        raw = json.loads(text)
    else:
        raise ValueError(f"Unsupported reference table format: {path.suffix or path.name}")
    if not isinstance(raw, dict):
        raise ValueError(f"Reference table {path} must contain a mapping at the top level.")
    table = ReferenceTable.model_validate(raw)
    logger.info(
        "reference_table.loaded",
        path=str(path),
        version=table.version,
        categories=sorted(table.categories),
    )
    return table


def resolve_reference_table(settings: ReviewSettings) -> ReferenceTable:
    if settings.reference_table_path is None:
        return default_reference_table()
    return load_reference_table(settings.reference_table_path)

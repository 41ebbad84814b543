from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from datetime import date
from pathlib import Path

import structlog


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _slug(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", value).strip("_") or "review"


def render_markdown(report, review, uploads=None) -> str:
    lines = [
        f"# {report.title}",
        "",
        f"**Client:** {report.client_name}  ",
        f"**Financial Year:** {report.financial_year}  ",
        f"**Report Date:** {report.report_date.isoformat()}",
        "",
        f"> **IMPORTANT DISCLAIMER:** {report.disclaimer}",
    ]
    for section in report.sections:
        lines.append("")
        lines.append(f"## {section.title}")
        if section.content:
            lines.append("")
            lines.append(section.content)
        if section.points:
            lines.append("")
            for point in section.points:
                lines.append(f"- {point}")
    if uploads:
        lines.append("")
        lines.append("## Documents Reviewed")
        lines.append("")
        for kind, meta in uploads.items():
            details = [f"{meta.size:,} bytes"] if meta.size else []
            if meta.mime_type:
                details.append(meta.mime_type)
            suffix = f" ({', '.join(details)})" if details else ""
            lines.append(f"- {kind}: {meta.name}{suffix}")
    if review.errors:
        lines.append("")
        lines.append("## Checks Not Completed")
        lines.append("")
        for err in review.errors:
            scope = err.rule_id or err.document or "review"
            lines.append(f"- {scope}: {err.kind} - {err.message}")
    return "\n".join(lines) + "\n"


def run_review_from_fixtures(fixtures_dir: Path, *, report_date: date | None = None):
    """Derive, validate and assemble for one fixtures directory. Returns (inputs, compliance, review, report)."""
    _ensure_backend_on_path()
    from ca_review.rules_engine.compliance import derive
    from ca_review.rules_engine.report import assemble_report
    from ca_review.rules_engine.runner import validate
    from pipelines.data_source import build_fixture_review_inputs
    from pipelines.reference_data import resolve_reference_table
    from pipelines.settings import get_settings

    table = resolve_reference_table(get_settings())
    inputs = build_fixture_review_inputs(fixtures_dir)
    compliance = derive(inputs.profile, table)
    review = validate(
        inputs.summaries,
        compliance,
        table,
        document_errors=inputs.document_errors,
    )
    report = assemble_report(inputs.profile, compliance, review, report_date=report_date)
    return inputs, compliance, review, report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run a CA review against a fixtures directory and write JSON/MD outputs."
    )
    parser.add_argument(
        "--fixtures-dir",
        required=True,
        help="Directory holding profile.json and statement summaries (balance_sheet.json, ...).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for review files (defaults to fixtures dir).",
    )
    parser.add_argument(
        "--report-date",
        default=None,
        help="Report date (YYYY-MM-DD); defaults to today.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Emit debug logs (derivation and rule evaluation).",
    )
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.debug else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))

    fixtures_dir = Path(args.fixtures_dir).resolve()
    output_dir = Path(args.output_dir).resolve() if args.output_dir else fixtures_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    report_date = date.fromisoformat(args.report_date) if args.report_date else None

    inputs, compliance, review, report = run_review_from_fixtures(fixtures_dir, report_date=report_date)

    base_name = f"review_{_slug(inputs.profile.financial_year)}"
    out_json = output_dir / f"{base_name}.json"
    out_md = output_dir / f"{base_name}.md"
    out_findings = output_dir / f"{base_name}_findings.json"

    out_json.write_text(
        json.dumps(
            {
                "compliance": compliance.model_dump(mode="json"),
                "uploads": {kind: meta.model_dump(mode="json") for kind, meta in inputs.uploads.items()},
                "review": review.model_dump(mode="json"),
                "report": report.model_dump(mode="json"),
            },
            indent=2,
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    out_md.write_text(render_markdown(report, review, inputs.uploads), encoding="utf-8")
    out_findings.write_text(
        json.dumps([f.model_dump(mode="json") for f in review.findings()], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    print(f"Wrote {out_json}")
    print(f"Wrote {out_findings}")
    print(f"Wrote {out_md}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

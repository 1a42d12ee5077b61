from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


_ensure_backend_on_path()

from common.compliance_engine.models import HealthStatus, IssueSeverity  # noqa: E402
from pipelines.health_check import (  # noqa: E402
    HealthCheckRun,
    build_fixture_inputs,
    run_health_check_from_inputs,
)


def _status_label(value: object) -> str:
    return str(getattr(value, "value", value) or "")


def _write_markdown(run: HealthCheckRun, out_path: Path) -> None:
    summary = run.summary
    lines = [
        f"# Line Item Health Check {run.run_id}",
        "",
        f"Generated at: {run.generated_at.isoformat()}",
        f"Currency: {run.header.currency_code} | Domestic cost mode: {run.header.use_domestic_cost_mode}",
        f"Consolidated: {run.consolidated}",
        "",
        "## Totals",
        f"- Items flagged: {summary.items_flagged}",
        f"- Items with critical issues: {summary.critical_items}",
    ]
    for severity in IssueSeverity:
        lines.append(f"- {severity.value} issues: {summary.issue_counts.get(severity, 0)}")
    if summary.requires_acknowledgment:
        lines.append("")
        lines.append("**Critical issues present: acknowledge before export, print or save.**")

    lines.append("")
    lines.append("## Findings")
    if not run.findings:
        lines.append("")
        lines.append("All line items are healthy.")
    for finding in run.findings:
        item = finding.item
        name = item.product_name_local or item.product_name_foreign or "(unnamed)"
        lines.append("")
        lines.append(f"### Row {finding.index + 1}: {name} ({_status_label(finding.status)})")
        for issue in finding.issues:
            lines.append(
                f"- [{_status_label(issue.severity)}] {issue.field}: {issue.message}"
                f" ({issue.check_id})"
            )
    out_path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run line item health checks over a document fixture.")
    parser.add_argument(
        "--fixtures-dir",
        required=True,
        help="Directory with document.json and optional history.json, knowledge_base.json, user_rules.json.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for report files (defaults to fixtures dir).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Health check config JSON (defaults to HEALTH_CHECK_CONFIG_PATH, then built-in thresholds).",
    )
    parser.add_argument(
        "--consolidate",
        action="store_true",
        help="Merge rows with the same local product name before checking.",
    )
    parser.add_argument(
        "--fail-on-critical",
        action="store_true",
        help="Exit with status 2 when any critical issue is found.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    fixtures_dir = Path(args.fixtures_dir).resolve()
    output_dir = Path(args.output_dir).resolve() if args.output_dir else fixtures_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        inputs = build_fixture_inputs(
            fixtures_dir,
            config_path=Path(args.config).resolve() if args.config else None,
        )
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc

    run = run_health_check_from_inputs(inputs, consolidate=args.consolidate)

    out_json = output_dir / "health_check.json"
    out_md = output_dir / "health_check.md"
    out_json.write_text(json.dumps(run.model_dump(mode="json"), indent=2), encoding="utf-8")
    _write_markdown(run, out_md)

    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")

    has_critical = any(f.status == HealthStatus.CRITICAL for f in run.findings)
    if args.fail_on_critical and has_critical:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())

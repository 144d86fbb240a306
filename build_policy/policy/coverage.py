"""
Coverage report policy.

Reports are produced after a module's test run, whether or not tests
passed. The XML report is always written; HTML is opt-in. Output goes to a
single workspace-level directory with one file per module and format.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..rendering import render
from ..schemas.enums import ReportFormat
from ..schemas.results import CoverageReport, TestRunResult
from ..schemas.workspace import CoverageReportPolicy
from ..worker.storage import ReportStore, create_report_store

logger = logging.getLogger(__name__)


def build_coverage_policy(
    workspace_root: Path, settings=None, html_report: Optional[bool] = None
) -> CoverageReportPolicy:
    """Coverage policy rooted at the workspace build directory."""
    if settings is None:
        from ..config import get_settings

        settings = get_settings()

    if html_report is None:
        html_report = settings.report_html

    formats = {ReportFormat.XML}
    if html_report:
        formats.add(ReportFormat.HTML)

    return CoverageReportPolicy(
        formats=frozenset(formats),
        output_dir=workspace_root / settings.reports_dir,
    )


def report_file_name(module: str, fmt: ReportFormat) -> str:
    return f"{module}.{fmt.value}"


def _line_totals(coverage: Dict[str, Tuple[int, int]]) -> Tuple[int, int]:
    covered = sum(c for c, _ in coverage.values())
    missed = sum(m for _, m in coverage.values())
    return covered, missed


def render_xml(result: TestRunResult) -> bytes:
    """JaCoCo-style XML report with per-class LINE counters."""
    root = ET.Element("report", name=result.module)

    for class_name in sorted(result.coverage):
        covered, missed = result.coverage[class_name]
        cls = ET.SubElement(root, "class", name=class_name.replace(".", "/"))
        ET.SubElement(
            cls, "counter", type="LINE", missed=str(missed), covered=str(covered)
        )

    covered, missed = _line_totals(result.coverage)
    ET.SubElement(root, "counter", type="LINE", missed=str(missed), covered=str(covered))

    summary = result.summary()
    tests = ET.SubElement(root, "tests", {k: str(v) for k, v in summary.items()})
    if result.runner_error:
        tests.set("runner_error", result.runner_error)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def render_html(result: TestRunResult) -> str:
    covered, missed = _line_totals(result.coverage)
    total = covered + missed
    return render(
        "coverage.html",
        module=result.module,
        percent=f"{100.0 * covered / total:.1f}%" if total else "n/a",
        covered=covered,
        total=total,
        tests=result.summary(),
        runner_error=result.runner_error,
        classes=[(name, result.coverage[name]) for name in sorted(result.coverage)],
    )


def generate(
    policy: CoverageReportPolicy,
    result: TestRunResult,
    store: Optional[ReportStore] = None,
) -> CoverageReport:
    """
    Write the coverage report(s) for one module's test run.

    Args:
        policy: Formats and output directory
        result: What the test run executed, including failures
        store: Optional ReportStore; defaults to the policy's output directory

    Returns:
        CoverageReport with the written paths

    Raises:
        OSError: Propagated from the underlying storage
    """
    if store is None:
        store = create_report_store(policy.output_dir)

    report = CoverageReport(module=result.module)
    report.paths[ReportFormat.XML.value] = store.write(
        report_file_name(result.module, ReportFormat.XML), render_xml(result)
    )
    if ReportFormat.HTML in policy.formats:
        report.paths[ReportFormat.HTML.value] = store.write_text(
            report_file_name(result.module, ReportFormat.HTML), render_html(result)
        )

    logger.info(
        f"Coverage report for {result.module} written: "
        f"{', '.join(sorted(report.paths))}"
    )
    return report

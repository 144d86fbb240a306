"""
Quality gate policy: the checks that must pass before a module's tests run.

Gate order (all before the test task):
- checkstyleMain, checkstyleTest  style lint of main and test sources
- licenseFormat                   rewrite license headers in place (local only)
- licenseMain, licenseTest        verify license headers

Configuration:
- CI: when "true" (any case), licenseFormat is dropped and a header mismatch
  is fatal. Unset or any other value means a local build with auto-fix.
"""

from __future__ import annotations

from typing import List, Optional

from ..schemas.enums import CheckTag
from ..schemas.workspace import QualityGatePolicy

LINT_CHECKS = (CheckTag.CHECKSTYLE_MAIN, CheckTag.CHECKSTYLE_TEST)
LICENSE_CHECKS = (CheckTag.LICENSE_MAIN, CheckTag.LICENSE_TEST)

# Source set each check inspects
CHECK_SOURCE_SETS = {
    CheckTag.CHECKSTYLE_MAIN: "main",
    CheckTag.CHECKSTYLE_TEST: "test",
    CheckTag.LICENSE_MAIN: "main",
    CheckTag.LICENSE_TEST: "test",
}


def build_quality_gate(ci: Optional[bool] = None) -> QualityGatePolicy:
    """
    Build the gate policy for a test run.

    Args:
        ci: Whether this is a continuous-integration run. If not provided,
            reads the CI flag from settings.

    Returns:
        QualityGatePolicy with the ordered checks
    """
    if ci is None:
        from ..config import get_settings

        ci = get_settings().ci

    auto_fix = not ci
    checks: List[CheckTag] = list(LINT_CHECKS)
    if auto_fix:
        checks.append(CheckTag.LICENSE_FORMAT)
    checks.extend(LICENSE_CHECKS)

    return QualityGatePolicy(checks=tuple(checks), run_license_auto_fix=auto_fix)


def pre_test_tasks(gate: QualityGatePolicy) -> List[str]:
    """Task names the test task depends on, in execution order."""
    return [check.value for check in gate.checks]


def lint_checks(gate: QualityGatePolicy) -> List[CheckTag]:
    return [c for c in gate.checks if c in LINT_CHECKS]


def license_checks(gate: QualityGatePolicy) -> List[CheckTag]:
    return [c for c in gate.checks if c in LICENSE_CHECKS]

"""
Module gate pipeline: lint -> license -> test -> coverage report.

One pipeline instance per module per test run. States:

    pending -> lint_checked -> [auto_fixed] -> license_verified
            -> ready_for_test -> test_run -> report_generated

- A lint violation or an unfixable license mismatch moves the pipeline to
  "failed": tests never start and no report is written.
- Auto-fix only happens when the gate policy allows it (local builds). The
  headers are rewritten and verification runs again.
- Test failures are recorded; the coverage report is still generated,
  exactly once.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import structlog

from ..errors import GateFailure
from ..policy.coverage import generate
from ..policy.quality_gate import CHECK_SOURCE_SETS, license_checks, lint_checks
from ..schemas.enums import GateState, ModuleStatus
from ..schemas.results import (
    CoverageReport,
    LicenseFinding,
    ModuleOutcome,
    TestRunResult,
)
from ..schemas.workspace import (
    CoverageReportPolicy,
    ModulePolicy,
    ModuleSpec,
    QualityGatePolicy,
)
from ..tools.base import LicenseTool, LintTool, TestRunner
from .storage import ReportStore

logger = structlog.get_logger()


class ModulePipeline:
    """Runs one module's gates, tests and coverage report in strict order."""

    def __init__(
        self,
        module: ModuleSpec,
        policy: ModulePolicy,
        gate: QualityGatePolicy,
        coverage: CoverageReportPolicy,
        lint_tool: LintTool,
        license_tool: LicenseTool,
        test_runner: TestRunner,
        store: Optional[ReportStore] = None,
    ):
        self.module = module
        self.policy = policy
        self.gate = gate
        self.coverage = coverage
        self.lint_tool = lint_tool
        self.license_tool = license_tool
        self.test_runner = test_runner
        self.store = store
        self.state = GateState.PENDING
        self.states: List[GateState] = [GateState.PENDING]
        self.logger = logger.bind(module=module.name)

    def _transition(self, state: GateState) -> None:
        self.logger.debug("gate_transition", old=self.state.value, new=state.value)
        self.state = state
        self.states.append(state)

    def run(self) -> ModuleOutcome:
        """Run the pipeline and return the module's outcome.

        Gate failures end the run with status gate_failed. Errors from the
        report storage propagate to the caller.
        """
        if self.state != GateState.PENDING:
            raise RuntimeError(f"Pipeline for {self.module.name} has already run")

        self.logger.info("module_pipeline_start", checks=[c.value for c in self.gate.checks])

        try:
            self._lint()
            self._verify_licenses()
        except GateFailure as e:
            self._transition(GateState.FAILED)
            self.logger.error("gate_failed", code=e.code, check=e.check, message=e.message)
            return ModuleOutcome(
                module=self.module.name,
                status=ModuleStatus.GATE_FAILED,
                states=list(self.states),
                failure=e.to_dict(),
            )

        self._transition(GateState.READY_FOR_TEST)
        result = self._run_tests()
        report = self._generate_report(result)

        status = ModuleStatus.PASSED if result.success else ModuleStatus.TESTS_FAILED
        failure = None
        if not result.success:
            failure = {
                "error": "tests_failed",
                "runner_error": result.runner_error,
                "failed_tests": [f"{c.classname}.{c.name}" for c in result.failed],
            }

        self.logger.info("module_pipeline_complete", status=status.value, **result.summary())
        return ModuleOutcome(
            module=self.module.name,
            status=status,
            states=list(self.states),
            failure=failure,
            test_summary=result.summary(),
            report=report,
        )

    def _lint(self) -> None:
        for check in lint_checks(self.gate):
            source_set = CHECK_SOURCE_SETS[check]
            dirs = self.module.existing_dirs(source_set)
            violations = self.lint_tool.check(self.policy, source_set, dirs)
            if violations:
                raise GateFailure(
                    code="LINT_FAILED",
                    message=f"{len(violations)} style violation(s) in {source_set} "
                    f"sources, first: {violations[0]}",
                    check=check.value,
                    details=[v.to_dict() for v in violations],
                )
        self._transition(GateState.LINT_CHECKED)

    def _license_findings(self) -> List[LicenseFinding]:
        findings: List[LicenseFinding] = []
        for check in license_checks(self.gate):
            dirs = self.module.existing_dirs(CHECK_SOURCE_SETS[check])
            findings.extend(self.license_tool.check(self.policy, dirs))
        return findings

    def _all_source_dirs(self) -> List[Path]:
        return [d for name in self.module.source_sets for d in self.module.existing_dirs(name)]

    def _verify_licenses(self) -> None:
        findings = self._license_findings()

        if findings and self.gate.run_license_auto_fix:
            rewritten = self.license_tool.format(self.policy, self._all_source_dirs())
            self._transition(GateState.AUTO_FIXED)
            self.logger.info("license_auto_fixed", files=len(rewritten))
            findings = self._license_findings()

        if findings:
            raise GateFailure(
                code="LICENSE_MISMATCH",
                message=f"{len(findings)} file(s) without the license header, "
                f"first: {findings[0].file}",
                check="license",
                details=[f.to_dict() for f in findings],
            )
        self._transition(GateState.LICENSE_VERIFIED)

    def _run_tests(self) -> TestRunResult:
        if self.state != GateState.READY_FOR_TEST:
            raise RuntimeError(
                f"Tests for {self.module.name} cannot start from state {self.state.value}"
            )
        try:
            result = self.test_runner.run(self.module, self.policy)
        except Exception as e:
            # A crashed runner still counts as a run; coverage reports what was recorded
            self.logger.error("test_runner_crashed", error=str(e))
            result = TestRunResult(module=self.module.name, runner_error=str(e))
        self._transition(GateState.TEST_RUN)
        return result

    def _generate_report(self, result: TestRunResult) -> CoverageReport:
        if GateState.REPORT_GENERATED in self.states:
            raise RuntimeError(f"Coverage report for {self.module.name} already generated")
        report = generate(self.coverage, result, self.store)
        self._transition(GateState.REPORT_GENERATED)
        return report

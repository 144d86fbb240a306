"""
Workspace run: configure every module, then run their pipelines.

Configuration errors abort the run before any module work starts. After
that, each module's pipeline is isolated: modules run concurrently in
worker threads, and an exception in one module becomes that module's
"error" outcome without touching the others.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog

from ..policy.coverage import build_coverage_policy
from ..policy.module_policy import configure
from ..policy.quality_gate import build_quality_gate
from ..schemas.enums import GateState, ModuleStatus
from ..schemas.results import ModuleOutcome
from ..schemas.workspace import (
    CoverageReportPolicy,
    ModulePolicy,
    ModuleSpec,
    QualityGatePolicy,
    WorkspaceConfig,
)
from ..tools.base import LicenseTool, LintTool, TestRunner
from .pipeline import ModulePipeline
from .storage import ReportStore, create_report_store

logger = structlog.get_logger()


@dataclass
class WorkspaceRunResult:
    """One outcome per module, in module order."""

    outcomes: List[ModuleOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(o.passed for o in self.outcomes)

    def by_module(self) -> Dict[str, ModuleOutcome]:
        return {o.module: o for o in self.outcomes}


@dataclass
class ToolSet:
    """External tools shared by every module pipeline of a run."""

    lint: LintTool
    license: LicenseTool
    tests: TestRunner


class WorkspaceRunner:
    """Runs the gate pipeline of every module in a workspace."""

    def __init__(
        self,
        workspace: WorkspaceConfig,
        workspace_root: Path,
        tools: ToolSet,
        gate: Optional[QualityGatePolicy] = None,
        coverage: Optional[CoverageReportPolicy] = None,
        settings=None,
        year: Optional[int] = None,
        parallel: bool = True,
    ):
        if settings is None:
            from ..config import get_settings

            settings = get_settings()

        self.workspace = workspace
        self.workspace_root = workspace_root
        self.tools = tools
        self.settings = settings
        self.gate = gate or build_quality_gate(settings.ci)
        self.coverage = coverage or build_coverage_policy(workspace_root, settings)
        self.year = year
        self.parallel = parallel
        self.logger = logger.bind(group=workspace.group, version=workspace.version)

    def configure_all(self, modules: Sequence[ModuleSpec]) -> List[ModulePolicy]:
        """Configure every module and check its tool inputs.

        Raises ConfigurationError on the first bad module, before any
        pipeline is built.
        """
        policies = [
            configure(
                module,
                self.workspace,
                self.settings,
                workspace_root=self.workspace_root,
                year=self.year,
            )
            for module in modules
        ]
        for policy in policies:
            for tool in (self.tools.lint, self.tools.license, self.tools.tests):
                tool.verify_configuration(policy)
        return policies

    def _pipeline(
        self, module: ModuleSpec, policy: ModulePolicy, store: ReportStore
    ) -> ModulePipeline:
        return ModulePipeline(
            module=module,
            policy=policy,
            gate=self.gate,
            coverage=self.coverage,
            lint_tool=self.tools.lint,
            license_tool=self.tools.license,
            test_runner=self.tools.tests,
            store=store,
        )

    async def run(self, modules: Sequence[ModuleSpec]) -> WorkspaceRunResult:
        policies = self.configure_all(modules)
        store = create_report_store(self.coverage.output_dir)
        pipelines = [self._pipeline(m, p, store) for m, p in zip(modules, policies)]

        self.logger.info(
            "workspace_run_start",
            modules=[m.name for m in modules],
            checks=[c.value for c in self.gate.checks],
            parallel=self.parallel,
        )

        if self.parallel:
            results = await asyncio.gather(
                *(asyncio.to_thread(p.run) for p in pipelines),
                return_exceptions=True,
            )
        else:
            results = []
            for p in pipelines:
                try:
                    results.append(p.run())
                except Exception as e:
                    results.append(e)

        outcomes = [
            self._outcome(pipeline, result)
            for pipeline, result in zip(pipelines, results)
        ]
        run_result = WorkspaceRunResult(outcomes=outcomes)
        self.logger.info(
            "workspace_run_complete",
            success=run_result.success,
            statuses={o.module: o.status.value for o in outcomes},
        )
        return run_result

    def _outcome(self, pipeline: ModulePipeline, result) -> ModuleOutcome:
        if isinstance(result, ModuleOutcome):
            return result
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            self.logger.error(
                "module_pipeline_error", module=pipeline.module.name, error=str(result)
            )
            return ModuleOutcome(
                module=pipeline.module.name,
                status=ModuleStatus.ERROR,
                states=list(pipeline.states) + [GateState.FAILED],
                failure={
                    "error": "module_error",
                    "type": type(result).__name__,
                    "message": str(result),
                },
            )
        raise TypeError(f"Unexpected pipeline result: {result!r}")


def run_workspace(
    workspace: WorkspaceConfig,
    workspace_root: Path,
    modules: Sequence[ModuleSpec],
    tools: ToolSet,
    **kwargs,
) -> WorkspaceRunResult:
    """Synchronous entry point around WorkspaceRunner.run."""
    runner = WorkspaceRunner(workspace, workspace_root, tools, **kwargs)
    return asyncio.run(runner.run(modules))

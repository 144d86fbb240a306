"""
Interfaces to the external tools a module pipeline drives.

The lint engine, license header engine and test framework are black boxes:
the pipeline only decides when they run and what their results mean.
Implementations can be swapped without changing the pipeline.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from ..schemas.results import LicenseFinding, LintViolation, TestRunResult
from ..schemas.workspace import ModulePolicy, ModuleSpec


class Tool(ABC):
    """Common identification for external tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name for logging and identification."""
        pass

    def verify_configuration(self, policy: ModulePolicy) -> None:
        """Check the tool's inputs for a module before any module work starts.

        Raises:
            ConfigurationError: If a required input is missing
        """


class LintTool(Tool):
    """Style lint engine (checkstyle)."""

    @abstractmethod
    def check(
        self, policy: ModulePolicy, source_set: str, dirs: Sequence[Path]
    ) -> List[LintViolation]:
        """Lint one source set.

        Args:
            policy: The module's policy (carries the checkstyle options)
            source_set: "main" or "test"
            dirs: Existing source directories of that source set

        Returns:
            Violations found; empty when the source set is clean
        """
        pass


class LicenseTool(Tool):
    """License header engine."""

    @abstractmethod
    def check(self, policy: ModulePolicy, dirs: Sequence[Path]) -> List[LicenseFinding]:
        """Return files whose header does not match the template."""
        pass

    @abstractmethod
    def format(self, policy: ModulePolicy, dirs: Sequence[Path]) -> List[str]:
        """Rewrite headers in place. Returns the rewritten file paths."""
        pass


class TestRunner(Tool):
    """Runs a module's test suite."""

    __test__ = False

    @abstractmethod
    def run(self, module: ModuleSpec, policy: ModulePolicy) -> TestRunResult:
        """Execute the test suite and report per-test results.

        Test failures are reported in the result, not raised.
        """
        pass

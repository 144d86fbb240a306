"""
Run-time results produced by the gate pipeline and its external tools.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .enums import GateState, ModuleStatus, TestOutcome


@dataclass
class LintViolation:
    """A single style-lint finding, with file/line detail from the lint tool."""

    file: str
    line: int
    message: str
    column: Optional[int] = None
    rule: Optional[str] = None
    severity: str = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "rule": self.rule,
            "severity": self.severity,
        }

    def __str__(self) -> str:
        location = f"{self.file}:{self.line}"
        if self.column is not None:
            location += f":{self.column}"
        return f"{location}: {self.message}"


@dataclass
class LicenseFinding:
    """A source file whose header does not match the license template."""

    file: str
    status: str  # "missing", "mismatch"

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "status": self.status}


@dataclass
class TestCaseResult:
    """Result of one test case."""

    __test__ = False

    name: str
    classname: str
    outcome: TestOutcome
    message: Optional[str] = None
    duration_seconds: float = 0.0


@dataclass
class TestRunResult:
    """Everything the test runner reported for a module."""

    __test__ = False

    module: str
    cases: List[TestCaseResult] = field(default_factory=list)
    # class name -> (covered lines, missed lines)
    coverage: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    runner_error: Optional[str] = None

    @property
    def failed(self) -> List[TestCaseResult]:
        return [
            c for c in self.cases
            if c.outcome in (TestOutcome.FAILED, TestOutcome.ERROR)
        ]

    @property
    def success(self) -> bool:
        return self.runner_error is None and not self.failed

    def summary(self) -> Dict[str, int]:
        counts = {outcome.value: 0 for outcome in TestOutcome}
        for case in self.cases:
            counts[case.outcome.value] += 1
        counts["total"] = len(self.cases)
        return counts


@dataclass
class CoverageReport:
    """Report files written for one module."""

    module: str
    paths: Dict[str, Path] = field(default_factory=dict)


@dataclass
class ModuleOutcome:
    """Final pass/fail outcome of one module's pipeline."""

    module: str
    status: ModuleStatus
    states: List[GateState] = field(default_factory=list)
    failure: Optional[Dict[str, Any]] = None
    test_summary: Optional[Dict[str, int]] = None
    report: Optional[CoverageReport] = None

    @property
    def passed(self) -> bool:
        return self.status == ModuleStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "status": self.status.value,
            "states": [s.value for s in self.states],
            "failure": self.failure,
            "test_summary": self.test_summary,
            "report": (
                {fmt: str(p) for fmt, p in self.report.paths.items()}
                if self.report
                else None
            ),
        }

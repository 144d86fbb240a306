"""Test configuration and fixtures."""

import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from build_policy.config import Settings
from build_policy.schemas.enums import TestOutcome
from build_policy.schemas.results import (
    LintViolation,
    TestCaseResult,
    TestRunResult,
)
from build_policy.schemas.workspace import ModulePolicy, ModuleSpec, WorkspaceConfig
from build_policy.tools.base import LintTool, TestRunner
from build_policy.tools.license_header import render_header

HEADER_TEMPLATE = (
    "This file is part of moonshine, licensed under the MIT License.\n"
    "\n"
    "Copyright (c) ${year} Mariell Hoversholm\n"
)
YEAR = 2021


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the surrounding environment."""
    return Settings(
        _env_file=None,
        ci=False,
        build_group="net.kyori.moonshine",
        build_version="2.0.0-SNAPSHOT",
        proxi_user=None,
        proxi_password=None,
        repository_url_template="https://repo.example.test/repository/maven-{channel}/",
    )


@pytest.fixture
def workspace() -> WorkspaceConfig:
    return WorkspaceConfig(group="net.kyori.moonshine", version="2.0.0-SNAPSHOT")


@pytest.fixture
def header() -> str:
    return render_header(HEADER_TEMPLATE, YEAR)


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Workspace directory holding the license template and checkstyle config."""
    (tmp_path / "LICENCE-HEADER").write_text(HEADER_TEMPLATE, encoding="utf-8")
    (tmp_path / ".checkstyle").mkdir()
    (tmp_path / ".checkstyle" / "checkstyle.xml").write_text("<module/>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_module(workspace_root: Path, header: str):
    """Create a conventional module with one main and one test source file."""

    def _make(name: str = "core", with_header: bool = True) -> ModuleSpec:
        root = workspace_root / name
        prefix = header if with_header else ""
        main = root / "src" / "main" / "java" / "net" / "kyori"
        main.mkdir(parents=True)
        (main / "Moonshine.java").write_text(
            prefix + "package net.kyori;\n\npublic class Moonshine {}\n", encoding="utf-8"
        )
        test = root / "src" / "test" / "kotlin"
        test.mkdir(parents=True)
        (test / "MoonshineTest.kt").write_text(
            header + "class MoonshineTest\n", encoding="utf-8"
        )
        return ModuleSpec.conventional(name, root)

    return _make


class FakeLintTool(LintTool):
    """Lint tool returning canned violations per (module, source set)."""

    def __init__(self, violations: Optional[Dict[tuple, List[LintViolation]]] = None):
        self.violations = violations or {}
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "fake-lint"

    def check(self, policy: ModulePolicy, source_set: str, dirs: Sequence[Path]):
        with self._lock:
            self.calls.append((policy.module, source_set))
        return list(self.violations.get((policy.module, source_set), []))


class FakeTestRunner(TestRunner):
    """Test runner returning canned results and recording call order."""

    def __init__(
        self,
        cases: Optional[Dict[str, List[TestCaseResult]]] = None,
        coverage: Optional[Dict[str, Dict[str, tuple]]] = None,
        crash: Optional[Dict[str, Exception]] = None,
    ):
        self.cases = cases or {}
        self.coverage = coverage or {}
        self.crash = crash or {}
        self.calls: List[str] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "fake-tests"

    def run(self, module: ModuleSpec, policy: ModulePolicy) -> TestRunResult:
        with self._lock:
            self.calls.append(module.name)
        if module.name in self.crash:
            raise self.crash[module.name]
        return TestRunResult(
            module=module.name,
            cases=list(self.cases.get(module.name, [passed_case()])),
            coverage=dict(self.coverage.get(module.name, {"net.kyori.Moonshine": (8, 2)})),
        )


def passed_case(name: str = "itWorks") -> TestCaseResult:
    return TestCaseResult(name=name, classname="net.kyori.MoonshineTest", outcome=TestOutcome.PASSED)


def failed_case(name: str = "itBreaks") -> TestCaseResult:
    return TestCaseResult(
        name=name,
        classname="net.kyori.MoonshineTest",
        outcome=TestOutcome.FAILED,
        message="expected 1 but was 2",
    )


def violation(file: str = "Moonshine.java", line: int = 3) -> LintViolation:
    return LintViolation(file=file, line=line, column=1, message="Missing javadoc.", rule="JavadocType")


@pytest.fixture
def lint_tool() -> FakeLintTool:
    return FakeLintTool()


@pytest.fixture
def fake_runner() -> FakeTestRunner:
    return FakeTestRunner()


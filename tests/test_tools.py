"""Tests for the checkstyle and test runner adapters."""

import json
import subprocess

import pytest

from build_policy.errors import ConfigurationError
from build_policy.policy.module_policy import configure
from build_policy.schemas.enums import TestOutcome
from build_policy.tools.checkstyle import CheckstyleTool, parse_output
from build_policy.tools.test_runner import CommandTestRunner, parse_junit_xml

CHECKSTYLE_OUTPUT = """Starting audit...
[ERROR] /ws/core/src/main/java/Foo.java:12:5: Line is longer than 100 characters. [LineLength]
[WARN] /ws/core/src/main/java/Foo.java:3: Missing a Javadoc comment. [JavadocType]
[ERROR] /ws/core/src/main/java/Bar.java:7: File contains tab characters. [FileTabCharacter]
Audit done.
Checkstyle ends with 2 errors.
"""

JUNIT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="net.kyori.MoonshineTest" tests="3" failures="1" errors="0" skipped="1">
  <testcase name="itWorks" classname="net.kyori.MoonshineTest" time="0.012"/>
  <testcase name="itBreaks" classname="net.kyori.MoonshineTest" time="0.003">
    <failure message="expected: 1 but was: 2" type="org.opentest4j.AssertionFailedError">stack</failure>
  </testcase>
  <testcase name="later" classname="net.kyori.MoonshineTest" time="0">
    <skipped/>
  </testcase>
</testsuite>
"""


def completed(returncode=0, stdout="", on_run=None):
    def _run(cmd, **kwargs):
        _run.calls.append((cmd, kwargs))
        if on_run is not None:
            on_run()
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout)

    _run.calls = []
    return _run


class TestCheckstyleParsing:
    def test_parse_output(self):
        violations = parse_output(CHECKSTYLE_OUTPUT)

        assert len(violations) == 3
        first = violations[0]
        assert first.file == "/ws/core/src/main/java/Foo.java"
        assert (first.line, first.column) == (12, 5)
        assert first.rule == "LineLength"
        assert violations[1].severity == "warn"
        assert violations[2].column is None


class TestCheckstyleTool:
    def test_errors_become_violations(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)
        run = completed(returncode=2, stdout=CHECKSTYLE_OUTPUT)

        violations = CheckstyleTool("checkstyle", run=run).check(policy, "main", module.existing_dirs("main"))

        assert [v.rule for v in violations] == ["LineLength", "FileTabCharacter"]
        cmd = run.calls[0][0]
        assert cmd[:3] == ["checkstyle", "-c", str(policy.checkstyle.config_file)]
        assert cmd[3] == "-p"
        assert cmd[-1] == str(module.existing_dirs("main")[0])

    def test_clean_run(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)

        tool = CheckstyleTool("checkstyle", run=completed(stdout="Starting audit...\nAudit done.\n"))
        assert tool.check(policy, "main", module.existing_dirs("main")) == []

    def test_failing_exit_without_parsed_errors(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)

        tool = CheckstyleTool("checkstyle", run=completed(returncode=254, stdout="unable to parse config"))
        violations = tool.check(policy, "main", module.existing_dirs("main"))
        assert len(violations) == 1
        assert "254" in violations[0].message

    def test_no_dirs_skips_the_tool(self, make_module, workspace, settings, workspace_root):
        policy = configure(make_module(), workspace, settings, workspace_root=workspace_root)
        run = completed()
        assert CheckstyleTool("checkstyle", run=run).check(policy, "test", []) == []
        assert run.calls == []

    def test_missing_command(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)

        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        with pytest.raises(ConfigurationError) as exc_info:
            CheckstyleTool("checkstyle", run=missing).check(policy, "main", module.existing_dirs("main"))
        assert exc_info.value.code == "LINT_TOOL_MISSING"

    def test_verify_configuration_accepts_existing_inputs(self, make_module, workspace, settings, workspace_root):
        policy = configure(make_module(), workspace, settings, workspace_root=workspace_root)
        CheckstyleTool("sh").verify_configuration(policy)

    def test_verify_configuration_missing_config(self, make_module, workspace, settings, workspace_root):
        policy = configure(make_module(), workspace, settings, workspace_root=workspace_root)
        policy.checkstyle.config_file.unlink()

        with pytest.raises(ConfigurationError) as exc_info:
            CheckstyleTool("sh").verify_configuration(policy)
        assert exc_info.value.code == "LINT_CONFIG_MISSING"

    def test_verify_configuration_missing_command(self, make_module, workspace, settings, workspace_root):
        policy = configure(make_module(), workspace, settings, workspace_root=workspace_root)

        with pytest.raises(ConfigurationError) as exc_info:
            CheckstyleTool("no-such-checkstyle-binary").verify_configuration(policy)
        assert exc_info.value.code == "LINT_TOOL_MISSING"


class TestCommandTestRunner:
    def _write_results(self, module):
        results = module.root / "build" / "test-results" / "test"
        results.mkdir(parents=True, exist_ok=True)
        (results / "TEST-net.kyori.MoonshineTest.xml").write_text(JUNIT_XML, encoding="utf-8")
        coverage = module.root / "build" / "coverage"
        coverage.mkdir(parents=True, exist_ok=True)
        (coverage / "coverage.json").write_text(
            json.dumps({"net.kyori.Moonshine": {"covered": 8, "missed": 2}}), encoding="utf-8"
        )

    def test_parse_junit_xml(self, tmp_path):
        path = tmp_path / "TEST-x.xml"
        path.write_text(JUNIT_XML, encoding="utf-8")

        cases = parse_junit_xml(path)
        assert [c.outcome for c in cases] == [TestOutcome.PASSED, TestOutcome.FAILED, TestOutcome.SKIPPED]
        assert cases[1].message == "expected: 1 but was: 2"
        assert cases[0].duration_seconds == pytest.approx(0.012)

    def test_run_reads_results_and_coverage(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)
        run = completed(returncode=1, on_run=lambda: self._write_results(module))

        result = CommandTestRunner("gradle test", run=run).run(module, policy)

        assert run.calls[0][1]["cwd"] == str(module.root)
        assert result.summary()["total"] == 3
        assert len(result.failed) == 1
        assert result.coverage == {"net.kyori.Moonshine": (8, 2)}
        assert result.runner_error is None
        assert not result.success

    def test_nonzero_exit_without_failures_is_runner_error(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)

        result = CommandTestRunner("gradle test", run=completed(returncode=1, stdout="BUILD FAILED")).run(module, policy)
        assert result.runner_error == "exit code 1: BUILD FAILED"
        assert result.cases == []

    def test_missing_command_is_runner_error(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)

        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        result = CommandTestRunner("gradle test", run=missing).run(module, policy)
        assert "not found" in result.runner_error

    def test_results_from_an_earlier_run_are_ignored(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        self._write_results(module)
        policy = configure(module, workspace, settings, workspace_root=workspace_root)
        run = completed(returncode=1, stdout="Compilation failed; see the compiler error output")

        result = CommandTestRunner("gradle test", run=run).run(module, policy)

        assert result.cases == []
        assert result.coverage == {}
        assert result.runner_error == "exit code 1: Compilation failed; see the compiler error output"
        assert not list((module.root / "build" / "test-results" / "test").glob("TEST-*.xml"))

"""
Adapters for the external tools driven by the module pipeline.

Components:
    - base: LintTool, LicenseTool and TestRunner interfaces
    - checkstyle: style lint via the checkstyle command line
    - license_header: license header check and in-place format
    - test_runner: test suite via a command, JUnit XML results
"""

from .base import LicenseTool, LintTool, TestRunner, Tool
from .checkstyle import CheckstyleTool, parse_output
from .license_header import LicenseHeaderTool, render_header
from .test_runner import CommandTestRunner, parse_junit_xml

__all__ = [
    "Tool",
    "LintTool",
    "LicenseTool",
    "TestRunner",
    "CheckstyleTool",
    "parse_output",
    "LicenseHeaderTool",
    "render_header",
    "CommandTestRunner",
    "parse_junit_xml",
]

"""
Canonical enums for build policy objects.
"""

from enum import Enum


class Capability(str, Enum):
    """Build capabilities enabled on a module (one per build plugin)."""

    JAVA = "java"
    JAVA_LIBRARY = "java-library"
    MAVEN_PUBLISH = "maven-publish"
    CHECKSTYLE = "checkstyle"
    JACOCO = "jacoco"
    IDEA = "idea"
    KOTLIN_JVM = "kotlin-jvm"
    LICENSE = "license"
    CHECKER_FRAMEWORK = "checker-framework"


class CheckTag(str, Enum):
    """Pre-test checks, named after the tasks the build engine runs."""

    CHECKSTYLE_MAIN = "checkstyleMain"
    CHECKSTYLE_TEST = "checkstyleTest"
    LICENSE_FORMAT = "licenseFormat"
    LICENSE_MAIN = "licenseMain"
    LICENSE_TEST = "licenseTest"


class ReportFormat(str, Enum):
    """Coverage report output formats."""

    XML = "xml"
    HTML = "html"


class Channel(str, Enum):
    """Publication channel, derived from the workspace version."""

    SNAPSHOT = "snapshots"
    RELEASE = "releases"


class GateState(str, Enum):
    """States of a module's gate pipeline."""

    PENDING = "pending"
    LINT_CHECKED = "lint_checked"
    LICENSE_VERIFIED = "license_verified"
    AUTO_FIXED = "auto_fixed"
    READY_FOR_TEST = "ready_for_test"
    TEST_RUN = "test_run"
    REPORT_GENERATED = "report_generated"
    FAILED = "failed"


class ModuleStatus(str, Enum):
    """Final outcome of a module run."""

    PASSED = "passed"
    TESTS_FAILED = "tests_failed"
    GATE_FAILED = "gate_failed"
    ERROR = "error"


class TestOutcome(str, Enum):
    """Outcome of a single test case."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"

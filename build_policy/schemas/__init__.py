"""Build policy data models."""

from .enums import (
    Capability,
    Channel,
    CheckTag,
    GateState,
    ModuleStatus,
    ReportFormat,
    TestOutcome,
)
from .results import (
    CoverageReport,
    LicenseFinding,
    LintViolation,
    ModuleOutcome,
    TestCaseResult,
    TestRunResult,
)
from .workspace import (
    CheckstyleOptions,
    CoverageReportPolicy,
    Credentials,
    Dependency,
    JavadocOptions,
    KotlinOptions,
    LicenseOptions,
    ModulePolicy,
    ModuleSpec,
    PublicationPolicy,
    QualityGatePolicy,
    SiblingArtifact,
    WorkspaceConfig,
)

__all__ = [
    "Capability",
    "Channel",
    "CheckTag",
    "CheckstyleOptions",
    "CoverageReport",
    "CoverageReportPolicy",
    "Credentials",
    "Dependency",
    "GateState",
    "JavadocOptions",
    "KotlinOptions",
    "LicenseFinding",
    "LicenseOptions",
    "LintViolation",
    "ModuleOutcome",
    "ModulePolicy",
    "ModuleSpec",
    "ModuleStatus",
    "PublicationPolicy",
    "QualityGatePolicy",
    "ReportFormat",
    "SiblingArtifact",
    "TestCaseResult",
    "TestOutcome",
    "TestRunResult",
    "WorkspaceConfig",
]

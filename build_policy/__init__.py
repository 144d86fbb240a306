"""
Build Policy

Shared build, quality-gate, coverage and publication policy for the modules
of a JVM library workspace.
"""

import importlib.metadata

__author__ = "George Loudon"
__email__ = "george@example.com"
__version__ = importlib.metadata.version("build-policy")

from .errors import BuildPolicyError, ConfigurationError, GateFailure, PublicationError
from .policy import (
    build_coverage_policy,
    build_publication_policy,
    build_quality_gate,
    configure,
    discover_modules,
    generate,
    publish,
    resolve_channel,
)
from .schemas import (
    Channel,
    CheckTag,
    CoverageReportPolicy,
    GateState,
    ModulePolicy,
    ModuleSpec,
    ModuleStatus,
    PublicationPolicy,
    QualityGatePolicy,
    WorkspaceConfig,
)
from .worker.loop import ToolSet, WorkspaceRunner, run_workspace
from .worker.pipeline import ModulePipeline

__all__ = [
    "BuildPolicyError",
    "Channel",
    "CheckTag",
    "ConfigurationError",
    "CoverageReportPolicy",
    "GateFailure",
    "GateState",
    "ModulePipeline",
    "ModulePolicy",
    "ModuleSpec",
    "ModuleStatus",
    "PublicationError",
    "PublicationPolicy",
    "QualityGatePolicy",
    "ToolSet",
    "WorkspaceConfig",
    "WorkspaceRunner",
    "build_coverage_policy",
    "build_publication_policy",
    "build_quality_gate",
    "configure",
    "discover_modules",
    "generate",
    "publish",
    "resolve_channel",
    "run_workspace",
]

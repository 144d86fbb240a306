"""
Build policies applied uniformly to every module of the workspace.

This package provides the policy objects a build engine consumes:
- module_policy: compile settings, packaging, check configuration
- quality_gate: checks that must pass before tests
- coverage: post-test report generation
- publication: channel resolution and artifact upload
"""

from .coverage import build_coverage_policy, generate
from .module_policy import configure, discover_modules
from .publication import (
    build_publication_policy,
    destination_url,
    publish,
    resolve_channel,
)
from .quality_gate import build_quality_gate, pre_test_tasks

__all__ = [
    "build_coverage_policy",
    "build_publication_policy",
    "build_quality_gate",
    "configure",
    "destination_url",
    "discover_modules",
    "generate",
    "pre_test_tasks",
    "publish",
    "resolve_channel",
]

"""
Workspace and module policy models.

All policy objects are frozen: they are created during the configuration
phase and shared by reference afterwards, so concurrent module builds can
read them without coordination.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, constr

from .enums import Capability, Channel, CheckTag, ReportFormat


class WorkspaceConfig(BaseModel):
    """Global identity shared by every module in the workspace."""

    model_config = ConfigDict(frozen=True)

    group: constr(strip_whitespace=True, min_length=1)
    version: constr(strip_whitespace=True, min_length=1)

    @classmethod
    def from_settings(cls, settings) -> "WorkspaceConfig":
        return cls(group=settings.build_group, version=settings.build_version)

    @property
    def group_path(self) -> str:
        """Group id as a repository path (net.kyori -> net/kyori)."""
        return self.group.replace(".", "/")


class ModuleSpec(BaseModel):
    """A buildable unit of the workspace, as discovered on disk."""

    model_config = ConfigDict(frozen=True)

    name: constr(min_length=1)
    root: Path
    source_sets: Dict[str, Tuple[Path, ...]] = Field(default_factory=dict)

    @classmethod
    def conventional(cls, name: str, root: Path) -> "ModuleSpec":
        """Module with the standard src/{main,test}/{java,kotlin} layout."""
        return cls(
            name=name,
            root=root,
            source_sets={
                set_name: (
                    root / "src" / set_name / "java",
                    root / "src" / set_name / "kotlin",
                )
                for set_name in ("main", "test")
            },
        )

    def existing_dirs(self, source_set: str) -> List[Path]:
        return [d for d in self.source_sets.get(source_set, ()) if d.is_dir()]


class Dependency(BaseModel):
    """A declared dependency coordinate."""

    model_config = ConfigDict(frozen=True)

    group: str
    artifact: str
    version: str

    @classmethod
    def parse(cls, notation: str) -> "Dependency":
        group, artifact, version = notation.split(":")
        return cls(group=group, artifact=artifact, version=version)

    def notation(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


class SiblingArtifact(BaseModel):
    """An extra packaging artifact built next to the main jar."""

    model_config = ConfigDict(frozen=True)

    classifier: str
    file_name: str


class KotlinOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    jvm_target: str = "1.8"
    java_parameters: bool = True


class JavadocOptions(BaseModel):
    """Documentation generation options. No effect on library consumers."""

    model_config = ConfigDict(frozen=True)

    doclint: str = "none"
    quiet: bool = True
    encoding: str = "UTF-8"
    charset: str = "UTF-8"
    source: str = "8"
    links: Tuple[str, ...] = ("https://docs.oracle.com/javase/8/docs/api/",)

    def as_arguments(self) -> List[str]:
        args = [f"-Xdoclint:{self.doclint}"]
        if self.quiet:
            args.append("-quiet")
        args += ["-encoding", self.encoding, "-charset", self.charset]
        args += ["-source", self.source]
        for link in self.links:
            args += ["-link", link]
        return args


class CheckstyleOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    tool_version: str
    config_dir: Path

    @property
    def config_file(self) -> Path:
        return self.config_dir / "checkstyle.xml"

    @property
    def properties(self) -> Dict[str, str]:
        return {"basedir": str(self.config_dir.absolute())}


class LicenseOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    header_file: Path
    year: int
    includes: Tuple[str, ...] = ("**/*.java", "**/*.kt")
    comment_style: str = "DOUBLESLASH_STYLE"

    @property
    def extensions(self) -> Tuple[str, ...]:
        return tuple(pattern.rsplit("*", 1)[-1] for pattern in self.includes)


class ModulePolicy(BaseModel):
    """Per-module compile, packaging and check settings."""

    model_config = ConfigDict(frozen=True)

    module: str
    source_version: str = "1.8"
    target_version: str = "1.8"
    disable_auto_target_jvm: bool = True
    compiler_args: Tuple[str, ...] = ("-parameters",)
    test_compiler_args: Tuple[str, ...] = ("-parameters",)
    kotlin: KotlinOptions = Field(default_factory=KotlinOptions)
    enabled_capabilities: FrozenSet[Capability] = frozenset()
    repositories: Tuple[str, ...] = ("mavenCentral",)
    api_dependencies: Tuple[Dependency, ...] = ()
    test_dependencies: Tuple[Dependency, ...] = ()
    sibling_artifacts: Tuple[SiblingArtifact, ...] = ()
    javadoc: JavadocOptions = Field(default_factory=JavadocOptions)
    checkstyle: CheckstyleOptions
    license: LicenseOptions
    publication_name: str = "maven"
    publication_component: str = "java"

    def has(self, capability: Capability) -> bool:
        return capability in self.enabled_capabilities


class QualityGatePolicy(BaseModel):
    """Ordered pre-test checks for a module."""

    model_config = ConfigDict(frozen=True)

    checks: Tuple[CheckTag, ...]
    run_license_auto_fix: bool


class CoverageReportPolicy(BaseModel):
    """Post-test coverage report configuration."""

    model_config = ConfigDict(frozen=True)

    formats: FrozenSet[ReportFormat] = frozenset({ReportFormat.XML})
    output_dir: Path


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: Optional[str] = None
    password: Optional[str] = None

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=***)"


class PublicationPolicy(BaseModel):
    """Where and how a workspace version is published."""

    model_config = ConfigDict(frozen=True)

    channel: Channel
    destination_url: str
    repository_name: str = "proxi-nexus"
    credentials: Optional[Credentials] = None

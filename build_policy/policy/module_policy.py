"""
Module policy: compile settings, packaging and check configuration.

Every module in the workspace gets the same policy, seeded from the shared
WorkspaceConfig:

- Java source/target level 1.8 with automatic JVM target selection disabled
- "-parameters" for main and test compilation (parameter names retained in
  compiled output); Kotlin targets JVM 1.8 with java_parameters enabled
- sources and javadoc jars built next to the main jar
- lenient javadoc (doclint none, quiet, UTF-8, source 8, JDK 8 API link)
- checkstyle and license header settings rooted at the workspace directory
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import List, Optional

from ..errors import ConfigurationError
from ..schemas.enums import Capability
from ..schemas.workspace import (
    CheckstyleOptions,
    Dependency,
    LicenseOptions,
    ModulePolicy,
    ModuleSpec,
    SiblingArtifact,
    WorkspaceConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPABILITIES = frozenset(Capability)

API_DEPENDENCIES = (
    "com.google.guava:guava:30.1-jre",
    "io.leangen.geantyref:geantyref:1.3.4",
)

TEST_DEPENDENCIES = (
    "org.junit.jupiter:junit-jupiter:5.+",
    "org.assertj:assertj-core:3.+",
    "org.jetbrains.kotlin:kotlin-stdlib-jdk8:1.5.10",
    "org.jetbrains.kotlin:kotlin-reflect:1.5.10",
    "io.kotest:kotest-runner-junit5:4.+",
    "io.kotest:kotest-assertions-core:4.+",
    "io.mockk:mockk:1.10.6",
)

SOURCE_LAYOUT_DIRS = ("java", "kotlin")


def discover_modules(workspace_root: Path) -> List[ModuleSpec]:
    """
    List the subprojects of a workspace.

    A subproject is any direct child directory with a src/main/java or
    src/main/kotlin tree. The workspace root itself is never a module.
    """
    modules = []
    for child in sorted(workspace_root.iterdir()):
        if not child.is_dir() or child.name.startswith("."):
            continue
        if any((child / "src" / "main" / d).is_dir() for d in SOURCE_LAYOUT_DIRS):
            modules.append(ModuleSpec.conventional(child.name, child))
    return modules


def sibling_artifacts(module_name: str, version: str) -> List[SiblingArtifact]:
    """Sources and javadoc bundles packaged next to the main jar."""
    return [
        SiblingArtifact(
            classifier=classifier,
            file_name=f"{module_name}-{version}-{classifier}.jar",
        )
        for classifier in ("sources", "javadoc")
    ]


def configure(
    module: ModuleSpec,
    workspace: WorkspaceConfig,
    settings=None,
    workspace_root: Optional[Path] = None,
    year: Optional[int] = None,
) -> ModulePolicy:
    """
    Attach the workspace policy to a module.

    Args:
        module: The module to configure
        workspace: Shared, immutable workspace identity
        settings: Optional settings; defaults to the global settings
        workspace_root: Directory holding LICENCE-HEADER and .checkstyle;
                        defaults to the module's parent directory
        year: License header year; defaults to the current year

    Returns:
        A frozen ModulePolicy

    Raises:
        ConfigurationError: If the module has no buildable main source set
    """
    if settings is None:
        from ..config import get_settings

        settings = get_settings()

    main_dirs = module.existing_dirs("main")
    if not main_dirs:
        raise ConfigurationError(
            code="NO_SOURCE_SET",
            message=f"Module '{module.name}' has no buildable main source set "
            f"(looked in: {', '.join(str(d) for d in module.source_sets.get('main', ())) or 'nothing declared'})",
        )

    root = workspace_root or module.root.parent
    checkstyle_dir = (root / settings.checkstyle_dir).absolute()

    policy = ModulePolicy(
        module=module.name,
        enabled_capabilities=DEFAULT_CAPABILITIES,
        api_dependencies=tuple(Dependency.parse(d) for d in API_DEPENDENCIES),
        test_dependencies=tuple(Dependency.parse(d) for d in TEST_DEPENDENCIES),
        sibling_artifacts=tuple(sibling_artifacts(module.name, workspace.version)),
        checkstyle=CheckstyleOptions(
            tool_version=settings.checkstyle_tool_version,
            config_dir=checkstyle_dir,
        ),
        license=LicenseOptions(
            header_file=root / settings.license_header_file,
            year=year if year is not None else datetime.date.today().year,
        ),
    )

    logger.info(
        f"Configured module {module.name} ({workspace.group}:{module.name}:"
        f"{workspace.version}), capabilities={len(policy.enabled_capabilities)}"
    )
    return policy

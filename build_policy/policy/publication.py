"""
Publication policy: which repository a version goes to, and with whose
credentials.

Channel rule:
- version ends with "-SNAPSHOT" -> snapshots repository
- anything else                 -> releases repository

Credentials come from the project properties proxiUser / proxiPassword
(falling back to settings). They are optional: without them the upload is
attempted anonymously and the remote decides.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ConfigurationError
from ..rendering import render
from ..schemas.enums import Channel
from ..schemas.workspace import (
    Credentials,
    ModulePolicy,
    PublicationPolicy,
    WorkspaceConfig,
)

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = "-SNAPSHOT"
USER_PROPERTY = "proxiUser"
PASSWORD_PROPERTY = "proxiPassword"
CHECKSUM_ALGORITHMS = ("sha1", "md5")


def resolve_channel(version: str) -> Channel:
    """Snapshot iff the version ends with the literal "-SNAPSHOT" suffix."""
    if version.endswith(SNAPSHOT_SUFFIX):
        return Channel.SNAPSHOT
    return Channel.RELEASE


def destination_url(channel: Channel, url_template: Optional[str] = None) -> str:
    """The fixed repository URL for a channel, always with a trailing slash."""
    if url_template is None:
        from ..config import get_settings

        url_template = get_settings().repository_url_template
    url = url_template.format(channel=channel.value)
    return url if url.endswith("/") else url + "/"


def resolve_credentials(
    properties: Optional[Dict[str, str]] = None, settings=None
) -> Optional[Credentials]:
    """Credentials from project properties, then settings. None when absent."""
    properties = properties or {}
    username = properties.get(USER_PROPERTY)
    password = properties.get(PASSWORD_PROPERTY)
    if settings is not None:
        username = username if username is not None else settings.proxi_user
        password = password if password is not None else settings.proxi_password
    if username is None and password is None:
        return None
    return Credentials(username=username, password=password)


def build_publication_policy(
    workspace: WorkspaceConfig,
    settings=None,
    properties: Optional[Dict[str, str]] = None,
) -> PublicationPolicy:
    """
    Evaluate the publication policy for the workspace version.

    Args:
        workspace: Shared workspace identity; its version picks the channel
        settings: Optional settings; defaults to the global settings
        properties: Project properties (e.g. from -P key=value)

    Returns:
        A frozen PublicationPolicy
    """
    if settings is None:
        from ..config import get_settings

        settings = get_settings()

    channel = resolve_channel(workspace.version)
    policy = PublicationPolicy(
        channel=channel,
        destination_url=destination_url(channel, settings.repository_url_template),
        repository_name=settings.repository_name,
        credentials=resolve_credentials(properties, settings),
    )
    logger.info(
        f"Publication of {workspace.version} -> {policy.repository_name} "
        f"({channel.value}), authenticated={policy.credentials is not None}"
    )
    return policy


@dataclass
class ArtifactFile:
    """One file of a Maven publication."""

    content: bytes
    extension: str
    classifier: Optional[str] = None


@dataclass
class PublicationArtifact:
    """Everything uploaded for one module version."""

    group: str
    artifact_id: str
    version: str
    files: List[ArtifactFile] = field(default_factory=list)

    def file_name(self, file: ArtifactFile) -> str:
        suffix = f"-{file.classifier}" if file.classifier else ""
        return f"{self.artifact_id}-{self.version}{suffix}.{file.extension}"

    def relative_path(self, file: ArtifactFile) -> str:
        group_path = self.group.replace(".", "/")
        return f"{group_path}/{self.artifact_id}/{self.version}/{self.file_name(file)}"


def render_pom(workspace: WorkspaceConfig, policy: ModulePolicy) -> str:
    """Minimal POM for a module; api dependencies are compile scope."""
    return render(
        "pom.xml",
        group=workspace.group,
        artifact_id=policy.module,
        version=workspace.version,
        dependencies=policy.api_dependencies,
    )


def collect_artifact(
    workspace: WorkspaceConfig, policy: ModulePolicy, module_root: Path
) -> PublicationArtifact:
    """
    Gather a module's built jars from build/libs plus a generated POM.

    Raises:
        ConfigurationError: If the main jar has not been built
    """
    libs = module_root / "build" / "libs"
    main_jar = libs / f"{policy.module}-{workspace.version}.jar"
    if not main_jar.is_file():
        raise ConfigurationError(
            code="ARTIFACT_MISSING",
            message=f"Main jar not found for {policy.module}: {main_jar}",
        )

    artifact = PublicationArtifact(
        group=workspace.group, artifact_id=policy.module, version=workspace.version
    )
    artifact.files.append(ArtifactFile(content=main_jar.read_bytes(), extension="jar"))
    for sibling in policy.sibling_artifacts:
        path = libs / sibling.file_name
        if path.is_file():
            artifact.files.append(
                ArtifactFile(
                    content=path.read_bytes(),
                    extension="jar",
                    classifier=sibling.classifier,
                )
            )
        else:
            logger.warning(f"Skipping missing {sibling.classifier} jar: {path}")
    artifact.files.append(
        ArtifactFile(content=render_pom(workspace, policy).encode("utf-8"), extension="pom")
    )
    return artifact


def publish(
    artifact: PublicationArtifact,
    channel: Channel,
    credentials: Optional[Credentials] = None,
    client=None,
    url_template: Optional[str] = None,
) -> List[str]:
    """
    Upload an artifact to the repository of the given channel.

    Each file is followed by its .sha1 and .md5 checksums. The first failure
    stops the upload and propagates as PublicationError; nothing is retried.

    Returns:
        The URLs uploaded, in order
    """
    from ..integrations.maven_repository import MavenRepositoryClient

    base_url = destination_url(channel, url_template)
    owns_client = client is None
    if owns_client:
        from ..config import get_settings

        client = MavenRepositoryClient(timeout=get_settings().publish_timeout_seconds)

    uploaded: List[str] = []
    try:
        for file in artifact.files:
            url = base_url + artifact.relative_path(file)
            client.upload(url, file.content, credentials)
            uploaded.append(url)
            for algorithm in CHECKSUM_ALGORITHMS:
                digest = hashlib.new(algorithm, file.content).hexdigest()
                client.upload(f"{url}.{algorithm}", digest.encode("ascii"), credentials)
                uploaded.append(f"{url}.{algorithm}")
    finally:
        if owns_client:
            client.close()

    logger.info(
        f"Published {artifact.group}:{artifact.artifact_id}:{artifact.version} "
        f"to {base_url} ({len(uploaded)} files)"
    )
    return uploaded

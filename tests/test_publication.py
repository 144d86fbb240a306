"""Tests for channel resolution and artifact publication."""

import base64
import hashlib
import xml.etree.ElementTree as ET

import httpx
import pytest

from build_policy.errors import ConfigurationError, PublicationError
from build_policy.integrations.maven_repository import MavenRepositoryClient
from build_policy.policy.module_policy import configure
from build_policy.policy.publication import (
    ArtifactFile,
    PublicationArtifact,
    build_publication_policy,
    collect_artifact,
    destination_url,
    publish,
    render_pom,
    resolve_channel,
)
from build_policy.schemas.enums import Channel
from build_policy.schemas.workspace import Credentials, WorkspaceConfig

TEMPLATE = "https://repo.example.test/repository/maven-{channel}/"


class RecordingTransport:
    """Mock transport recording every request, answering with a fixed status."""

    def __init__(self, status_code=201, body=""):
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)


def make_client(handler) -> MavenRepositoryClient:
    return MavenRepositoryClient(transport=httpx.MockTransport(handler))


def make_artifact() -> PublicationArtifact:
    return PublicationArtifact(
        group="net.kyori.moonshine",
        artifact_id="core",
        version="2.0.0",
        files=[
            ArtifactFile(content=b"jar-bytes", extension="jar"),
            ArtifactFile(content=b"src-bytes", extension="jar", classifier="sources"),
        ],
    )


class TestResolveChannel:
    @pytest.mark.parametrize(
        "version,expected",
        [
            ("2.0.0-SNAPSHOT", Channel.SNAPSHOT),
            ("2.0.0", Channel.RELEASE),
            ("1.0-snapshot", Channel.RELEASE),
            ("2.0.0-SNAPSHOT-1", Channel.RELEASE),
            ("-SNAPSHOT", Channel.SNAPSHOT),
            ("", Channel.RELEASE),
        ],
    )
    def test_suffix_rule(self, version, expected):
        assert resolve_channel(version) == expected

    def test_destination_urls(self):
        assert destination_url(Channel.SNAPSHOT, TEMPLATE).endswith("/maven-snapshots/")
        assert destination_url(Channel.RELEASE, TEMPLATE).endswith("/maven-releases/")

    def test_default_template_is_proxi_nexus(self):
        assert destination_url(Channel.RELEASE) == (
            "https://nexus.mardroemmar.dev/repository/maven-releases/"
        )


class TestBuildPublicationPolicy:
    def test_snapshot_version(self, workspace, settings):
        policy = build_publication_policy(workspace, settings)
        assert policy.channel == Channel.SNAPSHOT
        assert policy.destination_url == "https://repo.example.test/repository/maven-snapshots/"
        assert policy.repository_name == "proxi-nexus"

    def test_release_version(self, settings):
        policy = build_publication_policy(WorkspaceConfig(group="g", version="2.0.0"), settings)
        assert policy.channel == Channel.RELEASE

    def test_credentials_from_project_properties(self, workspace, settings):
        policy = build_publication_policy(
            workspace, settings, {"proxiUser": "deployer", "proxiPassword": "s3cret"}
        )
        assert policy.credentials == Credentials(username="deployer", password="s3cret")

    def test_credentials_fall_back_to_settings(self, workspace, settings):
        s = settings.model_copy(update={"proxi_user": "env-user", "proxi_password": "env-pass"})
        policy = build_publication_policy(workspace, s, {"proxiUser": "cli-user"})
        assert policy.credentials.username == "cli-user"
        assert policy.credentials.password == "env-pass"

    def test_absent_credentials_are_none(self, workspace, settings):
        assert build_publication_policy(workspace, settings).credentials is None

    def test_password_not_in_repr(self):
        assert "s3cret" not in repr(Credentials(username="u", password="s3cret"))


class TestPublish:
    def test_uploads_files_and_checksums(self):
        transport = RecordingTransport()
        with make_client(transport) as client:
            uploaded = publish(make_artifact(), Channel.RELEASE, None, client=client, url_template=TEMPLATE)

        base = "https://repo.example.test/repository/maven-releases/net/kyori/moonshine/core/2.0.0/"
        assert uploaded == [
            base + "core-2.0.0.jar",
            base + "core-2.0.0.jar.sha1",
            base + "core-2.0.0.jar.md5",
            base + "core-2.0.0-sources.jar",
            base + "core-2.0.0-sources.jar.sha1",
            base + "core-2.0.0-sources.jar.md5",
        ]
        assert all(r.method == "PUT" for r in transport.requests)
        assert transport.requests[0].content == b"jar-bytes"
        assert transport.requests[1].content == hashlib.sha1(b"jar-bytes").hexdigest().encode()

    def test_snapshot_channel_goes_to_snapshot_repository(self):
        transport = RecordingTransport()
        with make_client(transport) as client:
            uploaded = publish(make_artifact(), Channel.SNAPSHOT, None, client=client, url_template=TEMPLATE)
        assert all("/maven-snapshots/" in url for url in uploaded)

    def test_credentials_sent_as_basic_auth(self):
        transport = RecordingTransport()
        with make_client(transport) as client:
            publish(
                make_artifact(),
                Channel.RELEASE,
                Credentials(username="deployer", password="s3cret"),
                client=client,
                url_template=TEMPLATE,
            )
        token = base64.b64encode(b"deployer:s3cret").decode("ascii")
        assert all(r.headers["Authorization"] == f"Basic {token}" for r in transport.requests)

    def test_anonymous_publish_still_calls_remote_and_surfaces_error(self):
        transport = RecordingTransport(status_code=401, body="Unauthorized: authentication required")
        with make_client(transport) as client:
            with pytest.raises(PublicationError) as exc_info:
                publish(make_artifact(), Channel.RELEASE, None, client=client, url_template=TEMPLATE)

        assert len(transport.requests) == 1
        assert "Authorization" not in transport.requests[0].headers
        error = exc_info.value
        assert error.code == "REMOTE_REJECTED"
        assert error.status_code == 401
        assert error.response_body == "Unauthorized: authentication required"

    def test_network_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(PublicationError) as exc_info:
                publish(make_artifact(), Channel.RELEASE, None, client=client, url_template=TEMPLATE)

        assert len(calls) == 1
        assert exc_info.value.code == "NETWORK_ERROR"
        assert exc_info.value.to_dict()["error"] == "publication_error"


class TestCollectArtifact:
    def test_collects_jars_and_pom(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)
        libs = module.root / "build" / "libs"
        libs.mkdir(parents=True)
        (libs / "core-2.0.0-SNAPSHOT.jar").write_bytes(b"main")
        (libs / "core-2.0.0-SNAPSHOT-sources.jar").write_bytes(b"sources")

        artifact = collect_artifact(workspace, policy, module.root)

        names = [artifact.file_name(f) for f in artifact.files]
        assert names == [
            "core-2.0.0-SNAPSHOT.jar",
            "core-2.0.0-SNAPSHOT-sources.jar",
            "core-2.0.0-SNAPSHOT.pom",
        ]

    def test_missing_main_jar(self, make_module, workspace, settings, workspace_root):
        module = make_module()
        policy = configure(module, workspace, settings, workspace_root=workspace_root)
        with pytest.raises(ConfigurationError) as exc_info:
            collect_artifact(workspace, policy, module.root)
        assert exc_info.value.code == "ARTIFACT_MISSING"

    def test_pom_lists_api_dependencies(self, make_module, workspace, settings, workspace_root):
        policy = configure(make_module(), workspace, settings, workspace_root=workspace_root)
        pom = render_pom(workspace, policy)

        assert "<groupId>net.kyori.moonshine</groupId>" in pom
        assert "<artifactId>core</artifactId>" in pom
        assert "<artifactId>guava</artifactId>" in pom
        assert "<version>30.1-jre</version>" in pom
        assert "mockk" not in pom

    def test_pom_is_well_formed_and_escaped(self, make_module, settings, workspace_root):
        workspace = WorkspaceConfig(group="net.kyori.moonshine", version="2.0.0-R&D")
        policy = configure(make_module(), workspace, settings, workspace_root=workspace_root)

        root = ET.fromstring(render_pom(workspace, policy).encode("utf-8"))

        ns = {"m": "http://maven.apache.org/POM/4.0.0"}
        assert root.find("m:version", ns).text == "2.0.0-R&D"
        artifacts = [d.find("m:artifactId", ns).text for d in root.iterfind("m:dependencies/m:dependency", ns)]
        assert artifacts == ["guava", "geantyref"]

"""
Configuration management for Build Policy.
"""

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_ci_flag(raw: Any) -> bool:
    """Interpret the CI environment flag.

    Only the string "true" (any case) counts as a CI context. Unset, empty
    and every other value mean a local build.
    """
    if raw is None:
        return False
    if isinstance(raw, bool):
        return raw
    return str(raw).lower() == "true"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    ci: bool = Field(default=False, validation_alias=AliasChoices("ci", "CI"))

    # Workspace identity
    build_group: str = Field(default="net.kyori.moonshine")
    build_version: str = Field(default="2.0.0-SNAPSHOT")

    # Publication
    repository_name: str = Field(default="proxi-nexus")
    repository_url_template: str = Field(
        default="https://nexus.mardroemmar.dev/repository/maven-{channel}/",
        description="Destination URL; '{channel}' is replaced by 'snapshots' or 'releases'.",
    )
    proxi_user: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "proxi_user", "proxiUser", "ORG_GRADLE_PROJECT_proxiUser"
        ),
    )
    proxi_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "proxi_password", "proxiPassword", "ORG_GRADLE_PROJECT_proxiPassword"
        ),
    )
    publish_timeout_seconds: float = Field(default=30.0)

    # Quality gates
    license_header_file: str = Field(default="LICENCE-HEADER")
    checkstyle_dir: str = Field(default=".checkstyle")
    checkstyle_tool_version: str = Field(default="8.43")
    checkstyle_command: str = Field(default="checkstyle")
    test_command: str = Field(default="gradle test --offline")

    # Coverage
    reports_dir: str = Field(default="build/reports/jacoco")
    report_html: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("ci", mode="before")
    @classmethod
    def _coerce_ci(cls, value: Any) -> bool:
        return parse_ci_flag(value)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings

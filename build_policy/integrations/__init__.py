"""Integrations with remote services."""

from .maven_repository import MavenRepositoryClient

__all__ = ["MavenRepositoryClient"]

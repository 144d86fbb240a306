"""
Error taxonomy for the build policy layer.

- ConfigurationError: missing or malformed workspace inputs. Raised before
  any module work begins.
- GateFailure: lint or license violations. Fatal for the module that raised
  it, never for its siblings.
- PublicationError: network or authentication errors from the remote
  repository, surfaced verbatim. Never retried here.

Test failures are not errors; they are recorded on the module outcome.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class BuildPolicyError(Exception):
    """
    Base error with a stable code.

    Attributes:
        code: Stable error code for programmatic handling
        message: Human-readable error description
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "error": "build_policy_error",
            "code": self.code,
            "message": self.message,
        }


class ConfigurationError(BuildPolicyError):
    """Raised when workspace or module inputs cannot be configured."""

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"] = "configuration_error"
        return data


class GateFailure(BuildPolicyError):
    """Raised when a pre-test quality gate fails for a module."""

    def __init__(
        self,
        code: str,
        message: str,
        check: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(code, message)
        self.check = check
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"] = "gate_failure"
        data["check"] = self.check
        data["details"] = self.details
        return data


class PublicationError(BuildPolicyError):
    """Raised when the remote repository rejects or cannot receive an upload."""

    def __init__(
        self,
        code: str,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(code, message)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"] = "publication_error"
        data["url"] = self.url
        data["status_code"] = self.status_code
        data["response_body"] = self.response_body
        return data

"""
Report storage for coverage output.

The coverage output directory is a workspace-level sink shared by every
module. Writers use module-qualified file names, so concurrent modules never
write the same path and no locking is needed.

v0: file:// and plain paths (local filesystem)
"""
from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union
from urllib.parse import urlparse


class ReportStore(ABC):
    """Abstract base class for report storage."""

    @abstractmethod
    def write(self, path: str, content: bytes) -> Path:
        """Write raw bytes to a path within the report directory."""
        pass

    @abstractmethod
    def write_text(self, path: str, content: str) -> Path:
        """Write text content to a path within the report directory."""
        pass

    @abstractmethod
    def get_uri(self) -> str:
        """Get the full URI of this report store."""
        pass


class FileReportStore(ReportStore):
    """Local filesystem report store.

    Structure:
        build/reports/jacoco/
        ├── core.xml       # Machine-readable coverage report per module
        ├── core.html      # Optional human-readable report
        └── kotlin.xml
    """

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        full_path = self.base_path / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        return full_path

    def write(self, path: str, content: bytes) -> Path:
        full_path = self._resolve(path)
        # Readers never see a partial report
        tmp_path = full_path.with_name(f".{full_path.name}.{os.getpid()}.tmp")
        tmp_path.write_bytes(content)
        os.replace(tmp_path, full_path)
        return full_path

    def write_text(self, path: str, content: str) -> Path:
        return self.write(path, content.encode("utf-8"))

    def get_uri(self) -> str:
        return f"file://{self.base_path.absolute()}"


def create_report_store(location: Union[str, Path]) -> ReportStore:
    """Factory function to create a ReportStore from a path or URI.

    Args:
        location: Plain path or file:// URI of the report directory

    Raises:
        ValueError: If the URI scheme is not supported
    """
    if isinstance(location, Path):
        return FileReportStore(location)

    parsed = urlparse(location)
    if parsed.scheme == "file":
        return FileReportStore(Path(parsed.path))
    if parsed.scheme == "":
        return FileReportStore(Path(location))

    raise ValueError(
        f"Unsupported storage scheme: {parsed.scheme}. Supported: file://"
    )

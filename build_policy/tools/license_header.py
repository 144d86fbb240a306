"""
License header check and format for .java / .kt sources.

The header template is read from the workspace LICENCE-HEADER file and
"${year}" is replaced by the configured year. Headers use the double-slash
comment style:

    //
    // This file is part of ...
    //
    // Copyright (c) 2021 ...
    //

followed by one blank line before the file contents.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Sequence

from ..errors import ConfigurationError
from ..schemas.results import LicenseFinding
from ..schemas.workspace import LicenseOptions, ModulePolicy
from .base import LicenseTool

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"


def render_header(template: str, year: int) -> str:
    """Render a template as a double-slash comment block."""
    text = template.replace("${year}", str(year)).strip("\n")
    lines = [COMMENT_PREFIX]
    for line in text.splitlines():
        line = line.rstrip()
        lines.append(f"{COMMENT_PREFIX} {line}" if line else COMMENT_PREFIX)
    lines.append(COMMENT_PREFIX)
    return "\n".join(lines) + "\n\n"


def _strip_existing_header(content: str, header: str) -> str:
    """Drop an earlier header block and the blank lines after it.

    Only a leading // block that opens like the rendered header counts as a
    header. Ordinary leading comments are kept.
    """
    lines = content.splitlines(keepends=True)
    opening = header.splitlines()[0]
    if not lines or lines[0].rstrip() != opening:
        return content
    index = 0
    while index < len(lines) and lines[index].lstrip().startswith(COMMENT_PREFIX):
        index += 1
    while index < len(lines) and not lines[index].strip():
        index += 1
    return "".join(lines[index:])


class LicenseHeaderTool(LicenseTool):
    """File-based license header engine."""

    @property
    def name(self) -> str:
        return "license-header"

    def _header(self, options: LicenseOptions) -> str:
        try:
            template = options.header_file.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigurationError(
                code="LICENSE_HEADER_MISSING",
                message=f"License header template not found: {options.header_file}",
            ) from e
        return render_header(template, options.year)

    def verify_configuration(self, policy: ModulePolicy) -> None:
        self._header(policy.license)

    def _sources(self, options: LicenseOptions, dirs: Sequence[Path]) -> Iterator[Path]:
        extensions = options.extensions
        for directory in dirs:
            for path in sorted(directory.rglob("*")):
                if path.is_file() and path.suffix in extensions:
                    yield path

    def check(self, policy: ModulePolicy, dirs: Sequence[Path]) -> List[LicenseFinding]:
        header = self._header(policy.license)
        findings = []
        for path in self._sources(policy.license, dirs):
            content = path.read_text(encoding="utf-8")
            if content.startswith(header):
                continue
            status = "mismatch" if content.lstrip().startswith(COMMENT_PREFIX) else "missing"
            findings.append(LicenseFinding(file=str(path), status=status))
        return findings

    def format(self, policy: ModulePolicy, dirs: Sequence[Path]) -> List[str]:
        header = self._header(policy.license)
        rewritten = []
        for path in self._sources(policy.license, dirs):
            content = path.read_text(encoding="utf-8")
            if content.startswith(header):
                continue
            path.write_text(header + _strip_existing_header(content, header), encoding="utf-8")
            rewritten.append(str(path))
        if rewritten:
            logger.info(f"Rewrote license headers in {len(rewritten)} file(s)")
        return rewritten

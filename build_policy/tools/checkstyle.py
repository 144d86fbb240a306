"""
Checkstyle adapter.

Runs the checkstyle command line against a source set:

    checkstyle -c <config_dir>/checkstyle.xml -p <properties> <dirs...>

The properties file carries "basedir" (the absolute config directory) so the
configuration can reference suppression files relative to itself. Output
lines look like:

    [ERROR] /path/Foo.java:12:5: Line is longer than 100 characters. [LineLength]
"""
from __future__ import annotations

import os
import re
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import structlog

from ..errors import ConfigurationError
from ..schemas.results import LintViolation
from ..schemas.workspace import ModulePolicy
from .base import LintTool

logger = structlog.get_logger()

_VIOLATION_RE = re.compile(
    r"^\[(?P<severity>ERROR|WARN)\]\s+(?P<file>.+?):(?P<line>\d+)"
    r"(?::(?P<column>\d+))?:\s*(?P<message>.*?)(?:\s+\[(?P<rule>\w+)\])?\s*$"
)


def parse_output(output: str) -> List[LintViolation]:
    """Parse checkstyle plain-format output into violations."""
    violations = []
    for line in output.splitlines():
        match = _VIOLATION_RE.match(line.strip())
        if not match:
            continue
        violations.append(
            LintViolation(
                file=match.group("file"),
                line=int(match.group("line")),
                column=int(match.group("column")) if match.group("column") else None,
                message=match.group("message"),
                rule=match.group("rule"),
                severity=match.group("severity").lower(),
            )
        )
    return violations


class CheckstyleTool(LintTool):
    """Checkstyle invoked as an external command."""

    def __init__(
        self,
        command: Optional[str] = None,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        if command is None:
            from ..config import get_settings

            command = get_settings().checkstyle_command
        self.command = shlex.split(command)
        self._run = run

    @property
    def name(self) -> str:
        return "checkstyle"

    def verify_configuration(self, policy: ModulePolicy) -> None:
        config_file = policy.checkstyle.config_file
        if not config_file.is_file():
            raise ConfigurationError(
                code="LINT_CONFIG_MISSING",
                message=f"Checkstyle configuration not found: {config_file}",
            )
        if shutil.which(self.command[0]) is None:
            raise ConfigurationError(
                code="LINT_TOOL_MISSING",
                message=f"Checkstyle command not found: {self.command[0]}",
            )

    def _write_properties(self, policy: ModulePolicy) -> Path:
        fd, path = tempfile.mkstemp(prefix="checkstyle-", suffix=".properties")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for key, value in policy.checkstyle.properties.items():
                f.write(f"{key}={value}\n")
        return Path(path)

    def check(
        self, policy: ModulePolicy, source_set: str, dirs: Sequence[Path]
    ) -> List[LintViolation]:
        if not dirs:
            return []

        props = self._write_properties(policy)
        cmd = self.command + [
            "-c", str(policy.checkstyle.config_file),
            "-p", str(props),
        ] + [str(d) for d in dirs]

        log = logger.bind(module=policy.module, source_set=source_set)
        log.debug("checkstyle_start", command=cmd)
        try:
            proc = self._run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
        except FileNotFoundError as e:
            raise ConfigurationError(
                code="LINT_TOOL_MISSING",
                message=f"Checkstyle command not found: {self.command[0]}",
            ) from e
        finally:
            props.unlink(missing_ok=True)

        violations = [v for v in parse_output(proc.stdout or "") if v.severity == "error"]
        if proc.returncode != 0 and not violations:
            tail = (proc.stdout or "").strip().splitlines()[-1:] or ["no output"]
            violations.append(
                LintViolation(
                    file=str(policy.checkstyle.config_file),
                    line=0,
                    message=f"checkstyle exited with {proc.returncode}: {tail[0]}",
                )
            )

        log.info("checkstyle_complete", violations=len(violations))
        return violations

"""
Command Line Interface for Build Policy.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_settings
from ..errors import ConfigurationError, PublicationError
from ..logging_config import configure_logging
from ..policy.coverage import build_coverage_policy
from ..policy.module_policy import configure, discover_modules
from ..policy.publication import (
    build_publication_policy,
    collect_artifact,
    destination_url,
    publish as publish_artifact,
    resolve_channel,
)
from ..policy.quality_gate import build_quality_gate, pre_test_tasks
from ..schemas.enums import ModuleStatus
from ..schemas.workspace import WorkspaceConfig
from ..tools import CheckstyleTool, CommandTestRunner, LicenseHeaderTool
from ..worker.loop import ToolSet, run_workspace


app = typer.Typer(help="Build Policy - shared build, gate and publication policy for a multi-module workspace")
console = Console()


STATUS_STYLE = {
    ModuleStatus.PASSED: "🟢 Passed",
    ModuleStatus.TESTS_FAILED: "🟠 Tests failed",
    ModuleStatus.GATE_FAILED: "🔴 Gate failed",
    ModuleStatus.ERROR: "❌ Error",
}


def _parse_properties(raw: List[str]) -> Dict[str, str]:
    properties = {}
    for item in raw:
        if "=" not in item:
            raise typer.BadParameter(f"Expected key=value, got '{item}'")
        key, value = item.split("=", 1)
        properties[key.strip()] = value
    return properties


def _modules(root: Path, names: Optional[List[str]]):
    modules = discover_modules(root)
    if names:
        modules = [m for m in modules if m.name in names]
        missing = set(names) - {m.name for m in modules}
        if missing:
            console.print(f"❌ Unknown module(s): {', '.join(sorted(missing))}")
            raise typer.Exit(code=2)
    if not modules:
        console.print(f"❌ No modules found under {root}")
        raise typer.Exit(code=2)
    return modules


@app.callback()
def main_callback():
    """Configure logging before any command runs."""
    configure_logging(get_settings())


@app.command()
def channel(version: str = typer.Argument(..., help="Version string to resolve")):
    """Show the publication channel and repository URL for a version."""
    resolved = resolve_channel(version)
    console.print(f"{version} -> {resolved.value} ({destination_url(resolved)})")


@app.command()
def plan(
    root: Path = typer.Option(Path("."), help="Workspace root directory"),
    ci: Optional[bool] = typer.Option(None, "--ci/--no-ci", help="Override the CI flag"),
):
    """Show the policy every module would be built with."""
    settings = get_settings()
    workspace = WorkspaceConfig.from_settings(settings)
    gate = build_quality_gate(settings.ci if ci is None else ci)
    coverage = build_coverage_policy(root, settings)

    table = Table(title=f"{workspace.group}:{workspace.version}", show_header=True, header_style="bold magenta")
    table.add_column("Module", style="cyan")
    table.add_column("Java", style="green")
    table.add_column("Compiler args")
    table.add_column("Pre-test tasks", style="yellow")
    table.add_column("Sibling artifacts")

    try:
        for module in _modules(root, None):
            policy = configure(module, workspace, settings, workspace_root=root)
            table.add_row(
                module.name,
                f"{policy.source_version} -> {policy.target_version}",
                " ".join(policy.compiler_args),
                ", ".join(pre_test_tasks(gate)),
                ", ".join(a.file_name for a in policy.sibling_artifacts),
            )
    except ConfigurationError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(code=2)

    console.print(table)

    publication = build_publication_policy(workspace, settings)
    console.print(
        f"Coverage: {', '.join(sorted(f.value for f in coverage.formats))} -> {coverage.output_dir}"
    )
    console.print(
        f"Publication: {publication.repository_name} [{publication.channel.value}] "
        f"{publication.destination_url} "
        f"({'authenticated' if publication.credentials else 'anonymous'})"
    )


@app.command()
def check(
    root: Path = typer.Option(Path("."), help="Workspace root directory"),
    module: Optional[List[str]] = typer.Option(None, help="Only run these modules"),
    ci: Optional[bool] = typer.Option(None, "--ci/--no-ci", help="Override the CI flag"),
    html: Optional[bool] = typer.Option(None, "--html/--no-html", help="Also write HTML coverage reports"),
    sequential: bool = typer.Option(False, help="Run modules one after another"),
    test_command: Optional[str] = typer.Option(None, help="Test command run in each module root"),
    checkstyle_command: Optional[str] = typer.Option(None, help="Checkstyle command"),
    as_json: bool = typer.Option(False, "--json", help="Print outcomes as JSON"),
):
    """Run lint, license, test and coverage for every module."""
    settings = get_settings()
    workspace = WorkspaceConfig.from_settings(settings)
    modules = _modules(root, module)

    tools = ToolSet(
        lint=CheckstyleTool(checkstyle_command or settings.checkstyle_command),
        license=LicenseHeaderTool(),
        tests=CommandTestRunner(test_command or settings.test_command),
    )

    try:
        result = run_workspace(
            workspace,
            root,
            modules,
            tools,
            gate=build_quality_gate(settings.ci if ci is None else ci),
            coverage=build_coverage_policy(root, settings, html_report=html),
            settings=settings,
            parallel=not sequential,
        )
    except ConfigurationError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps([o.to_dict() for o in result.outcomes], indent=2))
    else:
        table = Table(title="Module outcomes", show_header=True, header_style="bold cyan")
        table.add_column("Module", style="yellow")
        table.add_column("Status")
        table.add_column("Tests")
        table.add_column("Details")
        for outcome in result.outcomes:
            tests = ""
            if outcome.test_summary:
                tests = f"{outcome.test_summary['total']} run, {outcome.test_summary['failed'] + outcome.test_summary['error']} failed"
            details = ""
            if outcome.failure:
                details = outcome.failure.get("message") or ", ".join(outcome.failure.get("failed_tests", []))
            table.add_row(outcome.module, STATUS_STYLE[outcome.status], tests, details[:80])
        console.print(table)

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def publish(
    root: Path = typer.Option(Path("."), help="Workspace root directory"),
    module: Optional[List[str]] = typer.Option(None, help="Only publish these modules"),
    prop: Optional[List[str]] = typer.Option(None, "--property", "-P", help="Project property key=value (proxiUser, proxiPassword)"),
):
    """Publish built module jars to the snapshot or release repository."""
    settings = get_settings()
    workspace = WorkspaceConfig.from_settings(settings)
    policy = build_publication_policy(workspace, settings, _parse_properties(prop or []))

    console.print(
        f"🚀 Publishing {workspace.group}:{workspace.version} to "
        f"{policy.repository_name} ({policy.channel.value})"
    )
    try:
        for spec in _modules(root, module):
            module_policy = configure(spec, workspace, settings, workspace_root=root)
            artifact = collect_artifact(workspace, module_policy, spec.root)
            uploaded = publish_artifact(
                artifact,
                policy.channel,
                policy.credentials,
                url_template=settings.repository_url_template,
            )
            console.print(f"✅ {spec.name}: {len(uploaded)} file(s)")
    except ConfigurationError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(code=2)
    except PublicationError as e:
        console.print(f"❌ Publication failed: {e}")
        if e.response_body:
            console.print(e.response_body, markup=False)
        raise typer.Exit(code=1)


@app.command()
def version():
    """Show version information."""
    from .. import __version__
    rprint(Panel.fit(f"Build Policy v{__version__}", style="bold green"))


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()

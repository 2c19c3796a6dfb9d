"""CLI application for depbump."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from core.automerge import try_branch_automerge
from core.config import RepoConfig, get_global_config, set_global_config
from core.datasource import get_pkg_releases
from core.detect import identify
from core.errors import DepbumpError
from core.git import GitRepo
from core.lookup import LookupWorker
from core.managers import extract_package_file
from core.models import AutomergeResult, ReleaseResult, UpdateCandidate
from core.platform import GitHubPlatform
from core.update import build_update_report

console = Console()

AUTOMERGE_EXIT_CODES = {
    AutomergeResult.AUTOMERGED: 0,
    AutomergeResult.NO_AUTOMERGE: 2,
    AutomergeResult.NOT_READY: 2,
    AutomergeResult.PR_EXISTS: 2,
}


def format_json_output(candidates: list[UpdateCandidate]) -> str:
    """Format JSON output."""
    reports = []
    for candidate in candidates:
        reports.append({
            "name": candidate.entry.name,
            "datasource": candidate.entry.datasource,
            "current_version": candidate.entry.current_value or candidate.entry.spec,
            "new_version": candidate.new_version,
            "reason": candidate.reason,
            "update_type": candidate.update_type,
            "skip_reason": candidate.skip_reason,
        })

    return json.dumps({"reports": reports}, indent=2)


def format_releases_table(package: str, result: ReleaseResult) -> Table:
    table = Table(title=f"Releases of {package}")
    table.add_column("#", justify="right")
    table.add_column("Version")
    for index, release in enumerate(result.releases, start=1):
        table.add_row(str(index), release.version)
    return table


app = typer.Typer(
    name="depbump",
    help="depbump - Find dependency updates and automerge version-bump branches",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """depbump - Find dependency updates and automerge version-bump branches."""
    level = "DEBUG" if verbose else get_global_config().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def update(
    file_path: str = typer.Argument(help="Path to manifest file: requirements.txt, conanfile.txt, Kubernetes YAML (use '-' for stdin)"),
    output: str | None = typer.Option(None, "--out", "-o", help="Output file (use '-' for stdout)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Update file in place"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without applying"),
    python_version: str | None = typer.Option(None, "--python", help="Target Python version"),
    manager: str | None = typer.Option(None, "--manager", help="Force specific manager"),
    format_type: str = typer.Option("diff", "--format", help="Output format: diff or json"),
) -> None:
    """Update a dependency manifest to the newest available versions."""

    try:
        # Read input
        if file_path == "-":
            content = sys.stdin.read()
            display_path = "<stdin>"
        else:
            path_obj = Path(file_path)
            if not path_obj.exists():
                console.print(f"Error: File {file_path} not found", style="red")
                raise typer.Exit(1)
            content = path_obj.read_text()
            display_path = file_path

        # Detect manager
        if not manager:
            filename = file_path if file_path != "-" else None
            manager = identify(content, filename)

        if manager == "unknown":
            console.print("Error: Could not detect manifest type, use --manager", style="red")
            raise typer.Exit(1)

        manifest = extract_package_file(manager, content)

        if not manifest.entries:
            console.print("No dependencies found to update")
            raise typer.Exit(0)

        worker = LookupWorker(python_version=python_version)
        candidates = asyncio.run(worker.lookup_entries(manifest.entries))
        report = build_update_report(display_path, manager, content, candidates)

        if not report.has_changes:
            if format_type == "json":
                typer.echo(format_json_output(candidates))
            else:
                console.print("No updates available")
            raise typer.Exit(2)  # No changes exit code

        # The JSON report replaces stdout output; files always get the manifest
        as_json = format_type == "json"
        if as_json:
            typer.echo(format_json_output(candidates))
        elif dry_run:
            typer.echo(report.diff)

        if dry_run:
            return

        if in_place and file_path != "-":
            Path(file_path).write_text(report.updated_content)
            if not as_json:
                console.print(f"Updated {file_path}")
        elif output and output != "-":
            Path(output).write_text(report.updated_content)
            if not as_json:
                console.print(f"Wrote updated manifest to {output}")
        elif as_json:
            return
        elif output == "-" or file_path == "-":
            typer.echo(report.updated_content)
        else:
            console.print("Error: Specify --in-place, --out, or --dry-run", style="red")
            raise typer.Exit(1)

    except typer.Exit:
        # Re-raise typer exits (like Exit(2) for no changes)
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command()
def lookup(
    datasource: str = typer.Argument(help="Datasource id, e.g. conan or pypi"),
    package: str = typer.Argument(help="Package lookup name, e.g. poco/1.9.4@_/_"),
    registry_urls: list[str] | None = typer.Option(None, "--registry-url", help="Registry to query (repeatable)"),
    format_type: str = typer.Option("table", "--format", help="Output format: table or json"),
) -> None:
    """List the releases a datasource knows for a package."""
    try:
        result = asyncio.run(get_pkg_releases(datasource, package, registry_urls or None))
    except DepbumpError as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    if not result:
        console.print(f"No releases found for {package}", style="yellow")
        raise typer.Exit(1)

    if format_type == "json":
        typer.echo(json.dumps({"releases": [{"version": r.version} for r in result.releases]}, indent=2))
    else:
        console.print(format_releases_table(package, result))


@app.command()
def automerge(
    branch: str = typer.Argument(help="Branch to automerge"),
    repository: str = typer.Option(..., "--repo", help="Repository as OWNER/NAME"),
    enabled: bool = typer.Option(True, "--automerge/--no-automerge", help="Whether automerge is enabled"),
    automerge_type: str = typer.Option("branch", "--automerge-type", help="branch or pr"),
    ignore_tests: bool = typer.Option(False, "--ignore-tests", help="Treat branch status as green"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log the merge instead of performing it"),
    git_dir: Path = typer.Option(..., "--git-dir", help="Dedicated clone of the repository with a clean working tree"),
    base_branch: str = typer.Option("main", "--base-branch", help="Branch to merge into"),
) -> None:
    """Merge a version-bump branch directly once its checks pass."""
    settings = get_global_config()
    if dry_run:
        settings = settings.model_copy(update={"dry_run": True})
        set_global_config(settings)

    try:
        config = RepoConfig(
            branch_name=branch,
            automerge=enabled,
            automerge_type=automerge_type,
            ignore_tests=ignore_tests,
            base_branch=base_branch,
        )
        platform = GitHubPlatform(repository, token=settings.token, endpoint=settings.platform_endpoint)
        git = GitRepo(git_dir, base_branch=base_branch)
        result = asyncio.run(try_branch_automerge(config, platform, git))
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)

    style = "green" if result == AutomergeResult.AUTOMERGED else "yellow"
    console.print(f"{branch}: {result.value}", style=style)
    raise typer.Exit(AUTOMERGE_EXIT_CODES.get(result, 1))


if __name__ == "__main__":
    app()

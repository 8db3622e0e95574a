"""CLI application for upmfix."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from upmfix.locate import locate_manifest
from upmfix.models import DEFAULT_CONFIG, PatchConfig, PatchResult
from upmfix.updater import check_dependency_satisfied, ensure_dependency_and_registry

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def format_check_json(project: Path, package: str, min_version: str, satisfied: bool) -> str:
    """Format JSON output for the check command."""
    return json.dumps(
        {
            "project": str(project),
            "package": package,
            "min_version": min_version,
            "satisfied": satisfied,
        },
        indent=2,
    )


def format_ensure_json(result: PatchResult, config: PatchConfig) -> str:
    """Format JSON output for the ensure command."""
    return json.dumps(
        {
            "manifest": str(result.path),
            "package": config.package_name,
            "version": config.package_version,
            "registry_url": config.registry_url,
            "changed": result.changed,
            "written": result.written,
            "registry_added": result.registry_added,
            "dependency_added": result.dependency_added,
        },
        indent=2,
    )


app = typer.Typer(
    name="upmfix",
    help="upmfix - Ensure a Unity package manifest references a package and its scoped registry",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """upmfix - Patch Packages/manifest.json in place."""
    configure_logging(verbose)


@app.command()
def check(
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project root containing Packages/manifest.json"),
    package: str = typer.Option(DEFAULT_CONFIG.package_name, "--package", help="Package name to look for"),
    min_version: str = typer.Option(DEFAULT_CONFIG.package_version, "--min-version", help="Minimum acceptable version"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
) -> None:
    """Check whether the manifest references a new enough version of a package."""

    try:
        if locate_manifest(project) is None:
            console.print(f"Error: No Packages/manifest.json under {project}", style="red")
            raise typer.Exit(1)

        satisfied = check_dependency_satisfied(project, package, min_version)

        if format_type == "json":
            console.print(format_check_json(project, package, min_version, satisfied), soft_wrap=True, markup=False)
        elif satisfied:
            console.print(f"{package} >= {min_version} is configured")
        else:
            console.print(f"{package} >= {min_version} is not configured", style="yellow")

        if not satisfied:
            raise typer.Exit(2)

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


@app.command()
def ensure(
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project root containing Packages/manifest.json"),
    package: str = typer.Option(DEFAULT_CONFIG.package_name, "--package", help="Package name to add or update"),
    version: str = typer.Option(DEFAULT_CONFIG.package_version, "--version", help="Package version to write"),
    registry_name: str = typer.Option(DEFAULT_CONFIG.registry_name, "--registry-name", help="Scoped registry name"),
    registry_url: str = typer.Option(DEFAULT_CONFIG.registry_url, "--registry-url", help="Scoped registry url"),
    scopes: list[str] = typer.Option(
        list(DEFAULT_CONFIG.registry_scopes), "--scope", help="Scoped registry scope (repeatable)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without applying"),
    format_type: str = typer.Option("diff", "--format", help="Output format: diff or json"),
) -> None:
    """Add or update the package dependency and its scoped registry."""

    try:
        config = PatchConfig(
            package_name=package,
            package_version=version,
            registry_name=registry_name,
            registry_url=registry_url,
            registry_scopes=list(scopes),
        )

        result = ensure_dependency_and_registry(project, config, dry_run=dry_run)
        if result is None:
            console.print(f"Error: Could not update the manifest under {project}", style="red")
            raise typer.Exit(1)

        if format_type == "json":
            console.print(format_ensure_json(result, config), soft_wrap=True, markup=False)
        elif not result.changed:
            console.print("Manifest already up to date")
        elif dry_run:
            console.print(result.diff, soft_wrap=True, highlight=False, markup=False)
        else:
            console.print(f"Updated {result.path}")

        if not result.changed:
            raise typer.Exit(2)  # No changes exit code

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

"""CLI interface for wheelscan.

Every command prints JSON on stdout; logs and errors go to stderr.
"""

import json
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError

# Load .env before importing other wheelscan modules
load_dotenv()

from wheelscan import __version__  # noqa: E402
from wheelscan.config import ConfigError, ScanConfig  # noqa: E402
from wheelscan.logging import set_verbose  # noqa: E402


def _load_config(**overrides) -> ScanConfig:
    """Build the config from the environment, exiting 1 on invalid values."""
    try:
        return ScanConfig.from_env(**overrides)
    except (ConfigError, ValidationError) as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="wheelscan")
def cli() -> None:
    """wheelscan - find hand-rolled code and structural problems in a repository."""
    pass


@cli.command()
@click.argument("repo_path", type=click.Path(resolve_path=True))
@click.option(
    "--exact-lines",
    is_flag=True,
    help="Report only the matching line instead of a context window",
)
@click.option("--no-progress", is_flag=True, help="Disable progress bars")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def scan(repo_path: str, exact_lines: bool, no_progress: bool, verbose: bool) -> None:
    """Scan a repository for detections, workspaces and structural findings.

    REPO_PATH: Path to the repository to scan. A missing path or a file
    prints an empty result.
    """
    from wheelscan.analyzers.scanner import scan_codebase

    set_verbose(verbose)
    config = _load_config(
        context_radius=0 if exact_lines else None,
        show_progress=False if no_progress else None,
    )

    result = scan_codebase(repo_path, config=config)
    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


@cli.command()
@click.option("--domain", help="Only list rules in this domain")
def catalog(domain: str | None) -> None:
    """List the pattern catalog rules."""
    from wheelscan.analyzers.pattern_catalog import (
        DOMAINS,
        get_pattern_catalog,
        get_patterns_for_domain,
    )

    if domain is not None and domain not in DOMAINS:
        click.echo(f"Unknown domain: {domain}", err=True)
        sys.exit(1)

    rules = get_pattern_catalog() if domain is None else get_patterns_for_domain(domain)
    payload = [
        {
            "id": rule.id,
            "domain": rule.domain,
            "description": rule.description,
            "filePatterns": list(rule.file_patterns),
            "confidenceBase": rule.confidence_base,
        }
        for rule in rules
    ]
    click.echo(json.dumps(payload, indent=2))


@cli.command()
@click.argument("repo_path", type=click.Path(exists=True, file_okay=False, resolve_path=True))
def organization(repo_path: str) -> None:
    """Run the code organization heuristics.

    REPO_PATH: Path to the repository to analyze.
    """
    from wheelscan.analyzers.ignore import load_skip_dirs
    from wheelscan.analyzers.organization import analyze_code_organization
    from wheelscan.models.scan import ScanResult

    config = _load_config()
    analysis = analyze_code_organization(
        repo_path, config, load_skip_dirs(Path(repo_path), config.extra_skip_dirs)
    )
    # Reuse ScanResult for camelCase serialization of the two sections
    dumped = ScanResult(
        structural_findings=analysis.findings,
        code_organization_stats=analysis.stats,
    ).to_dict()
    payload = {
        "findings": dumped.get("structuralFindings", []),
        "stats": dumped["codeOrganizationStats"],
    }
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@cli.command()
@click.argument("repo_path", type=click.Path(exists=True, file_okay=False, resolve_path=True))
def cycles(repo_path: str) -> None:
    """List circular imports between source files.

    REPO_PATH: Path to the repository to analyze.
    """
    from wheelscan.analyzers.cycles import cycle_severity
    from wheelscan.analyzers.ignore import load_skip_dirs
    from wheelscan.analyzers.organization import collect_inventory, detect_circular_dependencies

    config = _load_config()
    repo = Path(repo_path)
    inventory = collect_inventory(repo, load_skip_dirs(repo, config.extra_skip_dirs))
    found = detect_circular_dependencies(inventory, max_file_size=config.max_file_size)

    payload = {
        "cycleCount": len(found),
        "cycles": [
            {"length": len(cycle), "severity": cycle_severity(cycle), "cycle": cycle}
            for cycle in found
        ],
    }
    click.echo(json.dumps(payload, indent=2))


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

"""Top-level scan: manifests, catalog detections and structural analysis.

One walk over the repository collects both workspace manifests and source
files. Source files are then read and matched in fixed-size batches on a
thread pool, so at most ``batch_size`` reads are in flight at once.
"""

from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from wheelscan.analyzers.ignore import SOURCE_EXTENSIONS, is_source_file, load_skip_dirs
from wheelscan.analyzers.manifests import ManifestDetector
from wheelscan.analyzers.organization import analyze_code_organization
from wheelscan.analyzers.pattern_catalog import get_pattern_catalog
from wheelscan.analyzers.patterns import scan_file
from wheelscan.analyzers.structure import analyze_structure
from wheelscan.analyzers.walker import walk_entries
from wheelscan.config import ScanConfig
from wheelscan.logging import log_operation, logger, progress_bar
from wheelscan.models.scan import Detection, ScanResult, StructuralFinding, WorkspaceScan


def _batches(items: Sequence[Path], size: int) -> Iterator[Sequence[Path]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def collect_sources_and_workspaces(
    repo_path: Path,
    skip_dirs: frozenset[str],
) -> tuple[list[Path], list[WorkspaceScan]]:
    """Walk once, feeding manifests to the detector and collecting source files."""
    detector = ManifestDetector(repo_path)
    sources: list[Path] = []

    for entry in walk_entries(repo_path, skip_dirs):
        if entry.is_dir:
            continue
        detector.visit(entry.path)
        if is_source_file(entry.path, SOURCE_EXTENSIONS):
            sources.append(entry.path)

    return sources, detector.result()


def detect_patterns(
    repo_path: Path,
    source_files: Sequence[Path],
    config: ScanConfig,
) -> list[Detection]:
    """Match every source file against the catalog, batch by batch.

    Args:
        repo_path: Repository root used to relativize reported paths.
        source_files: Absolute source file paths.
        config: Supplies batch_size, context_radius and max_file_size.

    Returns:
        Detections in source file order.
    """
    catalog = get_pattern_catalog()

    def scan_one(path: Path) -> list[Detection]:
        return scan_file(
            path,
            path.relative_to(repo_path).as_posix(),
            catalog,
            context_radius=config.context_radius,
            max_file_size=config.max_file_size,
        )

    detections: list[Detection] = []
    total = -(-len(source_files) // config.batch_size)

    with ThreadPoolExecutor(max_workers=config.batch_size) as executor:
        for batch in progress_bar(
            _batches(source_files, config.batch_size),
            desc="Scanning files",
            total=total,
            unit="batches",
            disable=not config.show_progress,
        ):
            for file_detections in executor.map(scan_one, batch):
                detections.extend(file_detections)

    return detections


def scan_codebase(repo_path: str | Path, config: ScanConfig | None = None) -> ScanResult:
    """Scan a repository for hand-rolled patterns and structural issues.

    Args:
        repo_path: Repository root.
        config: Thresholds and I/O limits; defaults to ScanConfig.from_env().

    Returns:
        ScanResult. A missing root, or a root that is not a directory, gives
        an empty result rather than an error.
    """
    config = config or ScanConfig.from_env()
    repo = Path(repo_path).resolve()

    if not repo.is_dir():
        logger.warning("Repository path does not exist or is not a directory: %s", repo)
        return ScanResult(detections=[], workspaces=[])

    with log_operation("scan_codebase", {"repo": repo}) as timing:
        skip_dirs = load_skip_dirs(repo, config.extra_skip_dirs)

        source_files, workspaces = collect_sources_and_workspaces(repo, skip_dirs)
        logger.info(
            "  Found %d source files in %d workspace(s)", len(source_files), len(workspaces)
        )

        detections = detect_patterns(repo, source_files, config)

        findings: list[StructuralFinding] = []
        layers = None
        if len(workspaces) > 1:
            structure = analyze_structure(repo, workspaces)
            findings.extend(structure.findings)
            layers = structure.design_system_layers

        organization = analyze_code_organization(repo, config, skip_dirs)
        findings.extend(organization.findings)

    logger.debug("  Scan took %.1fms", timing.elapsed_ms)

    return ScanResult(
        detections=detections,
        workspaces=workspaces,
        structural_findings=findings if findings or layers is not None else None,
        design_system_layers=layers,
        code_organization_stats=organization.stats,
    )

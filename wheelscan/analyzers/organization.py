"""Code organization heuristics.

Deterministic filesystem checks over JavaScript/TypeScript sources:
- God directories (too many source files in one directory)
- Mixed file naming conventions within a directory
- Deep directory nesting
- Barrel files with too many re-exports
- Catch-all directories (utils/, helpers/, ...) that keep growing
- Files mixing a default export with several named exports
- Circular imports

Every check is independent and reads the same DirectoryInventory. The
thresholds come from ScanConfig.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import networkx as nx

from wheelscan.analyzers.cycles import cycle_findings, find_import_cycles
from wheelscan.analyzers.ignore import ORGANIZATION_EXTENSIONS
from wheelscan.analyzers.imports import build_import_graph
from wheelscan.analyzers.patterns import MAX_FILE_SIZE, read_source
from wheelscan.analyzers.walker import walk_entries
from wheelscan.config import ScanConfig
from wheelscan.models.scan import CodeOrganizationStats, StructuralFinding

DOMAIN = "code-organization"

# Directory names that tend to collect unrelated helpers
CATCH_ALL_NAMES: frozenset[str] = frozenset({"utils", "helpers", "common", "shared", "lib"})

UNKNOWN_CONVENTION = "unknown"

# Checked in order; the first full match wins
_NAMING_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("SCREAMING_SNAKE", re.compile(r"^[A-Z][A-Z0-9_]+$")),
    ("PascalCase", re.compile(r"^[A-Z][a-zA-Z0-9]*$")),
    ("camelCase", re.compile(r"^[a-z][a-zA-Z0-9]*$")),
    ("kebab-case", re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)+$")),
    ("snake_case", re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)+$")),
)

_REEXPORT_RE = re.compile(r"export\s+(?:\*|\{[^}]*\})\s+from\s+['\"`]")
_DEFAULT_EXPORT_RE = re.compile(r"export\s+default\s")
_NAMED_EXPORT_RE = re.compile(
    r"export\s+(?:function|class|const|let|var|enum|type|interface)\s+\w"
)


def detect_naming_convention(filename: str) -> str:
    """Classify a file name's naming style.

    The extension and a leading dot are stripped first. ``index`` files and
    empty names are "unknown"; names matching none of the strict patterns
    fall back on separators and leading capitals.
    """
    name = re.sub(r"\.[^.]+$", "", filename)
    name = re.sub(r"^\.", "", name)
    if not name or name == "index":
        return UNKNOWN_CONVENTION

    for convention, pattern in _NAMING_RULES:
        if pattern.match(name):
            return convention

    if "-" in name:
        return "kebab-case"
    if "_" in name:
        return "snake_case"
    if name[0].isupper():
        return "PascalCase"
    return "camelCase"


def _stem(path: PurePosixPath | Path) -> str:
    return path.name[: -len(path.suffix)] if path.suffix else path.name


def _doubling_severity(count: int, threshold: int) -> str:
    return "critical" if count > threshold * 2 else "warning"


@dataclass
class DirectoryInventory:
    """Source files and directories collected in one walk.

    Attributes:
        repo_path: Repository root.
        files_by_dir: Repo-relative directory ("." for root) -> source file names.
        source_files: Absolute paths of every source file, in walk order.
        directories: Repo-relative paths of every walked directory.
        max_depth: Deepest directory, in path segments from the root.
        naming_conventions: Convention -> number of source files.
    """

    repo_path: Path
    files_by_dir: dict[str, list[str]] = field(default_factory=dict)
    source_files: list[Path] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    max_depth: int = 0
    naming_conventions: Counter = field(default_factory=Counter)

    def relative(self, path: Path) -> str:
        return path.relative_to(self.repo_path).as_posix()


@dataclass
class CodeOrganizationAnalysis:
    """Findings plus aggregate stats."""

    findings: list[StructuralFinding]
    stats: CodeOrganizationStats


def collect_inventory(
    repo_path: Path,
    skip_dirs: frozenset[str] | set[str] = frozenset(),
    extensions: frozenset[str] = ORGANIZATION_EXTENSIONS,
) -> DirectoryInventory:
    """Walk the repository once and group source files by directory."""
    inventory = DirectoryInventory(repo_path=Path(repo_path))

    for entry in walk_entries(inventory.repo_path, skip_dirs):
        if entry.is_dir:
            inventory.directories.append(entry.relative_path)
            inventory.max_depth = max(inventory.max_depth, entry.depth)
            continue

        if entry.path.suffix not in extensions:
            continue

        inventory.source_files.append(entry.path)

        convention = detect_naming_convention(entry.name)
        if convention != UNKNOWN_CONVENTION:
            inventory.naming_conventions[convention] += 1

        directory = PurePosixPath(entry.relative_path).parent.as_posix()
        inventory.files_by_dir.setdefault(directory, []).append(entry.name)

    return inventory


def check_god_directories(inventory: DirectoryInventory, threshold: int) -> list[StructuralFinding]:
    """Flag directories holding more than threshold source files."""
    findings = []
    for directory, files in inventory.files_by_dir.items():
        count = len(files)
        if count > threshold:
            findings.append(
                StructuralFinding(
                    type="god-directory",
                    domain=DOMAIN,
                    description=(
                        f'Directory "{directory}" contains {count} source files '
                        f"(threshold: {threshold}). Split by feature or domain."
                    ),
                    paths=[directory],
                    severity=_doubling_severity(count, threshold),
                    metadata={"fileCount": count, "threshold": threshold},
                )
            )
    return findings


def check_mixed_naming(
    inventory: DirectoryInventory,
    min_files: int = 3,
    min_bucket: int = 2,
) -> list[StructuralFinding]:
    """Flag directories where two or more naming conventions each have min_bucket files.

    Directories with fewer than min_files source files are not judged, and
    conventions with a single file are treated as noise.
    """
    findings = []
    for directory, files in inventory.files_by_dir.items():
        if len(files) < min_files:
            continue

        buckets: dict[str, list[str]] = {}
        for filename in files:
            convention = detect_naming_convention(filename)
            if convention == UNKNOWN_CONVENTION:
                continue
            buckets.setdefault(convention, []).append(filename)

        significant = [(conv, names) for conv, names in buckets.items() if len(names) >= min_bucket]
        if len(significant) < 2:
            continue

        summary = ", ".join(f"{conv} ({len(names)} files)" for conv, names in significant)
        findings.append(
            StructuralFinding(
                type="mixed-naming-convention",
                domain=DOMAIN,
                description=(
                    f'Directory "{directory}" uses mixed naming conventions: {summary}. '
                    "Choose one convention and enforce it."
                ),
                paths=[directory],
                severity="warning",
                metadata={"conventions": {conv: len(names) for conv, names in significant}},
            )
        )
    return findings


def nesting_depth(relative_dir: str) -> int:
    """Depth counted from the first ``src`` segment (inclusive), else from the root."""
    parts = relative_dir.split("/")
    if "src" in parts:
        return len(parts) - parts.index("src")
    return len(parts)


def check_deep_nesting(inventory: DirectoryInventory, max_depth: int) -> list[StructuralFinding]:
    """Flag directories nested deeper than max_depth."""
    findings = []
    for directory in inventory.directories:
        depth = nesting_depth(directory)
        if depth > max_depth:
            findings.append(
                StructuralFinding(
                    type="deep-nesting",
                    domain=DOMAIN,
                    description=(
                        f'Directory "{directory}" is {depth} levels deep (max: {max_depth}). '
                        "Consider flattening or using path aliases."
                    ),
                    paths=[directory],
                    severity="warning",
                    metadata={"depth": depth, "threshold": max_depth},
                )
            )
    return findings


def count_reexports(content: str) -> int:
    """Count ``export * from`` and ``export { ... } from`` statements."""
    return len(_REEXPORT_RE.findall(content))


def check_barrel_bloat(
    inventory: DirectoryInventory,
    threshold: int,
    contents: dict[Path, str],
) -> list[StructuralFinding]:
    """Flag index files with more than threshold re-exports."""
    findings = []
    for path in inventory.source_files:
        if _stem(path) != "index" or path not in contents:
            continue
        count = count_reexports(contents[path])
        if count <= threshold:
            continue
        relative = inventory.relative(path)
        findings.append(
            StructuralFinding(
                type="barrel-bloat",
                domain=DOMAIN,
                description=(
                    f'Barrel file "{relative}" has {count} re-exports '
                    f"(threshold: {threshold}). Consider direct imports or code-splitting."
                ),
                paths=[relative],
                severity=_doubling_severity(count, threshold),
                metadata={"reexportCount": count, "threshold": threshold},
            )
        )
    return findings


def check_catch_all_directories(
    inventory: DirectoryInventory,
    threshold: int,
) -> list[StructuralFinding]:
    """Flag utils/helpers/common/shared/lib directories with more than threshold files."""
    findings = []
    for directory, files in inventory.files_by_dir.items():
        if PurePosixPath(directory).name not in CATCH_ALL_NAMES:
            continue
        count = len(files)
        if count <= threshold:
            continue
        findings.append(
            StructuralFinding(
                type="catch-all-directory",
                domain=DOMAIN,
                description=(
                    f'Catch-all directory "{directory}" contains {count} files '
                    f"(threshold: {threshold}). Split into domain-specific modules "
                    "(e.g., utils/date, utils/string, utils/validation)."
                ),
                paths=[directory],
                severity=_doubling_severity(count, threshold),
                metadata={"fileCount": count, "threshold": threshold},
            )
        )
    return findings


def check_mixed_exports(
    inventory: DirectoryInventory,
    min_named: int,
    contents: dict[Path, str],
) -> list[StructuralFinding]:
    """Flag non-index files with a default export and at least min_named named exports.

    Reported as an info-level god-directory finding (a "god module") with
    ``metadata.issue == "mixed-export-style"``.
    """
    findings = []
    for path in inventory.source_files:
        if _stem(path) == "index" or path not in contents:
            continue
        content = contents[path]
        if not _DEFAULT_EXPORT_RE.search(content):
            continue
        named = len(_NAMED_EXPORT_RE.findall(content))
        if named < min_named:
            continue
        relative = inventory.relative(path)
        findings.append(
            StructuralFinding(
                type="god-directory",
                domain=DOMAIN,
                description=(
                    f'File "{relative}" mixes a default export with {named} named exports. '
                    "One module, one responsibility: split into separate files."
                ),
                paths=[relative],
                severity="info",
                metadata={
                    "hasDefaultExport": True,
                    "namedExportCount": named,
                    "issue": "mixed-export-style",
                },
            )
        )
    return findings


def detect_circular_dependencies(
    inventory: DirectoryInventory,
    max_workers: int = 8,
    max_file_size: int = MAX_FILE_SIZE,
) -> list[list[str]]:
    """Build the import graph and return cycles as repo-relative paths."""
    G = build_import_graph(inventory.source_files, max_workers, max_file_size)
    G = nx.relabel_nodes(G, {path: inventory.relative(path) for path in G.nodes}, copy=True)
    return [[str(node) for node in cycle] for cycle in find_import_cycles(G)]


def _read_contents(inventory: DirectoryInventory, max_file_size: int) -> dict[Path, str]:
    contents: dict[Path, str] = {}
    for path in inventory.source_files:
        content = read_source(path)
        if content is not None and len(content) <= max_file_size:
            contents[path] = content
    return contents


def analyze_code_organization(
    repo_path: Path,
    config: ScanConfig | None = None,
    skip_dirs: frozenset[str] | set[str] = frozenset(),
) -> CodeOrganizationAnalysis:
    """Run every organization heuristic plus cycle detection.

    Args:
        repo_path: Repository root (absolute).
        config: Thresholds; defaults to ScanConfig.from_env().
        skip_dirs: Extra directory names to prune.

    Returns:
        CodeOrganizationAnalysis with findings and stats.
    """
    config = config or ScanConfig.from_env()
    repo_path = Path(repo_path)
    inventory = collect_inventory(repo_path, skip_dirs | config.extra_skip_dirs)
    contents = _read_contents(inventory, config.max_file_size)

    findings: list[StructuralFinding] = []
    findings.extend(check_god_directories(inventory, config.god_directory_threshold))
    findings.extend(
        check_mixed_naming(inventory, config.naming_min_files, config.naming_min_bucket)
    )
    findings.extend(check_deep_nesting(inventory, config.max_nesting_depth))
    findings.extend(check_barrel_bloat(inventory, config.barrel_bloat_threshold, contents))
    findings.extend(check_catch_all_directories(inventory, config.catch_all_threshold))
    findings.extend(check_mixed_exports(inventory, config.mixed_export_min_named, contents))

    cycles = detect_circular_dependencies(
        inventory, max_workers=min(config.batch_size, 32), max_file_size=config.max_file_size
    )
    findings.extend(cycle_findings(cycles))

    stats = CodeOrganizationStats(
        total_source_files=len(inventory.source_files),
        max_directory_depth=inventory.max_depth,
        naming_conventions=dict(inventory.naming_conventions),
        circular_dependency_count=len(cycles),
    )
    return CodeOrganizationAnalysis(findings=findings, stats=stats)

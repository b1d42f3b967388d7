"""Path filter shared by the walker and every analyzer.

Configuration:
    - SKIP_DIRS: directory names that are always pruned (dependency caches,
      VCS metadata, build and coverage output)
    - .wheelscanignore: per-repo additions using gitignore-like lines
"""

from pathlib import Path

from wheelscan.logging import logger

# Always pruned; contents are never visited
SKIP_DIRS: frozenset[str] = frozenset({
    # Dependencies
    "node_modules",
    "vendor",
    # Version control
    ".git",
    # Build outputs
    "dist",
    "build",
    ".next",
    "target",
    ".turbo",
    # Python
    "__pycache__",
    ".venv",
    "venv",
    # Test coverage
    "coverage",
})

# Files the pattern detector scans
SOURCE_EXTENSIONS: frozenset[str] = frozenset({
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
    ".py", ".rs", ".go", ".java", ".sql", ".xml",
})

# Files the import graph and organization heuristics consider
ORGANIZATION_EXTENSIONS: frozenset[str] = frozenset({
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
})

WHEELSCANIGNORE_FILENAME = ".wheelscanignore"


def is_source_file(path: Path, extensions: frozenset[str] = SOURCE_EXTENSIONS) -> bool:
    """Check whether a file has a scannable source extension.

    Extensions are compared case-sensitively, so ``App.TS`` is not source.
    """
    return path.suffix in extensions


def should_skip_dir(
    name: str,
    extra: frozenset[str] | set[str] = frozenset(),
    relative_path: str | None = None,
) -> bool:
    """Check whether a directory is pruned from the walk.

    Entries in extra match either the directory base name or, when they
    contain a slash, its repo-relative POSIX path.
    """
    if name in SKIP_DIRS or name in extra:
        return True
    return relative_path is not None and relative_path in extra


def parse_wheelscanignore(repo_path: Path) -> set[str]:
    """Parse .wheelscanignore if it exists.

    Supports a gitignore-like subset:
    - Lines starting with # are comments
    - Empty lines are ignored
    - Each remaining line is a directory base name, or a repo-relative
      directory path when it contains a slash; leading and trailing slashes
      are dropped
    - Lines starting with ! are negations (not supported, skipped)

    Args:
        repo_path: Path to repository root.

    Returns:
        Set of directory names and paths, empty if the file is missing or unreadable.
    """
    ignore_file = repo_path / WHEELSCANIGNORE_FILENAME
    if not ignore_file.is_file():
        return set()

    patterns: set[str] = set()
    try:
        content = ignore_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("  Failed to read %s: %s", ignore_file, e)
        return set()

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            logger.debug("  Negation patterns not supported: %s", line)
            continue
        name = line.strip("/")
        if name:
            patterns.add(name)
    return patterns


def load_skip_dirs(repo_path: Path, extra: frozenset[str] | set[str] = frozenset()) -> frozenset[str]:
    """Combine configured extras with .wheelscanignore entries.

    SKIP_DIRS itself is always applied by should_skip_dir and is not
    included in the returned set.

    Args:
        repo_path: Repository root.
        extra: Additional names from ScanConfig.extra_skip_dirs.

    Returns:
        Frozen set of additional directory names to prune.
    """
    custom = parse_wheelscanignore(repo_path)
    if custom:
        logger.debug("  Loaded %d patterns from %s", len(custom), WHEELSCANIGNORE_FILENAME)
    return frozenset(extra) | frozenset(custom)

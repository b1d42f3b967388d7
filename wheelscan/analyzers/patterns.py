"""Line-oriented pattern matching against the catalog.

Source files are treated as plain text split into lines; no parsing is
attempted. For every applicable (rule, regex) pair only the first matching
line is reported, which bounds output volume per file.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path, PurePosixPath

from wheelscan.analyzers.pattern_catalog import PatternDefinition, get_pattern_catalog
from wheelscan.logging import logger
from wheelscan.models.scan import Detection, LineRange

# Files with more characters than this are treated as generated or minified
MAX_FILE_SIZE = 500_000

# Lines of context on each side of a match
DEFAULT_CONTEXT_RADIUS = 5


def matches_file_pattern(file_path: str | Path, patterns: Iterable[str]) -> bool:
    """Check a path against the catalog's glob shapes.

    Supported shapes:
    - ``**/*.ext`` and ``*.ext``: extension match anywhere
    - ``**/name`` and ``name``: exact base name match anywhere

    Args:
        file_path: File path (relative or absolute).
        patterns: Glob patterns from a PatternDefinition.

    Returns:
        True if any pattern matches.
    """
    path = PurePosixPath(Path(file_path).as_posix())
    ext = path.suffix
    basename = path.name

    for pattern in patterns:
        if pattern.startswith("**/"):
            pattern = pattern[3:]
        if pattern.startswith("*."):
            if ext == pattern[1:]:
                return True
        elif basename == pattern:
            return True
    return False


def applicable_patterns(
    file_path: str | Path,
    catalog: Sequence[PatternDefinition] | None = None,
) -> list[PatternDefinition]:
    """Return the rules whose file patterns match file_path."""
    if catalog is None:
        catalog = get_pattern_catalog()
    return [rule for rule in catalog if matches_file_pattern(file_path, rule.file_patterns)]


def line_range_for(line_number: int, line_count: int, context_radius: int) -> LineRange:
    """Pad a 1-indexed match line by context_radius, clamped to the file.

    A radius of 0 gives the exact-line variant (start == end).
    """
    start = max(1, line_number - context_radius)
    end = min(max(line_count, line_number), line_number + context_radius)
    return LineRange(start=start, end=end)


def scan_content(
    content: str,
    relative_path: str,
    catalog: Sequence[PatternDefinition] | None = None,
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
    max_file_size: int = MAX_FILE_SIZE,
) -> list[Detection]:
    """Match one file's text against the catalog.

    Args:
        content: Full file text.
        relative_path: Repo-relative POSIX path used for glob matching and
            reported in each Detection.
        catalog: Rules to apply (defaults to the full catalog).
        context_radius: Lines of context around the match; 0 reports only
            the matching line.
        max_file_size: Content longer than this is skipped entirely.

    Returns:
        At most one Detection per (rule, regex) pair.
    """
    if len(content) > max_file_size:
        logger.debug("  Skipping oversized file %s (%d chars)", relative_path, len(content))
        return []

    rules = applicable_patterns(relative_path, catalog)
    if not rules:
        return []

    lines = content.split("\n")
    detections: list[Detection] = []

    for rule in rules:
        for regex in rule.code_patterns:
            for index, line in enumerate(lines):
                if regex.search(line):
                    detections.append(
                        Detection(
                            file_path=relative_path,
                            line_range=line_range_for(index + 1, len(lines), context_radius),
                            pattern_id=rule.id,
                            confidence_score=rule.confidence_base,
                            domain=rule.domain,
                        )
                    )
                    break

    return detections


def read_source(path: Path) -> str | None:
    """Read a file as UTF-8, returning None when it cannot be read.

    Invalid byte sequences are replaced with U+FFFD so a stray Latin-1 byte
    does not hide the rest of the file.
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        # Permission denied or vanished mid-scan
        logger.debug("  Skipping unreadable file %s: %s", path, e)
        return None


def scan_file(
    path: Path,
    relative_path: str,
    catalog: Sequence[PatternDefinition] | None = None,
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
    max_file_size: int = MAX_FILE_SIZE,
) -> list[Detection]:
    """Read a file and match it against the catalog.

    Unreadable files produce no detections.
    """
    content = read_source(path)
    if content is None:
        return []
    return scan_content(content, relative_path, catalog, context_radius, max_file_size)

"""Relative import graph for JavaScript/TypeScript sources.

Import targets are pulled out of file text with regexes and resolved by
probing the filesystem: the literal as-is when it carries a source
extension, then each known extension, then an ``index`` file inside the
literal treated as a directory. Package imports and anything that does not
resolve are dropped.
"""

import os
import re
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import networkx as nx

from wheelscan.analyzers.ignore import ORGANIZATION_EXTENSIONS
from wheelscan.analyzers.patterns import MAX_FILE_SIZE, read_source
from wheelscan.logging import logger

# Extensions tried, in order, when a literal does not name a source file
RESOLVE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

_Q = "['\"`]"
_REL = r"(\.{1,2}/[^'\"`\n]+)"

IMPORT_PATTERNS: tuple[re.Pattern[str], ...] = (
    # import x from './a'; import { a } from '../b'; import './side-effect'
    re.compile(rf"import\s+(?:[^;]*?\s+from\s+)?{_Q}{_REL}{_Q}"),
    # import('./lazy')
    re.compile(rf"import\s*\(\s*{_Q}{_REL}{_Q}"),
    # require('./cjs')
    re.compile(rf"require\s*\(\s*{_Q}{_REL}{_Q}\s*\)"),
    # export * from './a'; export { a } from './a'
    re.compile(rf"export\s+(?:\*|\{{[^}}]*\}})\s+from\s+{_Q}{_REL}{_Q}"),
)


def extract_imports(content: str) -> list[str]:
    """Return the relative import literals found in source text.

    Only literals starting with ``./`` or ``../`` are returned; a literal
    matched by more than one form appears more than once.
    """
    imports: list[str] = []
    for pattern in IMPORT_PATTERNS:
        imports.extend(match.group(1) for match in pattern.finditer(content))
    return imports


def extract_file_imports(path: Path, max_file_size: int = MAX_FILE_SIZE) -> list[str]:
    """Read a file and extract its relative imports.

    Unreadable or oversized files have no imports.
    """
    content = read_source(path)
    if content is None or len(content) > max_file_size:
        return []
    return extract_imports(content)


def resolve_import_path(from_file: Path, literal: str) -> Path | None:
    """Resolve an import literal relative to the importing file.

    Args:
        from_file: Absolute path of the importing file.
        literal: Relative import literal (``./x``, ``../y/z.js``).

    Returns:
        Absolute normalized path of the target, or None if nothing exists.
    """
    resolved = Path(os.path.normpath(from_file.parent / literal))

    if resolved.suffix in ORGANIZATION_EXTENSIONS:
        return resolved if resolved.is_file() else None

    for ext in RESOLVE_EXTENSIONS:
        candidate = resolved.with_name(resolved.name + ext)
        if candidate.is_file():
            return candidate

    for ext in RESOLVE_EXTENSIONS:
        candidate = resolved / f"index{ext}"
        if candidate.is_file():
            return candidate

    return None


def _file_targets(path: Path, max_file_size: int) -> list[Path]:
    targets: list[Path] = []
    for literal in extract_file_imports(path, max_file_size):
        target = resolve_import_path(path, literal)
        if target is not None:
            targets.append(target)
    return targets


def build_import_graph(
    source_files: Sequence[Path],
    max_workers: int = 8,
    max_file_size: int = MAX_FILE_SIZE,
) -> nx.DiGraph:
    """Build the directed import graph between source files.

    Extraction and resolution run per file on a thread pool; the graph is
    assembled only after every file has been processed. Edges are kept only
    when both ends are in source_files.

    Args:
        source_files: Absolute, normalized source file paths.
        max_workers: Thread pool size for extraction.
        max_file_size: Files with more characters are treated as import-free.

    Returns:
        DiGraph with one node per source file (in input order) and an edge
        for each resolved import, in the order imports appear.
    """
    G = nx.DiGraph()
    G.add_nodes_from(source_files)
    if not source_files:
        return G

    known = set(source_files)

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        all_targets = list(executor.map(lambda p: _file_targets(p, max_file_size), source_files))

    for source, targets in zip(source_files, all_targets, strict=True):
        for target in targets:
            if target in known:
                G.add_edge(source, target)

    logger.debug(
        "  Import graph: %d files, %d edges", G.number_of_nodes(), G.number_of_edges()
    )
    return G

"""Package manifest detection.

Recognizes one manifest file per ecosystem while the tree is walked and
turns it into a WorkspaceScan. Dependency parsing is best-effort: a manifest
that cannot be parsed contributes an empty dependency map instead of
failing the scan.
"""

import json
import re
import tomllib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wheelscan.logging import logger
from wheelscan.models.scan import WorkspaceScan

# Sibling lockfile -> package manager, checked in order
NODE_LOCKFILES: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("package-lock.json", "npm"),
)
DEFAULT_NODE_MANAGER = "npm"

# PEP 508 requirement: name, optional extras, then the version specifier
_PEP508_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)\s*(?:\[[^\]]*\])?\s*([^;]*)")

_GO_REQUIRE_BLOCK_RE = re.compile(r"^require\s*\(\s*$(.*?)^\)", re.MULTILINE | re.DOTALL)
_GO_REQUIRE_LINE_RE = re.compile(r"^require[ \t]+([^\s(]\S*)[ \t]+(\S+)", re.MULTILINE)
_GO_DEP_RE = re.compile(r"^\s*(\S+)\s+(\S+)")


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _str_values(table: dict) -> dict[str, str]:
    """Keep string-valued entries of a TOML/JSON dependency table."""
    return {str(name): spec for name, spec in table.items() if isinstance(spec, str)}


def parse_package_json(content: str) -> dict[str, str]:
    """Merge dependencies and devDependencies from package.json."""
    try:
        pkg = json.loads(content)
    except json.JSONDecodeError as e:
        logger.debug("  Malformed package.json: %s", e)
        return {}
    if not isinstance(pkg, dict):
        return {}

    deps = _str_values(_as_dict(pkg.get("dependencies")))
    deps.update(_str_values(_as_dict(pkg.get("devDependencies"))))
    return deps


def _parse_requirement(requirement: str) -> tuple[str, str] | None:
    match = _PEP508_RE.match(requirement)
    if not match:
        return None
    spec = match.group(2).strip()
    return match.group(1), spec or "*"


def _toml_table_deps(table: dict) -> dict[str, str]:
    """Read a ``name = "spec"`` or ``name = {version = "spec"}`` table."""
    deps: dict[str, str] = {}
    for name, value in table.items():
        if isinstance(value, str):
            deps[name] = value
        elif isinstance(value, dict):
            version = value.get("version")
            deps[name] = version if isinstance(version, str) else "*"
    return deps


def _load_toml(content: str, filename: str) -> dict | None:
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        logger.debug("  Malformed %s: %s", filename, e)
        return None


def parse_pyproject(content: str) -> dict[str, str]:
    """Extract dependencies from pyproject.toml.

    Understands the PEP 621 ``[project] dependencies`` array, a
    ``[project.dependencies]`` or top-level ``[dependencies]`` table, and
    Poetry's ``[tool.poetry.dependencies]`` (without the python entry).
    """
    data = _load_toml(content, "pyproject.toml")
    if data is None:
        return {}

    deps: dict[str, str] = {}
    project = _as_dict(data.get("project"))
    project_deps = project.get("dependencies")

    if isinstance(project_deps, list):
        for requirement in project_deps:
            if not isinstance(requirement, str):
                continue
            parsed = _parse_requirement(requirement)
            if parsed:
                deps[parsed[0]] = parsed[1]
    elif isinstance(project_deps, dict):
        deps.update(_toml_table_deps(project_deps))

    deps.update(_toml_table_deps(_as_dict(data.get("dependencies"))))

    poetry = _as_dict(_as_dict(data.get("tool")).get("poetry"))
    poetry_deps = _toml_table_deps(_as_dict(poetry.get("dependencies")))
    poetry_deps.pop("python", None)
    deps.update(poetry_deps)

    return deps


def parse_cargo_toml(content: str) -> dict[str, str]:
    """Extract the ``[dependencies]`` table from Cargo.toml."""
    data = _load_toml(content, "Cargo.toml")
    if data is None:
        return {}
    return _toml_table_deps(_as_dict(data.get("dependencies")))


def parse_go_mod(content: str) -> dict[str, str]:
    """Extract ``require`` entries from go.mod."""
    deps: dict[str, str] = {}

    for block in _GO_REQUIRE_BLOCK_RE.findall(content):
        for line in block.splitlines():
            line = line.split("//", 1)[0]
            match = _GO_DEP_RE.match(line)
            if match:
                deps[match.group(1)] = match.group(2)

    for module, version in _GO_REQUIRE_LINE_RE.findall(content):
        deps[module] = version

    return deps


@dataclass(frozen=True)
class ManifestType:
    """A manifest filename and how to read it."""

    filename: str
    package_manager: str
    language: str
    parse_deps: Callable[[str], dict[str, str]]


MANIFEST_TYPES: tuple[ManifestType, ...] = (
    ManifestType("package.json", DEFAULT_NODE_MANAGER, "typescript", parse_package_json),
    ManifestType("pyproject.toml", "pip", "python", parse_pyproject),
    ManifestType("Cargo.toml", "cargo", "rust", parse_cargo_toml),
    ManifestType("go.mod", "go", "go", parse_go_mod),
)

_MANIFESTS_BY_NAME: dict[str, ManifestType] = {m.filename: m for m in MANIFEST_TYPES}


def detect_node_package_manager(directory: Path) -> str:
    """Pick the Node package manager from the first lockfile present."""
    for lockfile, manager in NODE_LOCKFILES:
        if (directory / lockfile).is_file():
            return manager
    return DEFAULT_NODE_MANAGER


def read_package_name(directory: Path) -> str | None:
    """Return the ``name`` declared in directory/package.json, if any."""
    try:
        pkg = json.loads((directory / "package.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(pkg, dict):
        return None
    name = pkg.get("name")
    return name if isinstance(name, str) else None


def is_manifest(filename: str) -> bool:
    """Check whether a base name is a recognized manifest."""
    return filename in _MANIFESTS_BY_NAME


class ManifestDetector:
    """Collects workspaces from manifest files seen during a walk.

    Each (directory, manifest filename) pair is processed once, even when
    the same path is offered again.
    """

    def __init__(self, repo_path: Path) -> None:
        self.repo_path = Path(repo_path)
        self.visited: set[tuple[Path, str]] = set()
        self.workspaces: list[WorkspaceScan] = []

    def visit(self, path: Path) -> WorkspaceScan | None:
        """Record a workspace if path is an unseen manifest.

        Args:
            path: Absolute path of a file met during the walk.

        Returns:
            The new WorkspaceScan, or None if path is not a manifest, was
            already visited, or cannot be read.
        """
        manifest = _MANIFESTS_BY_NAME.get(path.name)
        if manifest is None:
            return None

        directory = path.parent
        key = (directory, manifest.filename)
        if key in self.visited:
            return None
        self.visited.add(key)

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("  Skipping unreadable manifest %s: %s", path, e)
            return None

        package_manager = manifest.package_manager
        if manifest.filename == "package.json":
            package_manager = detect_node_package_manager(directory)

        workspace = WorkspaceScan(
            root=directory.relative_to(self.repo_path).as_posix(),
            package_manager=package_manager,
            language=manifest.language,
            dependencies=manifest.parse_deps(content),
        )
        self.workspaces.append(workspace)
        return workspace

    def result(self) -> list[WorkspaceScan]:
        """Return detected workspaces, or the synthetic root workspace if none."""
        if self.workspaces:
            return list(self.workspaces)
        return [
            WorkspaceScan(
                root=".",
                package_manager="unknown",
                language="unknown",
                dependencies={},
            )
        ]

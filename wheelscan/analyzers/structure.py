"""Design system layer classification for multi-workspace repositories.

Workspaces are sorted into layers by directory name (tokens -> config -> ui,
with apps on top). Dependencies must only point down the stack. Only
manifests and Tailwind config files are read; source code is not.
"""

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from wheelscan.analyzers.manifests import read_package_name
from wheelscan.analyzers.patterns import read_source
from wheelscan.models.scan import DesignSystemLayers, StructuralFinding, WorkspaceScan

DOMAIN = "design-system"

# Lowercase substrings of a workspace directory name; first list to match wins
TOKEN_PATTERNS: tuple[str, ...] = ("design-tokens", "tokens", "theme-tokens", "primitives")
CONFIG_PATTERNS: tuple[str, ...] = ("tailwind-config", "shared-config", "config")
UI_PATTERNS: tuple[str, ...] = ("ui", "components", "design-system", "component-library")

DOCS_NAMES: frozenset[str] = frozenset({"docs", "documentation"})

TAILWIND_CONFIG_NAMES: tuple[str, ...] = (
    "tailwind.config.ts",
    "tailwind.config.js",
    "tailwind.config.mjs",
    "tailwind.config.cjs",
)

_HEX_COLOR_RE = re.compile(r"['\"`]#[0-9a-fA-F]{3,8}['\"`]")


@dataclass
class StructuralAnalysis:
    """Layer findings plus the detected layer summary."""

    findings: list[StructuralFinding]
    design_system_layers: DesignSystemLayers


@dataclass
class _Layers:
    tokens: list[str]
    config: list[str]
    ui: list[str]
    apps: list[str]


def _matches_any(name: str, patterns: tuple[str, ...]) -> bool:
    lower = name.lower()
    return any(p in lower for p in patterns)


def classify_workspace(root: str) -> str | None:
    """Return "tokens", "config", "ui", "app" or None for a workspace root."""
    name = PurePosixPath(root).name
    if _matches_any(name, TOKEN_PATTERNS):
        return "tokens"
    if _matches_any(name, CONFIG_PATTERNS):
        return "config"
    if _matches_any(name, UI_PATTERNS):
        return "ui"
    if root.startswith("apps/"):
        return "app"
    return None


def _classify(workspaces: list[WorkspaceScan]) -> _Layers:
    layers = _Layers(tokens=[], config=[], ui=[], apps=[])
    buckets = {"tokens": layers.tokens, "config": layers.config, "ui": layers.ui, "app": layers.apps}
    for ws in workspaces:
        layer = classify_workspace(ws.root)
        if layer is not None:
            buckets[layer].append(ws.root)
    return layers


def check_missing_layers(layers: _Layers) -> list[StructuralFinding]:
    """Report gaps in the tokens -> config -> ui stack."""
    has_tokens, has_config, has_ui = bool(layers.tokens), bool(layers.config), bool(layers.ui)
    findings = []

    if not has_tokens and (has_config or has_ui):
        findings.append(
            StructuralFinding(
                type="missing-layer",
                domain=DOMAIN,
                description=(
                    "Monorepo has UI/config packages but no design token package. "
                    "Design values lack a single source of truth."
                ),
                paths=layers.ui + layers.config,
                severity="critical",
            )
        )
    if has_tokens and not has_config and has_ui:
        findings.append(
            StructuralFinding(
                type="missing-layer",
                domain=DOMAIN,
                description=(
                    "Monorepo has token and UI packages but no shared Tailwind config package. "
                    "Each app may duplicate the token-to-Tailwind mapping."
                ),
                paths=layers.tokens + layers.ui,
                severity="warning",
            )
        )
    if has_tokens and not has_ui:
        findings.append(
            StructuralFinding(
                type="missing-layer",
                domain=DOMAIN,
                description=(
                    "Monorepo has token package but no shared UI component library. "
                    "Components may be duplicated across apps."
                ),
                paths=list(layers.tokens),
                severity="warning",
            )
        )
    return findings


def _violation_message(source: str, target: str, source_layer: str) -> str:
    if source_layer == "tokens":
        return (
            f'Token package "{source}" depends on "{target}" → tokens should be the '
            "bottom layer with no upward dependencies."
        )
    if source_layer == "config":
        return (
            f'Config package "{source}" depends on UI package "{target}" → '
            "config should not depend on UI."
        )
    return f'UI package "{source}" depends on app "{target}" → UI should not depend on apps.'


def check_dependency_violations(
    repo_path: Path,
    workspaces: list[WorkspaceScan],
    layers: _Layers,
) -> list[StructuralFinding]:
    """Report dependencies that point up the layer stack.

    The target is matched by the ``name`` in its package.json; workspaces
    without a readable name can never be a violation target.
    """
    forbidden = {
        "tokens": layers.config + layers.ui,
        "config": layers.ui,
        "ui": layers.apps,
    }
    names: dict[str, str | None] = {}

    def package_name(root: str) -> str | None:
        if root not in names:
            names[root] = read_package_name(repo_path / root)
        return names[root]

    findings = []
    for ws in workspaces:
        layer = classify_workspace(ws.root)
        targets = forbidden.get(layer or "", [])
        if not targets:
            continue
        for dep in ws.dependencies:
            for target in targets:
                if package_name(target) == dep:
                    findings.append(
                        StructuralFinding(
                            type="dependency-violation",
                            domain=DOMAIN,
                            description=_violation_message(ws.root, target, layer),
                            paths=[ws.root, target],
                            severity="critical",
                        )
                    )
    return findings


def find_tailwind_config(directory: Path) -> Path | None:
    """Return the first tailwind.config.{ts,js,mjs,cjs} in directory."""
    for name in TAILWIND_CONFIG_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def check_tailwind_configs(
    repo_path: Path,
    workspaces: list[WorkspaceScan],
    layers: _Layers,
) -> list[StructuralFinding]:
    """Report app configs without shared presets and configs with hex colors."""
    findings = []

    if layers.config:
        for app_root in layers.apps:
            config_path = find_tailwind_config(repo_path / app_root)
            if config_path is None:
                continue
            content = read_source(config_path)
            if content is not None and "presets" not in content:
                findings.append(
                    StructuralFinding(
                        type="missing-shared-preset",
                        domain=DOMAIN,
                        description=(
                            f'App "{app_root}" tailwind.config does not use shared presets, '
                            "may duplicate design values."
                        ),
                        paths=[config_path.relative_to(repo_path).as_posix()],
                        severity="warning",
                    )
                )

    for ws in workspaces:
        config_path = find_tailwind_config(repo_path / ws.root)
        if config_path is None:
            continue
        content = read_source(config_path)
        if content is not None and _HEX_COLOR_RE.search(content):
            findings.append(
                StructuralFinding(
                    type="hardcoded-config-values",
                    domain=DOMAIN,
                    description=(
                        f'Tailwind config in "{ws.root}" contains hardcoded hex colors. '
                        "Reference CSS variables or token imports instead."
                    ),
                    paths=[config_path.relative_to(repo_path).as_posix()],
                    severity="warning",
                )
            )
    return findings


def analyze_structure(repo_path: Path, workspaces: list[WorkspaceScan]) -> StructuralAnalysis:
    """Classify workspaces into design system layers and check their flow.

    Args:
        repo_path: Repository root (absolute).
        workspaces: Workspaces from the manifest detector.

    Returns:
        StructuralAnalysis. Missing-layer findings are only produced when
        there is more than one workspace.
    """
    repo_path = Path(repo_path)
    layers = _classify(workspaces)

    findings: list[StructuralFinding] = []
    if len(workspaces) > 1:
        findings.extend(check_missing_layers(layers))
    findings.extend(check_dependency_violations(repo_path, workspaces, layers))
    findings.extend(check_tailwind_configs(repo_path, workspaces, layers))

    has_docs = any(PurePosixPath(ws.root).name in DOCS_NAMES for ws in workspaces)

    return StructuralAnalysis(
        findings=findings,
        design_system_layers=DesignSystemLayers(
            has_tokens=bool(layers.tokens),
            has_config=bool(layers.config),
            has_ui=bool(layers.ui),
            has_docs=has_docs,
            token_paths=layers.tokens,
            config_paths=layers.config,
            ui_paths=layers.ui,
        ),
    )

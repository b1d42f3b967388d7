"""Tests for design system layer classification."""

import json

from wheelscan.analyzers.structure import analyze_structure, classify_workspace
from wheelscan.models.scan import WorkspaceScan


def _ws(root: str, **deps: str) -> WorkspaceScan:
    return WorkspaceScan(root=root, package_manager="pnpm", language="typescript", dependencies=deps)


def _kinds(analysis) -> list[tuple[str, str]]:
    return [(f.type, f.severity) for f in analysis.findings]


class TestClassifyWorkspace:
    """Tests for layer classification by directory name."""

    def test_token_wins_over_config(self):
        assert classify_workspace("packages/tokens-config") == "tokens"

    def test_config_and_ui(self):
        assert classify_workspace("packages/tailwind-config") == "config"
        assert classify_workspace("packages/ui") == "ui"
        assert classify_workspace("packages/Design-System") == "ui"

    def test_apps_prefix(self):
        assert classify_workspace("apps/web") == "app"

    def test_unclassified(self):
        assert classify_workspace("packages/server") is None
        assert classify_workspace(".") is None


class TestMissingLayers:
    """Tests for missing-layer findings."""

    def test_ui_without_tokens_is_critical(self, temp_dir):
        analysis = analyze_structure(temp_dir, [_ws("."), _ws("packages/ui")])
        assert _kinds(analysis) == [("missing-layer", "critical")]
        assert analysis.findings[0].paths == ["packages/ui"]

    def test_tokens_and_ui_without_config(self, temp_dir):
        analysis = analyze_structure(
            temp_dir, [_ws("packages/tokens"), _ws("packages/ui")]
        )
        assert _kinds(analysis) == [("missing-layer", "warning")]
        assert analysis.findings[0].paths == ["packages/tokens", "packages/ui"]

    def test_tokens_without_ui(self, temp_dir):
        analysis = analyze_structure(
            temp_dir, [_ws("packages/tokens"), _ws("packages/config")]
        )
        assert _kinds(analysis) == [("missing-layer", "warning")]
        assert analysis.findings[0].paths == ["packages/tokens"]

    def test_complete_stack_has_no_missing_layer(self, temp_dir):
        analysis = analyze_structure(
            temp_dir, [_ws("packages/tokens"), _ws("packages/config"), _ws("packages/ui")]
        )
        assert analysis.findings == []
        layers = analysis.design_system_layers
        assert layers.has_tokens and layers.has_config and layers.has_ui

    def test_single_workspace_never_missing_layer(self, temp_dir):
        analysis = analyze_structure(temp_dir, [_ws("packages/ui")])
        assert analysis.findings == []


class TestDependencyViolations:
    """Tests for upward dependency detection."""

    def test_token_depending_on_ui(self, write_tree):
        root = write_tree({
            "packages/tokens/package.json": json.dumps({"name": "@acme/tokens"}),
            "packages/ui/package.json": json.dumps({"name": "@acme/ui"}),
            "packages/config/package.json": json.dumps({"name": "@acme/config"}),
        })
        workspaces = [
            _ws("packages/tokens", **{"@acme/ui": "workspace:*"}),
            _ws("packages/config"),
            _ws("packages/ui", **{"@acme/tokens": "workspace:*"}),
        ]
        analysis = analyze_structure(root, workspaces)
        violations = [f for f in analysis.findings if f.type == "dependency-violation"]
        assert len(violations) == 1
        assert violations[0].severity == "critical"
        assert violations[0].paths == ["packages/tokens", "packages/ui"]

    def test_ui_depending_on_app(self, write_tree):
        root = write_tree({
            "packages/ui/package.json": json.dumps({"name": "@acme/ui"}),
            "apps/web/package.json": json.dumps({"name": "web"}),
        })
        workspaces = [_ws("packages/ui", web="workspace:*"), _ws("apps/web")]
        analysis = analyze_structure(root, workspaces)
        violations = [f for f in analysis.findings if f.type == "dependency-violation"]
        assert [v.paths for v in violations] == [["packages/ui", "apps/web"]]

    def test_config_depending_on_ui(self, write_tree):
        root = write_tree({
            "packages/tokens/package.json": json.dumps({"name": "@acme/tokens"}),
            "packages/config/package.json": json.dumps({"name": "@acme/config"}),
            "packages/ui/package.json": json.dumps({"name": "@acme/ui"}),
        })
        workspaces = [
            _ws("packages/tokens"),
            _ws("packages/config", **{"@acme/ui": "workspace:*"}),
            _ws("packages/ui", **{"@acme/tokens": "workspace:*"}),
        ]
        analysis = analyze_structure(root, workspaces)
        violations = [f for f in analysis.findings if f.type == "dependency-violation"]
        assert len(violations) == 1
        assert violations[0].severity == "critical"
        assert violations[0].paths == ["packages/config", "packages/ui"]
        assert "config should not depend on UI" in violations[0].description

    def test_target_without_package_name(self, temp_dir):
        workspaces = [_ws("packages/config", ui="1.0.0"), _ws("packages/ui")]
        analysis = analyze_structure(temp_dir, workspaces)
        assert not [f for f in analysis.findings if f.type == "dependency-violation"]


class TestTailwindConfigs:
    """Tests for Tailwind config checks."""

    def test_app_without_presets(self, write_tree):
        root = write_tree({
            "apps/web/tailwind.config.ts": "export default { content: [] };\n",
        })
        workspaces = [_ws("apps/web"), _ws("packages/tailwind-config")]
        analysis = analyze_structure(root, workspaces)
        presets = [f for f in analysis.findings if f.type == "missing-shared-preset"]
        assert [f.paths for f in presets] == [["apps/web/tailwind.config.ts"]]

    def test_app_with_presets(self, write_tree):
        root = write_tree({
            "apps/web/tailwind.config.js": "module.exports = { presets: [shared] };\n",
        })
        workspaces = [_ws("apps/web"), _ws("packages/tailwind-config")]
        analysis = analyze_structure(root, workspaces)
        assert not [f for f in analysis.findings if f.type == "missing-shared-preset"]

    def test_hardcoded_hex_colors(self, write_tree):
        root = write_tree({
            "packages/tailwind-config/tailwind.config.ts": (
                "export default { theme: { colors: { brand: '#ff0055' } } };\n"
            ),
        })
        analysis = analyze_structure(root, [_ws("packages/tailwind-config")])
        hardcoded = [f for f in analysis.findings if f.type == "hardcoded-config-values"]
        assert len(hardcoded) == 1
        assert hardcoded[0].paths == ["packages/tailwind-config/tailwind.config.ts"]


class TestLayers:
    """Tests for the layer summary."""

    def test_has_docs(self, temp_dir):
        analysis = analyze_structure(temp_dir, [_ws("apps/docs"), _ws("apps/web")])
        assert analysis.design_system_layers.has_docs

    def test_serializes_has_ui_alias(self, temp_dir):
        analysis = analyze_structure(temp_dir, [_ws("packages/ui"), _ws("apps/web")])
        dumped = analysis.design_system_layers.model_dump(by_alias=True)
        assert dumped["hasUI"] is True
        assert dumped["uiPaths"] == ["packages/ui"]

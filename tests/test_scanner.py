"""Tests for the end-to-end scanner."""

import os
from pathlib import Path

import wheelscan
from wheelscan.analyzers import walker
from wheelscan.analyzers.ignore import SKIP_DIRS
from wheelscan.analyzers.organization import analyze_code_organization
from wheelscan.analyzers.pattern_catalog import DOMAINS, get_pattern_catalog
from wheelscan.analyzers.scanner import scan_codebase
from wheelscan.config import ScanConfig

QUIET = ScanConfig(show_progress=False)


class TestEmptyInputs:
    """Tests for roots that cannot be scanned."""

    def test_nonexistent_root(self, temp_dir: Path):
        result = scan_codebase(temp_dir / "does-not-exist")
        assert result.detections == []
        assert result.workspaces == []
        assert result.to_dict() == {"detections": [], "workspaces": []}

    def test_root_is_a_file(self, temp_dir: Path):
        path = temp_dir / "file.ts"
        path.write_text("console.log('x')")
        result = scan_codebase(path)
        assert result.detections == []
        assert result.workspaces == []

    def test_empty_directory_gets_synthetic_workspace(self, temp_dir: Path):
        result = scan_codebase(temp_dir, QUIET)
        assert result.detections == []
        assert [w.root for w in result.workspaces] == ["."]
        assert result.workspaces[0].package_manager == "unknown"
        assert result.design_system_layers is None
        assert result.code_organization_stats.total_source_files == 0


class TestMonorepoScan:
    """Tests against the monorepo fixture."""

    def test_workspace_completeness(self, monorepo: Path):
        """Every manifest outside skipped directories yields one workspace."""
        result = scan_codebase(monorepo, QUIET)
        roots = sorted(w.root for w in result.workspaces)
        assert roots == [".", "apps/web", "packages/tokens", "packages/ui"]
        managers = {w.root: w.package_manager for w in result.workspaces}
        assert managers["."] == "pnpm"
        assert managers["packages/ui"] == "npm"

    def test_detection_validity(self, monorepo: Path):
        result = scan_codebase(monorepo, QUIET)
        ids = {rule.id for rule in get_pattern_catalog()}
        assert result.detections
        for d in result.detections:
            assert d.pattern_id in ids
            assert d.domain in DOMAINS
            assert 0.0 <= d.confidence_score <= 1.0
            assert 1 <= d.line_range.start <= d.line_range.end
            assert (monorepo / d.file_path).is_file()

    def test_pluralization_detected(self, monorepo: Path):
        result = scan_codebase(monorepo, QUIET)
        plural = [d for d in result.detections if d.pattern_id == "i18n-manual-pluralization"]
        assert [d.file_path for d in plural] == ["packages/ui/src/Button.tsx"]

    def test_layers_present_for_multiple_workspaces(self, monorepo: Path):
        result = scan_codebase(monorepo, QUIET)
        layers = result.design_system_layers
        assert layers is not None
        assert layers.token_paths == ["packages/tokens"]
        assert layers.ui_paths == ["packages/ui"]
        # tokens + ui without a shared config package
        kinds = [(f.type, f.severity) for f in result.structural_findings]
        assert ("missing-layer", "warning") in kinds

    def test_idempotent(self, monorepo: Path):
        first = scan_codebase(monorepo, QUIET).to_dict()
        second = scan_codebase(monorepo, QUIET).to_dict()
        assert first == second

    def test_camel_case_wire_form(self, monorepo: Path):
        data = scan_codebase(monorepo, QUIET).to_dict()
        assert set(data) >= {"detections", "workspaces", "codeOrganizationStats"}
        detection = data["detections"][0]
        assert set(detection) == {"filePath", "lineRange", "patternId", "confidenceScore", "domain"}

    def test_exact_lines(self, monorepo: Path):
        result = scan_codebase(monorepo, ScanConfig(context_radius=0, show_progress=False))
        for d in result.detections:
            assert d.line_range.start == d.line_range.end


class TestSkipSet:
    """Tests for skip-set enforcement."""

    def test_nothing_reported_under_skipped_dirs(self, write_tree):
        root = write_tree({
            "src/app.ts": "console.log('hi');\n",
            "node_modules/lib/index.js": "console.log('vendored');\n",
            "node_modules/lib/package.json": "{}",
            "dist/bundle.js": "console.log('built');\n",
            "generated/api.ts": "console.log('gen');\n",
            ".wheelscanignore": "generated\n",
        })
        result = scan_codebase(root, QUIET)
        for d in result.detections:
            assert not set(d.file_path.split("/")) & (SKIP_DIRS | {"generated"})
        assert [d.file_path for d in result.detections] == ["src/app.ts"]
        assert [w.root for w in result.workspaces] == ["."]

    def test_extra_skip_dirs_from_config(self, write_tree):
        root = write_tree({"src/a.ts": "console.log(1);\n", "legacy/b.ts": "console.log(2);\n"})
        config = ScanConfig(extra_skip_dirs=frozenset({"legacy"}), show_progress=False)
        result = scan_codebase(root, config)
        assert {d.file_path for d in result.detections} == {"src/a.ts"}


class TestBatching:
    """Tests for batched file reads."""

    def test_small_batches_cover_every_file(self, write_tree):
        files = {f"src/f{i}.ts": "console.log(1);\n" for i in range(7)}
        root = write_tree(files)
        result = scan_codebase(root, ScanConfig(batch_size=2, show_progress=False))
        assert sorted(d.file_path for d in result.detections) == sorted(files)


class TestPackageEntryPoint:
    """Tests for the top-level wheelscan.scan_codebase."""

    def test_delegates(self, write_tree):
        root = write_tree({"a.ts": "console.log(1);\n"})
        result = wheelscan.scan_codebase(root, QUIET)
        assert [d.file_path for d in result.detections] == ["a.ts"]


class TestUnreadableDirectories:
    """Tests for directories that cannot be listed mid-scan."""

    def test_scan_completes_and_reports_siblings(self, write_tree, monkeypatch):
        root = write_tree({
            "locked/a.ts": "console.log('hidden');\n",
            "src/b.ts": "console.log('seen');\n",
        })
        real_scandir = os.scandir

        def scandir(path):
            if isinstance(path, Path) and path.name == "locked":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(walker.os, "scandir", scandir)
        result = scan_codebase(root, QUIET)
        assert [d.file_path for d in result.detections] == ["src/b.ts"]
        assert result.code_organization_stats.total_source_files == 1


class TestEnvironmentDefaults:
    """Tests for WHEELSCAN_* overrides when no config is passed."""

    def test_scan_codebase_reads_env(self, write_tree, monkeypatch):
        monkeypatch.setenv("WHEELSCAN_GOD_DIRECTORY_THRESHOLD", "2")
        monkeypatch.setenv("WHEELSCAN_SHOW_PROGRESS", "false")
        root = write_tree({"src/big/a.ts": "", "src/big/b.ts": "", "src/big/c.ts": ""})
        result = wheelscan.scan_codebase(root)
        god = [f for f in result.structural_findings if f.type == "god-directory"]
        assert [f.paths for f in god] == [["src/big"]]
        assert god[0].metadata == {"fileCount": 3, "threshold": 2}

    def test_analyze_code_organization_reads_env(self, write_tree, monkeypatch):
        monkeypatch.setenv("WHEELSCAN_CATCH_ALL_THRESHOLD", "1")
        root = write_tree({"src/utils/a.ts": "", "src/utils/b.ts": ""})
        analysis = analyze_code_organization(root)
        assert [f.type for f in analysis.findings] == ["catch-all-directory"]

"""Tests for the pattern catalog and the line-oriented detector."""

from pathlib import Path

import pytest

from wheelscan.analyzers.pattern_catalog import (
    DOMAINS,
    PATTERN_CATALOG,
    get_pattern,
    get_pattern_catalog,
    get_patterns_for_domain,
)
from wheelscan.analyzers.patterns import (
    applicable_patterns,
    line_range_for,
    matches_file_pattern,
    read_source,
    scan_content,
    scan_file,
)


class TestCatalog:
    """Tests for catalog invariants."""

    def test_ids_are_unique(self):
        ids = [rule.id for rule in PATTERN_CATALOG]
        assert len(ids) == len(set(ids))

    def test_domains_are_in_vocabulary(self):
        for rule in get_pattern_catalog():
            assert rule.domain in DOMAINS

    def test_confidence_in_range(self):
        for rule in get_pattern_catalog():
            assert 0.0 <= rule.confidence_base <= 1.0

    def test_every_rule_has_patterns(self):
        for rule in get_pattern_catalog():
            assert rule.file_patterns
            assert rule.code_patterns

    def test_catalog_is_immutable_tuple(self):
        assert isinstance(get_pattern_catalog(), tuple)

    def test_get_patterns_for_domain(self):
        rules = get_patterns_for_domain("i18n")
        assert {r.id for r in rules} >= {"i18n-manual-pluralization"}
        assert all(r.domain == "i18n" for r in rules)

    def test_get_pattern_unknown_id(self):
        with pytest.raises(KeyError):
            get_pattern("no-such-rule")

    def test_pluralization_rule(self):
        rule = get_pattern("i18n-manual-pluralization")
        assert rule.domain == "i18n"
        assert rule.confidence_base == 0.7


class TestFilePatterns:
    """Tests for glob matching."""

    def test_extension_glob(self):
        assert matches_file_pattern("src/a/b.tsx", ["**/*.tsx"])
        assert matches_file_pattern("b.ts", ["*.ts"])
        assert not matches_file_pattern("b.tsx", ["**/*.ts"])

    def test_basename_glob(self):
        assert matches_file_pattern("deep/dir/sitemap.xml", ["**/sitemap.xml"])
        assert not matches_file_pattern("deep/dir/other.xml", ["sitemap.xml"])

    def test_applicable_patterns_filters_by_extension(self):
        ids = {r.id for r in applicable_patterns("src/app.py")}
        assert "i18n-manual-pluralization" not in ids


class TestLineRange:
    """Tests for context padding."""

    def test_clamped_to_file(self):
        r = line_range_for(2, 4, 5)
        assert (r.start, r.end) == (1, 4)

    def test_radius_zero_is_exact(self):
        r = line_range_for(7, 20, 0)
        assert (r.start, r.end) == (7, 7)

    def test_middle_of_file(self):
        r = line_range_for(10, 100, 5)
        assert (r.start, r.end) == (5, 15)


class TestScanContent:
    """Tests for scan_content."""

    def test_pluralization_end_to_end(self):
        content = "const n = 3;\nconst label = count === 1 ? 'item' : 'items';\n"
        detections = scan_content(content, "src/Cart.tsx")
        plural = [d for d in detections if d.pattern_id == "i18n-manual-pluralization"]
        assert len(plural) == 1
        d = plural[0]
        assert d.file_path == "src/Cart.tsx"
        assert d.domain == "i18n"
        assert d.confidence_score == 0.7
        assert d.line_range.start == 1
        assert d.line_range.start <= 2 <= d.line_range.end

    def test_plain_export_has_no_detections(self):
        assert scan_content("export const x = 1;", "src/x.ts") == []

    def test_first_match_only_per_regex(self):
        line = "const a = count === 1 ? 'a' : 'b';\n"
        detections = scan_content(line * 5, "src/a.ts", context_radius=0)
        plural = [d for d in detections if d.pattern_id == "i18n-manual-pluralization"]
        assert len(plural) == 1
        assert plural[0].line_range.start == plural[0].line_range.end == 1

    def test_oversized_content_skipped(self):
        content = "console.log('x');\n" + "a" * 100
        assert scan_content(content, "a.ts", max_file_size=50) == []

    def test_non_applicable_file_type(self):
        assert scan_content("console.log('x')", "notes.md") == []

    def test_detections_reference_catalog(self):
        content = "console.log('hi');\nwindow.onerror = report;\n"
        ids = {r.id for r in PATTERN_CATALOG}
        for d in scan_content(content, "src/app.js"):
            assert d.pattern_id in ids
            assert 1 <= d.line_range.start <= d.line_range.end


class TestScanFile:
    """Tests for scan_file."""

    def test_reads_file(self, temp_dir: Path):
        path = temp_dir / "log.ts"
        path.write_text("console.error('boom');\n")
        detections = scan_file(path, "log.ts")
        assert [d.pattern_id for d in detections] == ["observability-manual-logging"]

    def test_invalid_utf8_bytes_do_not_hide_matches(self, temp_dir: Path):
        """A stray Latin-1 byte is replaced and the rest of the file is still scanned."""
        path = temp_dir / "utils.ts"
        path.write_bytes(
            b"// caf\xe9 helpers\nexport const label = count === 1 ? 'item' : 'items';\n"
        )
        detections = scan_file(path, "src/utils.ts")
        plural = [d for d in detections if d.pattern_id == "i18n-manual-pluralization"]
        assert len(plural) == 1
        assert plural[0].line_range.start <= 2 <= plural[0].line_range.end

    def test_read_source_replaces_invalid_bytes(self, temp_dir: Path):
        path = temp_dir / "blob.js"
        path.write_bytes(b"\xff\xfe\x00\x81console.log(")
        content = read_source(path)
        assert content is not None
        assert "\ufffd" in content
        assert content.endswith("console.log(")

    def test_missing_file_has_no_detections(self, temp_dir: Path):
        assert scan_file(temp_dir / "gone.ts", "gone.ts") == []

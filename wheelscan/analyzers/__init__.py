"""Analyzers for hand-rolled code detection and repository structure."""

from wheelscan.analyzers.cycles import cycle_findings, cycle_key, cycle_severity, find_import_cycles
from wheelscan.analyzers.ignore import (
    ORGANIZATION_EXTENSIONS,
    SKIP_DIRS,
    SOURCE_EXTENSIONS,
    load_skip_dirs,
    parse_wheelscanignore,
    should_skip_dir,
)
from wheelscan.analyzers.imports import build_import_graph, extract_imports, resolve_import_path
from wheelscan.analyzers.manifests import MANIFEST_TYPES, ManifestDetector
from wheelscan.analyzers.organization import (
    CodeOrganizationAnalysis,
    analyze_code_organization,
    detect_naming_convention,
)
from wheelscan.analyzers.pattern_catalog import (
    CatalogError,
    PatternDefinition,
    get_pattern,
    get_pattern_catalog,
    get_patterns_for_domain,
)
from wheelscan.analyzers.patterns import scan_content, scan_file
from wheelscan.analyzers.scanner import scan_codebase
from wheelscan.analyzers.structure import StructuralAnalysis, analyze_structure
from wheelscan.analyzers.walker import WalkEntry, walk_entries, walk_files

__all__ = [
    # Path filter and walker
    "ORGANIZATION_EXTENSIONS",
    "SKIP_DIRS",
    "SOURCE_EXTENSIONS",
    "WalkEntry",
    "load_skip_dirs",
    "parse_wheelscanignore",
    "should_skip_dir",
    "walk_entries",
    "walk_files",
    # Manifests
    "MANIFEST_TYPES",
    "ManifestDetector",
    # Pattern catalog and detector
    "CatalogError",
    "PatternDefinition",
    "get_pattern",
    "get_pattern_catalog",
    "get_patterns_for_domain",
    "scan_content",
    "scan_file",
    # Import graph and cycles
    "build_import_graph",
    "cycle_findings",
    "cycle_key",
    "cycle_severity",
    "extract_imports",
    "find_import_cycles",
    "resolve_import_path",
    # Organization and structure
    "CodeOrganizationAnalysis",
    "StructuralAnalysis",
    "analyze_code_organization",
    "analyze_structure",
    "detect_naming_convention",
    # Scanner
    "scan_codebase",
]

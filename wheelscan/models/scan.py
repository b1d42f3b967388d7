"""Scan result data models shared by every analyzer.

All cross-analyzer types live here so analyzers only import from this
module, never from each other's types. Python attributes are snake_case;
the JSON form produced with ``by_alias=True`` is camelCase.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

FindingType = Literal[
    "missing-layer",
    "dependency-violation",
    "missing-shared-preset",
    "hardcoded-config-values",
    "god-directory",
    "mixed-naming-convention",
    "deep-nesting",
    "barrel-bloat",
    "catch-all-directory",
    "circular-dependency",
]

Severity = Literal["critical", "warning", "info"]


class _CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LineRange(_CamelModel):
    """1-indexed inclusive line range within a file."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=1, description="First line (1-indexed)")
    end: int = Field(ge=1, description="Last line (inclusive)")

    @model_validator(mode="after")
    def _check_order(self) -> "LineRange":
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must be >= start ({self.start})")
        return self


class Detection(_CamelModel):
    """One matched occurrence of one catalog rule in one file."""

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(min_length=1, description="Repo-relative POSIX path")
    line_range: LineRange = Field(description="Reported range around the match")
    pattern_id: str = Field(min_length=1, description="Catalog rule id")
    confidence_score: float = Field(ge=0.0, le=1.0, description="Rule base confidence")
    domain: str = Field(description="Domain from the fixed domain vocabulary")


class WorkspaceScan(_CamelModel):
    """A directory governed by its own package manifest."""

    root: str = Field(description="Repo-relative directory, '.' for the repo root")
    package_manager: str = Field(description="npm, pnpm, yarn, bun, pip, cargo, go or unknown")
    language: str = Field(description="Primary ecosystem language")
    dependencies: dict[str, str] = Field(
        default_factory=dict, description="Declared dependency name -> version spec"
    )


class StructuralFinding(_CamelModel):
    """A structural or organizational observation not tied to a regex match."""

    type: FindingType = Field(description="Kind of finding")
    domain: str = Field(description="design-system or code-organization")
    description: str = Field(description="Human-readable description")
    paths: list[str] = Field(default_factory=list, description="Relevant repo-relative paths")
    severity: Severity = Field(description="critical, warning or info")
    metadata: dict[str, Any] | None = Field(default=None, description="Structured details")


class DesignSystemLayers(_CamelModel):
    """Design system layers detected across workspaces."""

    has_tokens: bool = False
    has_config: bool = False
    has_ui: bool = Field(default=False, alias="hasUI")
    has_docs: bool = False
    token_paths: list[str] = Field(default_factory=list)
    config_paths: list[str] = Field(default_factory=list)
    ui_paths: list[str] = Field(default_factory=list)


class CodeOrganizationStats(_CamelModel):
    """Aggregate counters from code organization analysis."""

    total_source_files: int = 0
    max_directory_depth: int = 0
    naming_conventions: dict[str, int] = Field(default_factory=dict)
    circular_dependency_count: int = 0


class ScanResult(_CamelModel):
    """Full result of scan_codebase()."""

    detections: list[Detection] = Field(default_factory=list)
    workspaces: list[WorkspaceScan] = Field(default_factory=list)
    structural_findings: list[StructuralFinding] | None = None
    design_system_layers: DesignSystemLayers | None = None
    code_organization_stats: CodeOrganizationStats | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire form, omitting absent optional sections."""
        return self.model_dump(by_alias=True, exclude_none=True)

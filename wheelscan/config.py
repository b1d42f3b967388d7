"""Scan configuration.

Thresholds for the organization heuristics and the I/O knobs of the scanner.
Every field can be overridden without code changes through a
``WHEELSCAN_<FIELD_NAME>`` environment variable (``.env`` files are loaded
when the package is imported).
"""

import os

from pydantic import BaseModel, Field

ENV_PREFIX = "WHEELSCAN_"


class ConfigError(ValueError):
    """Raised when an environment override cannot be parsed."""


class ScanConfig(BaseModel):
    """Tunable limits for a scan.

    The heuristic thresholds are externally chosen complexity limits; they are
    never derived from the scanned repository.
    """

    model_config = {"frozen": True}

    god_directory_threshold: int = Field(
        default=15, ge=1, description="Max source files in one directory"
    )
    max_nesting_depth: int = Field(
        default=5, ge=1, description="Max directory depth counted from src/"
    )
    barrel_bloat_threshold: int = Field(
        default=10, ge=1, description="Max re-export statements in an index file"
    )
    catch_all_threshold: int = Field(
        default=10, ge=1, description="Max files in utils/helpers/common/shared/lib"
    )
    mixed_export_min_named: int = Field(
        default=3, ge=1, description="Named exports alongside a default export to flag"
    )
    naming_min_files: int = Field(
        default=3, ge=1, description="Min source files in a directory to judge naming"
    )
    naming_min_bucket: int = Field(
        default=2, ge=1, description="Min files for a naming convention to count"
    )
    max_file_size: int = Field(
        default=500_000, ge=1, description="Files with more characters are skipped"
    )
    context_radius: int = Field(
        default=5, ge=0, description="Lines of context around a match (0 = exact line)"
    )
    batch_size: int = Field(
        default=50, ge=1, description="Concurrent in-flight file reads"
    )
    extra_skip_dirs: frozenset[str] = Field(
        default_factory=frozenset,
        description="Directory names or relative paths skipped in addition to SKIP_DIRS",
    )
    show_progress: bool = Field(default=True, description="Show tqdm progress bars")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> "ScanConfig":
        """Build a config from WHEELSCAN_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ (used by tests).
            **overrides: Explicit values that win over the environment.

        Returns:
            Validated ScanConfig.

        Raises:
            ConfigError: If an integer variable holds a non-integer value.
        """
        env = os.environ if environ is None else environ
        values: dict = {}

        for name, field in cls.model_fields.items():
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            raw = raw.strip()
            if field.annotation is int:
                try:
                    values[name] = int(raw)
                except ValueError as e:
                    raise ConfigError(
                        f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}"
                    ) from e
            elif field.annotation is bool:
                values[name] = raw.lower() in ("1", "true", "yes")
            else:
                # Comma-separated directory names
                values[name] = frozenset(p.strip() for p in raw.split(",") if p.strip())

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

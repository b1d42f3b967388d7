"""Pytest configuration and shared fixtures."""

import json
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_tree(temp_dir: Path):
    """Return a helper writing {relative path: content} into temp_dir."""

    def _write(files: dict[str, str], root: Path | None = None) -> Path:
        base = root or temp_dir
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return base

    return _write


@pytest.fixture
def monorepo(write_tree) -> Path:
    """Create a small design-system monorepo for testing."""
    return write_tree({
        "package.json": json.dumps({"name": "root", "devDependencies": {"turbo": "^2.0.0"}}),
        "pnpm-lock.yaml": "lockfileVersion: '9.0'\n",
        "packages/tokens/package.json": json.dumps({"name": "@acme/tokens"}),
        "packages/tokens/src/colors.ts": "export const primary = 'var(--primary)';\n",
        "packages/ui/package.json": json.dumps({
            "name": "@acme/ui",
            "dependencies": {"@acme/tokens": "workspace:*"},
        }),
        "packages/ui/src/Button.tsx": (
            "export function Button({ count }) {\n"
            "  const label = count === 1 ? 'item' : 'items';\n"
            "  return label;\n"
            "}\n"
        ),
        "apps/web/package.json": json.dumps({
            "name": "web",
            "dependencies": {"@acme/ui": "workspace:*", "next": "14.0.0"},
        }),
        "apps/web/src/page.tsx": "export default function Page() { return null; }\n",
    })

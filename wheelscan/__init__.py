"""wheelscan - static analysis engine for hand-rolled code and repo structure."""

# Load .env so WHEELSCAN_* threshold overrides are visible to every entry
# point (CLI, pytest, library use) that imports wheelscan.
from dotenv import load_dotenv

load_dotenv()

# Keep in sync with pyproject.toml [project] version.
__version__ = "0.1.0"


def scan_codebase(repo_path, config=None):
    """Scan a repository and return its ScanResult.

    Thin wrapper so ``import wheelscan`` stays cheap; see
    wheelscan.analyzers.scanner.scan_codebase for details.
    """
    from wheelscan.analyzers.scanner import scan_codebase as _scan_codebase

    return _scan_codebase(repo_path, config=config)

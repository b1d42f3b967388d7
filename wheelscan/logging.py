"""Logging configuration for wheelscan.

Logs to stderr so JSON written to stdout by the CLI stays machine-readable.
Provides tqdm progress bars for long file batches when stderr is a TTY.
"""

import logging
import os
import sys
import time
from collections.abc import Generator, Iterable
from contextlib import contextmanager
from typing import Any, TypeVar

from tqdm import tqdm

# Progress bars are disabled with WHEELSCAN_DISABLE_PROGRESS=1 or when
# stderr is not a TTY (CI logs, piped output).
_DISABLE_PROGRESS = (
    os.getenv("WHEELSCAN_DISABLE_PROGRESS", "").lower() in ("1", "true", "yes")
    or not sys.stderr.isatty()
)

T = TypeVar("T")

logger = logging.getLogger("wheelscan")
logger.setLevel(logging.INFO)

# Only add handler if not already configured
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "[wheelscan] %(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def set_verbose(verbose: bool) -> None:
    """Switch the wheelscan logger between INFO and DEBUG.

    Args:
        verbose: True to log skipped files and directories.
    """
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


class TimingContext:
    """Context object that captures elapsed time from an operation.

    Attributes:
        elapsed: Elapsed time in seconds (set after context exits).
        elapsed_ms: Elapsed time in milliseconds (set after context exits).
    """

    def __init__(self) -> None:
        self.elapsed: float = 0.0
        self.elapsed_ms: float = 0.0
        self._start: float = 0.0

    def start(self) -> None:
        """Start the timer."""
        self._start = time.perf_counter()

    def stop(self) -> None:
        """Stop the timer and record elapsed time."""
        self.elapsed = time.perf_counter() - self._start
        self.elapsed_ms = self.elapsed * 1000


@contextmanager
def log_operation(
    operation: str,
    details: dict[str, Any] | None = None,
) -> Generator[TimingContext, None, None]:
    """Context manager for logging operation start/end with timing.

    Args:
        operation: Name of the operation.
        details: Optional details dict to include in start message.

    Yields:
        TimingContext object with elapsed time after context exits.

    Example:
        with log_operation("scan_codebase", {"repo": "/path/to/repo"}) as timing:
            ...
        print(f"Took {timing.elapsed_ms:.1f}ms")
    """
    details_str = ""
    if details:
        details_str = " " + " ".join(f"{k}={v}" for k, v in details.items())

    logger.info("▶ Starting %s%s", operation, details_str)

    ctx = TimingContext()
    ctx.start()

    try:
        yield ctx
    except Exception as e:
        ctx.stop()
        logger.error("✗ %s failed after %.2fs: %s", operation, ctx.elapsed, e)
        raise
    else:
        ctx.stop()
        logger.info("✓ Completed %s in %.2fs", operation, ctx.elapsed)


def progress_bar(
    iterable: Iterable[T],
    desc: str | None = None,
    total: int | None = None,
    unit: str = "it",
    disable: bool = False,
) -> Iterable[T]:
    """Wrap an iterable with a progress bar.

    Progress is shown on stderr. When disabled (explicitly, via
    WHEELSCAN_DISABLE_PROGRESS, or on a non-TTY) the iterable is returned
    unchanged and a single summary line is logged for large totals.

    Args:
        iterable: The iterable to wrap.
        desc: Description shown before the progress bar.
        total: Total number of items (required for generators).
        unit: Unit name for the items (e.g., "files", "batches").
        disable: If True, disable progress bar entirely.

    Returns:
        Wrapped iterable that shows progress.
    """
    if disable or _DISABLE_PROGRESS:
        if not disable and total and total > 100:
            logger.info("  %s: processing %d %s...", desc or "Progress", total, unit)
        return iterable

    return tqdm(
        iterable,
        desc=f"  {desc}" if desc else None,
        total=total,
        unit=unit,
        file=sys.stderr,
        ncols=80,
        leave=False,
        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}]",
    )

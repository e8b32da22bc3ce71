"""Shared CLI runner helper for the catalog console scripts."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def run(cmd: Sequence[str]) -> None:
    """
    Run a command from the project root and exit with its return code.

    Args:
        cmd: Command and arguments to execute

    Example:
        >>> run([sys.executable, "-m", "pytest", "-q"])
    """
    result = subprocess.run(cmd, cwd=ROOT)
    raise SystemExit(result.returncode)

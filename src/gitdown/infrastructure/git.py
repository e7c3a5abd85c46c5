"""Thin subprocess wrapper around the ``git`` binary.

Unlike a best-effort lifecycle hook, a helper asking git for repository
metadata cannot produce output without an answer, so failures are raised
as :class:`GitCommandError` rather than logged and ignored.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from gitdown.engine.errors import HelperError

logger = logging.getLogger(__name__)


class GitCommandError(HelperError):
    """A git command could not be run or exited non-zero."""

    code = "GIT_ERROR"


def run_git(cwd: Path, *args: str) -> str:
    """Run ``git *args`` in *cwd* and return stripped stdout."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        msg = "git executable not found."
        raise GitCommandError(msg) from exc
    except (OSError, subprocess.CalledProcessError) as exc:
        stderr = getattr(exc, "stderr", "") or ""
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, stderr.strip())
        msg = f"git {' '.join(args)} failed: {stderr.strip() or exc}"
        raise GitCommandError(msg) from exc
    return result.stdout.strip()

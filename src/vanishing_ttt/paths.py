"""Environment-first configuration and provenance helpers.

Data goes under ``VTTT_DATA_DIR`` if set, else ``<repo_root>/data``. The
repository root is ``VTTT_REPO_ROOT``, the nearest parent holding ``.git``,
or the current working directory, in that order.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

DEFAULT_DIFFICULTY = "normal"


def _find_git_root(start: Path) -> Path | None:
    # a handful of levels covers src/ and site-packages layouts
    for cur in [start, *start.parents][:6]:
        if (cur / ".git").exists():
            return cur
    return None


def repo_root() -> Path:
    """Root used for data and provenance lookups.

    Set VTTT_REPO_ROOT to pin it (useful in CI or an installed wheel).
    """
    env = os.getenv("VTTT_REPO_ROOT")
    if env:
        return Path(env)
    git_root = _find_git_root(Path(__file__).resolve())
    if git_root is not None:
        return git_root
    return Path.cwd()


def data_dir() -> Path:
    p = os.getenv("VTTT_DATA_DIR")
    return Path(p) if p else repo_root() / "data"


def default_difficulty() -> str:
    return os.getenv("VTTT_DIFFICULTY", DEFAULT_DIFFICULTY)


def get_git_commit() -> str | None:
    """Current commit hash of the repository root, or None outside a repo."""
    root = repo_root()
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "rev-parse", "HEAD"],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.strip() or None

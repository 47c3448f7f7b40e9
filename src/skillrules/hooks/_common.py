"""Shared utilities for hook scripts."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

from skillrules.activation.config import CONFIG_FILENAME, DEFAULT_RULES_FILENAME

SKILLS_SUBDIR = Path(".claude") / "skills"


def read_hook_input() -> dict[str, Any]:
    """Read JSON input from stdin. Returns empty dict on failure."""
    try:
        raw = sys.stdin.read()
        if not raw.strip():
            return {}
        data = json.loads(raw)
        return data if isinstance(data, dict) else {}
    except (json.JSONDecodeError, OSError):
        return {}


def get_git_root(cwd: Path | None = None) -> Path | None:
    """Find git repo root via `git rev-parse`. Returns None if not in a git repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=cwd,
        )
        if result.returncode == 0:
            return Path(result.stdout.strip())
        return None
    except (FileNotFoundError, NotADirectoryError, subprocess.TimeoutExpired):
        return None


def get_project_root(cwd: str | None = None) -> Path | None:
    """Get the project root for the current prompt.

    Resolution order:
    1. CLAUDE_PROJECT_DIR env var (set by Claude Code for hooks)
    2. SKILLRULES_PROJECT_ROOT env var (explicit override)
    3. ``cwd`` from the hook payload
    4. Git root from `git rev-parse --show-toplevel`
    5. Current working directory

    Returns None only if all methods fail.
    """
    for var in ("CLAUDE_PROJECT_DIR", "SKILLRULES_PROJECT_ROOT"):
        env_root = os.environ.get(var)
        if env_root:
            p = Path(env_root)
            if p.is_dir():
                return p

    if cwd:
        p = Path(cwd)
        if p.is_dir():
            return p

    git_root = get_git_root()
    if git_root:
        return git_root

    try:
        return Path.cwd()
    except OSError:
        return None


def get_global_skills_dir() -> Path:
    return Path.home() / SKILLS_SUBDIR


def get_rules_paths(
    project_root: Path | None,
    filename: str = DEFAULT_RULES_FILENAME,
) -> tuple[Path | None, Path]:
    """Return (project rules path, global rules path). Project is checked first."""
    primary = project_root / SKILLS_SUBDIR / filename if project_root else None
    return primary, get_global_skills_dir() / filename


def get_config_path(project_root: Path | None) -> Path | None:
    return project_root / CONFIG_FILENAME if project_root else None

"""Project identification for memory container tags.

A project is the git root containing the working directory, or the directory
itself outside of git.
"""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path
from typing import Optional


def sha256_short(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]


def _git_output(cmd: list[str], cwd: Optional[str] = None) -> Optional[str]:
    try:
        output = subprocess.check_output(cmd, cwd=cwd, text=True, stderr=subprocess.DEVNULL).strip()
    except (OSError, subprocess.CalledProcessError):
        return None
    return output or None


def get_git_root(cwd: str) -> Optional[str]:
    return _git_output(["git", "rev-parse", "--show-toplevel"], cwd=cwd)


def get_project_root(cwd: str) -> Path:
    return Path(get_git_root(cwd) or cwd)


def get_container_tag(cwd: str) -> str:
    base_path = get_git_root(cwd) or cwd
    return f"claudecode_project_{sha256_short(base_path)}"


def get_project_name(cwd: str) -> str:
    base_path = get_git_root(cwd) or cwd
    return base_path.rstrip("/").split("/")[-1] or "unknown"

# git.py
# Small, focused wrapper around the Git CLI.
# The runner goes through this module for every git interaction it needs:
# the submodule checkout and the trailing working-tree checks.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional


def _git(args: list[str], cwd: Optional[str | Path] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Args:
        args: List of git arguments (e.g. ["status", "--short"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        subprocess.CalledProcessError: if git exits non-zero.
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,
    )
    return out.strip()


def repo_root(cwd: Optional[str | Path] = None) -> Path:
    """Return the absolute path to the root of the current Git repository."""
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))


def submodule_init_cmd(path: str) -> str:
    """Command line that checks out the submodule at `path`."""
    return f"git submodule update --init {path}"


def has_modified_files(cwd: Optional[str | Path] = None) -> bool:
    """
    Return True if a tracked file differs from the index.

    Runs `git diff --exit-code` without capturing output so the diff itself
    ends up in the CI log.

    Raises:
        subprocess.CalledProcessError: if git fails for another reason
        (exit status other than 0 or 1).
    """
    proc = subprocess.run(["git", "diff", "--exit-code"], cwd=cwd)
    if proc.returncode == 0:
        return False
    if proc.returncode == 1:
        return True
    raise subprocess.CalledProcessError(proc.returncode, ["git", "diff", "--exit-code"])


def short_status(cwd: Optional[str | Path] = None) -> List[str]:
    """
    Return `git status -s` lines.

    After a successful `git diff --exit-code` these are untracked files and
    staged changes.
    """
    # leading spaces are significant in short format, so no _git() strip here
    out = subprocess.check_output(["git", "status", "-s"], cwd=cwd, text=True)
    return [line for line in out.splitlines() if line.strip()]


def status_paths(cwd: Optional[str | Path] = None) -> List[str]:
    """
    Return the paths reported by `git status`, unquoted.

    Uses the NUL separated porcelain format so names with spaces or
    non-ASCII characters come back verbatim.
    """
    out = subprocess.check_output(["git", "status", "--porcelain", "-z"], cwd=cwd, text=True)
    entries = out.split("\0")
    paths: List[str] = []
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        paths.append(entry[3:])
        # renames and copies carry the source path as the next entry
        if entry[0] in "RC":
            i += 1
    return paths


def modified_files(cwd: Optional[str | Path] = None) -> List[str]:
    """Return tracked paths that differ from the index."""
    out = subprocess.check_output(["git", "diff", "--name-only", "-z"], cwd=cwd, text=True)
    return [p for p in out.split("\0") if p]

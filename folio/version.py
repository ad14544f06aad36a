"""Version and build information for `folio --version`."""

from __future__ import annotations

import importlib.metadata
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

DIST_NAME = "folio"


class BuildInfo(NamedTuple):
    version: Optional[str]
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, OSError):
        return None
    return out.decode().strip() or None


def _installed_version() -> Optional[str]:
    try:
        return importlib.metadata.version(DIST_NAME)
    except importlib.metadata.PackageNotFoundError:
        return None


def _from_git_checkout() -> Optional[tuple[Optional[str], Optional[str], bool]]:
    here = Path(__file__).resolve().parent
    if _git(["rev-parse", "--show-toplevel"], cwd=here) is None:
        return None
    commit = _git(["rev-parse", "HEAD"], cwd=here)
    date = _git(["show", "-s", "--format=%cI", "HEAD"], cwd=here)
    dirty = bool(_git(["status", "--porcelain"], cwd=here))
    return commit, date, dirty


def _from_build_file() -> Optional[tuple[Optional[str], Optional[str], bool]]:
    # Written by the hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    if not (commit or date):
        return None
    return commit, date, False


def get_build_info() -> BuildInfo:
    # Priority: live git checkout -> embedded build file -> unknowns
    version = _installed_version()
    for getter in (_from_git_checkout, _from_build_file):
        found = getter()
        if found and (found[0] or found[1]):
            commit, date, dirty = found
            return BuildInfo(version=version, commit=commit, date=date, dirty=dirty)
    return BuildInfo(version=version, commit=None, date=None, dirty=False)


def get_version_string() -> str:
    info = get_build_info()
    version = info.version or "unknown"
    # Short (7-character) git hashes
    commit = info.commit[:7] if info.commit else "unknown"
    dirty_suffix = "-dirty" if info.dirty else ""
    date = info.date or "unknown"
    return f"folio {version} ({commit}{dirty_suffix} {date})"

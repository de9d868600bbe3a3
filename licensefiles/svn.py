"""Read svn:externals metadata from a working copy."""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from licensefiles.exceptions import PropertyReadError

log = structlog.get_logger("licensefiles.svn")

SVN_EXTERNALS = "svn:externals"


def read_externals(working_copy: Path, svn: str = "svn") -> str:
    """Return the raw svn:externals property of *working_copy*.

    Raises ``PropertyReadError`` when svn is missing or exits non-zero.
    """
    cmd = [svn, "propget", SVN_EXTERNALS, str(working_copy)]
    log.info("svn.propget", path=str(working_copy))
    try:
        proc = subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise PropertyReadError(f"svn executable not found: {svn}") from exc
    except subprocess.CalledProcessError as exc:
        raise PropertyReadError(
            f"svn propget failed (exit {exc.returncode}): {(exc.stderr or '').strip()}"
        ) from exc
    return proc.stdout


def read_externals_file(path: Path) -> str:
    """Read externals text saved to a file (e.g. ``svn propget > externals.txt``)."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise PropertyReadError(f"cannot read externals file {path}: {exc}") from exc

"""Depth-bounded recursive search for license files under a dependency."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from licensefiles.exceptions import ConfigurationError
from licensefiles.matcher import LicenseMatcher
from licensefiles.models import LicenseFinding

log = structlog.get_logger("licensefiles.locator")

ListChildren = Callable[[Path], Sequence[str]]


def list_directories(path: Path) -> list[str]:
    """Names of the immediate subdirectories of *path*, sorted.

    Hidden entries are skipped. An unreadable or missing directory has no
    children.
    """
    try:
        with os.scandir(path) as it:
            names = [
                entry.name
                for entry in it
                if not entry.name.startswith(".") and entry.is_dir()
            ]
    except OSError as exc:
        log.info("locator.unreadable", directory=str(path), error=str(exc))
        return []
    return sorted(names)


class RecursiveLicenseLocator:
    """Ask the matcher at a directory; descend only while nothing is found.

    Depth 1 is the dependency's own root, so ``max_depth=1`` never looks at a
    subdirectory.
    """

    def __init__(
        self,
        matcher: LicenseMatcher,
        max_depth: int = 1,
        list_children: ListChildren = list_directories,
    ) -> None:
        if max_depth < 1:
            raise ConfigurationError(f"max_depth must be at least 1, got {max_depth}")
        self.matcher = matcher
        self.max_depth = max_depth
        self.list_children = list_children

    def locate(
        self,
        root_name: str,
        logical_path: str,
        product: str,
        version: str | None,
        physical_dir: Path,
        depth: int = 1,
    ) -> list[LicenseFinding] | None:
        found = self.matcher.find(root_name, logical_path, product, version, physical_dir, depth)
        if found:
            log.info("locator.found", path=logical_path, count=len(found))
            return list(found)

        if depth >= self.max_depth:
            return None

        licenses: list[LicenseFinding] = []
        for child in self.list_children(physical_dir):
            # list_children implementations may not filter hidden names
            if child.startswith("."):
                continue
            collected = self.locate(
                root_name,
                f"{logical_path}/{child}",
                product,
                version,
                physical_dir / child,
                depth + 1,
            )
            if collected is not None:
                licenses.extend(collected)

        return licenses or None

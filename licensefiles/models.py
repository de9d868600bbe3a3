"""Data models for license discovery and manifest assembly."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Union

FOUND = "found"
MISSING = "missing"


@dataclass(frozen=True)
class DependencyDeclaration:
    """A single external reference with the version extracted from it."""

    name: str
    version: str


@dataclass
class LicenseFinding:
    """A license file reported by a matcher for one directory."""

    root: str  # dependency name the search started from
    relative_path: str  # logical path, e.g. "zlib/contrib"
    product: str
    sub_product: str
    version: str | None
    license_type: str
    source_file: Path
    license_filename: str  # suggested destination name


@dataclass
class ManifestEntry:
    """Canonical, post-override record written to the manifest."""

    dependency: str
    product: str
    sub_product: str
    version: str | None
    license_type: str
    license_filename: str
    status: Literal["found", "missing"] = FOUND

    @property
    def missing(self) -> bool:
        return self.status == MISSING


@dataclass(frozen=True)
class CopyPlanItem:
    """One license file to copy into the destination directory."""

    source_file: Path
    destination_filename: str


@dataclass(frozen=True)
class Found:
    dependency: str
    finding: LicenseFinding


@dataclass(frozen=True)
class Missing:
    declaration: DependencyDeclaration


LicenseResult = Union[Found, Missing]


@dataclass
class Manifest:
    """Result of one assembly pass."""

    entries: list[ManifestEntry] = field(default_factory=list)
    copy_plan: list[CopyPlanItem] = field(default_factory=list)
    # destination filename -> every source file that resolved to it
    collisions: dict[str, list[Path]] = field(default_factory=dict)
    # planned copies dropped because the destination is not a plain filename
    rejected: list[CopyPlanItem] = field(default_factory=list)

    @property
    def found_entries(self) -> list[ManifestEntry]:
        return [e for e in self.entries if not e.missing]

    @property
    def missing_entries(self) -> list[ManifestEntry]:
        return [e for e in self.entries if e.missing]

    def render(self) -> str:
        """Human-readable summary, one line per entry."""
        lines = [
            f"{len(self.found_entries)} license(s) found, "
            f"{len(self.missing_entries)} missing"
        ]
        for e in self.entries:
            product = f"{e.product}/{e.sub_product}" if e.sub_product else e.product
            version = f" ({e.version})" if e.version else ""
            if e.missing:
                lines.append(f"  {product}{version}: MISSING")
            else:
                lines.append(f"  {product}{version}: {e.license_type} -> {e.license_filename}")
        return "\n".join(lines)

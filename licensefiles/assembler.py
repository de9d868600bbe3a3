"""Assemble the license manifest and the file-copy plan."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from licensefiles.locator import RecursiveLicenseLocator
from licensefiles.models import (
    MISSING,
    CopyPlanItem,
    DependencyDeclaration,
    Found,
    LicenseResult,
    Manifest,
    ManifestEntry,
    Missing,
)
from licensefiles.overrides import OverrideRegistry

log = structlog.get_logger("licensefiles.assembler")


def to_entry(result: LicenseResult) -> ManifestEntry:
    """Convert a found or missing result into a raw (pre-override) entry."""
    if isinstance(result, Found):
        f = result.finding
        return ManifestEntry(
            dependency=result.dependency,
            product=f.product,
            sub_product=f.sub_product,
            version=f.version,
            license_type=f.license_type,
            license_filename=f.license_filename,
        )
    d = result.declaration
    return ManifestEntry(
        dependency=d.name,
        product=d.name,
        sub_product="",
        version=d.version,
        license_type="",
        license_filename="",
        status=MISSING,
    )


def is_safe_filename(name: str) -> bool:
    """True if *name* is a plain filename that stays inside the destination directory."""
    if name in ("", ".", ".."):
        return False
    return not any(c in name for c in ("/", "\\", "\0"))


class ManifestAssembler:
    """Drive one collection pass over the declared dependencies."""

    def __init__(
        self,
        locator: RecursiveLicenseLocator,
        overrides: OverrideRegistry | None = None,
    ) -> None:
        self.locator = locator
        self.overrides = overrides or OverrideRegistry()

    def assemble(
        self, declarations: Iterable[DependencyDeclaration], source_root: Path
    ) -> Manifest:
        """Return a manifest: found entries by dependency name, then missing ones.

        Dependencies excluded by an inclusion rule contribute nothing.
        """
        manifest = Manifest()
        missing: list[DependencyDeclaration] = []
        destinations: dict[str, Path] = {}

        for decl in sorted(declarations, key=lambda d: d.name):
            if not self.overrides.is_included(decl.name):
                log.info("assembler.skipped", external=decl.name)
                continue

            findings = self.locator.locate(
                decl.name, decl.name, decl.name, decl.version, source_root / decl.name, 1
            )
            if not findings:
                missing.append(decl)
                continue

            for finding in findings:
                entry = self.overrides.finalize(decl.name, to_entry(Found(decl.name, finding)))
                manifest.entries.append(entry)

                dest = self.overrides.rewrite(finding.license_filename)
                if not is_safe_filename(dest):
                    log.warning(
                        "assembler.unsafe_destination",
                        destination=dest,
                        source=str(finding.source_file),
                    )
                    manifest.rejected.append(CopyPlanItem(finding.source_file, dest))
                    continue

                previous = destinations.get(dest)
                if previous is not None:
                    sources = manifest.collisions.setdefault(dest, [previous])
                    sources.append(finding.source_file)
                    log.warning(
                        "assembler.collision",
                        destination=dest,
                        sources=[str(s) for s in sources],
                    )
                destinations[dest] = finding.source_file
                manifest.copy_plan.append(CopyPlanItem(finding.source_file, dest))

        for decl in missing:
            log.info("assembler.missing", external=decl.name, version=decl.version)
            manifest.entries.append(self.overrides.finalize(decl.name, to_entry(Missing(decl))))

        return manifest

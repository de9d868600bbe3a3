"""LicenseCollector — gather license files for svn:externals dependencies."""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog

from licensefiles.assembler import ManifestAssembler
from licensefiles.config import CollectorSettings
from licensefiles.exceptions import ConfigurationError
from licensefiles.externals import parse_externals, sorted_declarations
from licensefiles.locator import RecursiveLicenseLocator
from licensefiles.matcher import LicenseMatcher, get_matcher
from licensefiles.models import CopyPlanItem, DependencyDeclaration, Manifest
from licensefiles.svn import read_externals, read_externals_file
from licensefiles.writer import write_manifest

log = structlog.get_logger("licensefiles.collector")


def load_declarations(source: Path, externals_file: Path | None = None) -> list[DependencyDeclaration]:
    """Read externals (svn or a saved file) and return sorted declarations."""
    if externals_file is not None:
        text = read_externals_file(externals_file)
    else:
        log.info("collector.fetching_externals", path=str(source))
        text = read_externals(source)
    return list(sorted_declarations(parse_externals(text)))


def copy_licenses(plan: list[CopyPlanItem], to_dir: Path) -> list[Path]:
    """Copy every planned file into *to_dir*, overwriting existing files."""
    to_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for item in plan:
        dest = to_dir / item.destination_filename
        shutil.copyfile(item.source_file, dest)
        written.append(dest)
    return written


class LicenseCollector:
    """Full pipeline: externals -> locate -> assemble -> copy -> write manifest."""

    def __init__(self, settings: CollectorSettings, matcher: LicenseMatcher | None = None) -> None:
        if not settings.source.is_dir():
            raise ConfigurationError(f"source directory does not exist: {settings.source}")
        try:
            self._matcher = matcher or get_matcher(settings.matcher)
        except KeyError as exc:
            raise ConfigurationError(str(exc.args[0])) from exc
        self.settings = settings
        self._assembler = ManifestAssembler(
            RecursiveLicenseLocator(self._matcher, settings.max_depth),
            settings.overrides(),
        )

    def assemble(self) -> Manifest:
        s = self.settings
        log.info("collector.collecting", source=str(s.source), max_depth=s.max_depth)
        declarations = load_declarations(s.source, s.externals_file)
        return self._assembler.assemble(declarations, s.source)

    def run(self) -> Manifest:
        """Collect, copy the license files and write the manifest."""
        s = self.settings
        manifest = self.assemble()

        copy_licenses(manifest.copy_plan, s.to_dir)

        path = s.manifest_path
        log.info("collector.writing_manifest", path=str(path), format=s.format)
        write_manifest(manifest, path, s.format, s.xsl)
        log.info(
            "collector.manifest_written",
            found=len(manifest.found_entries),
            missing=len(manifest.missing_entries),
            copied=len(manifest.copy_plan),
            collisions=len(manifest.collisions),
            rejected=len(manifest.rejected),
        )
        log.debug("collector.manifest", summary=manifest.render())
        return manifest

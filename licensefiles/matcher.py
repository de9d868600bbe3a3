"""License matchers: decide whether a directory holds license files.

Matchers only look at the directory they are given; descending into
subdirectories is the locator's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from licensefiles.models import LicenseFinding

log = structlog.get_logger("licensefiles.matcher")


@runtime_checkable
class LicenseMatcher(Protocol):
    """Interface that every license matcher must satisfy."""

    name: str

    def find(
        self,
        root_name: str,
        logical_path: str,
        product: str,
        version: str | None,
        directory: Path,
        depth: int,
    ) -> list[LicenseFinding] | None: ...


MATCHER_REGISTRY: dict[str, LicenseMatcher] = {}


def register_matcher(matcher: LicenseMatcher) -> None:
    """Register a matcher instance by its name."""
    MATCHER_REGISTRY[matcher.name] = matcher


def get_matcher(name: str) -> LicenseMatcher:
    try:
        return MATCHER_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"unknown matcher '{name}' (available: {', '.join(sorted(MATCHER_REGISTRY))})"
        ) from None


@dataclass(frozen=True)
class LicenseFilePattern:
    """A filename pattern and the license type it implies."""

    pattern: re.Pattern[str]
    license_type: str


def _pattern(regex: str, license_type: str) -> LicenseFilePattern:
    return LicenseFilePattern(re.compile(regex, re.IGNORECASE), license_type)


# LICENSE, LICENSE.txt, LICENSE-MIT, COPYING.LESSER, ...
DEFAULT_PATTERNS: tuple[LicenseFilePattern, ...] = (
    _pattern(r"^unlicen[cs]e(\.(txt|md|rst))?$", "UNLICENSE"),
    _pattern(r"^licen[cs]e([._-][\w.-]*)?$", "LICENSE"),
    _pattern(r"^copying([._-][\w.-]*)?$", "COPYING"),
    _pattern(r"^notice([._-][\w.-]*)?$", "NOTICE"),
)

_DOC_SUFFIXES = {".txt", ".md", ".rst", ".html", ".htm"}


def license_filename(
    logical_path: str, version: str | None, extension: str, qualifier: str | None = None
) -> str:
    """Destination filename for a license found at *logical_path*.

    ``zlib/contrib`` at version ``1.2.11`` becomes ``zlib-contrib_1.2.11.txt``.
    """
    name = logical_path
    if version:
        name += f"_{version}"
    if qualifier:
        name += f"-{qualifier}"
    name += f".{extension}"
    return name.replace("/", "-")


class FilenameLicenseMatcher:
    """Match license files by their names in a single directory."""

    name = "filename"

    def __init__(self, patterns: tuple[LicenseFilePattern, ...] = DEFAULT_PATTERNS) -> None:
        self.patterns = patterns

    def classify(self, filename: str) -> str | None:
        for p in self.patterns:
            if p.pattern.match(filename):
                return p.license_type
        return None

    def find(
        self,
        root_name: str,
        logical_path: str,
        product: str,
        version: str | None,
        directory: Path,
        depth: int,
    ) -> list[LicenseFinding] | None:
        try:
            files = sorted(p for p in directory.iterdir() if p.is_file())
        except OSError as exc:
            log.debug("matcher.unreadable", directory=str(directory), error=str(exc))
            return None

        hits = [(f, t) for f in files if (t := self.classify(f.name)) is not None]
        if not hits:
            return None

        # Nested finds name the subdirectory they came from
        sub_product = logical_path.rsplit("/", 1)[-1] if depth > 1 else ""
        findings: list[LicenseFinding] = []
        for file, license_type in hits:
            suffix = file.suffix.lower()
            extension = suffix[1:] if suffix in _DOC_SUFFIXES else "txt"
            qualifier = license_type.lower() if len(hits) > 1 else None
            if qualifier and sum(1 for _, t in hits if t == license_type) > 1:
                qualifier = file.name.lower().replace(".", "-")
            findings.append(
                LicenseFinding(
                    root=root_name,
                    relative_path=logical_path,
                    product=product,
                    sub_product=sub_product,
                    version=version,
                    license_type=license_type,
                    source_file=file,
                    license_filename=license_filename(
                        logical_path, version, extension, qualifier
                    ),
                )
            )
        return findings


register_matcher(FilenameLicenseMatcher())

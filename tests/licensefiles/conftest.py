"""Shared fixtures for license-files tests: no svn or network needed."""

from __future__ import annotations

from pathlib import Path

import pytest

from licensefiles.models import LicenseFinding


class RecordingMatcher:
    """In-memory matcher: returns canned findings per physical directory."""

    name = "recording"

    def __init__(self, hits: dict[Path, list[str]] | None = None):
        # directory -> license types found exactly there
        self.hits = hits or {}
        self.calls: list[tuple[str, Path, int]] = []

    def find(self, root_name, logical_path, product, version, directory, depth):
        self.calls.append((logical_path, directory, depth))
        types = self.hits.get(directory)
        if not types:
            return None
        return [
            LicenseFinding(
                root=root_name,
                relative_path=logical_path,
                product=product,
                sub_product="",
                version=version,
                license_type=t,
                source_file=directory / t,
                license_filename=f"{logical_path.replace('/', '-')}_{version}-{t.lower()}.txt",
            )
            for t in types
        ]

    @property
    def queried_paths(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def recording_matcher():
    return RecordingMatcher()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """zlib ships a LICENSE at its root; curl has none anywhere."""
    src = tmp_path / "src"
    zlib = src / "zlib"
    zlib.mkdir(parents=True)
    (zlib / "LICENSE").write_text("zlib license text\n")
    (zlib / "contrib").mkdir()
    (zlib / "contrib" / "COPYING").write_text("nested, must not be found\n")

    curl = src / "curl"
    (curl / "lib").mkdir(parents=True)
    (curl / "lib" / "README").write_text("no license here\n")
    (curl / "docs").mkdir()
    return src


EXTERNALS = "zlib -r500 libs/zlib-1.2.11\ncurl -r77 libs/curl_7_68_0\n"


@pytest.fixture
def externals_file(tmp_path: Path) -> Path:
    f = tmp_path / "externals.txt"
    f.write_text(EXTERNALS)
    return f

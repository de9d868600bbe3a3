"""Extract dependency names and versions from svn:externals text.

Externals lines look like ``zlib -r500 libs/zlib-1.2.11``: the first token is
the local directory name, the rest is a path that embeds a version in no
particular format. Extraction is a best-effort heuristic, not a semver parser.
"""

from __future__ import annotations

import re
import string
from collections.abc import Iterator, Mapping

import structlog

from licensefiles.models import DependencyDeclaration

log = structlog.get_logger("licensefiles.externals")

_LINE_SEP_RE = re.compile(r"[\r\n]")

REVISION_MARKER = "-r"


def extract_version(name_part: str, remainder: str) -> str | None:
    """Return the version embedded in *remainder*, or None.

    A leading ``-r<digits>`` revision pin is discarded. After that, digits are
    kept, ``.``/``_`` are kept once the buffer is non-empty, and anything else
    is skipped without ending the scan, so ``1.2-beta.3`` yields ``1.2.3``.
    *name_part* is not inspected; it names the dependency only.
    """
    s = remainder.strip()
    if s.startswith(REVISION_MARKER):
        s = s[len(REVISION_MARKER) :].strip()
        i = 0
        while i < len(s) and s[i] in string.digits:
            i += 1
        s = s[i:]

    buf: list[str] = []
    for c in s:
        if c in string.digits:
            buf.append(c)
        elif c in "._" and buf:
            buf.append(c)

    # "4_5_" must end up as "4.5", so both separators are trimmed before normalizing
    while buf and buf[-1] in "._":
        buf.pop()

    version = "".join(buf).replace("_", ".")
    return version or None


def split_line(line: str) -> tuple[str, str] | None:
    """Split an externals line into (name, remainder) on the first whitespace run."""
    parts = line.split(None, 1)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def parse_externals(text: str) -> dict[str, str]:
    """Parse raw svn:externals text into a name -> version mapping.

    Lines without two tokens are skipped silently. Lines whose version cannot
    be extracted are dropped (logged). When a name is declared twice the first
    declaration wins.
    """
    externals: dict[str, str] = {}
    for raw_line in _LINE_SEP_RE.split(text or ""):
        parts = split_line(raw_line)
        if parts is None:
            continue
        name, remainder = parts

        version = extract_version(name, remainder)
        if version is None:
            log.info("externals.no_version", external=name, line=raw_line.strip())
            continue

        if name in externals:
            log.warning(
                "externals.duplicate",
                external=name,
                kept=externals[name],
                ignored=version,
            )
            continue
        externals[name] = version

    return externals


def sorted_declarations(externals: Mapping[str, str]) -> Iterator[DependencyDeclaration]:
    """Yield declarations in lexicographic name order."""
    for name in sorted(externals):
        yield DependencyDeclaration(name=name, version=externals[name])

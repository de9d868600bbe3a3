"""Inclusion/identity overrides and filename rewrite rules."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from licensefiles.exceptions import ConfigurationError, DuplicateRuleSetError
from licensefiles.models import ManifestEntry

# Fields of a ManifestEntry an InclusionRule may replace.
IDENTITY_FIELDS = ("product", "sub_product", "version", "license_type", "license_filename")


@dataclass(frozen=True)
class InclusionRule:
    """Per-dependency include flag plus optional metadata replacements."""

    name: str
    include: bool = True
    product: str | None = None
    sub_product: str | None = None
    version: str | None = None
    license_type: str | None = None
    license_filename: str | None = None

    def overrides(self) -> dict[str, str]:
        return {f: getattr(self, f) for f in IDENTITY_FIELDS if getattr(self, f) is not None}


def compile_rewrite(pattern: str, replacement: str) -> re.Pattern[str]:
    """Compile *pattern*, also checking group references in *replacement*.

    Raises ``re.error``.
    """
    compiled = re.compile(pattern)
    compiled.sub(replacement, "")
    return compiled


@dataclass(frozen=True)
class RewriteRule:
    """Replace *pattern* with *replacement*; ``regex=True`` uses ``re.sub``."""

    pattern: str
    replacement: str = ""
    regex: bool = False

    def __post_init__(self) -> None:
        if not self.regex:
            return
        try:
            compile_rewrite(self.pattern, self.replacement)
        except re.error as exc:
            raise ConfigurationError(f"invalid rewrite pattern {self.pattern!r}: {exc}") from exc

    def apply(self, text: str) -> str:
        if self.regex:
            return re.sub(self.pattern, self.replacement, text)
        return text.replace(self.pattern, self.replacement)


class OverrideRegistry:
    """Read-only view over at most one inclusion set and one rewrite set."""

    def __init__(
        self,
        inclusion_rules: Sequence[InclusionRule] | None = None,
        rewrite_rules: Sequence[RewriteRule] | None = None,
    ) -> None:
        self._inclusion: dict[str, InclusionRule] | None = None
        if inclusion_rules is not None:
            self._inclusion = {}
            for rule in inclusion_rules:
                if rule.name in self._inclusion:
                    raise ConfigurationError(f"duplicate externals rule for '{rule.name}'")
                self._inclusion[rule.name] = rule
        self._rewrites: tuple[RewriteRule, ...] | None = (
            tuple(rewrite_rules) if rewrite_rules is not None else None
        )

    @classmethod
    def from_rule_sets(
        cls,
        inclusion_sets: Iterable[Sequence[InclusionRule]] = (),
        rewrite_sets: Iterable[Sequence[RewriteRule]] = (),
    ) -> OverrideRegistry:
        """Build a registry, rejecting more than one set of either kind."""
        inclusion = list(inclusion_sets)
        rewrites = list(rewrite_sets)
        if len(inclusion) > 1:
            raise DuplicateRuleSetError("externals")
        if len(rewrites) > 1:
            raise DuplicateRuleSetError("rewrites")
        return cls(
            inclusion_rules=inclusion[0] if inclusion else None,
            rewrite_rules=rewrites[0] if rewrites else None,
        )

    @property
    def rewrite_rules(self) -> tuple[RewriteRule, ...]:
        return self._rewrites or ()

    def rule_for(self, name: str) -> InclusionRule | None:
        if self._inclusion is None:
            return None
        return self._inclusion.get(name)

    def is_included(self, name: str) -> bool:
        rule = self.rule_for(name)
        return rule is None or rule.include

    def apply_identity(self, name: str, entry: ManifestEntry) -> ManifestEntry:
        rule = self.rule_for(name)
        if rule is None:
            return entry
        return replace(entry, **rule.overrides())

    def rewrite(self, text: str) -> str:
        for rule in self.rewrite_rules:
            text = rule.apply(text)
        return text

    def finalize(self, name: str, entry: ManifestEntry) -> ManifestEntry:
        """Identity override first, then rewrites on the free-text fields."""
        entry = self.apply_identity(name, entry)
        return replace(
            entry,
            product=self.rewrite(entry.product),
            sub_product=self.rewrite(entry.sub_product),
            license_filename=self.rewrite(entry.license_filename),
        )

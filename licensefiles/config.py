"""Run configuration: TOML config files validated with pydantic."""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Literal

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from licensefiles.exceptions import ConfigurationError, DuplicateRuleSetError
from licensefiles.overrides import (
    InclusionRule,
    OverrideRegistry,
    RewriteRule,
    compile_rewrite,
)

DEFAULT_MANIFEST_NAMES = {"xml": "manifest.xml", "json": "manifest.json"}


class ExternalRuleConfig(BaseModel):
    """One ``[[externals]]`` table."""

    model_config = ConfigDict(extra="forbid")

    name: str
    include: bool = True
    product: str | None = None
    sub_product: str | None = None
    version: str | None = None
    license_type: str | None = None
    license_filename: str | None = None

    def to_rule(self) -> InclusionRule:
        return InclusionRule(**self.model_dump())


class RewriteRuleConfig(BaseModel):
    """One ``[[rewrites]]`` table."""

    model_config = ConfigDict(extra="forbid")

    pattern: str = Field(min_length=1)
    replacement: str = ""
    regex: bool = False

    @model_validator(mode="after")
    def _compiles(self) -> RewriteRuleConfig:
        if self.regex:
            try:
                compile_rewrite(self.pattern, self.replacement)
            except re.error as exc:
                raise ValueError(f"invalid regex {self.pattern!r}: {exc}") from exc
        return self

    def to_rule(self) -> RewriteRule:
        return RewriteRule(**self.model_dump())


class FileConfig(BaseModel):
    """Contents of a single config file; every key is optional."""

    model_config = ConfigDict(extra="forbid")

    max_depth: int | None = Field(default=None, ge=1)
    matcher: str | None = None
    format: Literal["xml", "json"] | None = None
    xsl: str | None = None
    manifest_name: str | None = None
    externals: list[ExternalRuleConfig] | None = None
    rewrites: list[RewriteRuleConfig] | None = None

    @field_validator("externals")
    @classmethod
    def _unique_names(cls, v: list[ExternalRuleConfig] | None):
        if v is None:
            return v
        seen: set[str] = set()
        for rule in v:
            if rule.name in seen:
                raise ValueError(f"duplicate externals rule for '{rule.name}'")
            seen.add(rule.name)
        return v


class CollectorSettings(BaseModel):
    """Validated settings for one collection run."""

    source: Path
    to_dir: Path
    max_depth: int = Field(default=1, ge=1)
    matcher: str = "filename"
    format: Literal["xml", "json"] = "xml"
    xsl: str | None = None
    manifest_name: str | None = None
    externals_file: Path | None = None
    inclusion_rules: list[InclusionRule] | None = None
    rewrite_rules: list[RewriteRule] | None = None

    @property
    def manifest_path(self) -> Path:
        return self.to_dir / (self.manifest_name or DEFAULT_MANIFEST_NAMES[self.format])

    def overrides(self) -> OverrideRegistry:
        return OverrideRegistry(self.inclusion_rules, self.rewrite_rules)


def load_config(path: Path) -> FileConfig:
    """Parse and validate a TOML config file."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {path}: {exc}") from exc

    try:
        return FileConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid config file {path}:\n{exc}") from exc


def build_settings(
    source: Path | None,
    to_dir: Path | None,
    config_files: list[Path] | tuple[Path, ...] = (),
    **options,
) -> CollectorSettings:
    """Merge config files and explicit options into ``CollectorSettings``.

    Later config files override earlier scalar values and explicit options
    (those not None) override all files. Only one file may define
    ``externals`` and only one may define ``rewrites``.
    """
    if source is None:
        raise ConfigurationError("license-files: missing 'src'")
    if to_dir is None:
        raise ConfigurationError("license-files: missing 'toDir'")

    merged: dict = {}
    inclusion_sources: list[str] = []
    rewrite_sources: list[str] = []
    for path in config_files:
        cfg = load_config(path)
        for key in ("max_depth", "matcher", "format", "xsl", "manifest_name"):
            value = getattr(cfg, key)
            if value is not None:
                merged[key] = value
        if cfg.externals is not None:
            inclusion_sources.append(str(path))
            merged["inclusion_rules"] = [r.to_rule() for r in cfg.externals]
        if cfg.rewrites is not None:
            rewrite_sources.append(str(path))
            merged["rewrite_rules"] = [r.to_rule() for r in cfg.rewrites]

    if len(inclusion_sources) > 1:
        raise DuplicateRuleSetError("externals", inclusion_sources)
    if len(rewrite_sources) > 1:
        raise DuplicateRuleSetError("rewrites", rewrite_sources)

    merged.update({k: v for k, v in options.items() if v is not None})

    try:
        return CollectorSettings(source=source, to_dir=to_dir, **merged)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings:\n{exc}") from exc

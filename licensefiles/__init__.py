"""license-files — collect third-party license files for svn:externals dependencies."""

from licensefiles.assembler import ManifestAssembler
from licensefiles.collector import LicenseCollector
from licensefiles.externals import extract_version, parse_externals
from licensefiles.locator import RecursiveLicenseLocator
from licensefiles.models import CopyPlanItem, DependencyDeclaration, Manifest, ManifestEntry
from licensefiles.overrides import InclusionRule, OverrideRegistry, RewriteRule

__all__ = [
    "CopyPlanItem",
    "DependencyDeclaration",
    "InclusionRule",
    "LicenseCollector",
    "Manifest",
    "ManifestAssembler",
    "ManifestEntry",
    "OverrideRegistry",
    "RecursiveLicenseLocator",
    "RewriteRule",
    "extract_version",
    "parse_externals",
]

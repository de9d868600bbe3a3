"""Custom exceptions for license-files."""


class LicenseFilesError(Exception):
    """Base exception for all license collection errors."""


class ConfigurationError(LicenseFilesError):
    """Raised when the run configuration is incomplete or contradictory.

    Always raised before any directory is scanned.
    """


class DuplicateRuleSetError(ConfigurationError):
    """Raised when a second rule set of the same kind is supplied."""

    def __init__(self, kind: str, sources: list[str] | None = None):
        self.kind = kind
        self.sources = sources or []
        detail = f" (defined in {', '.join(self.sources)})" if self.sources else ""
        super().__init__(f"Only one {kind} set allowed{detail}.")


class PropertyReadError(LicenseFilesError):
    """Raised when the svn:externals metadata cannot be retrieved."""

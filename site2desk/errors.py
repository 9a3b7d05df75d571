"""Exception hierarchy shared by the validator, compiler and orchestrator."""

from __future__ import annotations


class Site2DeskError(Exception):
    """Base class for every error raised by site2desk."""


# ---------------------------------------------------------------------------
# Validation stage
# ---------------------------------------------------------------------------


class ConfigValidationError(Site2DeskError):
    """Raised when a BuildConfig is structurally invalid."""


class InvalidUrlError(ConfigValidationError):
    """The configured ``url`` does not parse as an absolute URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class MissingRequiredFieldError(ConfigValidationError):
    """A required field (``name`` or ``appId``) is empty or absent."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}")


# ---------------------------------------------------------------------------
# Orchestration stage
# ---------------------------------------------------------------------------


class BuildError(Site2DeskError):
    """Raised when a build stage fails irrecoverably."""


class DependencyInstallError(BuildError):
    """Installing the generated application's dependencies failed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to install dependencies: {detail}")


class PackagingError(BuildError):
    """The external packager failed for one target format."""

    def __init__(self, package_format: str, detail: str) -> None:
        self.format = package_format
        self.detail = detail
        super().__init__(f"Failed to package for {package_format}: {detail}")


class BuildIOError(BuildError):
    """A directory or file write failed."""

    def __init__(self, path: object, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"I/O failure at {path}: {detail}")


class BuildInProgressError(BuildError):
    """A build was requested while another one is still running."""

    def __init__(self) -> None:
        super().__init__("Another build is already in progress")

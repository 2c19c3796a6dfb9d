"""Exception types raised by depbump."""


class DepbumpError(Exception):
    """Base class for errors reported to the user."""


class UnknownDatasourceError(DepbumpError):
    """Raised when no datasource is registered under the requested id."""

    def __init__(self, datasource: str):
        super().__init__(f"Unknown datasource: {datasource}")
        self.datasource = datasource


class PlatformError(DepbumpError):
    """Raised when the hosting platform API returns an error."""


class GitError(DepbumpError):
    """Raised when a git command fails.

    The message carries git's stderr so callers can classify the failure.
    """

    def __init__(self, message: str, command: list[str] | None = None):
        super().__init__(message)
        self.command = command or []

from __future__ import annotations


class LintSyncError(Exception):
    """Base error for lintsync."""


class ConfigError(LintSyncError):
    """A required environment or event value is missing or invalid."""


class NetworkError(LintSyncError):
    """The request never produced a response."""


class ApiError(LintSyncError):
    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthError(ApiError):
    pass


class DiffRejectedError(ApiError):
    """GitHub refused a line comment because the line is not part of the diff."""


class LinterError(LintSyncError):
    pass


class LinterOutputError(LinterError):
    pass

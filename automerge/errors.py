"""Exception classes for the auto-merge service."""


class AutoMergeError(Exception):
    """Base exception for all auto-merge errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(AutoMergeError):
    """Raised when settings are missing or inconsistent."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class EventPayloadError(AutoMergeError):
    """Raised when an inbound event cannot be turned into a pull request."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_EVENT", message)


class ProviderError(AutoMergeError):
    """Raised when a source-control provider call fails."""

    def __init__(
        self, message: str, status_code: int | None = None, code: str = "PROVIDER_ERROR"
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code


class ProviderAuthError(ProviderError):
    """Raised on 401/403 responses."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, status_code, code="PROVIDER_AUTH_ERROR")


class ProviderNotFoundError(ProviderError):
    """Raised when the pull request or repository does not exist."""

    def __init__(self, message: str, status_code: int | None = 404) -> None:
        super().__init__(message, status_code, code="PROVIDER_NOT_FOUND")


class MergeConflictError(ProviderError):
    """Raised on merge conflicts and stale optimistic-concurrency versions."""

    def __init__(self, message: str, status_code: int | None = 409) -> None:
        super().__init__(message, status_code, code="MERGE_CONFLICT")


class ProviderServerError(ProviderError):
    """Raised on server errors (5xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, status_code, code="PROVIDER_SERVER_ERROR")

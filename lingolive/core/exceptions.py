"""Custom exception classes for structured error handling.

HTTP routes raise these and the app-level handler renders ``to_dict()``.
The realtime router turns the same classes into ``error`` events.
"""

from typing import Any


class LingoLiveError(Exception):
    """Base exception for all LingoLive errors."""

    def __init__(self, code: str, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class MissingSiteKeyError(LingoLiveError):
    def __init__(self, message: str = "siteKey query parameter is required") -> None:
        super().__init__(code="MISSING_SITE_KEY", message=message, status_code=400)


class InvalidSiteKeyError(LingoLiveError):
    def __init__(self, message: str = "The provided site key is not authorized") -> None:
        super().__init__(code="INVALID_SITE_KEY", message=message, status_code=401)


class AuthenticationRequiredError(LingoLiveError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(code="AUTHENTICATION_REQUIRED", message=message, status_code=401)


class InvalidSessionTokenError(LingoLiveError):
    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(code="INVALID_SESSION_TOKEN", message=message, status_code=401)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class SessionNotFoundError(LingoLiveError):
    def __init__(self, message: str = "Session not found") -> None:
        super().__init__(code="SESSION_NOT_FOUND", message=message, status_code=404)


class SessionMismatchError(LingoLiveError):
    def __init__(self, message: str = "Session ID mismatch") -> None:
        super().__init__(code="SESSION_MISMATCH", message=message, status_code=403)


class UnsupportedLanguageError(LingoLiveError):
    def __init__(self, message: str = "Invalid language code") -> None:
        super().__init__(code="UNSUPPORTED_LANGUAGE", message=message, status_code=400)


class EmptyMessageError(LingoLiveError):
    def __init__(self, message: str = "Message text must not be empty") -> None:
        super().__init__(code="EMPTY_MESSAGE", message=message, status_code=400)


class MalformedEventError(LingoLiveError):
    def __init__(self, message: str = "Malformed event") -> None:
        super().__init__(code="MALFORMED_EVENT", message=message, status_code=400)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class LocaleNotFoundError(LingoLiveError):
    def __init__(self, message: str = "Failed to load locale file") -> None:
        super().__init__(code="LOCALE_NOT_FOUND", message=message, status_code=500)


class TranslationProviderError(LingoLiveError):
    def __init__(self, message: str = "Translation provider failed") -> None:
        super().__init__(code="TRANSLATION_PROVIDER_ERROR", message=message, status_code=502)

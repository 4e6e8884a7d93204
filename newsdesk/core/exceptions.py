"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ConfigurationError(ApplicationError):
    """Raised when settings are missing or inconsistent."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="SYS_CONFIGURATION_ERROR")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict | None = None,
        code: str = "VAL_VALIDATION_ERROR",
    ) -> None:
        self.details = details or {}
        super().__init__(message, code=code)


class MissingCredentialsError(ValidationError):
    """Raised when either pass phrase is empty."""

    def __init__(self, message: str = "Wrong Pass Phrase!") -> None:
        super().__init__(message, code="VAL_MISSING_CREDENTIALS")


class MissingRequiredFieldError(ValidationError):
    """Raised when a required form field is empty."""

    def __init__(self, message: str, fields: list[str]) -> None:
        super().__init__(
            message,
            details={"missing_fields": fields},
            code="VAL_MISSING_REQUIRED_FIELD",
        )


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        message: str = "External service error",
        code: str = "SYS_EXTERNAL_SERVICE_ERROR",
    ) -> None:
        super().__init__(message, code=code)


class SubmissionAttemptError(ExternalServiceError):
    """
    One failed attempt against the content backend.

    Non-200 status, transport errors, timeouts and unreadable bodies all
    collapse into this class; it is the only one the retry loop retries.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, code="SUB_ATTEMPT_FAILED")


class LinkingFailureError(ExternalServiceError):
    """Raised when a record was created but attaching its tags failed."""

    def __init__(
        self,
        record_id: int | str,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        self.record_id = record_id
        self.status_code = status_code
        detail = status_code if status_code is not None else reason
        super().__init__(f"Failed to link tags: {detail}", code="SUB_LINKING_FAILED")


class TagDirectoryError(ExternalServiceError):
    """Raised when the tag list cannot be fetched."""

    def __init__(self, message: str = "Failed to load tags.") -> None:
        super().__init__(message, code="SYS_TAG_DIRECTORY_ERROR")


class UnexpectedResponseError(ExternalServiceError):
    """Raised when the backend accepted a request but returned no identifier."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, code="SUB_UNEXPECTED_RESPONSE")

from fastapi import HTTPException, status
from typing import Optional


class APIException(HTTPException):
    """Flexible API Exception."""

    def __init__(self, status_code: int, code: str, message: Optional[str] = None):
        detail = {"code": code, "message": message or "An error occurred"}
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(APIException):
    """404 Not Found Error."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, code=code, message=message
        )


class BadRequestError(APIException):
    """400 Bad Request Error."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST, code=code, message=message
        )


class PayloadTooLargeError(APIException):
    """413 Payload Too Large."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code=code,
            message=message,
        )


class ServerError(APIException):
    """500 Internal Server Error."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=code,
            message=message,
        )


# ----------------------------
# Startup (fatal) errors
# ----------------------------
class StartupError(RuntimeError):
    """Raised while building the scoring context; the service cannot start."""


class ModelProvisioningError(StartupError):
    """Model artifact could not be downloaded or written."""


class ModelFormatError(StartupError):
    """Model artifact is present but not a usable STM."""


class ResourceNotFoundError(StartupError):
    """A lexical resource file is missing."""


class ResourceFormatError(StartupError):
    """A lexical resource file is malformed."""


class TopicGroupError(ResourceFormatError):
    """Topic group table does not partition the topic ids."""

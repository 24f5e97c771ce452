"""
Custom exceptions for the scan & bonus API
"""
from fastapi import HTTPException, status

from .constants import Messages


class BaseAPIException(HTTPException):
    """Base exception for all API errors"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        headers: dict = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundException(BaseAPIException):
    """Resource not found"""

    def __init__(self, resource: str, identifier: str = None):
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} '{identifier}' not found"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedException(BaseAPIException):
    """Caller could not be identified"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            error_code="UNAUTHORIZED"
        )


class BadRequestException(BaseAPIException):
    """Bad request - invalid input"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
            error_code="BAD_REQUEST"
        )


class InvalidImageException(BaseAPIException):
    """Empty or undecodable image"""

    def __init__(self, reason: str = None):
        detail = Messages.INVALID_IMAGE
        if reason:
            detail += f": {reason}"
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="INVALID_IMAGE"
        )


class ImageTooLargeException(BaseAPIException):
    """Image exceeds the size cap"""

    def __init__(self, size: int, limit: int):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image too large ({size} bytes). Maximum is {limit} bytes.",
            error_code="IMAGE_TOO_LARGE"
        )
        self.size = size
        self.limit = limit


class RateLimitedException(BaseAPIException):
    """Caller exceeded the scan quota"""

    def __init__(self, retry_after: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=Messages.RATE_LIMITED,
            error_code="RATE_LIMITED",
            headers={"Retry-After": str(max(retry_after, 0))}
        )
        self.retry_after = retry_after


class RecognitionUnavailableException(BaseAPIException):
    """Text recognition backend failed"""

    def __init__(self, reason: str = None):
        detail = Messages.RECOGNITION_FAILED
        if reason:
            detail += f": {reason}"
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code="RECOGNITION_UNAVAILABLE"
        )


class MissingFactorError(BaseAPIException):
    """Bonus factor configuration is incomplete"""

    def __init__(self, factor_type: str, factor_key: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Missing bonus factor '{factor_type}/{factor_key}'",
            error_code="MISSING_FACTOR"
        )
        self.factor_type = factor_type
        self.factor_key = factor_key

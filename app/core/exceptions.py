from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Server Error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authentication required"


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Conflict"


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    detail = "Rate limit exceeded"

    def __init__(self, remaining: int = 0, detail: str | None = None):
        self.remaining = remaining
        super().__init__(
            detail
            or f"Rate limit exceeded. You have {remaining} calls remaining."
        )


class StoreError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database error"


class StorageError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Object storage error"

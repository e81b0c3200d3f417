"""Application error taxonomy.

Every error carries a short human-readable ``message`` and the HTTP status it
maps to. ``main.py`` renders them all as ``{"error": message}``.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class InvalidTokenError(AuthError):
    status_code = 403

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ForbiddenError(AuthError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 400


class InsufficientStockError(AppError):
    """Raised when a cart line asks for more units than are on hand."""

    def __init__(
        self, product_id: int, product_name: str, available: int, required: int
    ) -> None:
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Required: {required}"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.required = required


class InternalError(AppError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)

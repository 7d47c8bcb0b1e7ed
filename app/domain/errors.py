# app/domain/errors.py
from typing import Any


class AppError(Exception):
    """Bazowy blad domenowy, mapowany na koperte {success: false, error} w app/api/errors.py."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input data"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Already exists"


class OutOfStock(AppError):
    status_code = 400
    default_message = "Product is out of stock"


class NoValidItems(AppError):
    status_code = 400
    default_message = "No valid cart items found"


class InvalidSignature(AppError):
    status_code = 400
    default_message = "Invalid signature"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"

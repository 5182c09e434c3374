# rasoi/errors.py
"""
Business-rule errors raised below the router layer.

Routers raise ``HTTPException`` directly for request-level problems; the
service functions raise these instead and ``rasoi.main`` maps them to a
JSON response using ``status_code``.
"""

from typing import Optional


class RasoiError(Exception):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationFailed(RasoiError):
    """Request is well formed but breaks a business rule."""


class InsufficientStock(ValidationFailed):
    pass


class InvalidTransition(ValidationFailed):
    pass


class Overpayment(ValidationFailed):
    pass


class NotFound(RasoiError):
    status_code = 404


class Conflict(RasoiError):
    status_code = 409

"""
Error types raised by the service layer.

Each error knows the HTTP status it maps to and the JSON key its message
is returned under ("message" or "error"), so handlers can stay thin.
"""


class ShopError(Exception):
    status_code = 500
    body_key = "error"

    def __init__(self, message: str, body_key: str = None):
        super().__init__(message)
        self.message = message
        if body_key:
            self.body_key = body_key

    def to_body(self) -> dict:
        return {self.body_key: self.message}


class MalformedInput(ShopError):
    status_code = 400


class Unauthorized(ShopError):
    status_code = 401
    body_key = "message"


class NotFound(ShopError):
    status_code = 404


class Conflict(ShopError):
    status_code = 409


class StoreFailure(ShopError):
    """Unexpected persistence error. Message is generic; details are logged only."""
    status_code = 500

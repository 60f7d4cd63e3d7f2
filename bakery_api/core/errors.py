"""
Bakery API — Error taxonomy

Every error a handler can raise derives from BakeryError and knows its own
HTTP status and response body; main.py installs a single handler for them.
"""
from typing import Any, Sequence


class BakeryError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> Any:
        return {"errors": {"msg": self.message}}


class ValidationFailed(BakeryError):
    """One or more field checks failed. Nothing was charged or written."""

    status_code = 422

    def __init__(self, errors: Sequence):
        super().__init__(f"{len(errors)} field(s) failed validation")
        self.errors = list(errors)

    def to_content(self) -> Any:
        return {"errors": [{"field": e.field, "message": e.message} for e in self.errors]}


class PaymentError(BakeryError):
    """
    The gateway declined or faulted. Answered with a 200 and
    ``success: false`` because storefront clients branch on that flag.
    """

    status_code = 200

    def to_content(self) -> Any:
        return {"success": False, "message": self.message}


class PersistenceError(BakeryError):
    status_code = 500

    def __init__(self, message: str = "Error connecting to db"):
        super().__init__(message)

    def to_content(self) -> Any:
        return {"message": self.message}


class NotFoundError(BakeryError):
    status_code = 404


class BlobStoreError(BakeryError):
    status_code = 500

"""
Domain errors raised by services and mapped to HTTP responses in chama.main.
"""


class ChamaError(Exception):
    """Base class for application errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ChamaError):
    """Bad year, bad month or similar input rejected before touching the store."""
    status_code = 400


class NotFoundError(ChamaError):
    """A member or contribution id did not resolve."""
    status_code = 404


class ConflictError(ChamaError):
    """A write would break the one-record-per-member-and-year constraint."""
    status_code = 409

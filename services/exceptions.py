"""
services/exceptions.py

Classified failures raised by the store / engine / ingestion layers.
middlewares/error_handler.py turns each class into the JSON error envelope
with the matching HTTP status.
"""


class GradingError(Exception):
    status_code = 500
    code = "GRADING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GradingError):
    """Malformed or out-of-range input, rejected before touching the store."""
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(GradingError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(GradingError):
    """Uniqueness violation (admission number, subject name per class level)."""
    status_code = 409
    code = "CONFLICT"


class IngestionError(GradingError):
    """A bulk grade save failed and was rolled back."""
    status_code = 500
    code = "INGESTION_FAILED"

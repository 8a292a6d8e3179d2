import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.exceptions import GradingError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def add_error_handlers(app: FastAPI):
    # ✅ classified failures from the store / engine / ingestion layers
    @app.exception_handler(GradingError)
    async def grading_error_handler(request: Request, exc: GradingError):
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
        return _error_response(exc.status_code, exc.code, exc.message)

    # ✅ request shape errors (bad class level / term / year, non-array grades, ...)
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
            for err in exc.errors()
        ]
        return _error_response(422, "VALIDATION_ERROR", "Invalid request data", details)

    # ✅ anything else: logged, never echoed back to the caller
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, "INTERNAL_ERROR", "Something went wrong")

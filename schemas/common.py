"""
schemas/common.py

Error envelope produced by middlewares/error_handler.py:
{"success": false, "error": {"code", "message"[, "details"]}, "generated_at"}
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ConfigDict


class ErrorDetail(BaseModel):
    """Error code / message pair"""
    code: str = Field(..., description="error code (e.g. NOT_FOUND, CONFLICT, INGESTION_FAILED)")
    message: str = Field(..., description="human readable message")
    details: Optional[List[Any]] = Field(default=None, description="per-field validation errors")


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="response time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException


class ErrorCode:
    INVALID_URL = "InvalidUrl"
    EMPTY_CONTENT = "EmptyContent"
    ANALYSIS_FAILED = "AnalysisFailed"
    PERSISTENCE_FAILED = "PersistenceFailed"
    AUTH_REQUIRED = "AuthRequired"
    QR_DECODE_FAILED = "QrDecodeFailed"


class PhishnixError(Exception):
    """Base class for errors raised by the analysis services."""

    code = "PhishnixError"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_detail(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.field:
            error["field"] = self.field
        return {"error": error}


class InvalidUrlError(PhishnixError):
    code = ErrorCode.INVALID_URL


class EmptyContentError(PhishnixError):
    code = ErrorCode.EMPTY_CONTENT


class AnalysisFailedError(PhishnixError):
    """The reasoning service failed, raised, or returned an invalid shape.

    ``message`` is the upstream message, untouched. ``display_message`` is what
    the user sees.
    """

    code = ErrorCode.ANALYSIS_FAILED
    status_code = 502

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage

    @property
    def display_message(self) -> str:
        if self.message:
            return f"Analysis failed: {self.message}"
        return "Analysis failed. Please try again."

    def to_detail(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.display_message,
                "upstream_message": self.message,
            }
        }


class PersistenceFailedError(PhishnixError):
    code = ErrorCode.PERSISTENCE_FAILED
    status_code = 500


class AuthRequiredError(PhishnixError):
    code = ErrorCode.AUTH_REQUIRED
    status_code = 401


class QrDecodeError(PhishnixError):
    """Raised when an uploaded image holds no readable QR code"""

    code = ErrorCode.QR_DECODE_FAILED


def raise_http_error(exc: PhishnixError):
    raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc

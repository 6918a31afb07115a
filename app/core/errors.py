from enum import Enum
from typing import Any, Optional

from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError


class ErrorCode(str, Enum):
    # Category errors
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_FETCH_ERROR = "CATEGORY_FETCH_ERROR"
    CATEGORY_CREATE_ERROR = "CATEGORY_CREATE_ERROR"
    CATEGORY_VALIDATION_ERROR = "CATEGORY_VALIDATION_ERROR"

    # Session errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_FETCH_ERROR = "SESSION_FETCH_ERROR"
    SESSION_CREATE_ERROR = "SESSION_CREATE_ERROR"
    SESSION_UPDATE_ERROR = "SESSION_UPDATE_ERROR"
    SESSION_DELETE_ERROR = "SESSION_DELETE_ERROR"
    SESSION_VALIDATION_ERROR = "SESSION_VALIDATION_ERROR"

    # Message errors
    MESSAGE_NOT_FOUND = "MESSAGE_NOT_FOUND"
    MESSAGE_FETCH_ERROR = "MESSAGE_FETCH_ERROR"
    MESSAGE_CREATE_ERROR = "MESSAGE_CREATE_ERROR"
    MESSAGE_UPDATE_ERROR = "MESSAGE_UPDATE_ERROR"
    MESSAGE_VALIDATION_ERROR = "MESSAGE_VALIDATION_ERROR"
    MESSAGE_UNAUTHORIZED = "MESSAGE_UNAUTHORIZED"

    # Profile and storage errors
    PROFILE_FETCH_ERROR = "PROFILE_FETCH_ERROR"
    PROFILE_UPDATE_ERROR = "PROFILE_UPDATE_ERROR"
    STORAGE_SIGN_ERROR = "STORAGE_SIGN_ERROR"

    # General errors
    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_MESSAGES = {
    ErrorCode.CATEGORY_NOT_FOUND: "The requested category was not found",
    ErrorCode.CATEGORY_FETCH_ERROR: "Failed to fetch categories",
    ErrorCode.CATEGORY_CREATE_ERROR: "Failed to create category",
    ErrorCode.CATEGORY_VALIDATION_ERROR: "Category data validation failed",
    ErrorCode.SESSION_NOT_FOUND: "The requested session was not found",
    ErrorCode.SESSION_FETCH_ERROR: "Failed to fetch sessions",
    ErrorCode.SESSION_CREATE_ERROR: "Failed to create session",
    ErrorCode.SESSION_UPDATE_ERROR: "Failed to update session",
    ErrorCode.SESSION_DELETE_ERROR: "Failed to delete session",
    ErrorCode.SESSION_VALIDATION_ERROR: "Session data validation failed",
    ErrorCode.MESSAGE_NOT_FOUND: "The requested message was not found",
    ErrorCode.MESSAGE_FETCH_ERROR: "Failed to fetch messages",
    ErrorCode.MESSAGE_CREATE_ERROR: "Failed to create message",
    ErrorCode.MESSAGE_UPDATE_ERROR: "Failed to update message",
    ErrorCode.MESSAGE_VALIDATION_ERROR: "Message data validation failed",
    ErrorCode.MESSAGE_UNAUTHORIZED: "You are not authorized to access this message",
    ErrorCode.PROFILE_FETCH_ERROR: "Failed to load profile",
    ErrorCode.PROFILE_UPDATE_ERROR: "Failed to update profile",
    ErrorCode.STORAGE_SIGN_ERROR: "Failed to create signed upload URL",
    ErrorCode.INVALID_REQUEST: "The request contains invalid data",
    ErrorCode.UNAUTHORIZED: "Authentication required",
    ErrorCode.INTERNAL_ERROR: "An internal error occurred",
}


class ApiError(HTTPException):
    """
    HTTPException carrying a machine-readable error code.

    Rendered by the app's exception handler as
    ``{"error": {"code", "message", "details"}}``.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Any = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.details = details
        super().__init__(status_code=status_code, detail=self.message)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }

def validation_details(exc: ValidationError) -> list:
    """JSON-safe form of a pydantic ValidationError for the error envelope."""
    return jsonable_encoder(exc.errors(include_url=False))

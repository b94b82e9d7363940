"""Shared utilities for FastAPI routes."""

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed. Use POST."


def search_error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    """Error envelope shaped like a search outcome with no results."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "results": [], "searchQuery": "", "error": message},
    )


def first_validation_message(exc: ValidationError) -> str:
    """Client-facing message of the first validation error."""
    errors = exc.errors()
    return errors[0]["msg"] if errors else "Invalid request"

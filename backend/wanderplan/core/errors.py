"""Application error types and the remediation hints attached to them."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from wanderplan.llm.client import ModelAttempt


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class BadRequestError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404


class StoreError(AppError):
    """Document store unreachable or rejecting the request."""


class GenerationError(AppError):
    """Every configured model failed to produce content."""

    def __init__(self, message: str, attempts: Optional[List["ModelAttempt"]] = None) -> None:
        super().__init__(message)
        self.attempts = list(attempts or [])


class MissingCredentialsError(GenerationError):
    pass


class ItineraryValidationError(AppError):
    """Generated content could not be turned into an itinerary.

    ``reason`` is one of ``unparseable``, ``missing_days``, ``empty_days``
    or ``invalid_day``.
    """

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


def with_remediation(message: str) -> str:
    """Append a hint on how to fix the most common generation failures."""
    lowered = message.lower()
    if "api key" in lowered or "gemini_api_key" in lowered:
        return message + " Please check GEMINI_API_KEY in your environment or .env file."
    if "mongodb" in lowered or "database" in lowered:
        return message + " Please check MONGODB_URI in your environment or .env file."
    if "parse" in lowered or "json" in lowered or "itinerary data" in lowered:
        return message + " The AI response was invalid. Please try again."
    return message

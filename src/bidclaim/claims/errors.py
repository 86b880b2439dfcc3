"""Failure kinds of the claim workflow.

Each error carries the HTTP status it maps to and a message that is safe to
show to the caller. ``PersistenceError`` keeps the original exception for the
server log only.
"""

from __future__ import annotations


class ClaimError(Exception):
    status_code = 400
    default_message = "Claim request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def payload(self) -> dict:
        return {"success": False, "message": self.message}


class InvalidUrl(ClaimError):
    default_message = "Invalid HiBid URL provided"


class IdentifierExtractionFailed(InvalidUrl):
    default_message = "Could not extract Auction ID from URL"


class FetchFailed(ClaimError):
    default_message = "Failed to verify auction details. Please check the URL."


class AlreadyClaimed(ClaimError):
    status_code = 409
    default_message = "This auction has already been claimed."


class NotTrialEligible(ClaimError):
    default_message = "This auction is unusually large. Please contact support."


class PhoneInUse(ClaimError):
    default_message = "This phone number is already in use by another account."


class PersistenceError(ClaimError):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__()

"""
Custom exceptions and error handling for the trip proposal engine.

Defines application-specific exceptions with error codes so the request layer
can map failures to responses without parsing messages.

Usage:
    from core.errors import NotFoundError, ValidationError, ErrorCode

    raise NotFoundError("TripProposal", proposal_id)
    raise ValidationError("Trip is at maximum capacity", code=ErrorCode.CAPACITY_EXCEEDED)
"""

from enum import Enum

import pydantic


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Lookup errors
    PROPOSAL_NOT_FOUND = "PROPOSAL_NOT_FOUND"
    GUEST_NOT_FOUND = "GUEST_NOT_FOUND"
    INCLUSION_NOT_FOUND = "INCLUSION_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"

    # Business rule errors
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INVALID_TRANSITION = "INVALID_TRANSITION"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.PROPOSAL_NOT_FOUND: "This trip proposal could not be found.",
    ErrorCode.GUEST_NOT_FOUND: "This guest could not be found on the trip.",
    ErrorCode.INCLUSION_NOT_FOUND: "This line item could not be found on the trip.",
    ErrorCode.NOT_FOUND: "The requested item could not be found.",
    ErrorCode.CAPACITY_EXCEEDED: "This trip is full. No more guests can be added.",
    ErrorCode.INVALID_TRANSITION: "The proposal cannot be moved to that status right now.",
    ErrorCode.VALIDATION_ERROR: "Your request contains invalid information. Please check and try again.",
    ErrorCode.INVALID_REQUEST: "Invalid request format. Please try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}

_NOT_FOUND_CODES: dict[str, ErrorCode] = {
    "TripProposal": ErrorCode.PROPOSAL_NOT_FOUND,
    "TripProposalGuest": ErrorCode.GUEST_NOT_FOUND,
    "TripProposalInclusion": ErrorCode.INCLUSION_NOT_FOUND,
}


class ProposalEngineError(Exception):
    """Base exception for all proposal engine errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class NotFoundError(ProposalEngineError):
    """A referenced proposal, or a proposal-scoped guest or inclusion, does not resolve."""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            code=_NOT_FOUND_CODES.get(entity, ErrorCode.NOT_FOUND),
        )


class ValidationError(ProposalEngineError):
    """A business rule was violated or the input failed schema validation."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        field_errors: dict[str, list[str]] | None = None,
    ):
        self.field_errors = field_errors or {}
        super().__init__(message, code=code)


def field_errors_from(exc: pydantic.ValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into a field -> messages map."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        errors.setdefault(field, []).append(err["msg"])
    return errors

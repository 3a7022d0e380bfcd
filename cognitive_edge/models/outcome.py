# ABOUTME: Result-style outcome models returned by the turn service instead of raised exceptions.
# ABOUTME: A TurnOutcome is either ok with a ProtocolTurnResult or failed with a TurnError and HTTP status.

from typing import Literal

from pydantic import BaseModel, Field

from cognitive_edge.models.protocol import ProtocolTurnResult

TurnErrorCode = Literal[
    "missing_phase",
    "invalid_phase",
    "invalid_user_input",
    "responder_timeout",
    "responder_failure",
]

# Client-facing message for every responder-side failure
GENERIC_FAILURE_MESSAGE = "Failed to process protocol request"


class TurnError(BaseModel):
    """Failure description safe to return to the end user"""

    code: TurnErrorCode
    message: str
    status_code: int = Field(ge=400, le=599)

    @property
    def retryable(self) -> bool:
        return self.status_code >= 500


class TurnOutcome(BaseModel):
    """Explicit success/failure value for a protocol turn"""

    ok: bool
    result: ProtocolTurnResult | None = None
    error: TurnError | None = None

    @classmethod
    def success(cls, result: ProtocolTurnResult) -> "TurnOutcome":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, code: TurnErrorCode, message: str, status_code: int) -> "TurnOutcome":
        return cls(
            ok=False,
            error=TurnError(code=code, message=message, status_code=status_code),
        )

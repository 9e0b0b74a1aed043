"""Revenue split models — contributors, payment outcomes and split results."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SplitOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class SplitStatus(StrEnum):
    """Aggregate outcome of one split attempt."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


class Contributor(BaseModel):
    """A payee with a declared or derived weight."""

    contributor_id: str
    weight: float = 1.0
    payout_address: str | None = None


class PaymentResult(BaseModel):
    """What a payment transport reports for one payment."""

    success: bool
    error: str | None = None
    preimage: str | None = None


class SplitResult(BaseModel):
    """The recorded outcome for one contributor of a split."""

    model_config = ConfigDict(frozen=True)

    contributor_id: str
    amount: int = Field(default=0, ge=0)
    outcome: SplitOutcome
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == SplitOutcome.SUCCESS

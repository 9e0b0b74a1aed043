"""Revenue splitting and payment transports."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from folio.models.split import PaymentResult
from folio.payments.splitter import compute_shares, split_and_send, summarize_split


@runtime_checkable
class PaymentTransport(Protocol):
    """Protocol for paying one contributor's share."""

    async def pay_invoice(
        self,
        amount: int,
        payout_address: str,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentResult:
        """Pay ``amount`` to ``payout_address`` and report the outcome."""
        ...


__all__ = [
    "PaymentTransport",
    "compute_shares",
    "split_and_send",
    "summarize_split",
]

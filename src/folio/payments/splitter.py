"""Proportional revenue splits with independent per-contributor payments."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING, Any

from folio.exceptions import SplitRequestError
from folio.models.split import SplitOutcome, SplitResult, SplitStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from folio.models.split import Contributor
    from folio.payments import PaymentTransport

logger = logging.getLogger(__name__)

NO_PAYOUT_ADDRESS = "no payout address"
SHARE_TOO_SMALL = "share too small"
TIMEOUT = "timeout"
PAYMENT_FAILED = "payment failed"

MIN_SHARE = 1


def _validate_request(total_amount: int, contributors: Sequence[Contributor]) -> None:
    if (
        isinstance(total_amount, bool)
        or not isinstance(total_amount, int)
        or total_amount <= 0
    ):
        msg = f"Total amount must be a positive integer, got {total_amount!r}"
        raise SplitRequestError(msg)
    if not contributors:
        msg = "At least one contributor is required"
        raise SplitRequestError(msg)
    for contributor in contributors:
        if not math.isfinite(contributor.weight) or contributor.weight < 0:
            msg = (
                f"Contributor {contributor.contributor_id} has invalid weight "
                f"{contributor.weight!r}"
            )
            raise SplitRequestError(msg)


def compute_shares(total_amount: int, contributors: Sequence[Contributor]) -> list[int]:
    """Return each contributor's floored share of ``total_amount``.

    Shares are proportional to weight; the remainder left by flooring is not
    distributed. Every share is 0 when the weights sum to zero.
    """
    _validate_request(total_amount, contributors)
    total_weight = math.fsum(contributor.weight for contributor in contributors)
    if total_weight == 0:
        return [0] * len(contributors)
    return [
        math.floor(total_amount * (contributor.weight / total_weight))
        for contributor in contributors
    ]


def _failure(contributor: Contributor, reason: str, amount: int = 0) -> SplitResult:
    return SplitResult(
        contributor_id=contributor.contributor_id,
        amount=amount,
        outcome=SplitOutcome.FAILURE,
        reason=reason,
    )


async def _pay(
    contributor: Contributor,
    share: int,
    transport: PaymentTransport,
    *,
    timeout: float | None,  # noqa: ASYNC109
    metadata: dict[str, Any],
) -> SplitResult:
    """Make exactly one payment attempt and record its outcome."""
    address = contributor.payout_address or ""
    try:
        async with asyncio.timeout(timeout):
            result = await transport.pay_invoice(share, address, metadata)
    except TimeoutError:
        logger.warning(
            "Payment timed out — contributor=%s amount=%d",
            contributor.contributor_id,
            share,
        )
        return _failure(contributor, TIMEOUT, share)
    except asyncio.CancelledError:
        logger.warning(
            "Split cancelled while paying contributor=%s; payment may have been sent",
            contributor.contributor_id,
        )
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Payment failed — contributor=%s amount=%d",
            contributor.contributor_id,
            share,
            exc_info=True,
        )
        return _failure(contributor, str(exc) or type(exc).__name__, share)

    if not result.success:
        logger.info(
            "Payment rejected — contributor=%s error=%s",
            contributor.contributor_id,
            result.error,
        )
        return _failure(contributor, result.error or PAYMENT_FAILED, share)

    logger.info(
        "Payment sent — contributor=%s amount=%d", contributor.contributor_id, share
    )
    return SplitResult(
        contributor_id=contributor.contributor_id,
        amount=share,
        outcome=SplitOutcome.SUCCESS,
    )


async def split_and_send(  # noqa: PLR0913
    total_amount: int,
    contributors: Iterable[Contributor],
    transport: PaymentTransport,
    *,
    timeout: float | None = None,  # noqa: ASYNC109
    max_concurrency: int | None = None,
    metadata: dict[str, Any] | None = None,
) -> list[SplitResult]:
    """Split ``total_amount`` by weight and pay every contributor independently.

    Raises SplitRequestError before any payment is attempted when the amount
    or contributor set is invalid. Results are returned in contributor order;
    a failed payment never prevents the others.
    """
    payees = list(contributors)
    shares = compute_shares(total_amount, payees)
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def attempt(contributor: Contributor, share: int) -> SplitResult:
        if not contributor.payout_address:
            return _failure(contributor, NO_PAYOUT_ADDRESS)
        if share < MIN_SHARE:
            return _failure(contributor, SHARE_TOO_SMALL)
        payment_metadata = {
            **(metadata or {}),
            "contributor_id": contributor.contributor_id,
        }
        if semaphore is None:
            return await _pay(
                contributor,
                share,
                transport,
                timeout=timeout,
                metadata=payment_metadata,
            )
        async with semaphore:
            return await _pay(
                contributor,
                share,
                transport,
                timeout=timeout,
                metadata=payment_metadata,
            )

    results = list(
        await asyncio.gather(
            *(
                attempt(contributor, share)
                for contributor, share in zip(payees, shares, strict=True)
            )
        )
    )
    logger.info(
        "Split of %d finished — status=%s paid=%d/%d",
        total_amount,
        summarize_split(results),
        sum(1 for result in results if result.succeeded),
        len(results),
    )
    return results


def summarize_split(results: Sequence[SplitResult]) -> SplitStatus:
    succeeded = sum(1 for result in results if result.succeeded)
    if results and succeeded == len(results):
        return SplitStatus.COMPLETE
    if succeeded:
        return SplitStatus.PARTIAL
    return SplitStatus.FAILED

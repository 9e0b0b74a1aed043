"""Lightning-address payment transport: LNURL-pay invoice lookup and wallet payment."""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from folio.exceptions import PaymentError
from folio.models.revision import EventKind
from folio.models.split import PaymentResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from folio.config import PaymentConfig

logger = logging.getLogger(__name__)

MSATS_PER_SAT = 1000


@runtime_checkable
class Wallet(Protocol):
    """Protocol for a connected wallet able to pay a bolt11 invoice."""

    async def pay_invoice(self, invoice: str) -> str | None:
        """Pay the invoice and return the preimage when the wallet reports one."""
        ...


@runtime_checkable
class Signer(Protocol):
    """Protocol for signing an unsigned event on behalf of the current user."""

    async def sign_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Return the signed event."""
        ...


def parse_lightning_address(address: str) -> tuple[str, str]:
    """Split ``name@domain`` into its parts."""
    name, sep, domain = address.strip().partition("@")
    if not sep or not name or not domain or "@" in domain:
        msg = f"Invalid lightning address: {address!r}"
        raise PaymentError(msg)
    return name, domain


def build_zap_request(  # noqa: PLR0913
    amount: int,
    recipient_id: str,
    *,
    revision_id: str | None = None,
    comment: str = "",
    relays: Sequence[str] = (),
    now: int | None = None,
) -> dict[str, Any]:
    """Build an unsigned zap request for ``amount`` sats."""
    tags: list[list[str]] = [
        ["relays", *relays],
        ["amount", str(amount * MSATS_PER_SAT)],
        ["p", recipient_id],
    ]
    if revision_id:
        tags.append(["e", revision_id])
    return {
        "kind": int(EventKind.ZAP_REQUEST),
        "content": comment,
        "tags": tags,
        "created_at": now if now is not None else int(time.time()),
    }


class LightningAddressTransport:
    """Pay contributors at their lightning address through an injected wallet."""

    def __init__(
        self,
        wallet: Wallet,
        *,
        signer: Signer | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,  # noqa: ASYNC109
        relays: Sequence[str] = (),
    ) -> None:
        """Initialize with a wallet and an optional shared HTTP client."""
        self._wallet = wallet
        self._signer = signer
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._relays = tuple(relays)

    @classmethod
    def from_config(
        cls,
        config: PaymentConfig,
        wallet: Wallet,
        *,
        signer: Signer | None = None,
    ) -> LightningAddressTransport:
        return cls(
            wallet,
            signer=signer,
            timeout=config.lnurl_timeout,
            relays=config.zap_relays,
        )

    def _ensure_client(self) -> httpx.AsyncClient:
        """Lazily create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> dict:
        client = self._ensure_client()
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            msg = f"LNURL request failed: {exc}"
            raise PaymentError(msg) from exc
        except json.JSONDecodeError as exc:
            msg = "LNURL endpoint returned invalid JSON"
            raise PaymentError(msg) from exc
        if not isinstance(data, dict):
            msg = "LNURL endpoint returned an unexpected payload"
            raise PaymentError(msg)
        if data.get("status") == "ERROR":
            msg = str(data.get("reason") or "LNURL endpoint returned an error")
            raise PaymentError(msg)
        return data

    async def resolve_invoice(
        self,
        amount: int,
        payout_address: str,
        zap_request: dict[str, Any] | None = None,
    ) -> str:
        """Request a bolt11 invoice for ``amount`` sats from the LNURL-pay endpoint."""
        name, domain = parse_lightning_address(payout_address)
        pay_data = await self._get_json(f"https://{domain}/.well-known/lnurlp/{name}")

        callback = pay_data.get("callback")
        if not callback:
            msg = "Invalid LNURL response"
            raise PaymentError(msg)

        msats = amount * MSATS_PER_SAT
        min_sendable = pay_data.get("minSendable")
        max_sendable = pay_data.get("maxSendable")
        if (isinstance(min_sendable, int) and msats < min_sendable) or (
            isinstance(max_sendable, int) and msats > max_sendable
        ):
            msg = f"Amount {amount} sats is outside the limits of {payout_address}"
            raise PaymentError(msg)

        params = {"amount": str(msats)}
        if zap_request is not None:
            params["nostr"] = json.dumps(zap_request, separators=(",", ":"))
        invoice_data = await self._get_json(callback, params)

        invoice = invoice_data.get("pr")
        if not invoice:
            msg = "Failed to get invoice"
            raise PaymentError(msg)
        return str(invoice)

    async def pay_invoice(
        self,
        amount: int,
        payout_address: str,
        metadata: dict[str, Any] | None = None,
    ) -> PaymentResult:
        """Resolve an invoice for the address and pay it with the wallet.

        When a signer is configured the invoice request carries a signed zap
        request naming the contributor and, if given, the revision.
        """
        metadata = metadata or {}
        zap_request = None
        recipient_id = metadata.get("contributor_id")
        if self._signer is not None and recipient_id:
            zap_request = await self._signer.sign_event(
                build_zap_request(
                    amount,
                    recipient_id,
                    revision_id=metadata.get("revision_id"),
                    comment=metadata.get("comment", ""),
                    relays=self._relays,
                )
            )

        invoice = await self.resolve_invoice(amount, payout_address, zap_request)
        preimage = await self._wallet.pay_invoice(invoice)
        logger.debug("Paid invoice for %d sats to %s", amount, payout_address)
        return PaymentResult(success=True, preimage=preimage)

"""Error types raised for caller-contract violations and transport failures."""

from __future__ import annotations


class FolioError(Exception):
    """Base class for all folio errors."""


class SplitRequestError(FolioError, ValueError):
    """A revenue split was requested with an invalid amount or contributor set."""


class PaymentError(FolioError):
    """A payment transport could not obtain or pay an invoice."""

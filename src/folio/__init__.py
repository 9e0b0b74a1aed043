"""Version history, line diffs and weighted revenue splits for long-form articles."""

from folio.contributions import (
    calculate_contribution_weight,
    calculate_contribution_weights,
    contributors_from_history,
)
from folio.diff import compute_diff, get_diff_stats
from folio.history import assemble, fetch_version_history
from folio.payments.splitter import split_and_send

__all__ = [
    "assemble",
    "calculate_contribution_weight",
    "calculate_contribution_weights",
    "compute_diff",
    "contributors_from_history",
    "fetch_version_history",
    "get_diff_stats",
    "split_and_send",
]

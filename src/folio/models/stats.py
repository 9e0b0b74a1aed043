"""Engagement statistics model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class EngagementStats(BaseModel):
    """Engagement events for one revision, grouped by type."""

    zaps: list[dict[str, Any]] = Field(default_factory=list)
    reactions: list[dict[str, Any]] = Field(default_factory=list)
    reposts: list[dict[str, Any]] = Field(default_factory=list)
    comments: list[dict[str, Any]] = Field(default_factory=list)
    total_zap_msats: int = 0
    quality_score: int = 0

    @property
    def total_zap_sats(self) -> int:
        return self.total_zap_msats // 1000

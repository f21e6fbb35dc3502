"""Allotment policy: thresholds the matching engine is constructed with."""

from __future__ import annotations

from dataclasses import dataclass

from fundlink.core.config import Settings, settings as default_settings


@dataclass(frozen=True)
class AllotmentPolicy:
    min_investors_for_allotment: int = 5
    max_refresh_count: int = 3
    refresh_cooldown_hours: int = 24
    ai_min_count: int = 1
    ai_max_count: int = 20
    ai_default_count: int = 5

    def __post_init__(self) -> None:
        if self.min_investors_for_allotment < 1:
            raise ValueError("min_investors_for_allotment must be >= 1")
        if self.max_refresh_count < 0:
            raise ValueError("max_refresh_count must be >= 0")
        if self.ai_min_count < 1 or self.ai_max_count < self.ai_min_count:
            raise ValueError("AI match count bounds are inconsistent")

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> AllotmentPolicy:
        s = s or default_settings
        return cls(
            min_investors_for_allotment=s.MIN_INVESTORS_FOR_ALLOTMENT,
            max_refresh_count=s.MAX_REFRESH_COUNT,
            refresh_cooldown_hours=s.REFRESH_COOLDOWN_HOURS,
            ai_min_count=s.AI_MATCH_MIN_COUNT,
            ai_max_count=s.AI_MATCH_MAX_COUNT,
            ai_default_count=s.AI_MATCH_DEFAULT_COUNT,
        )

    def clamp_ai_count(self, requested: int | None) -> int:
        """Clamp a requested AI candidate count into [ai_min_count, ai_max_count]."""
        if requested is None:
            requested = self.ai_default_count
        return min(max(requested, self.ai_min_count), self.ai_max_count)

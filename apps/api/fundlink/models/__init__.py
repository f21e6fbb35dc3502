"""SQLAlchemy models package: import all models so Base.metadata is populated."""

from fundlink.models.base import BaseModel, TimestampedModel
from fundlink.models.enums import (
    AllotmentMethod,
    FundingRequestStatus,
    FundingStage,
    MatchStatus,
    NotificationPriority,
    NotificationType,
    PartyType,
    RelatedEntityType,
    UserRole,
)
from fundlink.models.funding import FundingRequest
from fundlink.models.matching import FounderInvestorMatch
from fundlink.models.notifications import Notification
from fundlink.models.profiles import Founder, Investor

__all__ = [
    "AllotmentMethod",
    "BaseModel",
    "Founder",
    "FounderInvestorMatch",
    "FundingRequest",
    "FundingRequestStatus",
    "FundingStage",
    "Investor",
    "MatchStatus",
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "PartyType",
    "RelatedEntityType",
    "TimestampedModel",
    "UserRole",
]

"""PostgreSQL native enums for all domain models."""

import enum


# ── Identity ─────────────────────────────────────────────────────────────────


class UserRole(str, enum.Enum):
    FOUNDER = "founder"
    INVESTOR = "investor"
    ADMIN = "admin"


# ── Funding requests ─────────────────────────────────────────────────────────


class FundingStage(str, enum.Enum):
    PRE_SEED = "Pre-Seed"
    SEED = "Seed"
    SERIES_A = "Series A"
    SERIES_B = "Series B"
    SERIES_C = "Series C"
    SERIES_D_PLUS = "Series D+"
    BRIDGE = "Bridge/Convertible"
    GROWTH = "Growth/Late Stage"


class FundingRequestStatus(str, enum.Enum):
    OPEN = "open"
    ALLOTTED = "allotted"
    CLOSED = "closed"


class AllotmentMethod(str, enum.Enum):
    MANUAL = "manual"
    AI = "ai"


# ── Matching ─────────────────────────────────────────────────────────────────


class MatchStatus(str, enum.Enum):
    ACTIVE = "active"
    CONTACTED = "contacted"
    INTERESTED = "interested"
    DECLINED = "declined"
    FUNDED = "funded"


# ── Notifications ────────────────────────────────────────────────────────────


class NotificationType(str, enum.Enum):
    FUNDING_ALLOTTED = "funding_allotted"
    INVESTORS_ASSIGNED = "investors_assigned"
    FUNDING_REFRESHED = "funding_refreshed"
    FUNDING_REQUEST_CREATED = "funding_request_created"
    FUNDING_REQUEST_CLOSED = "funding_request_closed"
    FUNDING_REQUEST_DELETED = "funding_request_deleted"
    MATCH_STATUS_CHANGED = "match_status_changed"


class NotificationPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class PartyType(str, enum.Enum):
    """Who sent or receives a notification."""

    FOUNDER = "founder"
    INVESTOR = "investor"
    ADMIN = "admin"
    SYSTEM = "system"


class RelatedEntityType(str, enum.Enum):
    FUNDING_REQUEST = "funding_request"
    MATCH = "match"

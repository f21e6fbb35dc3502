"""Acting party: the authenticated user resolved once to its profile variant."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Literal

from fundlink.core.errors import NotFoundError, PermissionDeniedError
from fundlink.models.enums import PartyType, UserRole
from fundlink.modules.matching.domain import FounderProfile, FundingRequestRecord, InvestorProfile
from fundlink.modules.matching.ports import Directory
from fundlink.schemas.auth import CurrentUser


@dataclass(frozen=True)
class FounderParty:
    founder: FounderProfile
    kind: Literal["founder"] = "founder"

    @property
    def id(self) -> uuid.UUID:
        return self.founder.id

    @property
    def party_type(self) -> PartyType:
        return PartyType.FOUNDER


@dataclass(frozen=True)
class InvestorParty:
    investor: InvestorProfile
    kind: Literal["investor"] = "investor"

    @property
    def id(self) -> uuid.UUID:
        return self.investor.id

    @property
    def party_type(self) -> PartyType:
        return PartyType.INVESTOR


@dataclass(frozen=True)
class AdminParty:
    admin_id: uuid.UUID
    kind: Literal["admin"] = "admin"

    @property
    def id(self) -> uuid.UUID:
        return self.admin_id

    @property
    def party_type(self) -> PartyType:
        return PartyType.ADMIN


Party = FounderParty | InvestorParty | AdminParty


async def resolve_party(user: CurrentUser, directory: Directory) -> Party:
    """Look up the profile behind ``user`` and wrap it in its Party variant."""
    if user.role == UserRole.ADMIN:
        return AdminParty(admin_id=user.user_id)

    if user.role == UserRole.FOUNDER:
        founder = await directory.find_founder_by_id(user.user_id)
        if founder is None:
            raise NotFoundError("Founder profile not found")
        return FounderParty(founder=founder)

    investor = await directory.find_investor_by_id(user.user_id)
    if investor is None:
        raise NotFoundError("Investor profile not found")
    return InvestorParty(investor=investor)


def is_admin(party: Party) -> bool:
    return isinstance(party, AdminParty)


def owns(party: Party, funding_request: FundingRequestRecord) -> bool:
    return isinstance(party, FounderParty) and party.id == funding_request.founder_id


def ensure_owner_or_admin(party: Party, funding_request: FundingRequestRecord) -> None:
    if not (is_admin(party) or owns(party, funding_request)):
        raise PermissionDeniedError("Funding request not found or access denied")


def ensure_admin(party: Party) -> None:
    if not is_admin(party):
        raise PermissionDeniedError("Only admins can perform this action")

"""Profile models: Founder (company seeking capital) and Investor."""

from typing import Any

from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fundlink.models.base import BaseModel


class Founder(BaseModel):
    __tablename__ = "founders"
    __table_args__ = (
        Index("ix_founders_email", "email", unique=True),
    )

    company_name: Mapped[str] = mapped_column(String(300), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(200))
    address: Mapped[str | None] = mapped_column(String(500))

    def __repr__(self) -> str:
        return f"<Founder(id={self.id}, company={self.company_name!r})>"


class Investor(BaseModel):
    __tablename__ = "investors"
    __table_args__ = (
        Index("ix_investors_email", "email", unique=True),
        Index("ix_investors_is_verified", "is_verified"),
    )

    full_name: Mapped[str] = mapped_column(String(300), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(40))
    linkedin: Mapped[str | None] = mapped_column(String(500))
    company: Mapped[str | None] = mapped_column(String(300))
    designation: Mapped[str | None] = mapped_column(String(200))
    bio: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(300))
    photo_url: Mapped[str | None] = mapped_column(String(1000))
    investment_interests: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    amount_range: Mapped[str | None] = mapped_column(String(50))
    # [{"company_name", "industry", "stage", "amount_invested", "year"}, ...]
    previous_investments: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list, server_default="[]"
    )
    notable_exits: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    is_verified: Mapped[bool] = mapped_column(
        default=False, server_default="false", nullable=False
    )

    def __repr__(self) -> str:
        return f"<Investor(id={self.id}, name={self.full_name!r}, verified={self.is_verified})>"

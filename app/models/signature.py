"""Investor signature ledger feeding the property signing status."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


class InvestorSignature(Base):
    """Record that an investor signed one agreement for one property.

    Captures:
    - Who signed (investor_id) what (template_id, template_version) for which property
    - A digest of the submitted signature payload (signature_hash)
    - Client fingerprint (ip_address, user_agent)
    """

    __tablename__ = "investor_signatures"
    __table_args__ = (
        UniqueConstraint(
            "investor_id",
            "template_id",
            "property_id",
            name="uq_investor_signatures_investor_template_property",
        ),
        Index("ix_investor_signatures_property", "property_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    investor_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("agreement_templates.id"), nullable=False
    )
    property_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    template_version: Mapped[int] = mapped_column(Integer, nullable=False)

    signature_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    consent_given: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    ip_address: Mapped[str | None] = mapped_column(String(45))  # IPv6 max length
    user_agent: Mapped[str | None] = mapped_column(String(500))

    signed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    template = relationship("AgreementTemplate")

"""Agreement template models for co-ownership legal documents."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


class AgreementTemplateType(enum.Enum):
    co_ownership = "co_ownership"
    power_of_attorney = "power_of_attorney"
    jop_declaration = "jop_declaration"


class TemplateLanguage(enum.Enum):
    en = "en"
    ar = "ar"


class AgreementTemplate(Base):
    """Bilingual agreement text with a SHA-256 hash per language.

    ``content_hash`` / ``content_hash_arabic`` always describe the content
    they sit next to; ``version`` increases by one on every content change.
    """

    __tablename__ = "agreement_templates"
    __table_args__ = (
        Index("ix_agreement_templates_type_active", "template_type", "is_active"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    template_type: Mapped[AgreementTemplateType] = mapped_column(
        Enum(AgreementTemplateType, name="agreement_template_type"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    content_arabic: Mapped[str] = mapped_column(Text, nullable=False)
    content_hash_arabic: Mapped[str] = mapped_column(String(64), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Pre-approved PDF kept alongside the text; never rendered here.
    template_pdf_path: Mapped[str | None] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<AgreementTemplate {self.template_type.value}: {self.name} v{self.version}>"

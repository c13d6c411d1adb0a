"""Pydantic schemas for agreement templates."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.agreement import AgreementTemplateType, TemplateLanguage


class AgreementTemplateCreate(BaseModel):
    """Schema for creating an agreement template."""

    template_type: AgreementTemplateType
    name: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=10)
    content_arabic: str = Field(..., min_length=10)
    is_active: bool = True
    template_pdf_path: str | None = Field(None, max_length=500)


class AgreementTemplateContentUpdate(BaseModel):
    """Replace the text of one language; emptiness is checked by the service."""

    content: str
    language: TemplateLanguage = TemplateLanguage.en


class AgreementTemplateActiveUpdate(BaseModel):
    is_active: bool


class AgreementTemplateRead(BaseModel):
    """Schema for reading an agreement template."""

    id: UUID
    template_type: AgreementTemplateType
    name: str
    content: str
    content_hash: str
    content_arabic: str
    content_hash_arabic: str
    version: int
    is_active: bool
    template_pdf_path: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AgreementTemplateIntegrity(BaseModel):
    template_id: UUID
    template_type: AgreementTemplateType
    version: int
    content_hash_valid: bool
    content_hash_arabic_valid: bool
    is_valid: bool

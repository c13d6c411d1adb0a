"""Pydantic schemas for investor signatures and signing status."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.agreement import AgreementTemplateType


class InvestorSignatureCreate(BaseModel):
    investor_id: UUID
    template_id: UUID
    property_id: UUID
    signature_data: str = Field(..., min_length=10)
    consent_given: bool = True
    ip_address: str | None = Field(None, max_length=45)
    user_agent: str | None = None


class InvestorSignatureRead(BaseModel):
    id: UUID
    investor_id: UUID
    template_id: UUID
    property_id: UUID
    template_version: int
    signature_hash: str
    consent_given: bool
    ip_address: str | None
    user_agent: str | None
    signed_at: datetime

    model_config = {"from_attributes": True}


class DocumentSignatureStatus(BaseModel):
    template_id: UUID
    template_name: str
    document_type: AgreementTemplateType
    signed_count: int
    total_required: int
    is_complete: bool
    signed_investor_ids: list[UUID] = []


class PropertySignatureStatus(BaseModel):
    property_id: UUID
    documents: list[DocumentSignatureStatus]
    all_complete: bool

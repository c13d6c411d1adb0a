from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.signature import (
    InvestorSignatureCreate,
    InvestorSignatureRead,
    PropertySignatureStatus,
)
from app.services import signatures as signature_service

router = APIRouter(prefix="/signatures", tags=["signatures"])


@router.post(
    "",
    response_model=InvestorSignatureRead,
    status_code=status.HTTP_201_CREATED,
)
def record_signature(payload: InvestorSignatureCreate, db: Session = Depends(get_db)):
    return signature_service.investor_signatures.record(db, payload)


@router.get("/investor/{investor_id}", response_model=list[InvestorSignatureRead])
def list_investor_signatures(
    investor_id: UUID,
    property_id: UUID | None = None,
    db: Session = Depends(get_db),
):
    return signature_service.investor_signatures.list_for_investor(
        db, str(investor_id), str(property_id) if property_id else None
    )


@router.get("/property/{property_id}/status", response_model=PropertySignatureStatus)
def get_property_signature_status(property_id: UUID, db: Session = Depends(get_db)):
    return signature_service.investor_signatures.property_status(db, str(property_id))

"""Service for investor signatures and per-property signing status."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.metrics import SIGNATURES_RECORDED
from app.models.signature import InvestorSignature
from app.schemas.signature import InvestorSignatureCreate
from app.services.agreement_templates import agreement_templates
from app.services.common import coerce_uuid, sha256_hex

logger = logging.getLogger(__name__)


class InvestorSignatures:
    """Service for recording signatures and projecting signing progress."""

    @staticmethod
    def get_existing(
        db: Session, investor_id, template_id, property_id
    ) -> InvestorSignature | None:
        return (
            db.query(InvestorSignature)
            .filter(InvestorSignature.investor_id == coerce_uuid(investor_id))
            .filter(InvestorSignature.template_id == coerce_uuid(template_id))
            .filter(InvestorSignature.property_id == coerce_uuid(property_id))
            .first()
        )

    @staticmethod
    def record(db: Session, payload: InvestorSignatureCreate) -> InvestorSignature:
        """Record that an investor signed a template for a property.

        Args:
            db: Database session
            payload: Signature data; only a digest of ``signature_data`` is kept

        Returns:
            Created InvestorSignature

        Raises:
            HTTPException: 404 unknown template, 400 inactive template,
                409 duplicate signature or template failing hash verification
        """
        template = agreement_templates.get(db, str(payload.template_id))
        if not template.is_active:
            raise HTTPException(status_code=400, detail="Agreement template is not active")
        if not agreement_templates.ensure_integrity(template):
            raise HTTPException(
                status_code=409, detail="Agreement template failed integrity verification"
            )

        existing = InvestorSignatures.get_existing(
            db, payload.investor_id, payload.template_id, payload.property_id
        )
        if existing:
            raise HTTPException(
                status_code=409, detail="Investor has already signed this document"
            )

        signature = InvestorSignature(
            investor_id=payload.investor_id,
            template_id=template.id,
            property_id=payload.property_id,
            template_version=template.version,
            signature_hash=sha256_hex(payload.signature_data),
            consent_given=payload.consent_given,
            ip_address=payload.ip_address,
            user_agent=payload.user_agent[:500] if payload.user_agent else None,
            signed_at=datetime.now(UTC),
        )
        db.add(signature)
        try:
            db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent submission of the same signature.
            db.rollback()
            raise HTTPException(
                status_code=409, detail="Investor has already signed this document"
            ) from exc
        db.refresh(signature)
        SIGNATURES_RECORDED.labels(template_type=template.template_type.value).inc()
        logger.info(
            "Investor %s signed %s v%s for property %s",
            signature.investor_id,
            template.template_type.value,
            signature.template_version,
            signature.property_id,
        )
        return signature

    @staticmethod
    def list_for_investor(
        db: Session, investor_id: str, property_id: str | None = None
    ) -> list[InvestorSignature]:
        query = db.query(InvestorSignature).filter(
            InvestorSignature.investor_id == coerce_uuid(investor_id)
        )
        if property_id:
            query = query.filter(InvestorSignature.property_id == coerce_uuid(property_id))
        return query.order_by(InvestorSignature.signed_at.desc()).all()

    @staticmethod
    def property_status(
        db: Session, property_id: str, total_required: int | None = None
    ) -> dict:
        """Build the multi-party signing status of a property.

        One entry per active template; ``signed_count`` counts distinct
        investors. With no active templates there is nothing left to sign, so the
        property is complete.
        """
        property_uuid = coerce_uuid(property_id)
        required = (
            settings.signers_required_per_document if total_required is None else total_required
        )
        rows = (
            db.query(InvestorSignature.template_id, InvestorSignature.investor_id)
            .filter(InvestorSignature.property_id == property_uuid)
            .all()
        )
        signers_by_template: dict = {}
        for template_id, investor_id in rows:
            signers_by_template.setdefault(template_id, set()).add(investor_id)

        documents = []
        for template in agreement_templates.list_active(db):
            signers = signers_by_template.get(template.id, set())
            documents.append(
                {
                    "template_id": template.id,
                    "template_name": template.name,
                    "document_type": template.template_type,
                    "signed_count": len(signers),
                    "total_required": required,
                    "is_complete": len(signers) >= required,
                    "signed_investor_ids": sorted(signers, key=str),
                }
            )
        return {
            "property_id": property_uuid,
            "documents": documents,
            "all_complete": all(doc["is_complete"] for doc in documents),
        }


investor_signatures = InvestorSignatures()

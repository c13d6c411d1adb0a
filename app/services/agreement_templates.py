"""Service layer for agreement template versioning and tamper evidence."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

from fastapi import HTTPException
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.metrics import TEMPLATE_EDITS, TEMPLATE_INTEGRITY_FAILURES
from app.models.agreement import AgreementTemplate, AgreementTemplateType, TemplateLanguage
from app.schemas.agreement import AgreementTemplateCreate
from app.services.common import apply_ordering, apply_pagination, get_or_404, sha256_hex
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{([A-Z][A-Z0-9_]*)\}")

# language -> (content attribute, hash attribute)
_LANGUAGE_FIELDS = {
    TemplateLanguage.en: ("content", "content_hash"),
    TemplateLanguage.ar: ("content_arabic", "content_hash_arabic"),
}


def content_hash(text: str) -> str:
    return sha256_hex(text)


def placeholders(text: str | None) -> list[str]:
    """Return the sorted placeholder token names used in ``text``."""
    if not text:
        return []
    return sorted(set(PLACEHOLDER_RE.findall(text)))


def verify_integrity(template: AgreementTemplate) -> bool:
    """True when both stored hashes match the stored content.

    The Arabic hash is only checked when Arabic content is present.
    """
    if content_hash(template.content or "") != template.content_hash:
        return False
    if template.content_arabic:
        return content_hash(template.content_arabic) == template.content_hash_arabic
    return True


class AgreementTemplateService(ListResponseMixin):
    """Service for managing agreement templates."""

    def list(
        self,
        db: Session,
        template_type: AgreementTemplateType | None = None,
        is_active: bool | None = None,
        order_by: str = "template_type",
        order_dir: str = "asc",
        limit: int = 100,
        offset: int = 0,
    ) -> list[AgreementTemplate]:
        """List agreement templates with filters (admin view)."""
        query = db.query(AgreementTemplate)

        if template_type:
            query = query.filter(AgreementTemplate.template_type == template_type)
        if is_active is not None:
            query = query.filter(AgreementTemplate.is_active == is_active)

        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {
                "template_type": AgreementTemplate.template_type,
                "name": AgreementTemplate.name,
                "version": AgreementTemplate.version,
                "created_at": AgreementTemplate.created_at,
                "updated_at": AgreementTemplate.updated_at,
            },
        )
        return apply_pagination(query, limit, offset).all()

    def list_active(
        self, db: Session, template_type: AgreementTemplateType | None = None
    ) -> list[AgreementTemplate]:
        query = db.query(AgreementTemplate).filter(AgreementTemplate.is_active.is_(True))
        if template_type:
            query = query.filter(AgreementTemplate.template_type == template_type)
        return query.order_by(
            AgreementTemplate.template_type.asc(), AgreementTemplate.created_at.asc()
        ).all()

    def get(self, db: Session, template_id: str) -> AgreementTemplate:
        return get_or_404(db, AgreementTemplate, template_id, "Agreement template not found")

    def get_active_by_type(
        self, db: Session, template_type: AgreementTemplateType
    ) -> AgreementTemplate | None:
        return (
            db.query(AgreementTemplate)
            .filter(
                and_(
                    AgreementTemplate.template_type == template_type,
                    AgreementTemplate.is_active.is_(True),
                )
            )
            .order_by(AgreementTemplate.version.desc())
            .first()
        )

    def create(self, db: Session, payload: AgreementTemplateCreate) -> AgreementTemplate:
        now = datetime.now(UTC)
        template = AgreementTemplate(
            template_type=payload.template_type,
            name=payload.name.strip(),
            content=payload.content,
            content_hash=content_hash(payload.content),
            content_arabic=payload.content_arabic,
            content_hash_arabic=content_hash(payload.content_arabic),
            version=1,
            is_active=payload.is_active,
            template_pdf_path=payload.template_pdf_path,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(template)
            db.flush()
            if template.is_active:
                self._deactivate_siblings(db, template)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create %s agreement template", payload.template_type.value)
            raise
        db.refresh(template)
        logger.info(
            "Created agreement template %s (%s) v%s",
            template.id,
            template.template_type.value,
            template.version,
        )
        return template

    def edit_content(
        self,
        db: Session,
        template_id: str,
        content: str,
        language: TemplateLanguage = TemplateLanguage.en,
    ) -> AgreementTemplate:
        """Replace the content of one language and bump the version.

        Identical content with a matching stored hash is a no-op: the record
        is returned untouched. Anything else, a repair of tampered text
        included, is rewritten.
        Content, hash, version and timestamp are committed together; on
        failure the session is rolled back and the previous version stays.
        """
        if content is None or not content.strip():
            raise HTTPException(status_code=400, detail="Template content must not be empty")
        template = self.get(db, template_id)
        content_field, hash_field = _LANGUAGE_FIELDS[language]

        new_hash = content_hash(content)
        if new_hash == getattr(template, hash_field) and content == getattr(
            template, content_field
        ):
            logger.debug(
                "Unchanged %s content for agreement template %s; version stays %s",
                language.value,
                template.id,
                template.version,
            )
            return template

        previous_version = template.version
        try:
            setattr(template, content_field, content)
            setattr(template, hash_field, new_hash)
            template.version = previous_version + 1
            template.updated_at = datetime.now(UTC)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to update agreement template %s", template_id)
            raise
        db.refresh(template)
        TEMPLATE_EDITS.labels(
            template_type=template.template_type.value, language=language.value
        ).inc()
        logger.info(
            "Agreement template %s %s content updated: v%s -> v%s",
            template.id,
            language.value,
            previous_version,
            template.version,
        )
        return template

    def set_active(self, db: Session, template_id: str, is_active: bool) -> AgreementTemplate:
        template = self.get(db, template_id)
        if template.is_active == is_active:
            return template
        try:
            template.is_active = is_active
            template.updated_at = datetime.now(UTC)
            if is_active:
                self._deactivate_siblings(db, template)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to change active flag of agreement template %s", template_id)
            raise
        db.refresh(template)
        return template

    def integrity_report(self, db: Session, template_id: str) -> dict:
        template = self.get(db, template_id)
        english_valid = content_hash(template.content or "") == template.content_hash
        arabic_valid = (
            not template.content_arabic
            or content_hash(template.content_arabic) == template.content_hash_arabic
        )
        is_valid = english_valid and arabic_valid
        if not is_valid:
            self._report_integrity_failure(template)
        return {
            "template_id": template.id,
            "template_type": template.template_type,
            "version": template.version,
            "content_hash_valid": english_valid,
            "content_hash_arabic_valid": arabic_valid,
            "is_valid": is_valid,
        }

    def ensure_integrity(self, template: AgreementTemplate) -> bool:
        """Verify a template, logging and counting a mismatch as a warning."""
        if verify_integrity(template):
            return True
        self._report_integrity_failure(template)
        return False

    def _report_integrity_failure(self, template: AgreementTemplate) -> None:
        TEMPLATE_INTEGRITY_FAILURES.labels(template_type=template.template_type.value).inc()
        logger.warning(
            "Agreement template %s (%s v%s) failed hash verification",
            template.id,
            template.template_type.value,
            template.version,
        )

    def _deactivate_siblings(self, db: Session, template: AgreementTemplate) -> None:
        if not settings.enforce_single_active_template:
            return
        db.query(AgreementTemplate).filter(
            and_(
                AgreementTemplate.template_type == template.template_type,
                AgreementTemplate.id != template.id,
                AgreementTemplate.is_active.is_(True),
            )
        ).update({"is_active": False})


agreement_templates = AgreementTemplateService()

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.agreement import AgreementTemplateType
from app.schemas.agreement import (
    AgreementTemplateActiveUpdate,
    AgreementTemplateContentUpdate,
    AgreementTemplateCreate,
    AgreementTemplateIntegrity,
    AgreementTemplateRead,
)
from app.schemas.common import ListResponse
from app.services import agreement_templates as template_service

router = APIRouter(prefix="/templates", tags=["agreement-templates"])
admin_router = APIRouter(prefix="/admin/templates", tags=["admin-agreement-templates"])


@router.get("", response_model=list[AgreementTemplateRead])
def list_active_templates(
    template_type: AgreementTemplateType | None = None,
    db: Session = Depends(get_db),
):
    return template_service.agreement_templates.list_active(db, template_type)


@router.get("/{template_id}", response_model=AgreementTemplateRead)
def get_template(template_id: str, db: Session = Depends(get_db)):
    return template_service.agreement_templates.get(db, template_id)


@admin_router.get("", response_model=ListResponse[AgreementTemplateRead])
def list_templates(
    template_type: AgreementTemplateType | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="template_type"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return template_service.agreement_templates.list_response(
        db,
        template_type=template_type,
        is_active=is_active,
        order_by=order_by,
        order_dir=order_dir,
        limit=limit,
        offset=offset,
    )


@admin_router.post(
    "",
    response_model=AgreementTemplateRead,
    status_code=status.HTTP_201_CREATED,
)
def create_template(payload: AgreementTemplateCreate, db: Session = Depends(get_db)):
    return template_service.agreement_templates.create(db, payload)


@admin_router.put("/{template_id}", response_model=AgreementTemplateRead)
def edit_template_content(
    template_id: str,
    payload: AgreementTemplateContentUpdate,
    db: Session = Depends(get_db),
):
    return template_service.agreement_templates.edit_content(
        db, template_id, payload.content, payload.language
    )


@admin_router.patch("/{template_id}/active", response_model=AgreementTemplateRead)
def set_template_active(
    template_id: str,
    payload: AgreementTemplateActiveUpdate,
    db: Session = Depends(get_db),
):
    return template_service.agreement_templates.set_active(db, template_id, payload.is_active)


@admin_router.get("/{template_id}/integrity", response_model=AgreementTemplateIntegrity)
def verify_template(template_id: str, db: Session = Depends(get_db)):
    return template_service.agreement_templates.integrity_report(db, template_id)

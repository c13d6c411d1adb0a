"""Seed the canonical co-ownership agreement templates."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.agreement import AgreementTemplate, AgreementTemplateType
from app.services.agreement_templates import content_hash

logger = logging.getLogger(__name__)

CO_OWNERSHIP_EN = """CO-OWNERSHIP AGREEMENT

This Co-Ownership Agreement is entered into on {AGREEMENT_DATE} between the co-owners listed in Schedule 1 in respect of the property known as {PROPERTY_TITLE}, located at {PROPERTY_LOCATION}, Dubai, United Arab Emirates.

1. OWNERSHIP SHARES
Each co-owner holds an undivided share in the property as set out in Schedule 1. {INVESTOR_NAME} holds {SHARE_PERCENTAGE}% of the property, acquired for AED {PURCHASE_PRICE}.

2. MANAGEMENT AND USE
Decisions concerning sale, lease or material alteration of the property require the written consent of co-owners holding more than fifty percent (50%) of the shares.

3. COSTS AND INCOME
Service charges, maintenance costs and rental income are shared pro rata to each co-owner's share.

4. TRANSFER OF SHARES
A co-owner wishing to transfer a share shall first offer it to the other co-owners on the same terms for a period of thirty (30) days.

5. REGISTRATION
The co-owners agree that this agreement and the resulting title shall be registered with the Dubai Land Department (DLD).

6. GOVERNING LAW
This agreement is governed by the laws of the Emirate of Dubai and the federal laws of the United Arab Emirates.

Signed by {INVESTOR_NAME} (Passport No. {PASSPORT_NUMBER}) on {SIGNATURE_DATE}."""

CO_OWNERSHIP_AR = """اتفاقية الملكية المشتركة

أبرمت اتفاقية الملكية المشتركة هذه بتاريخ {AGREEMENT_DATE} بين المالكين المشتركين المدرجين في الجدول رقم 1 بشأن العقار المعروف باسم {PROPERTY_TITLE} والكائن في {PROPERTY_LOCATION}، دبي، الإمارات العربية المتحدة.

1. حصص الملكية
يملك كل مالك مشترك حصة شائعة في العقار وفقاً للجدول رقم 1. يملك {INVESTOR_NAME} نسبة {SHARE_PERCENTAGE}% من العقار بقيمة {PURCHASE_PRICE} درهم إماراتي.

2. الإدارة والاستخدام
تتطلب القرارات المتعلقة ببيع العقار أو تأجيره أو تعديله جوهرياً موافقة خطية من المالكين الذين يملكون أكثر من خمسين بالمائة (50%) من الحصص.

3. التكاليف والدخل
يتم تقاسم رسوم الخدمات وتكاليف الصيانة والدخل الإيجاري بنسبة حصة كل مالك.

4. نقل الحصص
على المالك الراغب في نقل حصته أن يعرضها أولاً على باقي المالكين بنفس الشروط لمدة ثلاثين (30) يوماً.

5. التسجيل
يوافق المالكون على تسجيل هذه الاتفاقية وسند الملكية الناتج عنها لدى دائرة الأراضي والأملاك في دبي.

6. القانون الواجب التطبيق
تخضع هذه الاتفاقية لقوانين إمارة دبي والقوانين الاتحادية لدولة الإمارات العربية المتحدة.

وقع عليها {INVESTOR_NAME} (جواز سفر رقم {PASSPORT_NUMBER}) بتاريخ {SIGNATURE_DATE}."""

POWER_OF_ATTORNEY_EN = """SPECIAL POWER OF ATTORNEY

I, {INVESTOR_NAME}, holder of Passport No. {PASSPORT_NUMBER} and Emirates ID {EMIRATES_ID}, hereby appoint {ATTORNEY_NAME} as my attorney to act on my behalf in respect of my share in the property known as {PROPERTY_TITLE}, located at {PROPERTY_LOCATION}.

The attorney is authorised to:
1. Appear before the Dubai Land Department and sign all documents required to register my share;
2. Pay and receive fees, charges and deposits relating to the property;
3. Open and operate the escrow account {ESCROW_IBAN} for the purposes of this transaction.

This power of attorney remains valid until {EXPIRY_DATE} unless revoked earlier in writing.

Signed on {SIGNATURE_DATE}."""

POWER_OF_ATTORNEY_AR = """وكالة خاصة

أنا {INVESTOR_NAME}، حامل جواز السفر رقم {PASSPORT_NUMBER} والهوية الإماراتية رقم {EMIRATES_ID}، أوكل بموجب هذا {ATTORNEY_NAME} للتصرف نيابة عني فيما يتعلق بحصتي في العقار المعروف باسم {PROPERTY_TITLE} والكائن في {PROPERTY_LOCATION}.

يحق للوكيل:
1. المثول أمام دائرة الأراضي والأملاك في دبي وتوقيع جميع المستندات اللازمة لتسجيل حصتي؛
2. دفع واستلام الرسوم والمصاريف والودائع المتعلقة بالعقار؛
3. فتح وإدارة حساب الضمان {ESCROW_IBAN} لأغراض هذه المعاملة.

تبقى هذه الوكالة سارية حتى {EXPIRY_DATE} ما لم تُلغَ كتابياً قبل ذلك.

حررت بتاريخ {SIGNATURE_DATE}."""

JOP_DECLARATION_EN = """JOINT OWNERSHIP OF PROPERTY (JOP) DECLARATION

We, the undersigned co-owners of {PROPERTY_TITLE}, located at {PROPERTY_LOCATION}, declare that:

1. The property is held in joint ownership in the shares recorded in the Co-Ownership Agreement dated {AGREEMENT_DATE};
2. {INVESTOR_NAME} holds {SHARE_PERCENTAGE}% of the property;
3. The common areas and shared facilities shall be managed in accordance with the applicable Jointly Owned Property law of the Emirate of Dubai;
4. Each co-owner undertakes to pay their share of service charges as determined by the owners association.

Declared by {INVESTOR_NAME} on {SIGNATURE_DATE}."""

JOP_DECLARATION_AR = """إقرار الملكية المشتركة للعقار

نحن الموقعين أدناه، المالكين المشتركين للعقار {PROPERTY_TITLE} الكائن في {PROPERTY_LOCATION}، نقر بما يلي:

1. أن العقار مملوك ملكية مشتركة بالحصص المسجلة في اتفاقية الملكية المشتركة المؤرخة في {AGREEMENT_DATE}؛
2. أن {INVESTOR_NAME} يملك نسبة {SHARE_PERCENTAGE}% من العقار؛
3. أن تدار الأجزاء المشتركة والمرافق المشتركة وفقاً لقانون الملكية المشتركة المعمول به في إمارة دبي؛
4. أن يلتزم كل مالك بدفع حصته من رسوم الخدمات وفقاً لما تحدده جمعية الملاك.

أقر بذلك {INVESTOR_NAME} بتاريخ {SIGNATURE_DATE}."""

CANONICAL_TEMPLATES = [
    {
        "template_type": AgreementTemplateType.co_ownership,
        "name": "Co-Ownership Agreement",
        "content": CO_OWNERSHIP_EN,
        "content_arabic": CO_OWNERSHIP_AR,
    },
    {
        "template_type": AgreementTemplateType.power_of_attorney,
        "name": "Power of Attorney",
        "content": POWER_OF_ATTORNEY_EN,
        "content_arabic": POWER_OF_ATTORNEY_AR,
    },
    {
        "template_type": AgreementTemplateType.jop_declaration,
        "name": "Joint Ownership Declaration",
        "content": JOP_DECLARATION_EN,
        "content_arabic": JOP_DECLARATION_AR,
    },
]


def seed_agreement_templates(db: Session) -> int:
    """Insert the canonical templates when the table is empty.

    Returns the number of templates created; 0 when templates already exist.
    The caller owns the session and closes it.
    """
    existing = db.query(func.count(AgreementTemplate.id)).scalar() or 0
    if existing:
        logger.info("Agreement templates already present (%s); skipping seed", existing)
        return 0

    now = datetime.now(UTC)
    try:
        for data in CANONICAL_TEMPLATES:
            db.add(
                AgreementTemplate(
                    template_type=data["template_type"],
                    name=data["name"],
                    content=data["content"],
                    content_hash=content_hash(data["content"]),
                    content_arabic=data["content_arabic"],
                    content_hash_arabic=content_hash(data["content_arabic"]),
                    version=1,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
            )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to seed agreement templates")
        raise
    logger.info("Seeded %s agreement templates", len(CANONICAL_TEMPLATES))
    return len(CANONICAL_TEMPLATES)

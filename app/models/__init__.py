from app.models.agreement import (  # noqa: F401
    AgreementTemplate,
    AgreementTemplateType,
    TemplateLanguage,
)
from app.models.signature import InvestorSignature  # noqa: F401

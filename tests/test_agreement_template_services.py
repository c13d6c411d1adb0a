"""Tests for agreement template services."""

import hashlib
import uuid

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from app.models.agreement import AgreementTemplate, AgreementTemplateType, TemplateLanguage
from app.schemas.agreement import AgreementTemplateCreate
from app.services import agreement_templates
from app.services.agreement_templates import content_hash, placeholders, verify_integrity


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


# =============================================================================
# Hashing Tests
# =============================================================================


class TestContentHash:
    def test_hash_is_sha256_hex_of_utf8(self):
        assert content_hash("B") == _sha256("B")
        assert content_hash("اتفاقية") == _sha256("اتفاقية")

    def test_hash_is_exact_over_whitespace(self):
        assert content_hash("A") != content_hash("A ")

    def test_placeholders_lists_tokens_once(self):
        text = "Between {INVESTOR_NAME} and {INVESTOR_NAME} for {PROPERTY_TITLE} {lower}"
        assert placeholders(text) == ["INVESTOR_NAME", "PROPERTY_TITLE"]
        assert placeholders(None) == []


# =============================================================================
# Listing Tests
# =============================================================================


class TestAgreementTemplateList:
    def test_list_active_excludes_inactive(self, db_session, make_template):
        active = make_template(template_type=AgreementTemplateType.co_ownership)
        inactive = make_template(
            template_type=AgreementTemplateType.power_of_attorney, is_active=False
        )

        results = agreement_templates.agreement_templates.list_active(db_session)
        ids = {t.id for t in results}
        assert active.id in ids
        assert inactive.id not in ids

    def test_list_active_by_type(self, db_session, active_templates):
        results = agreement_templates.agreement_templates.list_active(
            db_session, AgreementTemplateType.jop_declaration
        )
        assert len(results) == 1
        assert results[0].template_type == AgreementTemplateType.jop_declaration

    def test_active_templates_hash_round_trip(self, db_session, active_templates):
        for template in agreement_templates.agreement_templates.list_active(db_session):
            assert _sha256(template.content) == template.content_hash
            assert _sha256(template.content_arabic) == template.content_hash_arabic

    def test_admin_list_includes_inactive(self, db_session, make_template):
        make_template(is_active=False)
        results = agreement_templates.agreement_templates.list(db_session, is_active=False)
        assert results
        assert all(not t.is_active for t in results)

    def test_admin_list_rejects_unknown_order_column(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            agreement_templates.agreement_templates.list(db_session, order_by="content")
        assert exc_info.value.status_code == 400


# =============================================================================
# Get Tests
# =============================================================================


class TestAgreementTemplateGet:
    def test_get_existing(self, db_session, template):
        assert agreement_templates.agreement_templates.get(db_session, str(template.id)).id == template.id

    def test_get_unknown_raises_404(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            agreement_templates.agreement_templates.get(db_session, str(uuid.uuid4()))
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Agreement template not found"

    def test_get_malformed_id_raises_404(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            agreement_templates.agreement_templates.get(db_session, "not-a-uuid")
        assert exc_info.value.status_code == 404


# =============================================================================
# Create Tests
# =============================================================================


class TestAgreementTemplateCreate:
    def test_create_starts_at_version_one_with_hashes(self, db_session):
        payload = AgreementTemplateCreate(
            template_type=AgreementTemplateType.power_of_attorney,
            name="Power of Attorney",
            content="I, {INVESTOR_NAME}, appoint {ATTORNEY_NAME}.",
            content_arabic="أنا {INVESTOR_NAME} أوكل {ATTORNEY_NAME}.",
        )
        created = agreement_templates.agreement_templates.create(db_session, payload)

        assert created.version == 1
        assert created.is_active is True
        assert created.content_hash == _sha256(payload.content)
        assert created.content_hash_arabic == _sha256(payload.content_arabic)
        assert verify_integrity(created)

    def test_create_active_deactivates_same_type(self, db_session, make_template):
        old = make_template(template_type=AgreementTemplateType.co_ownership)
        other_type = make_template(template_type=AgreementTemplateType.jop_declaration)

        payload = AgreementTemplateCreate(
            template_type=AgreementTemplateType.co_ownership,
            name="Co-Ownership Agreement v2",
            content="New co-ownership wording for {PROPERTY_TITLE}.",
            content_arabic="صيغة جديدة لاتفاقية الملكية المشتركة.",
        )
        created = agreement_templates.agreement_templates.create(db_session, payload)

        db_session.refresh(old)
        db_session.refresh(other_type)
        assert created.is_active is True
        assert old.is_active is False
        assert other_type.is_active is True

    def test_create_requires_minimum_content(self):
        with pytest.raises(ValueError):
            AgreementTemplateCreate(
                template_type=AgreementTemplateType.co_ownership,
                name="Too short",
                content="short",
                content_arabic="قصير",
            )


# =============================================================================
# Edit Tests
# =============================================================================


class TestAgreementTemplateEdit:
    def test_edit_bumps_version_and_rehashes(self, db_session, template):
        assert template.version == 1
        assert template.content == "A"

        updated = agreement_templates.agreement_templates.edit_content(
            db_session, str(template.id), "B"
        )

        assert updated.version == 2
        assert updated.content == "B"
        assert updated.content_hash == _sha256("B")
        assert verify_integrity(updated)

    def test_edit_with_identical_content_keeps_version(self, db_session, template):
        before_updated_at = template.updated_at

        updated = agreement_templates.agreement_templates.edit_content(
            db_session, str(template.id), "A"
        )

        assert updated.version == 1
        assert updated.content_hash == _sha256("A")
        assert updated.updated_at == before_updated_at

    def test_each_change_increments_by_one(self, db_session, template):
        versions = []
        for text in ["B", "C", "C", "D"]:
            updated = agreement_templates.agreement_templates.edit_content(
                db_session, str(template.id), text
            )
            versions.append(updated.version)
            assert verify_integrity(updated)
        assert versions == [2, 3, 3, 4]

    def test_edit_arabic_only_touches_arabic_fields(self, db_session, template):
        english_hash = template.content_hash

        updated = agreement_templates.agreement_templates.edit_content(
            db_session, str(template.id), "نص جديد", TemplateLanguage.ar
        )

        assert updated.version == 2
        assert updated.content == "A"
        assert updated.content_hash == english_hash
        assert updated.content_arabic == "نص جديد"
        assert updated.content_hash_arabic == _sha256("نص جديد")
        assert verify_integrity(updated)

    def test_identical_arabic_content_is_noop(self, db_session, template):
        updated = agreement_templates.agreement_templates.edit_content(
            db_session, str(template.id), template.content_arabic, TemplateLanguage.ar
        )
        assert updated.version == 1

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_edit_rejects_empty_content(self, db_session, template, content):
        with pytest.raises(HTTPException) as exc_info:
            agreement_templates.agreement_templates.edit_content(
                db_session, str(template.id), content
            )
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Template content must not be empty"

        db_session.refresh(template)
        assert template.version == 1
        assert template.content == "A"

    def test_failed_commit_keeps_previous_version(self, db_session, template, monkeypatch):
        rollbacks = []

        def _boom():
            raise SQLAlchemyError("commit failed")

        def _rollback():
            rollbacks.append(True)
            db_session.expire_all()

        monkeypatch.setattr(db_session, "commit", _boom)
        monkeypatch.setattr(db_session, "rollback", _rollback)
        with pytest.raises(SQLAlchemyError):
            agreement_templates.agreement_templates.edit_content(
                db_session, str(template.id), "B"
            )

        db_session.refresh(template)
        assert rollbacks == [True]
        assert template.version == 1
        assert template.content == "A"
        assert template.content_hash == _sha256("A")
        assert verify_integrity(template)

    def test_edit_unknown_template_raises_404(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            agreement_templates.agreement_templates.edit_content(
                db_session, str(uuid.uuid4()), "B"
            )
        assert exc_info.value.status_code == 404


# =============================================================================
# Activation Tests
# =============================================================================


class TestAgreementTemplateActivation:
    def test_failed_commit_keeps_active_flag(self, db_session, template, monkeypatch):
        rollbacks = []

        def _boom():
            raise SQLAlchemyError("commit failed")

        def _rollback():
            rollbacks.append(True)
            db_session.expire_all()

        monkeypatch.setattr(db_session, "commit", _boom)
        monkeypatch.setattr(db_session, "rollback", _rollback)
        with pytest.raises(SQLAlchemyError):
            agreement_templates.agreement_templates.set_active(
                db_session, str(template.id), False
            )

        db_session.refresh(template)
        assert rollbacks == [True]
        assert template.is_active is True
        assert template.version == 1

    def test_activate_deactivates_sibling(self, db_session, make_template):
        current = make_template(template_type=AgreementTemplateType.jop_declaration)
        draft = make_template(
            template_type=AgreementTemplateType.jop_declaration, content="draft", is_active=False
        )

        activated = agreement_templates.agreement_templates.set_active(
            db_session, str(draft.id), True
        )

        db_session.refresh(current)
        assert activated.is_active is True
        assert current.is_active is False
        active = agreement_templates.agreement_templates.get_active_by_type(
            db_session, AgreementTemplateType.jop_declaration
        )
        assert active.id == draft.id

    def test_deactivate_does_not_change_version(self, db_session, template):
        updated = agreement_templates.agreement_templates.set_active(
            db_session, str(template.id), False
        )
        assert updated.is_active is False
        assert updated.version == 1


# =============================================================================
# Integrity Tests
# =============================================================================


class TestAgreementTemplateIntegrity:
    def test_fresh_template_verifies(self, template):
        assert verify_integrity(template)

    def test_direct_modification_is_detected(self, db_session, template):
        # Bypass the store, as a direct database edit would.
        template.content = "tampered"
        db_session.commit()

        assert not verify_integrity(template)
        report = agreement_templates.agreement_templates.integrity_report(
            db_session, str(template.id)
        )
        assert report["is_valid"] is False
        assert report["content_hash_valid"] is False
        assert report["content_hash_arabic_valid"] is True

    def test_arabic_tamper_is_detected(self, db_session, template):
        template.content_arabic = "نص معدل"
        db_session.commit()

        report = agreement_templates.agreement_templates.integrity_report(
            db_session, str(template.id)
        )
        assert report["content_hash_valid"] is True
        assert report["content_hash_arabic_valid"] is False
        assert report["is_valid"] is False

    def test_missing_arabic_content_is_not_checked(self):
        template = AgreementTemplate(
            template_type=AgreementTemplateType.co_ownership,
            name="English only",
            content="A",
            content_hash=_sha256("A"),
            content_arabic="",
            content_hash_arabic="",
        )
        assert verify_integrity(template)

    def test_ensure_integrity_reports_failure_without_raising(self, db_session, template, caplog):
        template.content_hash = "0" * 64
        db_session.commit()

        with caplog.at_level("WARNING"):
            assert agreement_templates.agreement_templates.ensure_integrity(template) is False
        assert "failed hash verification" in caplog.text

    def test_edit_after_tamper_restores_integrity(self, db_session, template):
        template.content = "tampered"
        db_session.commit()

        updated = agreement_templates.agreement_templates.edit_content(
            db_session, str(template.id), "Restored wording"
        )
        assert updated.version == 2
        assert verify_integrity(updated)

    def test_resubmitting_original_text_repairs_tamper(self, db_session, template):
        template.content = "tampered"
        db_session.commit()

        updated = agreement_templates.agreement_templates.edit_content(
            db_session, str(template.id), "A"
        )
        assert updated.content == "A"
        assert updated.content_hash == _sha256("A")
        assert updated.version == 2
        assert verify_integrity(updated)

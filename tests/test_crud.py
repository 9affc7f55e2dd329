from datetime import timedelta

import pytest

from app.core.exceptions import ConflictError, InternalError
from app.crud.invitation import invitation as invitation_crud
from app.crud.note import note as note_crud
from app.crud.tenant import tenant as tenant_crud
from app.crud.user import user as user_crud
from app.models import InvitationStatus, Plan, Role
from app.utils.timeutils import ensure_utc, utcnow
from tests.utils import add_notes


def test_create_with_admin(db):
    tenant, admin = tenant_crud.create_with_admin(
        db, name="Initech", slug="initech", email="boss@initech.com", password="password", plan=Plan.PRO
    )
    assert tenant.plan == Plan.PRO
    assert admin.role == Role.ADMIN
    assert admin.tenant_id == tenant.id
    assert admin.hashed_password != "password"


def test_duplicate_slug(db, acme):
    with pytest.raises(ConflictError):
        tenant_crud.create_with_admin(db, name="Other", slug="acme", email="x@other.com", password="password")


def test_same_email_allowed_in_different_tenants(db, acme, globex):
    tenant, _, _ = globex
    user = user_crud.create(db, email="admin@acme.com", password="password", tenant_id=tenant.id)
    assert user.tenant_id == tenant.id


def test_duplicate_email_in_tenant(db, acme):
    tenant, _, _ = acme
    with pytest.raises(ConflictError):
        user_crud.create(db, email="user@acme.com", password="password", tenant_id=tenant.id)


def test_usage_counts(db, acme, globex):
    acme_tenant, acme_admin, _ = acme
    _, globex_admin, _ = globex
    add_notes(db, acme_admin, 2)
    add_notes(db, globex_admin, 1)

    assert tenant_crud.get_usage(db, acme_tenant.id) == (2, 2)


def test_note_get_is_tenant_filtered(db, acme, globex):
    _, acme_admin, _ = acme
    globex_tenant, _, _ = globex
    add_notes(db, acme_admin, 1)
    notes, total = note_crud.search(db, tenant_id=acme_admin.tenant_id)

    assert total == 1
    assert note_crud.get(db, id=notes[0].id, tenant_id=globex_tenant.id) is None


def test_mark_accepted_only_once(db, acme):
    tenant, admin, _ = acme
    invitation = invitation_crud.create(
        db,
        obj_in={
            "email": "new@acme.com",
            "role": Role.MEMBER,
            "token": "a" * 64,
            "status": InvitationStatus.PENDING,
            "invited_by": admin.id,
            "expires_at": utcnow() + timedelta(days=7),
        },
        tenant_id=tenant.id,
    )

    assert invitation_crud.mark_accepted_if_pending(db, invitation_id=invitation.id, accepted_at=utcnow())
    db.commit()
    assert not invitation_crud.mark_accepted_if_pending(db, invitation_id=invitation.id, accepted_at=utcnow())
    assert invitation_crud.get_pending_by_token(db, "a" * 64) is None


def test_ensure_utc():
    naive = utcnow().replace(tzinfo=None)
    assert ensure_utc(naive).tzinfo is not None
    assert ensure_utc(None) is None


def test_count_users_by_role(db, acme):
    tenant, _, _ = acme
    assert user_crud.count(db, tenant_id=tenant.id) == 2
    assert user_crud.count(db, tenant_id=tenant.id, role=Role.ADMIN) == 1
    assert user_crud.count(db, tenant_id=tenant.id, role=Role.MEMBER) == 1


def test_non_unique_integrity_error_is_internal(db, acme):
    tenant, _, _ = acme
    with pytest.raises(InternalError):
        user_crud.create(db, email=None, password="password", tenant_id=tenant.id)

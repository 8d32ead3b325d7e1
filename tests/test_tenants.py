from fastapi import status

from notes_api.models import SubscriptionPlan, Tenant
from conftest import ACME_ADMIN, ACME_MEMBER, GLOBEX_ADMIN


def _plan(db_session, slug):
    db_session.expire_all()
    return db_session.query(Tenant).filter(Tenant.slug == slug).one().subscription_plan


def test_admin_upgrades_own_tenant(client, auth_headers, tenants, db_session):
    resp = client.post("/api/tenants/acme/upgrade", headers=auth_headers(ACME_ADMIN))

    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    assert body["message"] == "Subscription Plan upgraded to Pro successfully."
    assert body["tenant"]["_id"] == tenants["acme"].id
    assert body["tenant"]["slug"] == "acme"
    assert body["tenant"]["subscriptionPlan"] == "pro"
    assert _plan(db_session, "acme") == SubscriptionPlan.PRO


def test_member_cannot_upgrade(client, auth_headers, db_session):
    resp = client.post("/api/tenants/acme/upgrade", headers=auth_headers(ACME_MEMBER))

    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert resp.json() == {"message": "Forbidden: Admins only"}
    assert _plan(db_session, "acme") == SubscriptionPlan.FREE


def test_slug_in_path_never_selects_the_tenant(client, auth_headers, db_session):
    # Acme's admin names Globex in the path; only Acme is upgraded
    resp = client.post("/api/tenants/globex/upgrade", headers=auth_headers(ACME_ADMIN))

    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["tenant"]["slug"] == "acme"
    assert _plan(db_session, "acme") == SubscriptionPlan.PRO
    assert _plan(db_session, "globex") == SubscriptionPlan.FREE


def test_upgrade_with_unknown_slug_upgrades_caller_tenant(client, auth_headers, db_session):
    resp = client.post("/api/tenants/does-not-exist/upgrade", headers=auth_headers(GLOBEX_ADMIN))

    assert resp.status_code == status.HTTP_200_OK
    assert _plan(db_session, "globex") == SubscriptionPlan.PRO


def test_upgrade_is_idempotent(client, auth_headers, db_session):
    headers = auth_headers(ACME_ADMIN)
    assert client.post("/api/tenants/acme/upgrade", headers=headers).status_code == 200

    resp = client.post("/api/tenants/acme/upgrade", headers=headers)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["tenant"]["subscriptionPlan"] == "pro"


def test_upgrade_requires_authentication(client, tenants, db_session):
    resp = client.post("/api/tenants/acme/upgrade")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert _plan(db_session, "acme") == SubscriptionPlan.FREE


def test_upgrade_for_missing_tenant_returns_404(client, auth_headers, db_session):
    headers = auth_headers(ACME_ADMIN)
    db_session.query(Tenant).filter(Tenant.slug == "acme").delete()
    db_session.commit()

    resp = client.post("/api/tenants/acme/upgrade", headers=headers)
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json() == {"message": "Tenant not found"}

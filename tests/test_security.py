from datetime import timedelta

from notes_api.core.security import (
    create_access_token,
    decode_access_token,
    dummy_verify,
    get_password_hash,
    verify_password,
)
from notes_api.models import UserRole
from notes_api.schemas.auth import Identity

SECRET = "unit-test-secret"


def test_password_hash_round_trip():
    hashed = get_password_hash("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_dummy_verify_never_succeeds():
    assert dummy_verify("not-a-real-password") is False


def test_token_carries_identity_claims():
    identity = Identity(user_id="u-1", role=UserRole.ADMIN, tenant_id="t-1")
    token = create_access_token(identity.to_claims(), SECRET)

    payload = decode_access_token(token, SECRET)
    assert payload["userId"] == "u-1"
    assert payload["role"] == "admin"
    assert payload["tenantId"] == "t-1"
    assert Identity.from_claims(payload) == identity


def test_decode_rejects_wrong_secret():
    token = create_access_token({"userId": "u-1"}, SECRET)
    assert decode_access_token(token, "other-secret") is None


def test_decode_rejects_expired_token():
    token = create_access_token({"userId": "u-1"}, SECRET, expires_delta=timedelta(seconds=-1))
    assert decode_access_token(token, SECRET) is None


def test_decode_rejects_garbage():
    assert decode_access_token("a.b.c", SECRET) is None


def test_identity_from_incomplete_or_bad_claims():
    assert Identity.from_claims({"userId": "u-1", "role": "member"}) is None
    assert Identity.from_claims({"userId": "u-1", "role": "root", "tenantId": "t-1"}) is None
    assert Identity.from_claims({}) is None

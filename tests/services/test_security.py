from evenza_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    is_authorized,
    token_for_user,
    verify_password,
)
from evenza_api.app.core.states import ADMIN_ROLES


def test_password_hash_roundtrip() -> None:
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("secret123", "not-a-hash")


def test_token_carries_identity() -> None:
    user = {"id": 7, "email": "ada@example.com", "name": "Ada", "role": "admin"}
    claims = decode_access_token(token_for_user(user))
    assert claims["sub"] == "7"
    assert claims["role"] == "admin"
    assert claims["email"] == "ada@example.com"


def test_remember_me_extends_lifetime() -> None:
    user = {"id": 7, "email": "ada@example.com", "name": "Ada", "role": "user"}
    short = decode_access_token(token_for_user(user))
    long = decode_access_token(token_for_user(user, remember_me=True))
    assert long["exp"] > short["exp"]


def test_tampered_token_is_rejected() -> None:
    token = create_access_token({"sub": "1", "role": "user"})
    header, payload, signature = token.split(".")
    forged = create_access_token({"sub": "1", "role": "super_admin"}).split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}") is None
    assert decode_access_token("garbage") is None


def test_expired_token_is_rejected() -> None:
    token = create_access_token({"sub": "1"}, expires_delta=-10)
    assert decode_access_token(token) is None


def test_is_authorized() -> None:
    assert is_authorized({"role": "super_admin"}, ADMIN_ROLES)
    assert is_authorized({"role": "admin"}, ADMIN_ROLES)
    assert not is_authorized({"role": "user"}, ADMIN_ROLES)
    assert not is_authorized({}, ADMIN_ROLES)

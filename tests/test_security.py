from datetime import timedelta

from stockflow.auth.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from stockflow.models.user import User, UserRole


def test_password_hashing():
    hashed = get_password_hash("admin1234!")
    assert hashed != "admin1234!"
    assert verify_password("admin1234!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("admin1234!", "not-a-hash")


def test_token_round_trip_and_expiry():
    token = create_access_token({"sub": "user-1"})
    assert decode_access_token(token)["sub"] == "user-1"

    expired = create_access_token({"sub": "user-1"}, expires_delta=timedelta(minutes=-1))
    assert decode_access_token(expired) is None
    assert decode_access_token("garbage") is None


def test_can_access():
    admin = User(username="a", role=UserRole.ADMIN, permissions=None)
    staff = User(username="s", role=UserRole.STAFF, permissions=["list", "users"])

    assert admin.can_access("users")
    assert admin.can_access("reports")
    assert staff.can_access("dashboard")
    assert staff.can_access("list")
    assert not staff.can_access("reports")
    assert not staff.can_access("users")

from smarthourly.utils.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_round_trip() -> None:
    password = "Password123!"
    hashed = get_password_hash(password)

    assert hashed != password
    assert verify_password(password, hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_rejects_invalid_hash() -> None:
    assert verify_password("Password123!", "not-a-valid-bcrypt-hash") is False


def test_token_carries_user_id() -> None:
    assert decode_access_token(create_access_token(42, "operator")) == 42


def test_expired_or_garbage_token() -> None:
    assert decode_access_token(create_access_token(42, "operator", expires_minutes=-1)) is None
    assert decode_access_token("not.a.token") is None

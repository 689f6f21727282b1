from datetime import timedelta
import time

import pytest
from jose import jwt

from app.errors import ConfigurationError
from app.schemas.token import TokenType
from app.services.token_verifier import TokenVerifier
from app.services.user_repository import UserRepository
from app.utils.jwt_handler import create_access_token, create_recover_token, create_refresh_token

SECRET = "verifier-secret"


@pytest.fixture
def verifier(db):
    return TokenVerifier(UserRepository(db), secret=SECRET, algorithm="HS256")


def bearer(token):
    return f"Bearer {token}"


def claims_for(user):
    return {"sub": str(user.id), "phone": user.phone}


def test_missing_secret_is_a_configuration_error(db):
    verifier = TokenVerifier(UserRepository(db), secret="")
    with pytest.raises(ConfigurationError):
        verifier.verify("Bearer abc", TokenType.ACCESS, account_id=1)


def test_token_without_bearer_prefix_is_rejected_before_decoding(verifier, monkeypatch):
    def fail_decode(*args, **kwargs):
        raise AssertionError("decode must not be attempted")

    monkeypatch.setattr("app.services.token_verifier.decode_token", fail_decode)

    for token in ("abc.def.ghi", "Token abc", "bearer abc", "Bearerabc", ""):
        result = verifier.verify(token, TokenType.ACCESS, account_id=1)
        assert result.success is False
        assert result.message == "Invalid token format"


def test_bad_signature_is_a_verification_failure(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret="another-secret")

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=active_user.id)

    assert result.success is False
    assert result.message == "Token verification failed"


def test_malformed_token_is_a_verification_failure(verifier):
    result = verifier.verify("Bearer not-a-jwt", TokenType.ACCESS, account_id=1)

    assert result.success is False
    assert result.message == "Token verification failed"


def test_token_without_phone_claim_is_rejected(verifier):
    token = jwt.encode({"type": "access", "sub": "1"}, SECRET, algorithm="HS256")

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=1)

    assert result.success is False
    assert result.message == "Token verification failed"


def test_expired_token_is_rejected(verifier, active_user):
    token = create_access_token(claims_for(active_user), expires_delta=timedelta(seconds=-10), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=active_user.id)

    assert result.success is False
    assert result.message == "Token expired"


def test_access_token_for_live_user_verifies(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, phone=active_user.phone, account_id=active_user.id)

    assert result.success is True
    assert result.message == "Token verified successfully"
    assert result.claims.phone == active_user.phone


def test_refresh_token_for_live_user_verifies(verifier, active_user):
    token = create_refresh_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.REFRESH, account_id=active_user.id)

    assert result.success is True


def test_access_requires_account_id(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS)

    assert result.success is False
    assert result.message == "Account ID not found"


def test_access_rejects_phone_mismatch(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, phone="1231231234", account_id=active_user.id)

    assert result.success is False
    assert result.message == "Phone number does not belong to this JWT token"


def test_access_accepts_numeric_phone(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, phone=int(active_user.phone), account_id=active_user.id)

    assert result.success is True


def test_access_treats_empty_phone_as_absent(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, phone="", account_id=active_user.id)

    assert result.success is True


def test_fractional_timestamps_are_accepted(verifier, active_user):
    now = time.time()
    token = jwt.encode(
        {"type": "access", "sub": str(active_user.id), "phone": active_user.phone, "iat": now, "exp": now + 60.5},
        SECRET,
        algorithm="HS256",
    )

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=active_user.id)

    assert result.success is True


def test_access_rejects_unknown_user(verifier):
    token = create_access_token({"sub": "1", "phone": "5550001111"}, secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=1)

    assert result.success is False
    assert result.message == "User linked to this JWT token does not exist"


def test_access_rejects_deleted_user(verifier, deleted_user):
    token = create_access_token(claims_for(deleted_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=deleted_user.id)

    assert result.success is False
    assert result.message == "User linked to this JWT token is deleted"


def test_access_rejects_foreign_account_id(verifier, active_user):
    token = create_access_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=active_user.id + 100)

    assert result.success is False
    assert result.message == "User Id provided does not belong to this token"


def test_recover_token_fails_for_live_user(verifier, active_user):
    token = create_recover_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.RECOVER, phone=active_user.phone)

    assert result.success is False
    assert result.message == "User linked to this JWT token is not deleted"


def test_recover_token_succeeds_for_deleted_user(verifier, deleted_user):
    token = create_recover_token(claims_for(deleted_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.RECOVER, phone=deleted_user.phone)

    assert result.success is True
    assert result.message == "Token verified successfully"


def test_recover_requires_phone(verifier, deleted_user):
    token = create_recover_token(claims_for(deleted_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.RECOVER)

    assert result.success is False
    assert result.message == "Phone number not found"


def test_recover_rejects_phone_mismatch(verifier, deleted_user):
    token = create_recover_token(claims_for(deleted_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.RECOVER, phone="1231231234")

    assert result.success is False
    assert result.message == "Phone number does not belong to this JWT token"


def test_recover_rejects_unknown_user(verifier):
    token = create_recover_token({"sub": "9", "phone": "5550001111"}, secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.RECOVER, phone="5550001111")

    assert result.success is False
    assert result.message == "User linked to this JWT token does not exist"


def test_refresh_token_cannot_be_used_as_access_token(verifier, active_user):
    token = create_refresh_token(claims_for(active_user), secret=SECRET)

    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=active_user.id)

    assert result.success is False
    assert result.message == "Invalid token type, does not match the operation!"


def test_recover_token_cannot_be_used_as_access_token(verifier, deleted_user):
    token = create_recover_token(claims_for(deleted_user), secret=SECRET)

    # The deleted-user check fires before the type check
    result = verifier.verify(bearer(token), TokenType.ACCESS, account_id=deleted_user.id)

    assert result.success is False
    assert result.message == "User linked to this JWT token is deleted"


def test_other_types_only_check_signature_and_type(verifier):
    token = jwt.encode({"type": "invite", "phone": "5550001111"}, SECRET, algorithm="HS256")

    assert verifier.verify(bearer(token), "invite").success is True

    mismatch = verifier.verify(bearer(token), "share")
    assert mismatch.success is False
    assert mismatch.message == "Invalid token type, does not match the operation!"

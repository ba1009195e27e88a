"""Tests for session token issuance and validation."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from eventboard.auth.jwt import create_access_token, decode_access_token
from eventboard.auth.sessions import SessionIssuer, SessionValidator
from eventboard.config import Settings
from eventboard.errors import AuthError

ISSUED_AT = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def issuer(user_repository, settings):
    return SessionIssuer(user_repository, settings)


@pytest.fixture
def validator(settings):
    return SessionValidator(settings)


class TestSessionIssuer:
    """Test login and token minting."""

    def test_login_returns_token_and_user(self, issuer, alice):
        """Test that a correct login returns a token and public user fields."""
        result = issuer.login("alice@x.com", "password123")

        assert result.token
        assert result.user.id == alice.id
        assert result.user.firstname == "Alice"

    def test_login_is_case_insensitive_on_email(self, issuer, alice):
        """Test that the email can be typed in any case."""
        result = issuer.login("ALICE@x.com", "password123")
        assert result.user.id == alice.id

    def test_login_wrong_password(self, issuer, alice):
        """Test that a wrong password fails with AuthError."""
        with pytest.raises(AuthError):
            issuer.login("alice@x.com", "wrong-password")

    def test_login_unknown_user(self, issuer):
        """Test that an unknown email fails with AuthError."""
        with pytest.raises(AuthError):
            issuer.login("nobody@x.com", "password123")

    def test_token_carries_identity_claims(self, issuer, alice, settings):
        """Test the claims embedded in the token."""
        result = issuer.login("alice@x.com", "password123")
        payload = jwt.decode(result.token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

        assert payload["sub"] == alice.id
        assert payload["firstname"] == "Alice"
        assert payload["lastname"] == "Martin"
        assert payload["email"] == "alice@x.com"
        assert payload["exp"] - payload["iat"] == 7 * 24 * 3600

    def test_expiry_fixed_at_issuance(self, issuer, alice):
        """Test that the expiry is issuance time plus the configured lifetime."""
        result = issuer.login("alice@x.com", "password123", now=ISSUED_AT)
        assert result.expires_at == ISSUED_AT + timedelta(days=7)


class TestSessionValidator:
    """Test token validation."""

    def test_valid_token(self, issuer, validator, alice):
        """Test that a freshly issued token validates."""
        result = issuer.login("alice@x.com", "password123")
        identity = validator.validate(result.token)

        assert identity.id == alice.id
        assert identity.email == "alice@x.com"

    def test_missing_token(self, validator):
        """Test that no token yields AuthError('missing')."""
        for token in (None, ""):
            with pytest.raises(AuthError) as exc_info:
                validator.validate(token)
            assert exc_info.value.reason == "missing"

    def test_malformed_token(self, validator):
        """Test that garbage yields AuthError('invalid')."""
        with pytest.raises(AuthError) as exc_info:
            validator.validate("not-a-jwt")
        assert exc_info.value.reason == "invalid"

    def test_token_signed_with_other_secret(self, validator, alice, settings):
        """Test that a token signed with another key is rejected."""
        other = settings.model_copy(update={"jwt_secret_key": "some-other-secret"})
        token, _ = create_access_token(alice, other)

        with pytest.raises(AuthError) as exc_info:
            validator.validate(token)
        assert exc_info.value.reason == "invalid"

    def test_tampered_token(self, validator, alice, settings):
        """Test that changing the payload breaks the signature."""
        token, _ = create_access_token(alice, settings)
        header, payload, signature = token.split(".")
        forged, _ = create_access_token(alice.model_copy(update={"id": "someone-else"}), settings)
        tampered = ".".join([header, forged.split(".")[1], signature])

        with pytest.raises(AuthError) as exc_info:
            validator.validate(tampered)
        assert exc_info.value.reason == "invalid"

    def test_token_missing_claims(self, validator, settings):
        """Test that a correctly signed token without identity claims is rejected."""
        token = jwt.encode(
            {"sub": "user-1", "iat": 0, "exp": 2**40},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(AuthError) as exc_info:
            validator.validate(token)
        assert exc_info.value.reason == "invalid"

    def test_expiry_boundary(self, validator, alice, settings):
        """Test validity one second before expiry and rejection after it."""
        token, expires_at = create_access_token(alice, settings, now=ISSUED_AT)

        identity = validator.validate(token, now=expires_at - timedelta(seconds=1))
        assert identity.id == alice.id

        with pytest.raises(AuthError) as at_expiry:
            validator.validate(token, now=expires_at)
        assert at_expiry.value.reason == "expired"

        with pytest.raises(AuthError) as after_expiry:
            validator.validate(token, now=expires_at + timedelta(seconds=1))
        assert after_expiry.value.reason == "expired"

    def test_expired_token_with_real_clock(self, alice):
        """Test that a token issued long ago is expired now."""
        settings = Settings(jwt_secret_key="test-secret-key", jwt_expiration_days=1)
        token, _ = create_access_token(alice, settings, now=ISSUED_AT)

        with pytest.raises(AuthError) as exc_info:
            decode_access_token(token, settings)
        assert exc_info.value.reason == "expired"

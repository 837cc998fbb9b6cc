"""
Unit tests for JwtTokenService.

Tests cover:
- Access token claims (sub, email, role, jti, iat, exp, iss, aud)
- Expiry, signature, algorithm, issuer and audience checks
- Separation of access and refresh JWTs
- Opaque token generation and hashing
"""

import hashlib
import re
import uuid
from datetime import timedelta

import jwt
import pytest

from identity.config import JwtSettings
from identity.services.jwt_token_service import JwtTokenService
from identity.utils.time import now_utc


def _raw_claims(token: str, settings: JwtSettings) -> dict:
    return jwt.decode(
        token,
        settings.secret,
        algorithms=["HS256"],
        audience=settings.audience,
        issuer=settings.issuer,
    )


@pytest.mark.unit
@pytest.mark.service
class TestAccessTokens:
    """Test issuing and decoding access tokens."""

    def test_issue_access_token_claims(self, token_service, jwt_settings):
        # Arrange
        user_id = uuid.uuid4()

        # Act
        issued = token_service.issue_access_token(user_id, "a@x.com", ["Member", "Admin"])

        # Assert
        claims = _raw_claims(issued.token, jwt_settings)
        assert claims["sub"] == str(user_id)
        assert claims["email"] == "a@x.com"
        assert claims["role"] == ["Member", "Admin"]
        assert claims["jti"] == issued.jti
        assert claims["iss"] == jwt_settings.issuer
        assert claims["aud"] == jwt_settings.audience
        assert "token_type" not in claims

    def test_expiry_is_issued_at_plus_ttl(self, token_service, jwt_settings):
        issued = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])

        claims = _raw_claims(issued.token, jwt_settings)
        assert claims["exp"] - claims["iat"] == jwt_settings.access_token_expiration_minutes * 60
        assert int(issued.expires_at.timestamp()) == claims["exp"]

    def test_each_token_gets_unique_jti(self, token_service):
        first = token_service.issue_access_token(uuid.uuid4(), "a@x.com", [])
        second = token_service.issue_access_token(uuid.uuid4(), "a@x.com", [])

        assert first.jti != second.jti

    def test_decode_round_trip(self, token_service):
        # Arrange
        user_id = uuid.uuid4()
        issued = token_service.issue_access_token(user_id, "a@x.com", ["Member"])

        # Act
        claims = token_service.decode_access_token(issued.token)

        # Assert
        assert claims is not None
        assert claims.user_id == user_id
        assert claims.email == "a@x.com"
        assert claims.roles == ["Member"]
        assert claims.jti == issued.jti
        assert claims.expires_at == issued.expires_at

    def test_expired_token_rejected(self, jwt_settings):
        # Arrange
        past = now_utc() - timedelta(minutes=jwt_settings.access_token_expiration_minutes + 1)
        service = JwtTokenService(jwt_settings, clock=lambda: past)
        issued = service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])

        # Act & Assert
        assert service.decode_access_token(issued.token) is None

    def test_expired_token_readable_without_exp_check(self, jwt_settings):
        past = now_utc() - timedelta(hours=2)
        service = JwtTokenService(jwt_settings, clock=lambda: past)
        user_id = uuid.uuid4()
        issued = service.issue_access_token(user_id, "a@x.com", ["Member"])

        claims = service.decode_access_token(issued.token, verify_exp=False)

        assert claims is not None
        assert claims.user_id == user_id

    def test_tampered_signature_rejected(self, token_service):
        issued = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])
        header, payload, signature = issued.token.split(".")
        tampered_signature = ("A" if signature[0] != "A" else "B") + signature[1:]

        assert token_service.decode_access_token(f"{header}.{payload}.{tampered_signature}") is None

    def test_wrong_secret_rejected(self, token_service, jwt_settings):
        other = JwtTokenService(jwt_settings.model_copy(update={"secret": "another-secret-key-that-is-long-enough!!"}))
        issued = other.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])

        assert token_service.decode_access_token(issued.token) is None

    def test_other_algorithm_rejected(self, token_service, jwt_settings):
        # Arrange
        issued = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])
        claims = _raw_claims(issued.token, jwt_settings)
        forged = jwt.encode(claims, jwt_settings.secret, algorithm="HS512")

        # Act & Assert
        assert token_service.decode_access_token(forged) is None

    def test_wrong_audience_rejected(self, token_service, jwt_settings):
        issued = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])
        claims = _raw_claims(issued.token, jwt_settings)
        claims["aud"] = "someone-else"
        forged = jwt.encode(claims, jwt_settings.secret, algorithm="HS256")

        assert token_service.decode_access_token(forged) is None

    def test_wrong_issuer_rejected(self, token_service, jwt_settings):
        issued = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])
        claims = _raw_claims(issued.token, jwt_settings)
        claims["iss"] = "rogue-issuer"
        forged = jwt.encode(claims, jwt_settings.secret, algorithm="HS256")

        assert token_service.decode_access_token(forged) is None

    def test_missing_jti_rejected(self, token_service, jwt_settings):
        issued = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])
        claims = _raw_claims(issued.token, jwt_settings)
        del claims["jti"]
        forged = jwt.encode(claims, jwt_settings.secret, algorithm="HS256")

        assert token_service.decode_access_token(forged) is None

    def test_garbage_rejected(self, token_service):
        assert token_service.decode_access_token("not-a-jwt") is None

    def test_refresh_jwt_not_accepted_as_access_token(self, token_service):
        refresh = token_service.issue_refresh_jwt(uuid.uuid4(), "a@x.com")

        assert token_service.decode_access_token(refresh.token) is None

    def test_pinned_id_factory(self, jwt_settings):
        service = JwtTokenService(jwt_settings, id_factory=lambda: "fixed-jti")

        issued = service.issue_access_token(uuid.uuid4(), "a@x.com", [])

        assert issued.jti == "fixed-jti"


@pytest.mark.unit
@pytest.mark.service
class TestRefreshJwts:
    """Test self-describing refresh tokens used by the stateless strategy."""

    def test_issue_and_validate(self, token_service, jwt_settings):
        # Arrange
        user_id = uuid.uuid4()

        # Act
        issued = token_service.issue_refresh_jwt(user_id, "a@x.com")
        info = token_service.validate_refresh_jwt(issued.token)

        # Assert
        assert info is not None
        assert info.user_id == user_id
        assert info.token_id == issued.token_id
        assert info.revoked is False
        claims = _raw_claims(issued.token, jwt_settings)
        assert claims["token_type"] == "refresh"
        assert "role" not in claims
        assert claims["exp"] - claims["iat"] == jwt_settings.refresh_token_expiration_days * 86400

    def test_access_token_not_accepted_as_refresh(self, token_service):
        access = token_service.issue_access_token(uuid.uuid4(), "a@x.com", ["Member"])

        assert token_service.validate_refresh_jwt(access.token) is None

    def test_expired_refresh_jwt_rejected(self, jwt_settings):
        past = now_utc() - timedelta(days=jwt_settings.refresh_token_expiration_days, minutes=1)
        service = JwtTokenService(jwt_settings, clock=lambda: past)
        issued = service.issue_refresh_jwt(uuid.uuid4(), "a@x.com")

        assert service.validate_refresh_jwt(issued.token) is None


@pytest.mark.unit
@pytest.mark.service
class TestOpaqueTokens:
    def test_generate_opaque_token_is_url_safe_and_long(self):
        token = JwtTokenService.generate_opaque_token()

        assert len(token) >= 64
        assert re.fullmatch(r"[A-Za-z0-9_-]+", token)
        assert token != JwtTokenService.generate_opaque_token()

    def test_hash_token_is_sha256_hex(self):
        assert JwtTokenService.hash_token("abc") == hashlib.sha256(b"abc").hexdigest()
        assert len(JwtTokenService.hash_token("abc")) == 64

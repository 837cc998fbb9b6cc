"""Unit tests for the RefreshToken ledger model."""

import pytest
from datetime import datetime, timedelta

from identity.models import RefreshToken
from identity.utils.time import now_db_utc


def _record(expires_at: datetime, revoked_at: datetime | None = None) -> RefreshToken:
    return RefreshToken(
        token_hash="a" * 64,
        expires_at=expires_at,
        revoked_at=revoked_at,
    )


@pytest.mark.unit
@pytest.mark.model
class TestRefreshTokenModel:
    """Test lifecycle helpers on RefreshToken."""

    def test_not_expired_before_expiry(self):
        # Arrange
        expires_at = datetime(2030, 1, 1, 12, 0, 0)
        record = _record(expires_at)

        # Act & Assert
        assert record.is_expired_at(expires_at - timedelta(seconds=1)) is False

    def test_expired_exactly_at_expiry(self):
        """The boundary instant already counts as expired."""
        expires_at = datetime(2030, 1, 1, 12, 0, 0)
        record = _record(expires_at)

        assert record.is_expired_at(expires_at) is True

    def test_active_requires_not_revoked_and_not_expired(self):
        record = _record(now_db_utc() + timedelta(days=1))

        assert record.is_active is True
        assert record.is_revoked is False

    def test_expired_record_is_not_active(self):
        record = _record(now_db_utc() - timedelta(seconds=1))

        assert record.is_expired is True
        assert record.is_active is False

    def test_revoked_record_is_not_active(self):
        record = _record(now_db_utc() + timedelta(days=1), revoked_at=datetime(2029, 6, 1, 8, 0, 0))

        assert record.is_revoked is True
        assert record.is_expired is False
        assert record.is_active is False

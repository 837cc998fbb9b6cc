"""Unit tests for SetPasswordUseCase."""

import pytest

from identity.exceptions import ValidationException
from identity.schemas import SetPasswordCommand
from identity.use_cases.set_password import SetPasswordUseCase


@pytest.mark.unit
@pytest.mark.use_case
class TestSetPasswordUseCase:
    async def test_execute_sets_password(self, db_session, identity_service, user_factory):
        # Arrange
        user = await user_factory(password=None)
        use_case = SetPasswordUseCase(session=db_session, identity_service_factory=lambda session: identity_service)

        # Act
        await use_case.execute(user.id, SetPasswordCommand(password="StrongPass1"))

        # Assert
        assert (await identity_service.validate_credentials(user.email, "StrongPass1")).id == user.id

    async def test_execute_existing_password(self, db_session, identity_service, user_factory):
        user = await user_factory(password="StrongPass1")
        use_case = SetPasswordUseCase(session=db_session, identity_service_factory=lambda session: identity_service)

        with pytest.raises(ValidationException) as exc_info:
            await use_case.execute(user.id, SetPasswordCommand(password="OtherPass2"))
        assert list(exc_info.value.errors) == ["password"]

import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy import select
from proconnect.crud import user as user_crud
from proconnect.core.error_codes import USER_ALREADY_EXISTS
from proconnect.core.exceptions import InvalidOperationError
from proconnect.models.user import User
from proconnect.schemas.user import UserUpdate


async def _email_of(db_session, user_id):
    result = await db_session.execute(select(User.email).where(User.id == user_id))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_update_email_to_taken_address(db_session, alice, bob):
    with pytest.raises(InvalidOperationError) as exc_info:
        await user_crud.update_user(db_session, alice, UserUpdate(email=bob.email))

    assert exc_info.value.error_code == USER_ALREADY_EXISTS


@pytest.mark.asyncio
async def test_update_email_racing_past_the_check_is_rejected(db_session, alice, bob):
    alice_id, alice_email, bob_email = alice.id, alice.email, bob.email

    # Simulate another account claiming the address after the lookup
    with patch("proconnect.crud.user.get_user_by_email", AsyncMock(return_value=None)):
        with pytest.raises(InvalidOperationError) as exc_info:
            await user_crud.update_user(db_session, alice, UserUpdate(email=bob_email))

    assert exc_info.value.error_code == USER_ALREADY_EXISTS
    assert await _email_of(db_session, alice_id) == alice_email

"""
Authentication endpoints
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.schemas.auth import AuthResponse
from proconnect.schemas.user import UserCreate
from proconnect.core.security import create_access_token
from proconnect.core.exceptions import CustomHTTPException
from proconnect.core.error_codes import INVALID_CREDENTIALS, ACCOUNT_DEACTIVATED
from proconnect.crud.user import create_user, authenticate_user
from proconnect.crud.connection import get_connection_ids
from proconnect.utils.connection_helpers import format_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    user = await create_user(db, user_in)
    return AuthResponse(
        access_token=create_access_token(user.id),
        user=format_profile(user, []),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    user = await authenticate_user(db, form_data.username, form_data.password)
    if not user:
        logger.warning(f"Failed login attempt for: {form_data.username}")
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            error_code=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated. Please contact support",
            error_code=ACCOUNT_DEACTIVATED,
        )

    return AuthResponse(
        access_token=create_access_token(user.id),
        user=format_profile(user, await get_connection_ids(db, user.id)),
    )

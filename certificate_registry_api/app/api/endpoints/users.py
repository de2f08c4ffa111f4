"""
Account endpoints: registration and login.

Both routes are public.  Login answers every credential failure with
the same 400 response so callers cannot tell which emails exist.
"""

from fastapi import APIRouter, HTTPException, status

from certificate_registry_api.app.core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
)
from certificate_registry_api.app.schemas.user import Message, Token, UserCreate, UserLogin
from certificate_registry_api.app.services.user_service import INVALID_CREDENTIALS, UserService

router = APIRouter()


@router.post("/register", response_model=Message, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate) -> Message:
    """Зарегистрировать новую учётную запись.

    Пароль хранится только в виде хеша; в ответе не возвращаются
    никакие данные учётной записи.
    """
    try:
        await UserService.create_user(user)
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    return Message(message="User registered successfully")


@router.post("/login", response_model=Token)
async def login_user(credentials: UserLogin) -> Token:
    """Authenticate by email and password and return a session token."""
    try:
        token = await UserService.login(credentials.email, credentials.password)
    except AuthenticationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS)
    return Token(token=token)

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from donation_admin.database import get_db
from donation_admin.dependencies import get_current_user
from donation_admin.modules.auth.models import User
from donation_admin.modules.auth.repository import UserRepository
from donation_admin.modules.auth.schemas import (
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    UserResponse,
)
from donation_admin.modules.auth.service import AuthService

router = APIRouter(
    prefix='/api/auth',
    tags=['Auth'],
)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency que fornece o servico de autenticacao."""
    return AuthService(UserRepository(db))


@router.post('/login', response_model=TokenResponse)
def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Autentica o usuario com email e senha.

    Retorna access_token e refresh_token em caso de sucesso.
    """
    return service.authenticate(data.email, data.password)


@router.post('/refresh', response_model=TokenResponse)
def refresh(
    data: RefreshRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Renova access_token e refresh_token a partir de um refresh token."""
    return service.refresh_token(data.refresh_token)


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Retorna os dados do usuario autenticado."""
    return UserResponse.model_validate(current_user)

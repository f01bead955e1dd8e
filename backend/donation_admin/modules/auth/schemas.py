import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from donation_admin.shared.security import sanitize_text


class LoginRequest(BaseModel):
    """Schema de requisicao de login."""

    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def email_normalized(cls, v: EmailStr) -> str:
        """Normaliza o email."""
        return sanitize_text(str(v)).lower()

    @field_validator('password')
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        """Valida que a senha nao esta vazia."""
        if not v or not v.strip():
            raise ValueError('A senha nao pode estar vazia')
        return v


class TokenResponse(BaseModel):
    """Schema de resposta com tokens JWT."""

    access_token: str
    refresh_token: str
    token_type: str = 'bearer'


class RefreshRequest(BaseModel):
    """Schema de requisicao de refresh token."""

    refresh_token: str


class UserResponse(BaseModel):
    """Schema de resposta com dados do usuario autenticado."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    is_active: bool
    role: str
    created_at: datetime


class PublicProfileResponse(BaseModel):
    """Dados publicos de um perfil, exibidos em links compartilhados."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    role: str
    created_at: datetime

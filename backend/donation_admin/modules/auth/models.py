from enum import Enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from donation_admin.shared.models import SoftDeleteModel


class UserRole(str, Enum):
    """Perfis de usuario da plataforma."""

    admin = 'admin'
    donor = 'donor'
    ngo = 'ngo'
    company = 'company'


class User(SoftDeleteModel):
    """
    Modelo de usuario da plataforma (doadores, ONGs, empresas e admins).

    Armazena dados de autenticacao e identificacao do usuario.
    Herda de SoftDeleteModel (inclui id, created_at, updated_at, deleted_at).
    """

    __tablename__ = 'users'

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    phone: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
        default=None,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.donor.value,
        nullable=False,
    )

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from donation_admin.shared.models import BaseModel


class Setting(BaseModel):
    """
    Modelo de categoria de configuracao da plataforma.

    Cada registro guarda o conjunto completo de pares chave-valor de uma
    categoria (email, security, branding, ...), serializado em JSON e
    criptografado, pois varias categorias contem segredos (SMTP, gateway
    de pagamento, chaves de servicos externos).
    Herda de BaseModel (inclui id, created_at, updated_at).
    NAO possui exclusao: categorias sao apenas sobrescritas ou resetadas.
    """

    __tablename__ = 'settings'

    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )
    encrypted_values: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    updated_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from donation_admin.shared.models import BaseModel


class ShareResourceType(str, Enum):
    """Tipos de recurso que podem ser compartilhados publicamente."""

    profile = 'profile'
    campaign = 'campaign'
    portfolio = 'portfolio'


class ShareLink(BaseModel):
    """
    Modelo de link publico de compartilhamento.

    Mapeia um identificador opaco (share_id) para um par
    (resource_type, resource_id), com design customizado opcional,
    contador de visualizacoes e flag de ativacao.
    Existe no maximo um link por recurso (constraint unica do par).
    """

    __tablename__ = 'share_links'
    __table_args__ = (
        UniqueConstraint(
            'resource_type',
            'resource_id',
            name='uq_share_links_resource',
        ),
    )

    share_id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
    )
    resource_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    resource_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    custom_design: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    view_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    last_viewed: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )

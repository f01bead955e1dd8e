import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from donation_admin.shared.models import SoftDeleteModel


class ApprovalStatus(str, Enum):
    """Status de aprovacao de uma campanha."""

    pending = 'pending'
    approved = 'approved'
    rejected = 'rejected'


class Campaign(SoftDeleteModel):
    """
    Modelo de campanha de arrecadacao.

    Apenas os campos necessarios para exibicao publica via link
    de compartilhamento sao mapeados aqui.
    """

    __tablename__ = 'campaigns'

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )
    category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        default=None,
    )
    goal_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    raised_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal('0'),
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    location: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
    )
    image_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        default=None,
    )
    approval_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApprovalStatus.pending.value,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class CampaignPublicResponse(BaseModel):
    """Dados publicos de uma campanha exibidos em links compartilhados."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None = None
    category: str | None = None
    goal_amount: Decimal
    raised_amount: Decimal
    end_date: datetime | None = None
    location: str | None = None
    image_url: str | None = None
    approval_status: str
    is_active: bool
    created_at: datetime

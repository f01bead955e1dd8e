import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from donation_admin.shared.schemas import PaginatedResponse


class AuditLogResponse(BaseModel):
    """Schema de resposta de um registro de atividade."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID | None = None
    action: str
    description: str | None = None
    resource_type: str
    resource_id: str | None = None
    details: dict | None = None
    ip_address: str | None = None
    created_at: datetime


AuditLogListResponse = PaginatedResponse[AuditLogResponse]

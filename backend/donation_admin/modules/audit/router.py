import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from donation_admin.database import get_db
from donation_admin.dependencies import require_roles
from donation_admin.modules.audit.repository import AuditLogRepository
from donation_admin.modules.audit.schemas import AuditLogListResponse
from donation_admin.modules.audit.service import AuditLogService

router = APIRouter(
    prefix='/api/audit-logs',
    tags=['Audit Logs'],
)


def get_audit_service(db: Session = Depends(get_db)) -> AuditLogService:
    return AuditLogService(AuditLogRepository(db))


@router.get('', response_model=AuditLogListResponse)
def list_audit_logs(
    page: int = Query(1, ge=1, description='Numero da pagina'),
    per_page: int = Query(20, ge=1, le=100, description='Itens por pagina'),
    action: str | None = Query(None, description='Filtro por acao'),
    resource_type: str | None = Query(None, description='Filtro por tipo de recurso'),
    user_id: uuid.UUID | None = Query(None, description='Filtro por usuario (UUID)'),
    date_from: datetime | None = Query(None, description='Inicio do periodo'),
    date_to: datetime | None = Query(None, description='Fim do periodo'),
    service: AuditLogService = Depends(get_audit_service),
    current_user=Depends(require_roles('admin')),
) -> AuditLogListResponse:
    """Lista atividades administrativas (admin only)."""
    return service.list_logs(
        page=page,
        per_page=per_page,
        action=action,
        resource_type=resource_type,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
    )

import logging
import uuid
from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from donation_admin.modules.audit.repository import AuditLogRepository
from donation_admin.modules.audit.schemas import AuditLogResponse
from donation_admin.shared.schemas import PaginatedResponse

logger = logging.getLogger(__name__)


class ActivityRecorder(Protocol):
    """Contrato do colaborador de auditoria usado pelos servicos."""

    def record(
        self,
        actor_id: uuid.UUID | None,
        action: str,
        description: str,
        metadata: dict | None = None,
        resource_type: str = 'admin',
        resource_id: str | None = None,
    ) -> None:
        ...


class ActivityLogger:
    """
    Registrador de atividades baseado na tabela audit_log.

    Falhas ao gravar a atividade sao registradas em log e descartadas:
    a operacao principal ja foi persistida e nao deve ser abortada.
    """

    def __init__(self, repository: AuditLogRepository) -> None:
        self._repository = repository

    def record(
        self,
        actor_id: uuid.UUID | None,
        action: str,
        description: str,
        metadata: dict | None = None,
        resource_type: str = 'admin',
        resource_id: str | None = None,
    ) -> None:
        """Grava uma atividade sem propagar erros de armazenamento."""
        try:
            self._repository.create({
                'user_id': actor_id,
                'action': action,
                'description': description,
                'resource_type': resource_type,
                'resource_id': resource_id,
                'details': metadata,
            })
        except SQLAlchemyError:
            logger.warning(
                'Falha ao registrar atividade "%s" (%s)',
                action,
                description,
                exc_info=True,
            )
            self._repository.rollback()


class AuditLogService:
    """
    Servico de consulta da trilha de auditoria.
    """

    def __init__(self, repository: AuditLogRepository) -> None:
        self._repository = repository

    def list_logs(
        self,
        page: int = 1,
        per_page: int = 20,
        action: str | None = None,
        resource_type: str | None = None,
        user_id: uuid.UUID | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> PaginatedResponse[AuditLogResponse]:
        """Lista logs de auditoria com filtros."""
        logs, total = self._repository.list(
            page=page,
            per_page=per_page,
            action=action,
            resource_type=resource_type,
            user_id=user_id,
            date_from=date_from,
            date_to=date_to,
        )
        items = [AuditLogResponse.model_validate(log) for log in logs]
        return PaginatedResponse[AuditLogResponse].create(
            items=items,
            total=total,
            page=page,
            per_page=per_page,
        )

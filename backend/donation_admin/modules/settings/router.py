from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from donation_admin.database import get_db
from donation_admin.dependencies import get_activity_logger, require_roles
from donation_admin.modules.audit.service import ActivityLogger
from donation_admin.modules.auth.models import User
from donation_admin.modules.settings.repository import SettingRepository
from donation_admin.modules.settings.schemas import (
    AllSettingsResponse,
    BulkUpsertResponse,
    CategorySettingsResponse,
    SettingsBulkUpsertRequest,
    SettingsUpsertRequest,
)
from donation_admin.modules.settings.service import SettingService

router = APIRouter(
    prefix='/api/settings',
    tags=['Settings'],
)


# -------------------------------------------------------------------------
# Dependency injection chain: get_db -> repository -> service
# -------------------------------------------------------------------------


def get_setting_repository(
    db: Session = Depends(get_db),
) -> SettingRepository:
    """Dependency que fornece o repositorio de configuracoes."""
    return SettingRepository(db)


def get_setting_service(
    repository: SettingRepository = Depends(get_setting_repository),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> SettingService:
    """Dependency que fornece o servico de configuracoes."""
    return SettingService(repository, activity_logger)


# -------------------------------------------------------------------------
# Endpoints (admin only)
# -------------------------------------------------------------------------

# IMPORTANTE: Rotas especificas (/defaults, /bulk) devem vir ANTES de rotas
# parametrizadas (/{category}) para evitar conflitos de matching.


@router.get('', response_model=AllSettingsResponse)
def get_all_settings(
    current_user: User = Depends(require_roles('admin')),
    service: SettingService = Depends(get_setting_service),
) -> AllSettingsResponse:
    """Retorna todas as categorias de configuracoes descriptografadas."""
    return AllSettingsResponse(
        message='Configuracoes recuperadas com sucesso',
        settings=service.get_all(),
    )


@router.get('/defaults', response_model=AllSettingsResponse)
def get_default_settings(
    current_user: User = Depends(require_roles('admin')),
    service: SettingService = Depends(get_setting_service),
) -> AllSettingsResponse:
    """Retorna a tabela de configuracoes padrao."""
    return AllSettingsResponse(
        message='Configuracoes padrao recuperadas com sucesso',
        settings=service.get_defaults(),
    )


@router.put('', response_model=CategorySettingsResponse)
def upsert_settings(
    data: SettingsUpsertRequest,
    current_user: User = Depends(require_roles('admin')),
    service: SettingService = Depends(get_setting_service),
) -> CategorySettingsResponse:
    """
    Substitui os valores de uma categoria (cria se nao existir).

    O conjunto enviado substitui integralmente o anterior.
    """
    values = service.upsert(data.category, data.values, current_user.id)
    return CategorySettingsResponse(
        message='Configuracoes atualizadas com sucesso',
        category=data.category,
        values=values,
    )


@router.put('/bulk', response_model=BulkUpsertResponse)
def bulk_upsert_settings(
    data: SettingsBulkUpsertRequest,
    response: Response,
    current_user: User = Depends(require_roles('admin')),
    service: SettingService = Depends(get_setting_service),
) -> BulkUpsertResponse:
    """
    Atualiza varias categorias de uma vez.

    Cada categoria e gravada de forma independente. Se alguma falhar,
    a resposta e 207 (Multi-Status) com o detalhe das falhas.
    """
    result = service.bulk_upsert(data.categories, current_user.id)

    if not result.success:
        response.status_code = status.HTTP_207_MULTI_STATUS
        message = 'Algumas categorias nao puderam ser atualizadas'
    else:
        message = 'Configuracoes atualizadas com sucesso'

    return BulkUpsertResponse(
        success=result.success,
        message=message,
        updated_categories=result.updated_categories,
        failed_categories=result.failed_categories,
    )


@router.put('/{category}/reset', response_model=CategorySettingsResponse)
def reset_settings(
    category: str,
    current_user: User = Depends(require_roles('admin')),
    service: SettingService = Depends(get_setting_service),
) -> CategorySettingsResponse:
    """Restaura os valores padrao de uma categoria."""
    values = service.reset_to_default(category, current_user.id)
    return CategorySettingsResponse(
        message=f'Configuracoes de {category} restauradas para o padrao',
        category=category,
        values=values,
    )


@router.get('/{category}', response_model=CategorySettingsResponse)
def get_settings_by_category(
    category: str,
    current_user: User = Depends(require_roles('admin')),
    service: SettingService = Depends(get_setting_service),
) -> CategorySettingsResponse:
    """Retorna os valores de uma categoria (ou seus padroes, se nunca gravada)."""
    return CategorySettingsResponse(
        message='Configuracoes recuperadas com sucesso',
        category=category,
        values=service.get_by_category(category),
    )

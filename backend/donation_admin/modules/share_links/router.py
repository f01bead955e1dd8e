from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from donation_admin.database import get_db
from donation_admin.dependencies import get_activity_logger, require_roles
from donation_admin.modules.audit.service import ActivityLogger
from donation_admin.modules.auth.models import User
from donation_admin.modules.share_links.models import ShareResourceType
from donation_admin.modules.share_links.repository import ShareLinkRepository
from donation_admin.modules.share_links.resolvers import build_resource_resolvers
from donation_admin.modules.share_links.schemas import (
    CustomDesignRequest,
    CustomDesignResponse,
    ShareDesignUpdateRequest,
    ShareLinkCreateResponse,
    ShareLinkStatusRequest,
    ShareLinkStatusResponse,
    ShareLinkSummary,
)
from donation_admin.modules.share_links.service import (
    CustomDesignView,
    ShareLinkService,
    build_api_url,
    build_share_url,
)

router = APIRouter(
    prefix='/api',
    tags=['Share Links'],
)


# -------------------------------------------------------------------------
# Dependency injection chain: get_db -> repository -> service
# -------------------------------------------------------------------------


def get_share_link_repository(
    db: Session = Depends(get_db),
) -> ShareLinkRepository:
    """Dependency que fornece o repositorio de links."""
    return ShareLinkRepository(db)


def get_share_link_service(
    db: Session = Depends(get_db),
    repository: ShareLinkRepository = Depends(get_share_link_repository),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> ShareLinkService:
    """Dependency que fornece o servico de links com os resolvers de recurso."""
    return ShareLinkService(
        repository,
        activity_logger,
        resolvers=build_resource_resolvers(db),
    )


def _create_response(
    service: ShareLinkService,
    response: Response,
    resource_type: ShareResourceType,
    resource_id: str,
    current_user: User,
) -> ShareLinkCreateResponse:
    link, created = service.get_or_create(resource_type.value, resource_id, current_user.id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ShareLinkCreateResponse(
        message='Link de compartilhamento gerado' if created else 'Link de compartilhamento existente',
        created=created,
        share_id=link.share_id,
        share_url=build_share_url(link),
        api_url=build_api_url(link),
    )


def _design_response(view: CustomDesignView, message: str) -> CustomDesignResponse:
    return CustomDesignResponse(
        message=message,
        custom_design=view.custom_design,
        share_url=view.share_url,
        api_url=view.api_url,
        share_link=(
            ShareLinkSummary.model_validate(view.share_link)
            if view.share_link is not None
            else None
        ),
    )


# -------------------------------------------------------------------------
# Geracao de links (admin only)
# -------------------------------------------------------------------------


@router.post('/users/{user_id}/share', response_model=ShareLinkCreateResponse)
def share_user_profile(
    user_id: str,
    response: Response,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> ShareLinkCreateResponse:
    """
    Gera (ou reaproveita) o link publico do perfil de um usuario.

    Retorna 201 quando o link e criado e 200 quando ja existia.
    """
    return _create_response(service, response, ShareResourceType.profile, user_id, current_user)


@router.post('/campaigns/{campaign_id}/share', response_model=ShareLinkCreateResponse)
def share_campaign(
    campaign_id: str,
    response: Response,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> ShareLinkCreateResponse:
    """Gera (ou reaproveita) o link publico de uma campanha."""
    return _create_response(service, response, ShareResourceType.campaign, campaign_id, current_user)


# -------------------------------------------------------------------------
# Design customizado (admin only)
# -------------------------------------------------------------------------


@router.get('/users/{user_id}/customize', response_model=CustomDesignResponse)
def get_profile_design(
    user_id: str,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> CustomDesignResponse:
    """Retorna o design do perfil compartilhado (vazio se ainda nao ha link)."""
    view = service.get_custom_design(ShareResourceType.profile.value, user_id)
    message = (
        'Customizacao do perfil recuperada com sucesso'
        if view.share_link is not None
        else 'Nenhuma customizacao encontrada'
    )
    return _design_response(view, message)


@router.put('/users/{user_id}/customize', response_model=CustomDesignResponse)
def set_profile_design(
    user_id: str,
    data: CustomDesignRequest,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> CustomDesignResponse:
    """
    Substitui o design do perfil compartilhado.

    Cria o link do perfil se ele ainda nao existir.
    """
    service.set_custom_design(
        ShareResourceType.profile.value,
        user_id,
        data.build_design(),
        current_user.id,
    )
    view = service.get_custom_design(ShareResourceType.profile.value, user_id)
    return _design_response(view, 'Customizacao do perfil salva com sucesso')


@router.get('/share/{share_id}/customize', response_model=CustomDesignResponse)
def get_share_design(
    share_id: str,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> CustomDesignResponse:
    """Retorna o design de um link pelo share_id."""
    view = service.get_custom_design_by_share_id(share_id)
    return _design_response(view, 'Customizacao recuperada com sucesso')


@router.put('/share/{share_id}/customize', response_model=CustomDesignResponse)
def set_share_design(
    share_id: str,
    data: ShareDesignUpdateRequest,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> CustomDesignResponse:
    """Substitui o design de um link existente."""
    service.set_custom_design_by_share_id(share_id, data.custom_design, current_user.id)
    view = service.get_custom_design_by_share_id(share_id)
    return _design_response(view, 'Customizacao salva com sucesso')


@router.put('/share/{share_id}/status', response_model=ShareLinkStatusResponse)
def set_share_status(
    share_id: str,
    data: ShareLinkStatusRequest,
    current_user: User = Depends(require_roles('admin')),
    service: ShareLinkService = Depends(get_share_link_service),
) -> ShareLinkStatusResponse:
    """Ativa ou desativa um link e define sua data de expiracao."""
    link = service.set_active(share_id, data.is_active, data.expires_at, current_user.id)
    return ShareLinkStatusResponse(
        message='Link ativado' if link.is_active else 'Link desativado',
        share_link=ShareLinkSummary.model_validate(link),
    )

from fastapi import APIRouter, Depends

from donation_admin.modules.auth.schemas import PublicProfileResponse
from donation_admin.modules.campaigns.schemas import CampaignPublicResponse
from donation_admin.modules.settings.router import get_setting_service
from donation_admin.modules.settings.schemas import PublicSettingsResponse
from donation_admin.modules.settings.service import SettingService
from donation_admin.modules.share_links.models import ShareResourceType
from donation_admin.modules.share_links.router import get_share_link_service
from donation_admin.modules.share_links.schemas import (
    SharedCampaignData,
    SharedCampaignResponse,
    SharedProfileData,
    SharedProfileResponse,
)
from donation_admin.modules.share_links.service import ShareLinkService

# Rotas sem autenticacao
router = APIRouter(
    prefix='/api/public',
    tags=['Public'],
)

_PROFILE_TYPES = (ShareResourceType.profile.value, ShareResourceType.portfolio.value)
_CAMPAIGN_TYPES = (ShareResourceType.campaign.value,)


@router.get('/settings', response_model=PublicSettingsResponse)
def get_public_settings(
    service: SettingService = Depends(get_setting_service),
) -> PublicSettingsResponse:
    """Retorna o subconjunto publico das configuracoes (tema, marca, contato)."""
    return PublicSettingsResponse(
        message='Configuracoes publicas recuperadas com sucesso',
        settings=service.get_public_settings(),
    )


@router.get('/share/profile/{share_id}', response_model=SharedProfileResponse)
def get_shared_profile(
    share_id: str,
    service: ShareLinkService = Depends(get_share_link_service),
) -> SharedProfileResponse:
    """
    Resolve o link publico de um perfil.

    Cada resolucao bem-sucedida incrementa o contador de visualizacoes.
    """
    resolved = service.resolve(share_id, _PROFILE_TYPES)
    user = resolved.resource
    return SharedProfileResponse(
        data=SharedProfileData(
            type=user.role,
            user=PublicProfileResponse.model_validate(user),
            custom_design=resolved.link.custom_design or {},
            view_count=resolved.link.view_count,
        ),
    )


@router.get('/share/campaign/{share_id}', response_model=SharedCampaignResponse)
def get_shared_campaign(
    share_id: str,
    service: ShareLinkService = Depends(get_share_link_service),
) -> SharedCampaignResponse:
    """Resolve o link publico de uma campanha."""
    resolved = service.resolve(share_id, _CAMPAIGN_TYPES)
    return SharedCampaignResponse(
        data=SharedCampaignData(
            campaign=CampaignPublicResponse.model_validate(resolved.resource),
            custom_design=resolved.link.custom_design or {},
            view_count=resolved.link.view_count,
        ),
    )

"""
Resolucao de recursos referenciados por links de compartilhamento.

Cada tipo de recurso tem uma funcao resolver(resource_id) que devolve a
entidade ou None quando ela nao existe (ou nao deve ser exibida).
"""

import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from donation_admin.modules.auth.repository import UserRepository
from donation_admin.modules.campaigns.repository import CampaignRepository
from donation_admin.modules.share_links.models import ShareResourceType

ResourceResolver = Callable[[str], Any | None]


def _parse_uuid(resource_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(resource_id))
    except ValueError:
        return None


def build_resource_resolvers(db: Session) -> dict[str, ResourceResolver]:
    """
    Monta o registro de resolvers por tipo de recurso.

    profile e portfolio apontam para usuarios ativos; campaign aponta para
    campanhas nao excluidas.
    """
    users = UserRepository(db)
    campaigns = CampaignRepository(db)

    def resolve_user(resource_id: str):
        user_id = _parse_uuid(resource_id)
        if user_id is None:
            return None
        user = users.get_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return user

    def resolve_campaign(resource_id: str):
        campaign_id = _parse_uuid(resource_id)
        if campaign_id is None:
            return None
        return campaigns.get_by_id(campaign_id)

    return {
        ShareResourceType.profile.value: resolve_user,
        ShareResourceType.portfolio.value: resolve_user,
        ShareResourceType.campaign.value: resolve_campaign,
    }

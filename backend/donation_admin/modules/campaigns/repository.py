import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from donation_admin.modules.campaigns.models import Campaign


class CampaignRepository:
    """
    Repositorio de acesso a dados de campanhas.

    Nao contem logica de negocio, apenas acesso a dados.
    """

    def __init__(self, db: Session) -> None:
        """Inicializa o repositorio com a sessao do banco."""
        self._db = db

    def get_by_id(self, campaign_id: uuid.UUID) -> Campaign | None:
        """
        Busca uma campanha pelo ID (excluindo registros com soft delete).

        Args:
            campaign_id: ID (UUID) da campanha.

        Returns:
            Campanha encontrada ou None.
        """
        stmt = select(Campaign).where(
            Campaign.id == campaign_id,
            Campaign.deleted_at.is_(None),
        )
        return self._db.execute(stmt).scalar_one_or_none()

    def create(self, campaign_data: dict) -> Campaign:
        """Cria uma nova campanha no banco de dados."""
        campaign = Campaign(**campaign_data)
        self._db.add(campaign)
        self._db.commit()
        self._db.refresh(campaign)
        return campaign

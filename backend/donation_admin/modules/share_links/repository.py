from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from donation_admin.modules.share_links.models import ShareLink
from donation_admin.shared.utils import utc_now


class ShareLinkRepository:
    """
    Repositorio de acesso a dados de links de compartilhamento.

    Nao contem logica de negocio. As constraints unicas (share_id e par
    resource_type/resource_id) sao garantidas pelo banco; violacoes na
    criacao sao propagadas como IntegrityError para o servico decidir.
    """

    def __init__(self, db: Session) -> None:
        """Inicializa o repositorio com a sessao do banco."""
        self._db = db

    def get_by_share_id(self, share_id: str) -> ShareLink | None:
        """Busca um link pelo identificador publico."""
        stmt = select(ShareLink).where(ShareLink.share_id == share_id)
        return self._db.execute(stmt).scalar_one_or_none()

    def get_by_resource(
        self,
        resource_type: str,
        resource_id: str,
    ) -> ShareLink | None:
        """
        Busca o link de um recurso.

        Args:
            resource_type: Tipo do recurso (profile, campaign, portfolio).
            resource_id: Identificador do recurso.

        Returns:
            Link encontrado ou None.
        """
        stmt = select(ShareLink).where(
            ShareLink.resource_type == resource_type,
            ShareLink.resource_id == resource_id,
        )
        return self._db.execute(stmt).scalar_one_or_none()

    def create(self, link_data: dict) -> ShareLink:
        """
        Cria um novo link de compartilhamento.

        Raises:
            IntegrityError: Se o par de recurso ou o share_id ja existirem.
                A transacao e desfeita antes de propagar.
        """
        link = ShareLink(**link_data)
        self._db.add(link)
        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise
        self._db.refresh(link)
        return link

    def update(self, link: ShareLink, data: dict) -> ShareLink:
        """Atualiza campos de um link existente."""
        for field, value in data.items():
            setattr(link, field, value)
        self._db.commit()
        self._db.refresh(link)
        return link

    def increment_views(self, link: ShareLink) -> ShareLink:
        """
        Incrementa o contador de visualizacoes de forma atomica.

        Executa um unico UPDATE (view_count = view_count + 1), sem
        ler-modificar-gravar, e recarrega o link com o valor final.
        """
        stmt = (
            update(ShareLink)
            .where(ShareLink.id == link.id)
            .values(
                view_count=ShareLink.view_count + 1,
                last_viewed=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        self._db.execute(stmt)
        self._db.commit()
        self._db.refresh(link)
        return link


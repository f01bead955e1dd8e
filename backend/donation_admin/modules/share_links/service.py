import logging
import uuid
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from donation_admin.config import settings
from donation_admin.modules.audit.service import ActivityRecorder
from donation_admin.modules.share_links.models import ShareLink, ShareResourceType
from donation_admin.modules.share_links.repository import ShareLinkRepository
from donation_admin.modules.share_links.resolvers import ResourceResolver
from donation_admin.shared.exceptions import BadRequestException, NotFoundException
from donation_admin.shared.metrics import (
    track_dangling_share_link,
    track_share_link_created,
    track_share_link_view,
)
from donation_admin.shared.utils import as_utc, generate_share_token, utc_now

logger = logging.getLogger(__name__)

# Tentativas de criacao em caso de colisao de share_id
MAX_CREATE_ATTEMPTS = 3

EMPTY_DESIGN = {'html': '', 'css': ''}

LINK_NOT_FOUND_MESSAGE = 'Link compartilhado nao encontrado ou expirado'
RESOURCE_NOT_FOUND_MESSAGE = 'Recurso compartilhado nao encontrado'


def _public_path(resource_type: str) -> str:
    """Segmento de URL publica do tipo de recurso (portfolio usa profile)."""
    if resource_type == ShareResourceType.campaign.value:
        return 'campaign'
    return 'profile'


def build_share_url(link: ShareLink) -> str:
    """URL publica do frontend para o link."""
    base = settings.frontend_url.rstrip('/')
    return f'{base}/share/{_public_path(link.resource_type)}/{link.share_id}'


def build_api_url(link: ShareLink) -> str:
    """URL da API publica que resolve o link."""
    base = settings.api_public_url.rstrip('/')
    return f'{base}/api/public/share/{_public_path(link.resource_type)}/{link.share_id}'


@dataclass
class ResolvedShareLink:
    """Link resolvido junto com o recurso referenciado."""

    link: ShareLink
    resource: Any


@dataclass
class CustomDesignView:
    """Design de um recurso e URLs do link (nulos se o link nao existe)."""

    custom_design: dict
    share_url: str | None = None
    api_url: str | None = None
    share_link: ShareLink | None = None


class ShareLinkService:
    """
    Servico do registro de links publicos de compartilhamento.

    Garante no maximo um link por recurso (get-or-create idempotente),
    resolve links publicos contabilizando visualizacoes e gerencia o
    design customizado de cada link.
    """

    def __init__(
        self,
        repository: ShareLinkRepository,
        activity_logger: ActivityRecorder,
        resolvers: Mapping[str, ResourceResolver] | None = None,
    ) -> None:
        self._repository = repository
        self._activity_logger = activity_logger
        self._resolvers = dict(resolvers or {})

    # ---------------------------------------------------------------------
    # Criacao
    # ---------------------------------------------------------------------

    def get_or_create(
        self,
        resource_type: str,
        resource_id: str,
        actor_id: uuid.UUID | None,
    ) -> tuple[ShareLink, bool]:
        """
        Retorna o link existente do recurso ou cria um novo.

        Conflitos na constraint do par (requisicoes concorrentes) sao
        resolvidos relendo e reaproveitando o link ja gravado.

        Returns:
            Tupla (link, created).

        Raises:
            BadRequestException: Se o tipo de recurso for invalido.
            IntegrityError: Se todas as tentativas colidirem no share_id.
        """
        resource_type = self._validate_resource_type(resource_type)
        resource_id = str(resource_id)

        existing = self._repository.get_by_resource(resource_type, resource_id)
        if existing:
            return existing, False

        attempt = 0
        while True:
            attempt += 1
            try:
                link = self._repository.create({
                    'share_id': generate_share_token(),
                    'resource_type': resource_type,
                    'resource_id': resource_id,
                    'custom_design': {},
                    'is_active': True,
                    'view_count': 0,
                    'created_by': actor_id,
                })
            except IntegrityError:
                existing = self._repository.get_by_resource(resource_type, resource_id)
                if existing:
                    return existing, False
                if attempt >= MAX_CREATE_ATTEMPTS:
                    raise
                logger.warning(
                    'Colisao de share_id ao criar link para %s/%s (tentativa %d)',
                    resource_type,
                    resource_id,
                    attempt,
                )
                continue

            track_share_link_created(resource_type)
            self._activity_logger.record(
                actor_id,
                'share_link_created',
                f'Admin gerou link de compartilhamento para {resource_type} {resource_id}',
                {'share_id': link.share_id, 'resource_type': resource_type},
                resource_type='share_link',
                resource_id=resource_id,
            )
            return link, True

    # ---------------------------------------------------------------------
    # Resolucao publica
    # ---------------------------------------------------------------------

    def resolve(
        self,
        share_id: str,
        resource_types: Collection[str] | None = None,
    ) -> ResolvedShareLink:
        """
        Resolve um link publico e contabiliza a visualizacao.

        O link precisa estar ativo, nao expirado e (se informado) ser de um
        dos tipos esperados. O recurso e resolvido antes do incremento:
        falhas nao alteram o link.

        Raises:
            NotFoundException: Link inexistente, inativo, expirado ou de
                outro tipo; ou recurso referenciado inexistente (mensagem
                distinta).
        """
        link = self._repository.get_by_share_id(share_id)
        if not self._is_resolvable(link, resource_types):
            raise NotFoundException(LINK_NOT_FOUND_MESSAGE)

        resolver = self._resolvers.get(link.resource_type)
        resource = resolver(link.resource_id) if resolver else None
        if resource is None:
            logger.warning(
                'Link compartilhado %s aponta para %s inexistente: %s',
                link.share_id,
                link.resource_type,
                link.resource_id,
            )
            track_dangling_share_link(link.resource_type)
            raise NotFoundException(RESOURCE_NOT_FOUND_MESSAGE)

        link = self._repository.increment_views(link)
        track_share_link_view(link.resource_type)
        return ResolvedShareLink(link=link, resource=resource)

    # ---------------------------------------------------------------------
    # Design customizado
    # ---------------------------------------------------------------------

    def set_custom_design(
        self,
        resource_type: str,
        resource_id: str,
        design: dict,
        actor_id: uuid.UUID | None,
    ) -> ShareLink:
        """
        Substitui o design do link de um recurso, criando o link se preciso.
        """
        link, _ = self.get_or_create(resource_type, resource_id, actor_id)
        return self._replace_design(link, design, actor_id)

    def set_custom_design_by_share_id(
        self,
        share_id: str,
        design: dict,
        actor_id: uuid.UUID | None,
    ) -> ShareLink:
        """
        Substitui o design de um link existente.

        Raises:
            NotFoundException: Se o share_id nao existir.
        """
        link = self._get_link_or_404(share_id)
        return self._replace_design(link, design, actor_id)

    def get_custom_design(self, resource_type: str, resource_id: str) -> CustomDesignView:
        """
        Retorna o design do link de um recurso.

        A ausencia de link nao e erro: devolve design vazio e URLs nulas.
        """
        resource_type = self._validate_resource_type(resource_type)
        link = self._repository.get_by_resource(resource_type, str(resource_id))
        if link is None:
            return CustomDesignView(custom_design=dict(EMPTY_DESIGN))
        return self._design_view(link)

    def get_custom_design_by_share_id(self, share_id: str) -> CustomDesignView:
        """
        Retorna o design de um link pelo share_id.

        Raises:
            NotFoundException: Se o share_id nao existir.
        """
        return self._design_view(self._get_link_or_404(share_id))

    # ---------------------------------------------------------------------
    # Status
    # ---------------------------------------------------------------------

    def set_active(
        self,
        share_id: str,
        is_active: bool,
        expires_at: datetime | None,
        actor_id: uuid.UUID | None,
    ) -> ShareLink:
        """
        Ativa ou desativa um link e define (ou remove) sua expiracao.

        Raises:
            NotFoundException: Se o share_id nao existir.
        """
        link = self._get_link_or_404(share_id)
        link = self._repository.update(link, {
            'is_active': is_active,
            'expires_at': as_utc(expires_at),
        })

        self._activity_logger.record(
            actor_id,
            'share_link_status_updated',
            f'Admin {"ativou" if is_active else "desativou"} o link {share_id}',
            {
                'share_id': share_id,
                'is_active': is_active,
                'expires_at': expires_at.isoformat() if expires_at else None,
            },
            resource_type='share_link',
            resource_id=link.resource_id,
        )
        return link

    # ---------------------------------------------------------------------
    # Auxiliares
    # ---------------------------------------------------------------------

    def _replace_design(
        self,
        link: ShareLink,
        design: dict,
        actor_id: uuid.UUID | None,
    ) -> ShareLink:
        if not isinstance(design, dict):
            raise BadRequestException('O design customizado deve ser um objeto')

        link = self._repository.update(link, {'custom_design': dict(design)})
        self._activity_logger.record(
            actor_id,
            'share_link_customized',
            f'Admin customizou o link {link.share_id}',
            {'share_id': link.share_id, 'design_keys': sorted(design.keys())},
            resource_type='share_link',
            resource_id=link.resource_id,
        )
        return link

    def _get_link_or_404(self, share_id: str) -> ShareLink:
        link = self._repository.get_by_share_id(share_id)
        if link is None:
            raise NotFoundException('Link compartilhado nao encontrado')
        return link

    @staticmethod
    def _design_view(link: ShareLink) -> CustomDesignView:
        return CustomDesignView(
            custom_design=(
                link.custom_design if link.custom_design is not None else dict(EMPTY_DESIGN)
            ),
            share_url=build_share_url(link),
            api_url=build_api_url(link),
            share_link=link,
        )

    @staticmethod
    def _is_resolvable(
        link: ShareLink | None,
        resource_types: Collection[str] | None,
    ) -> bool:
        """Link existe, esta ativo, nao expirou e e de um tipo aceito."""
        if link is None or not link.is_active:
            return False
        if resource_types is not None and link.resource_type not in resource_types:
            return False
        expires_at = as_utc(link.expires_at)
        return expires_at is None or expires_at > utc_now()

    @staticmethod
    def _validate_resource_type(resource_type: str) -> str:
        try:
            return ShareResourceType(resource_type).value
        except ValueError:
            raise BadRequestException(f'Tipo de recurso invalido: {resource_type}')

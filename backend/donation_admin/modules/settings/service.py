import logging
import uuid
from dataclasses import dataclass, field

from cryptography.fernet import InvalidToken
from sqlalchemy.exc import SQLAlchemyError

from donation_admin.config import settings as app_settings
from donation_admin.modules.audit.service import ActivityRecorder
from donation_admin.modules.settings.defaults import (
    SettingValue,
    get_default_settings,
    is_default_category,
)
from donation_admin.modules.settings.models import Setting
from donation_admin.modules.settings.repository import SettingRepository
from donation_admin.shared.cache import cached, invalidate_cache
from donation_admin.shared.exceptions import BadRequestException, NotFoundException
from donation_admin.shared.metrics import track_settings_write
from donation_admin.shared.security import is_sensitive_key
from donation_admin.shared.utils import decrypt_dict, encrypt_dict

logger = logging.getLogger(__name__)

PUBLIC_SETTINGS_CACHE_PREFIX = 'settings:public'

# Chaves expostas publicamente, por grupo -> (categoria de origem, chaves)
_PUBLIC_THEME_KEYS = ('primary_color', 'secondary_color')
_PUBLIC_BRANDING_KEYS = ('logo_url', 'favicon_url')
_PUBLIC_GENERAL_KEYS = ('site_name', 'site_description')
_PUBLIC_FLAG_KEYS = ('registration_enabled', 'maintenance_mode')
_PUBLIC_CONTACT_KEYS = (
    'company_name',
    'contact_email',
    'contact_phone',
    'contact_address',
    'copyright_text',
    'terms_url',
    'privacy_url',
)

SettingsBag = dict[str, SettingValue]


@dataclass
class BulkUpsertResult:
    """Resultado da atualizacao em lote (categorias gravadas e falhas)."""

    updated_categories: list[str] = field(default_factory=list)
    failed_categories: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed_categories


class SettingService:
    """
    Servico de configuracoes da plataforma.

    Cada categoria e um conjunto aberto de pares chave-valor gravado como
    um unico registro. Escritas substituem o conjunto inteiro (sem merge).
    Categorias da tabela de padroes podem ser inicializadas e resetadas.
    """

    def __init__(
        self,
        repository: SettingRepository,
        activity_logger: ActivityRecorder,
    ) -> None:
        """Inicializa o servico com o repositorio e o registrador de atividades."""
        self._repository = repository
        self._activity_logger = activity_logger

    # ---------------------------------------------------------------------
    # Leitura
    # ---------------------------------------------------------------------

    def get_all(self) -> dict[str, SettingsBag]:
        """
        Retorna todas as categorias (categoria -> valores).

        Categorias padrao ainda nao gravadas aparecem com seus valores padrao.
        """
        result: dict[str, SettingsBag] = {
            setting.category: self._decrypt(setting)
            for setting in self._repository.get_all()
        }
        for category, values in get_default_settings().items():
            result.setdefault(category, values)
        return dict(sorted(result.items()))

    def get_by_category(self, category: str) -> SettingsBag:
        """
        Retorna os valores de uma categoria.

        Raises:
            NotFoundException: Se a categoria nunca foi gravada e nao
                possui entrada na tabela de padroes.
        """
        setting = self._repository.get_by_category(category)
        if setting:
            return self._decrypt(setting)

        defaults = get_default_settings()
        if category in defaults:
            return defaults[category]

        raise NotFoundException('Categoria de configuracoes nao encontrada')

    def get_defaults(self) -> dict[str, SettingsBag]:
        """Retorna a tabela embutida de configuracoes padrao."""
        return get_default_settings()

    @cached(
        ttl=lambda: app_settings.public_settings_cache_ttl,
        prefix=PUBLIC_SETTINGS_CACHE_PREFIX,
    )
    def get_public_settings(self) -> dict[str, SettingsBag]:
        """
        Retorna o subconjunto publico das configuracoes.

        Inclui tema, identidade visual, flags de funcionalidades, contato
        e redes sociais. Chaves com nomes sensiveis nunca sao expostas.
        Chaves ausentes em uma categoria gravada caem para o valor padrao.
        """
        defaults = get_default_settings()
        stored = self.get_all()

        def merged(category: str) -> SettingsBag:
            return {**defaults.get(category, {}), **stored.get(category, {})}

        branding = merged('branding')
        general = merged('general')
        features = merged('features')
        legal = merged('legal')
        social = merged('social')

        public = {
            'theme': _pick(branding, _PUBLIC_THEME_KEYS),
            'branding': {
                **_pick(general, _PUBLIC_GENERAL_KEYS),
                **_pick(branding, _PUBLIC_BRANDING_KEYS),
            },
            'features': {
                **{key: value for key, value in features.items() if key.startswith('enable_')},
                **_pick(general, _PUBLIC_FLAG_KEYS),
            },
            'contact': _pick(legal, _PUBLIC_CONTACT_KEYS),
            'social': {key: value for key, value in social.items() if key.endswith('_url')},
        }
        return {
            group: {key: value for key, value in values.items() if not is_sensitive_key(key)}
            for group, values in public.items()
        }

    # ---------------------------------------------------------------------
    # Escrita
    # ---------------------------------------------------------------------

    def upsert(
        self,
        category: str,
        values: SettingsBag,
        actor_id: uuid.UUID | None,
    ) -> SettingsBag:
        """
        Substitui integralmente os valores de uma categoria (cria se ausente).

        Args:
            category: Nome da categoria.
            values: Novo conjunto completo de pares chave-valor.
            actor_id: ID do administrador responsavel.

        Returns:
            Valores gravados.

        Raises:
            BadRequestException: Se values nao for um dicionario.
        """
        self._validate_values(category, values)
        setting = self._write(category, values, actor_id, operation='upsert')

        self._activity_logger.record(
            actor_id,
            'admin_update_settings',
            f'Admin atualizou as configuracoes de {category}',
            {'category': category, 'settings_keys': list(values.keys())},
            resource_type='settings',
            resource_id=category,
        )
        return self._decrypt(setting)

    def bulk_upsert(
        self,
        data: dict[str, SettingsBag],
        actor_id: uuid.UUID | None,
    ) -> BulkUpsertResult:
        """
        Aplica upsert em varias categorias, cada uma em sua propria transacao.

        Nao ha atomicidade entre categorias: o payload inteiro e validado
        antes de qualquer escrita, e falhas de armazenamento por categoria
        sao acumuladas e devolvidas no resultado.
        """
        if not isinstance(data, dict) or not data:
            raise BadRequestException('Dados de configuracoes sao obrigatorios')
        for category, values in data.items():
            self._validate_values(category, values)

        result = BulkUpsertResult()
        for category, values in data.items():
            try:
                self._write(category, values, actor_id, operation='upsert')
                result.updated_categories.append(category)
            except SQLAlchemyError as exc:
                self._repository.rollback()
                logger.warning(
                    'Falha ao gravar a categoria de configuracoes "%s": %s',
                    category,
                    exc,
                )
                result.failed_categories[category] = str(exc)

        self._activity_logger.record(
            actor_id,
            'admin_bulk_update_settings',
            'Admin atualizou multiplas categorias de configuracoes: '
            + ', '.join(data),
            {
                'categories': result.updated_categories,
                'failed_categories': sorted(result.failed_categories),
            },
            resource_type='settings',
        )
        return result

    def reset_to_default(
        self,
        category: str,
        actor_id: uuid.UUID | None,
    ) -> SettingsBag:
        """
        Sobrescreve uma categoria com os valores da tabela de padroes.

        Raises:
            NotFoundException: Se a categoria nao possui entrada padrao
                (mesmo que exista com chaves customizadas).
        """
        if not is_default_category(category):
            raise NotFoundException('Categoria de configuracoes nao encontrada')

        defaults = get_default_settings()[category]
        self._write(category, defaults, actor_id, operation='reset')

        self._activity_logger.record(
            actor_id,
            'admin_reset_settings',
            f'Admin restaurou os padroes de {category}',
            {'category': category, 'settings_keys': list(defaults.keys())},
            resource_type='settings',
            resource_id=category,
        )
        return defaults

    def initialize_defaults(self, actor_id: uuid.UUID | None = None) -> list[str]:
        """
        Cria as categorias padrao que ainda nao existem.

        Categorias existentes nunca sao sobrescritas.

        Returns:
            Lista das categorias criadas.
        """
        created: list[str] = []
        for category, values in get_default_settings().items():
            setting = self._repository.create_if_absent(
                category,
                encrypt_dict(values),
                updated_by=actor_id,
            )
            if setting:
                created.append(category)
                track_settings_write('initialize', category)

        if created:
            invalidate_cache(PUBLIC_SETTINGS_CACHE_PREFIX)
            logger.info('Categorias de configuracoes inicializadas: %s', ', '.join(created))
            self._activity_logger.record(
                actor_id,
                'settings_initialized',
                'Configuracoes padrao inicializadas: ' + ', '.join(created),
                {'categories': created},
                resource_type='settings',
            )
        return created

    # ---------------------------------------------------------------------
    # Auxiliares
    # ---------------------------------------------------------------------

    def _write(
        self,
        category: str,
        values: SettingsBag,
        actor_id: uuid.UUID | None,
        operation: str,
    ) -> Setting:
        """Criptografa e grava a categoria, invalidando o cache publico."""
        setting = self._repository.upsert(
            category,
            encrypt_dict(values),
            updated_by=actor_id,
        )
        invalidate_cache(PUBLIC_SETTINGS_CACHE_PREFIX)
        track_settings_write(operation, category)
        return setting

    @staticmethod
    def _validate_values(category: str, values: SettingsBag) -> None:
        """Rejeita payloads malformados antes de qualquer acesso ao banco."""
        if not isinstance(category, str) or not category.strip():
            raise BadRequestException('A categoria e obrigatoria')
        if not isinstance(values, dict):
            raise BadRequestException(
                f'As configuracoes da categoria "{category}" devem ser um objeto'
            )

    @staticmethod
    def _decrypt(setting: Setting) -> SettingsBag:
        """Descriptografa os valores de uma categoria."""
        try:
            return decrypt_dict(setting.encrypted_values)
        except InvalidToken:
            # Chave de criptografia trocada sem rotacao: nao expoe o conteudo
            logger.warning(
                'Nao foi possivel descriptografar a categoria de configuracoes: %s',
                setting.category,
            )
            return {}


def _pick(values: SettingsBag, keys: tuple[str, ...]) -> SettingsBag:
    """Seleciona as chaves informadas que existem no conjunto."""
    return {key: values[key] for key in keys if key in values}

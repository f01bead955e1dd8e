import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from donation_admin.modules.settings.models import Setting
from donation_admin.shared.utils import utc_now


class SettingRepository:
    """
    Repositorio de acesso a dados de categorias de configuracao.

    Responsavel por operacoes de leitura e escrita na tabela settings.
    Nao contem logica de negocio, apenas acesso a dados.
    A unicidade de categoria e garantida pela constraint do banco.
    """

    def __init__(self, db: Session) -> None:
        """Inicializa o repositorio com a sessao do banco."""
        self._db = db

    def get_by_category(
        self,
        category: str,
        include_inactive: bool = False,
    ) -> Setting | None:
        """
        Busca uma categoria de configuracao.

        Args:
            category: Nome da categoria (ex: email, branding).
            include_inactive: Se True, retorna tambem categorias inativas.

        Returns:
            Configuracao encontrada ou None.
        """
        stmt = select(Setting).where(Setting.category == category)
        if not include_inactive:
            stmt = stmt.where(Setting.is_active.is_(True))
        return self._db.execute(stmt).scalar_one_or_none()

    def get_all(self) -> list[Setting]:
        """Retorna todas as categorias ativas ordenadas por nome."""
        stmt = (
            select(Setting)
            .where(Setting.is_active.is_(True))
            .order_by(Setting.category)
        )
        return list(self._db.execute(stmt).scalars().all())

    def upsert(
        self,
        category: str,
        encrypted_values: str,
        updated_by: uuid.UUID | None = None,
    ) -> Setting:
        """
        Cria ou sobrescreve uma categoria de configuracao (upsert).

        O conjunto de valores e substituido por completo. Se outra requisicao
        criar a mesma categoria entre a leitura e a insercao, a violacao da
        constraint unica e tratada como atualizacao do registro existente
        (last-write-wins).

        Args:
            category: Nome da categoria.
            encrypted_values: JSON criptografado com os pares chave-valor.
            updated_by: ID do usuario responsavel pela alteracao.

        Returns:
            Configuracao criada ou atualizada.
        """
        existing = self.get_by_category(category, include_inactive=True)
        if existing:
            return self._overwrite(existing, encrypted_values, updated_by)

        setting = Setting(
            category=category,
            encrypted_values=encrypted_values,
            updated_by=updated_by,
            last_modified=utc_now(),
            is_active=True,
        )
        self._db.add(setting)
        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            existing = self.get_by_category(category, include_inactive=True)
            if existing is None:
                raise
            return self._overwrite(existing, encrypted_values, updated_by)

        self._db.refresh(setting)
        return setting

    def create_if_absent(
        self,
        category: str,
        encrypted_values: str,
        updated_by: uuid.UUID | None = None,
    ) -> Setting | None:
        """
        Cria a categoria somente se ela ainda nao existir.

        Returns:
            Configuracao criada, ou None se a categoria ja existia.
        """
        if self.get_by_category(category, include_inactive=True):
            return None

        setting = Setting(
            category=category,
            encrypted_values=encrypted_values,
            updated_by=updated_by,
            last_modified=utc_now(),
            is_active=True,
        )
        self._db.add(setting)
        try:
            self._db.commit()
        except IntegrityError:
            # Criada concorrentemente por outro processo
            self._db.rollback()
            return None

        self._db.refresh(setting)
        return setting

    def rollback(self) -> None:
        """Descarta a transacao corrente apos uma falha de escrita."""
        self._db.rollback()

    def _overwrite(
        self,
        setting: Setting,
        encrypted_values: str,
        updated_by: uuid.UUID | None,
    ) -> Setting:
        """Sobrescreve os valores de uma categoria existente."""
        setting.encrypted_values = encrypted_values
        setting.updated_by = updated_by
        setting.last_modified = utc_now()
        setting.is_active = True
        self._db.commit()
        self._db.refresh(setting)
        return setting

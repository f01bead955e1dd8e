from pydantic import BaseModel, Field, field_validator

from donation_admin.modules.settings.defaults import SettingValue
from donation_admin.shared.security import sanitize_text


def _validate_keys(values: dict[str, SettingValue]) -> dict[str, SettingValue]:
    """Valida as chaves de um conjunto de configuracoes; valores sao gravados como enviados."""
    for key in values:
        if not key.strip():
            raise ValueError('As chaves de configuracao nao podem estar vazias')
        if key != key.strip():
            raise ValueError(f'Chave de configuracao com espacos nas extremidades: "{key}"')
    return values


def _clean_category(category: str) -> str:
    """Sanitiza e valida o nome de uma categoria."""
    cleaned = sanitize_text(category)
    if not cleaned:
        raise ValueError('A categoria nao pode estar vazia')
    if len(cleaned) > 100:
        raise ValueError('A categoria deve ter no maximo 100 caracteres')
    return cleaned


class SettingsUpsertRequest(BaseModel):
    """
    Schema para substituicao completa dos valores de uma categoria.

    Os valores informados substituem integralmente os anteriores
    (chaves ausentes sao descartadas).
    """

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description='Categoria da configuracao (ex: email, branding)',
    )
    values: dict[str, SettingValue] = Field(
        ...,
        description='Dicionario de configuracoes (chave -> valor escalar)',
    )

    @field_validator('category')
    @classmethod
    def category_sanitized(cls, v: str) -> str:
        """Sanitiza categoria."""
        return _clean_category(v)

    @field_validator('values')
    @classmethod
    def values_keys_valid(cls, v: dict[str, SettingValue]) -> dict[str, SettingValue]:
        """Valida as chaves da categoria."""
        return _validate_keys(v)


class SettingsBulkUpsertRequest(BaseModel):
    """Schema para atualizacao de varias categorias em uma unica requisicao."""

    categories: dict[str, dict[str, SettingValue]] = Field(
        ...,
        description='Dicionario categoria -> (chave -> valor)',
    )

    @field_validator('categories')
    @classmethod
    def categories_valid(
        cls,
        v: dict[str, dict[str, SettingValue]],
    ) -> dict[str, dict[str, SettingValue]]:
        """Valida que ha ao menos uma categoria e valida as chaves."""
        if not v:
            raise ValueError('Informe ao menos uma categoria')
        return {_clean_category(category): _validate_keys(values) for category, values in v.items()}


class CategorySettingsResponse(BaseModel):
    """Schema de resposta com os valores de uma categoria."""

    success: bool = True
    message: str
    category: str
    values: dict[str, SettingValue]


class AllSettingsResponse(BaseModel):
    """Schema de resposta com todas as categorias (categoria -> valores)."""

    success: bool = True
    message: str
    settings: dict[str, dict[str, SettingValue]]


class BulkUpsertResponse(BaseModel):
    """
    Schema de resposta da atualizacao em lote.

    failed_categories mapeia cada categoria que falhou para a mensagem
    de erro correspondente; as demais foram gravadas normalmente.
    """

    success: bool
    message: str
    updated_categories: list[str]
    failed_categories: dict[str, str] = Field(default_factory=dict)


class PublicSettingsResponse(BaseModel):
    """Subconjunto seguro de configuracoes exposto sem autenticacao."""

    success: bool = True
    message: str
    settings: dict[str, dict[str, SettingValue]]

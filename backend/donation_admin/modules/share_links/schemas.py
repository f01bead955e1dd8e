from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from donation_admin.modules.auth.schemas import PublicProfileResponse
from donation_admin.modules.campaigns.schemas import CampaignPublicResponse
from donation_admin.shared.security import validate_json_size

# Limite do payload de design customizado (HTML/CSS livres)
MAX_CUSTOM_DESIGN_BYTES = 256 * 1024


def _check_design_size(value: dict[str, Any] | None) -> dict[str, Any] | None:
    """Valida o tamanho de um payload de design (conteudo gravado como enviado)."""
    return validate_json_size(value, MAX_CUSTOM_DESIGN_BYTES, 'custom_design')


class ShareLinkSummary(BaseModel):
    """Resumo de um link de compartilhamento (visao administrativa)."""

    model_config = ConfigDict(from_attributes=True)

    share_id: str
    resource_type: str
    resource_id: str
    is_active: bool
    view_count: int
    last_viewed: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime


class ShareLinkCreateResponse(BaseModel):
    """Resposta da geracao (ou reaproveitamento) de um link."""

    success: bool = True
    message: str
    created: bool
    share_id: str
    share_url: str
    api_url: str


class CustomDesignRequest(BaseModel):
    """
    Schema para definir o design customizado de um perfil compartilhado.

    Se html ou css forem informados, o design e montado como
    {html, css, **customDesign}; caso contrario, customDesign e usado
    diretamente. O design anterior e sempre substituido por completo.
    """

    model_config = ConfigDict(populate_by_name=True)

    html: str | None = None
    css: str | None = None
    custom_design: dict[str, Any] | None = Field(
        default=None,
        alias='customDesign',
        description='Objeto livre de design (chaves de tema, blocos, etc.)',
    )

    @field_validator('custom_design')
    @classmethod
    def custom_design_valid(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        """Valida o tamanho do design."""
        return _check_design_size(v)

    @field_validator('html', 'css')
    @classmethod
    def markup_size(cls, v: str | None) -> str | None:
        """Limita o tamanho de HTML/CSS."""
        if v is not None and len(v.encode('utf-8')) > MAX_CUSTOM_DESIGN_BYTES:
            raise ValueError(
                f'O campo excede o limite de {MAX_CUSTOM_DESIGN_BYTES // 1024}KB'
            )
        return v

    def build_design(self) -> dict[str, Any]:
        """Monta o payload final de design a ser gravado."""
        extra = self.custom_design or {}
        if self.html or self.css:
            return {'html': self.html or '', 'css': self.css or '', **extra}
        return dict(extra)


class ShareDesignUpdateRequest(BaseModel):
    """Schema para substituir o design de um link identificado pelo share_id."""

    model_config = ConfigDict(populate_by_name=True)

    custom_design: dict[str, Any] = Field(
        ...,
        alias='customDesign',
    )

    @field_validator('custom_design')
    @classmethod
    def custom_design_valid(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Valida o tamanho do design."""
        return _check_design_size(v)


class CustomDesignResponse(BaseModel):
    """Design customizado de um recurso e URLs do seu link (se existir)."""

    success: bool = True
    message: str
    custom_design: dict[str, Any]
    share_url: str | None = None
    api_url: str | None = None
    share_link: ShareLinkSummary | None = None


class ShareLinkStatusRequest(BaseModel):
    """Schema para ativar/desativar um link e definir sua expiracao."""

    is_active: bool
    expires_at: datetime | None = None


class ShareLinkStatusResponse(BaseModel):
    """Resposta da alteracao de status de um link."""

    success: bool = True
    message: str
    share_link: ShareLinkSummary


# ---------------------------------------------------------------------------
# Resolucao publica
# ---------------------------------------------------------------------------


class SharedProfileData(BaseModel):
    """Perfil resolvido a partir de um link publico."""

    type: str
    user: PublicProfileResponse
    custom_design: dict[str, Any]
    view_count: int


class SharedProfileResponse(BaseModel):
    """Resposta publica de um perfil compartilhado."""

    success: bool = True
    data: SharedProfileData


class SharedCampaignData(BaseModel):
    """Campanha resolvida a partir de um link publico."""

    campaign: CampaignPublicResponse
    custom_design: dict[str, Any]
    view_count: int


class SharedCampaignResponse(BaseModel):
    """Resposta publica de uma campanha compartilhada."""

    success: bool = True
    data: SharedCampaignData

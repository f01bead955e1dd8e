"""
Metricas Prometheus customizadas da plataforma de doacoes.

Define contadores para escritas de configuracoes e para o ciclo de vida
dos links publicos de compartilhamento.
"""

from prometheus_client import Counter

# ---------------------------------------------------------------------------
# Metricas de configuracoes
# ---------------------------------------------------------------------------

SETTINGS_WRITES_TOTAL = Counter(
    'donation_admin_settings_writes_total',
    'Total de escritas de configuracoes por operacao e categoria',
    ['operation', 'category'],  # operation: upsert/reset/initialize
)

# ---------------------------------------------------------------------------
# Metricas de links de compartilhamento
# ---------------------------------------------------------------------------

SHARE_LINKS_CREATED_TOTAL = Counter(
    'donation_admin_share_links_created_total',
    'Total de links de compartilhamento criados',
    ['resource_type'],
)

SHARE_LINK_VIEWS_TOTAL = Counter(
    'donation_admin_share_link_views_total',
    'Total de visualizacoes publicas de links de compartilhamento',
    ['resource_type'],
)

DANGLING_SHARE_LINKS_TOTAL = Counter(
    'donation_admin_dangling_share_links_total',
    'Links validos cujo recurso referenciado nao existe mais',
    ['resource_type'],
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def track_settings_write(operation: str, category: str) -> None:
    """Registra uma escrita de configuracao."""
    SETTINGS_WRITES_TOTAL.labels(operation=operation, category=category).inc()


def track_share_link_created(resource_type: str) -> None:
    """Registra a criacao de um link de compartilhamento."""
    SHARE_LINKS_CREATED_TOTAL.labels(resource_type=resource_type).inc()


def track_share_link_view(resource_type: str) -> None:
    """Registra uma resolucao publica bem-sucedida."""
    SHARE_LINK_VIEWS_TOTAL.labels(resource_type=resource_type).inc()


def track_dangling_share_link(resource_type: str) -> None:
    """Registra um link apontando para recurso inexistente."""
    DANGLING_SHARE_LINKS_TOTAL.labels(resource_type=resource_type).inc()

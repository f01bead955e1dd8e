from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuracoes da aplicacao carregadas de variaveis de ambiente."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # PostgreSQL
    # -------------------------------------------------------------------------
    postgres_host: str = 'localhost'
    postgres_port: int = 5432
    postgres_user: str = 'donation'
    postgres_password: str = 'donation_secret_password'
    postgres_db: str = 'donation_admin'

    @property
    def database_url(self) -> str:
        """URL de conexao com o PostgreSQL."""
        return (
            f'postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}'
            f'@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}'
        )

    # -------------------------------------------------------------------------
    # Redis
    # -------------------------------------------------------------------------
    redis_url: str = 'redis://localhost:6379/0'

    # Tempo de vida (segundos) do cache das configuracoes publicas
    public_settings_cache_ttl: int = 60

    # -------------------------------------------------------------------------
    # JWT
    # -------------------------------------------------------------------------
    jwt_secret_key: str = 'change-me-to-a-long-random-secret-key'
    jwt_algorithm: str = 'HS256'
    jwt_access_token_expire_minutes: int = 30
    jwt_refresh_token_expire_days: int = 7

    # -------------------------------------------------------------------------
    # Criptografia (Fernet)
    # -------------------------------------------------------------------------
    encryption_key: str = 'change-me-to-a-valid-fernet-key'
    encryption_keys: str = ''

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------
    cors_origins: str = 'http://localhost:5173'

    @property
    def cors_origins_list(self) -> list[str]:
        """Retorna lista de origens permitidas para CORS."""
        return [origin.strip() for origin in self.cors_origins.split(',')]

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = 'INFO'
    log_format: str = 'json'
    log_levels: str = ''

    # -------------------------------------------------------------------------
    # Links publicos de compartilhamento
    # -------------------------------------------------------------------------
    frontend_url: str = 'http://localhost:5173'
    api_public_url: str = 'http://localhost:8000'

    # -------------------------------------------------------------------------
    # Erros
    # -------------------------------------------------------------------------
    # Quando True, a mensagem original de erros inesperados e devolvida ao
    # cliente. Desligar se alguma rota administrativa for exposta publicamente.
    expose_internal_errors: bool = True

    # -------------------------------------------------------------------------
    # Admin Seed
    # -------------------------------------------------------------------------
    admin_email: str = 'admin@donationplatform.com'
    admin_password: str = 'admin123'
    admin_name: str = 'Administrador'


# Instancia global de configuracoes
settings = Settings()

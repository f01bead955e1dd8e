import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from donation_admin.config import settings
from donation_admin.database import SessionLocal
from donation_admin.modules.audit.repository import AuditLogRepository
from donation_admin.modules.audit.router import router as audit_router
from donation_admin.modules.audit.service import ActivityLogger
from donation_admin.modules.auth.router import router as auth_router
from donation_admin.modules.auth.service import decode_token
from donation_admin.modules.public.router import router as public_router
from donation_admin.modules.settings.repository import SettingRepository
from donation_admin.modules.settings.router import router as settings_router
from donation_admin.modules.settings.service import SettingService
from donation_admin.modules.share_links.router import router as share_links_router
from donation_admin.shared.exceptions import DomainException, UnauthorizedException
from donation_admin.shared.logging import (
    correlation_id_var,
    generate_id,
    get_logger,
    request_id_var,
    setup_logging,
    user_id_var,
)
from donation_admin.shared.redis_client import get_redis_client

# Inicializa logging estruturado antes de qualquer outro codigo
setup_logging(
    log_level=settings.log_level,
    log_format=settings.log_format,
    log_levels=settings.log_levels,
)

logger = get_logger(__name__)

SERVICE_NAME = 'Donation Admin API'
SERVICE_VERSION = '1.0.0'

# Limites e headers de seguranca
_MAX_BODY_SIZE_BYTES = 10 * 1024 * 1024
_SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Content-Security-Policy': "default-src 'self'",
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Permissions-Policy': 'camera=(), microphone=(), geolocation=()',
    'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
}

# Valores padrao inseguros que devem ser alterados em producao
_INSECURE_DEFAULTS: dict[str, str] = {
    'jwt_secret_key': 'change-me-to-a-long-random-secret-key',
    'encryption_key': 'change-me-to-a-valid-fernet-key',
    'admin_password': 'admin123',
}


def _get_user_id_from_request(request: Request) -> str | None:
    """Extrai user_id do token JWT (se presente)."""
    auth_header = request.headers.get('authorization', '')
    if not auth_header.lower().startswith('bearer '):
        return None
    token = auth_header.split(' ', 1)[1]
    try:
        payload = decode_token(token)
    except UnauthorizedException:
        return None
    return payload.get('sub')


def _check_security_settings() -> None:
    """
    Verifica configuracoes de seguranca no startup.

    Emite avisos se valores padrao inseguros estiverem em uso,
    mas nao bloqueia a inicializacao para permitir desenvolvimento local.
    """
    for setting_name, insecure_value in _INSECURE_DEFAULTS.items():
        current_value = getattr(settings, setting_name, None)
        if current_value == insecure_value:
            logger.warning(
                'AVISO DE SEGURANCA: A configuracao "%s" esta usando o valor padrao. '
                'Altere para um valor seguro no arquivo .env antes de usar em producao.',
                setting_name.upper(),
            )


def _initialize_default_settings() -> None:
    """Cria as categorias de configuracao padrao ausentes (nunca sobrescreve)."""
    db = SessionLocal()
    try:
        service = SettingService(
            SettingRepository(db),
            ActivityLogger(AuditLogRepository(db)),
        )
        created = service.initialize_defaults()
        logger.info('Configuracoes padrao verificadas (%d criadas)', len(created))
    except Exception:
        logger.exception('Falha ao inicializar configuracoes padrao')
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia o ciclo de vida da aplicacao (startup/shutdown)."""
    _check_security_settings()
    _initialize_default_settings()
    logger.info(
        '%s v%s iniciada. CORS origens: %s',
        SERVICE_NAME,
        SERVICE_VERSION,
        settings.cors_origins,
    )
    yield
    logger.info('%s encerrada.', SERVICE_NAME)


app = FastAPI(
    title=SERVICE_NAME,
    description='API administrativa da plataforma de doacoes - configuracoes e links publicos',
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url='/docs',
    redoc_url='/redoc',
)

# -------------------------------------------------------------------------
# CORS Middleware
# -------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'],
    allow_headers=[
        'Authorization',
        'Content-Type',
        'Accept',
        'Origin',
        'X-Requested-With',
        'X-Correlation-ID',
    ],
)

# -------------------------------------------------------------------------
# Prometheus Instrumentation
# -------------------------------------------------------------------------
Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    should_group_untemplated=True,
    excluded_handlers=['/metrics', '/docs', '/redoc', '/openapi.json'],
).instrument(app).expose(app, endpoint='/metrics', include_in_schema=False)


@app.middleware('http')
async def request_context_middleware(
    request: Request,
    call_next,
) -> JSONResponse:
    """
    Gera request_id e correlation_id para cada request HTTP.

    O correlation_id pode ser propagado pelo cliente via header
    X-Correlation-ID, ou sera gerado automaticamente.
    O request_id e sempre gerado pelo servidor.
    """
    req_id = generate_id()
    corr_id = request.headers.get('x-correlation-id') or generate_id()

    req_token = request_id_var.set(req_id)
    corr_token = correlation_id_var.set(corr_id)
    uid_token = user_id_var.set(_get_user_id_from_request(request))

    try:
        response = await call_next(request)
        response.headers['X-Request-ID'] = req_id
        response.headers['X-Correlation-ID'] = corr_id
        return response
    finally:
        request_id_var.reset(req_token)
        correlation_id_var.reset(corr_token)
        user_id_var.reset(uid_token)


@app.middleware('http')
async def request_size_limit_middleware(
    request: Request,
    call_next,
) -> JSONResponse:
    """Limita tamanho maximo do payload."""
    body = await request.body()
    if len(body) > _MAX_BODY_SIZE_BYTES:
        return JSONResponse(
            status_code=413,
            content={
                'success': False,
                'message': 'Payload muito grande. Limite: 10MB.',
            },
        )
    request._body = body
    return await call_next(request)


@app.middleware('http')
async def security_headers_middleware(request: Request, call_next) -> JSONResponse:
    """Aplica headers de seguranca."""
    response = await call_next(request)
    for key, value in _SECURITY_HEADERS.items():
        response.headers.setdefault(key, value)
    return response


# -------------------------------------------------------------------------
# Handlers globais de excecoes
# -------------------------------------------------------------------------


@app.exception_handler(DomainException)
async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'success': False, 'message': exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Campos ausentes ou malformados: 400 antes de qualquer acesso ao banco."""
    errors = [
        {
            'loc': [str(part) for part in error.get('loc', ())],
            'message': error.get('msg', ''),
            'type': error.get('type', ''),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            'success': False,
            'message': 'Dados da requisicao invalidos',
            'errors': errors,
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    logger.exception(
        'Erro nao tratado em %s %s',
        request.method,
        request.url.path,
    )
    content: dict = {'success': False, 'message': 'Erro interno do servidor'}
    if settings.expose_internal_errors:
        content['error'] = str(exc)
    return JSONResponse(status_code=500, content=content)


# -------------------------------------------------------------------------
# Routers dos modulos
# -------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(settings_router)
app.include_router(share_links_router)
app.include_router(public_router)
app.include_router(audit_router)


# -------------------------------------------------------------------------
# Health Check
# -------------------------------------------------------------------------


@app.get('/', tags=['Health'])
async def health_check() -> dict[str, str]:
    """Endpoint de health check simples da aplicacao."""
    return {
        'status': 'healthy',
        'service': SERVICE_NAME,
        'version': SERVICE_VERSION,
    }


@app.get('/api/health', tags=['Health'])
def api_health_check() -> dict:
    """
    Health check com status de cada componente.

    Banco de dados e critico (unhealthy se falhar); Redis e apenas cache
    (degraded se falhar).
    """
    components: dict[str, dict] = {}

    # --- Banco de dados ---
    try:
        start = time.monotonic()
        db = SessionLocal()
        try:
            result = db.execute(text('SELECT 1')).scalar()
            components['database'] = {
                'status': 'healthy',
                'latency_ms': round((time.monotonic() - start) * 1000, 1),
                'details': f'Query test OK (result={result})',
            }
        finally:
            db.close()
    except Exception as e:
        components['database'] = {
            'status': 'unhealthy',
            'error': str(e)[:200],
        }

    # --- Redis ---
    try:
        start = time.monotonic()
        pong = get_redis_client().ping()
        components['redis'] = {
            'status': 'healthy' if pong else 'degraded',
            'latency_ms': round((time.monotonic() - start) * 1000, 1),
        }
    except Exception as e:
        components['redis'] = {
            'status': 'degraded',
            'error': str(e)[:200],
        }

    statuses = [c['status'] for c in components.values()]
    if all(s == 'healthy' for s in statuses):
        overall = 'healthy'
    elif any(s == 'unhealthy' for s in statuses):
        overall = 'unhealthy'
    else:
        overall = 'degraded'

    return {
        'status': overall,
        'service': SERVICE_NAME,
        'version': SERVICE_VERSION,
        'components': components,
    }

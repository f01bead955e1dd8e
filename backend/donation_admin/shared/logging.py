"""
Logging estruturado da API administrativa de doacoes.

structlog renderiza tanto os eventos proprios quanto os do logging stdlib
(logging.getLogger(__name__) nos modulos), enriquecidos com o contexto
da requisicao corrente.
"""

import logging
import logging.config
import uuid
from contextvars import ContextVar

import structlog

# Contexto da requisicao corrente (preenchido pelo middleware em main.py)
request_id_var: ContextVar[str | None] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[str | None] = ContextVar('correlation_id', default=None)
user_id_var: ContextVar[str | None] = ContextVar('user_id', default=None)

_SERVICE_NAME = 'donation-admin'

# Bibliotecas ruidosas mantidas em WARNING
_QUIET_LOGGERS = ('uvicorn.access', 'sqlalchemy.engine')


def generate_id() -> str:
    """Gera um identificador curto (12 chars hex) para rastreamento."""
    return uuid.uuid4().hex[:12]


def add_request_context(logger, method_name: str, event_dict: dict) -> dict:
    """Processor: servico e identificadores da requisicao corrente."""
    event_dict['service'] = _SERVICE_NAME
    for key, var in (
        ('request_id', request_id_var),
        ('correlation_id', correlation_id_var),
        ('user_id', user_id_var),
    ):
        value = var.get()
        if value:
            event_dict[key] = value
    return event_dict


def parse_log_levels(log_levels_str: str) -> dict[str, str]:
    """
    Interpreta overrides de nivel por modulo no formato "modulo:NIVEL,...".

    Pares sem ':' ou com nivel desconhecido sao ignorados.
    """
    levels: dict[str, str] = {}
    for pair in (log_levels_str or '').split(','):
        module, _, level = pair.strip().rpartition(':')
        level = level.strip().upper()
        if module.strip() and isinstance(logging.getLevelName(level), int):
            levels[module.strip()] = level
    return levels


_configured = False


def setup_logging(
    log_level: str = 'INFO',
    log_format: str = 'json',
    log_levels: str = '',
) -> None:
    """Configura structlog e o logging stdlib uma unica vez por processo."""
    global _configured
    if _configured:
        return
    _configured = True

    pre_chain: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        add_request_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt='iso'),
    ]
    if log_format == 'console':
        renderers: list = [structlog.dev.ConsoleRenderer()]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]

    levels = {name: 'WARNING' for name in _QUIET_LOGGERS}
    levels.update(parse_log_levels(log_levels))

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'structlog': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processors': [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    *renderers,
                ],
                'foreign_pre_chain': pre_chain,
            },
        },
        'handlers': {
            'default': {
                'class': 'logging.StreamHandler',
                'formatter': 'structlog',
                'stream': 'ext://sys.stdout',
            },
        },
        'root': {'handlers': ['default'], 'level': log_level.upper()},
        'loggers': {name: {'level': level} for name, level in levels.items()},
    })

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)

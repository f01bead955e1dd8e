"""
Modulo de cache Redis para leituras frequentes.

Fornece o decorator @cached(ttl=N) para cachear resultados de funcoes,
e a funcao invalidate_cache para invalidacao por prefixo. Se o Redis estiver
indisponivel, o cache e simplesmente ignorado.
"""

import functools
import hashlib
import json
import logging
from collections.abc import Callable
from typing import Any

from donation_admin.shared.redis_client import get_redis_client

logger = logging.getLogger(__name__)

# Prefixo global para todas as chaves de cache
_CACHE_PREFIX = 'cache:'


def _make_cache_key(prefix: str, args: tuple, kwargs: dict) -> str:
    """Gera chave de cache deterministica a partir de prefix + argumentos."""
    key_data = json.dumps(
        {
            'a': [str(a) for a in args],
            'k': {str(k): str(v) for k, v in sorted(kwargs.items())},
        },
        sort_keys=True,
    )
    key_hash = hashlib.md5(key_data.encode()).hexdigest()[:16]
    return f'{_CACHE_PREFIX}{prefix}:{key_hash}'


def cached(
    ttl: int | Callable[[], int] = 60,
    prefix: str | None = None,
    is_method: bool = True,
):
    """
    Decorator que cacheia o resultado (JSON serializavel) de uma funcao no Redis.

    Args:
        ttl: Tempo de vida do cache em segundos, ou funcao que o retorna
             (permite ler o valor das configuracoes em tempo de execucao).
        prefix: Prefixo customizado para a chave. Se None, usa nome da funcao.
        is_method: Se True, ignora o primeiro argumento (self) na chave.

    Uso:
        @cached(ttl=300, prefix='settings:public')
        def get_public_settings(self):
            ...
    """
    def decorator(func):
        cache_prefix = prefix or f'{func.__module__}.{func.__qualname__}'

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            cache_args = args[1:] if is_method else args
            cache_key = _make_cache_key(cache_prefix, cache_args, kwargs)

            try:
                redis = get_redis_client()
                cached_value = redis.get(cache_key)
                if cached_value is not None:
                    return json.loads(cached_value)
            except Exception:
                # Se Redis falhar, executa a funcao normalmente
                logger.debug('Cache miss (Redis indisponivel) para %s', cache_key)

            result = func(*args, **kwargs)

            try:
                redis = get_redis_client()
                expire = ttl() if callable(ttl) else ttl
                redis.setex(cache_key, expire, json.dumps(result, default=_json_serializer))
            except Exception:
                logger.debug('Falha ao salvar cache para %s', cache_key)

            return result

        # Expoe o prefixo para invalidacao
        wrapper._cache_prefix = cache_prefix
        return wrapper
    return decorator


def invalidate_cache(prefix: str) -> int:
    """
    Invalida todas as chaves de cache que correspondem ao prefixo.

    Args:
        prefix: Prefixo das chaves a invalidar (ex: 'settings:public').

    Returns:
        Numero de chaves removidas.
    """
    try:
        redis = get_redis_client()
        pattern = f'{_CACHE_PREFIX}{prefix}:*'
        keys = list(redis.scan_iter(match=pattern, count=100))
        if keys:
            deleted = redis.delete(*keys)
            logger.debug('Cache invalidado: %d chaves com prefixo "%s"', deleted, prefix)
            return deleted
        return 0
    except Exception:
        logger.debug('Falha ao invalidar cache com prefixo "%s"', prefix)
        return 0


def _json_serializer(obj: Any) -> Any:
    """Serializer customizado para JSON que suporta tipos comuns."""
    import uuid
    from datetime import date, datetime

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if hasattr(obj, 'model_dump'):
        return obj.model_dump(mode='json')
    raise TypeError(f'Tipo nao serializavel: {type(obj)}')

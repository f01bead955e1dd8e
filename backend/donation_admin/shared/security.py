import json
import re
from typing import Any

# Regex para remover caracteres de controle ASCII
_CONTROL_CHARS_RE = re.compile(r'[\x00-\x08\x0b-\x0c\x0e-\x1f\x7f]')

# Fragmentos de chaves sensiveis (nunca expostas publicamente)
_SENSITIVE_KEYS = (
    'password',
    'passwd',
    'secret',
    'token',
    'api_key',
    'access_key',
    'private_key',
    'key_id',
    'client_id',
    'app_id',
    'database_url',
)


def is_sensitive_key(key: str) -> bool:
    """Indica se o nome de uma chave sugere conteudo sensivel."""
    lowered = key.lower()
    return any(fragment in lowered for fragment in _SENSITIVE_KEYS)


def sanitize_text(value: str) -> str:
    """
    Sanitiza um texto removendo caracteres de controle e trim.
    """
    if value is None:
        return value
    cleaned = _CONTROL_CHARS_RE.sub('', value)
    return cleaned.strip()


def validate_json_size(value: Any, max_bytes: int, field_name: str) -> Any:
    """
    Valida tamanho maximo de um campo JSON.
    """
    if value is None:
        return value
    try:
        payload = json.dumps(value, ensure_ascii=True)
    except (TypeError, ValueError):
        raise ValueError(f'Campo {field_name} possui JSON invalido')
    if len(payload.encode('utf-8')) > max_bytes:
        raise ValueError(
            f'Campo {field_name} excede o limite de {max_bytes // 1024}KB'
        )
    return value

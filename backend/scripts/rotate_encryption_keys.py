"""
Script para rotacao de chaves Fernet das categorias de configuracao.

Uso:
  ENCRYPTION_KEYS="nova_chave,antiga_chave" python -m scripts.rotate_encryption_keys

IMPORTANTE:
- A primeira chave de ENCRYPTION_KEYS sera usada para criptografar.
- As demais chaves serao usadas apenas para descriptografar.
"""

import sys

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from donation_admin.database import SessionLocal
from donation_admin.modules.settings.models import Setting
from donation_admin.shared.utils import get_fernet


def rotate_settings_keys(db: Session) -> int:
    """
    Recriptografa todas as categorias (inclusive inativas) com a chave atual.

    O conteudo descriptografado nao e alterado. Retorna a quantidade de
    categorias atualizadas.
    """
    fernet = get_fernet()
    updated = 0
    for setting in db.execute(select(Setting)).scalars():
        rotated = fernet.rotate(setting.encrypted_values.encode('utf-8'))
        setting.encrypted_values = rotated.decode('utf-8')
        updated += 1
    db.commit()
    return updated


def main() -> None:
    db = SessionLocal()
    try:
        updated = rotate_settings_keys(db)
        print(f'Rotacao concluida. Categorias atualizadas: {updated}')
    except SQLAlchemyError as exc:
        db.rollback()
        print(f'Erro na rotacao de chaves: {exc}', file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == '__main__':
    main()

"""
Script de seed: usuario admin padrao e categorias de configuracao padrao.

Executar via: python -m scripts.seed
"""

import sys

from sqlalchemy.exc import SQLAlchemyError

from donation_admin.config import settings
from donation_admin.database import SessionLocal
from donation_admin.modules.audit.repository import AuditLogRepository
from donation_admin.modules.audit.service import ActivityLogger
from donation_admin.modules.auth.models import User, UserRole
from donation_admin.modules.auth.repository import UserRepository
from donation_admin.modules.auth.service import hash_password
from donation_admin.modules.settings.repository import SettingRepository
from donation_admin.modules.settings.service import SettingService


def seed_admin_user(repository: UserRepository) -> User:
    """
    Cria o usuario admin padrao se ele ainda nao existir.

    Utiliza as configuracoes de ADMIN_EMAIL, ADMIN_PASSWORD e ADMIN_NAME
    definidas nas variaveis de ambiente.
    """
    existing_user = repository.get_by_email(settings.admin_email)
    if existing_user:
        print(f'Usuario admin ja existe: {settings.admin_email}.')
        return existing_user

    user = repository.create({
        'email': settings.admin_email,
        'hashed_password': hash_password(settings.admin_password),
        'name': settings.admin_name,
        'is_active': True,
        'role': UserRole.admin.value,
    })
    print(
        f'Usuario admin criado com sucesso!\n'
        f'  Email: {user.email}\n'
        f'  Nome: {user.name}\n'
        f'  ID: {user.id}'
    )
    return user


def seed_default_settings(service: SettingService, admin: User) -> list[str]:
    """Cria as categorias de configuracao padrao ausentes."""
    created = service.initialize_defaults(actor_id=admin.id)
    if created:
        print(f'Categorias de configuracao criadas: {", ".join(created)}')
    else:
        print('Todas as categorias de configuracao padrao ja existem.')
    return created


def main() -> None:
    db = SessionLocal()
    try:
        admin = seed_admin_user(UserRepository(db))
        service = SettingService(
            SettingRepository(db),
            ActivityLogger(AuditLogRepository(db)),
        )
        seed_default_settings(service, admin)
    except SQLAlchemyError as e:
        print(f'Erro ao executar seed: {e}', file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == '__main__':
    main()

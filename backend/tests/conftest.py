"""
Donation Admin - configuracao e fixtures de teste.
"""
import os
from collections.abc import Generator

import pytest
from cryptography.fernet import Fernet

# Variaveis de ambiente de teste (antes de importar a aplicacao)
os.environ['ENCRYPTION_KEY'] = Fernet.generate_key().decode()
os.environ['ENCRYPTION_KEYS'] = ''
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing-only'
# Porta inacessivel: o cache degrada para miss sem erro
os.environ['REDIS_URL'] = 'redis://localhost:1/0'
os.environ['LOG_FORMAT'] = 'console'
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['FRONTEND_URL'] = 'http://frontend.local'
os.environ['API_PUBLIC_URL'] = 'http://api.local'

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from donation_admin.database import Base, get_db
from donation_admin.main import app
from donation_admin.modules.auth.models import User, UserRole
from donation_admin.modules.auth.service import create_access_token, hash_password

TEST_PASSWORD = 'senha-de-teste-123'

test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    bind=test_engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


class FakeActivityLogger:
    """Registrador de atividades em memoria para testes de servico."""

    def __init__(self) -> None:
        self.records: list[dict] = []

    def record(
        self,
        actor_id,
        action,
        description,
        metadata=None,
        resource_type='admin',
        resource_id=None,
    ) -> None:
        self.records.append({
            'actor_id': actor_id,
            'action': action,
            'description': description,
            'metadata': metadata,
            'resource_type': resource_type,
            'resource_id': resource_id,
        })

    @property
    def actions(self) -> list[str]:
        return [entry['action'] for entry in self.records]


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Sessao com banco SQLite em memoria recriado a cada teste."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient com get_db apontando para a sessao de teste."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def activity_logger() -> FakeActivityLogger:
    return FakeActivityLogger()


def _create_user(db: Session, email: str, role: str, **extra) -> User:
    user = User(
        email=email,
        hashed_password=hash_password(TEST_PASSWORD),
        name=extra.pop('name', email.split('@')[0]),
        role=role,
        is_active=extra.pop('is_active', True),
        **extra,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return _create_user(db_session, 'admin@doacoes.org', UserRole.admin.value, name='Admin')


@pytest.fixture
def donor_user(db_session: Session) -> User:
    return _create_user(
        db_session,
        'doador@doacoes.org',
        UserRole.donor.value,
        name='Maria Doadora',
        phone='+55 11 99999-0000',
    )


@pytest.fixture
def make_user(db_session: Session):
    """Fabrica de usuarios adicionais."""

    def _make(email: str, role: str = UserRole.donor.value, **extra) -> User:
        return _create_user(db_session, email, role, **extra)

    return _make


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    token = create_access_token(str(admin_user.id))
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def donor_headers(donor_user: User) -> dict:
    token = create_access_token(str(donor_user.id))
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def user_password() -> str:
    return TEST_PASSWORD

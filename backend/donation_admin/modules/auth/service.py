import uuid
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from donation_admin.config import settings
from donation_admin.modules.auth.models import User
from donation_admin.modules.auth.repository import UserRepository
from donation_admin.modules.auth.schemas import TokenResponse
from donation_admin.shared.exceptions import UnauthorizedException


def hash_password(password: str) -> str:
    """
    Gera o hash bcrypt de uma senha.

    Args:
        password: Senha em texto puro.

    Returns:
        Hash bcrypt da senha.
    """
    return bcrypt.hashpw(
        password.encode('utf-8'), bcrypt.gensalt()
    ).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica se uma senha em texto puro corresponde ao hash bcrypt."""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8'),
    )


def _create_token(subject: str, token_type: str, expires_delta: timedelta) -> str:
    """Cria e assina um JWT do tipo informado (access ou refresh)."""
    now = datetime.now(UTC)
    to_encode = {
        'sub': subject,
        'exp': now + expires_delta,
        'iat': now,
        'jti': str(uuid.uuid4()),
        'type': token_type,
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def create_access_token(subject: str) -> str:
    """
    Cria um JWT access token.

    Args:
        subject: Identificador do usuario (UUID como string).

    Returns:
        Token JWT assinado.
    """
    return _create_token(
        subject,
        'access',
        timedelta(minutes=settings.jwt_access_token_expire_minutes),
    )


def create_refresh_token(subject: str) -> str:
    """Cria um JWT refresh token para o usuario informado."""
    return _create_token(
        subject,
        'refresh',
        timedelta(days=settings.jwt_refresh_token_expire_days),
    )


def decode_token(token: str) -> dict:
    """
    Decodifica e valida um token JWT.

    Raises:
        UnauthorizedException: Se o token for invalido ou expirado.
    """
    try:
        payload: dict = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload
    except JWTError:
        raise UnauthorizedException('Token invalido ou expirado')


class AuthService:
    """
    Servico de autenticacao.

    Contem a logica de negocio para login, refresh de tokens
    e obtencao do usuario autenticado. A emissao de tokens e um
    colaborador das rotas administrativas, que so dependem de
    get_current_user_data.
    """

    def __init__(self, repository: UserRepository) -> None:
        """Inicializa o servico com o repositorio de usuarios."""
        self._repository = repository

    def authenticate(self, email: str, password: str) -> TokenResponse:
        """
        Autentica um usuario com email e senha.

        Raises:
            UnauthorizedException: Se as credenciais forem invalidas.
        """
        user = self._repository.get_by_email(email)

        if not user or not verify_password(password, user.hashed_password):
            raise UnauthorizedException('Credenciais invalidas')

        if not user.is_active:
            raise UnauthorizedException('Usuario desativado')

        return TokenResponse(
            access_token=create_access_token(str(user.id)),
            refresh_token=create_refresh_token(str(user.id)),
        )

    def refresh_token(self, refresh_token_str: str) -> TokenResponse:
        """
        Renova os tokens usando um refresh token valido.

        Raises:
            UnauthorizedException: Se o refresh token for invalido.
        """
        user = self._get_user_from_token(refresh_token_str, 'refresh')
        return TokenResponse(
            access_token=create_access_token(str(user.id)),
            refresh_token=create_refresh_token(str(user.id)),
        )

    def get_current_user_data(self, token: str) -> User:
        """
        Obtem o usuario a partir de um access token.

        Args:
            token: Access token JWT.

        Returns:
            Modelo User do usuario autenticado.

        Raises:
            UnauthorizedException: Se o token for invalido ou o usuario nao existir.
        """
        return self._get_user_from_token(token, 'access')

    def _get_user_from_token(self, token: str, expected_type: str) -> User:
        """Valida tipo e subject do token e carrega o usuario ativo."""
        payload = decode_token(token)

        if payload.get('type') != expected_type:
            raise UnauthorizedException('Token invalido: tipo incorreto')

        subject = payload.get('sub')
        if not subject:
            raise UnauthorizedException('Token invalido: subject ausente')

        try:
            user_id = uuid.UUID(subject)
        except ValueError:
            raise UnauthorizedException('Token invalido: subject malformado')

        user = self._repository.get_by_id(user_id)
        if not user:
            raise UnauthorizedException('Usuario nao encontrado')

        if not user.is_active:
            raise UnauthorizedException('Usuario desativado')

        return user

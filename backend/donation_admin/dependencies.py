from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from donation_admin.database import get_db
from donation_admin.modules.audit.repository import AuditLogRepository
from donation_admin.modules.audit.service import ActivityLogger
from donation_admin.modules.auth.models import User
from donation_admin.modules.auth.repository import UserRepository
from donation_admin.modules.auth.service import AuthService
from donation_admin.shared.exceptions import ForbiddenException, UnauthorizedException

# Esquema OAuth2 para extracao do token do header Authorization.
# auto_error=False para que a ausencia do token gere o envelope padrao (401).
oauth2_scheme = OAuth2PasswordBearer(tokenUrl='/api/auth/login', auto_error=False)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency que valida o token JWT e retorna o usuario autenticado.

    Extrai o token Bearer do header Authorization, decodifica e valida o JWT,
    e retorna o modelo User correspondente.

    Raises:
        UnauthorizedException: Se o token estiver ausente, for invalido
            ou o usuario nao existir.
    """
    if not token:
        raise UnauthorizedException('Acesso negado. Token nao informado.')
    service = AuthService(UserRepository(db))
    return service.get_current_user_data(token)


def require_roles(*allowed_roles: str):
    """
    Dependency para exigir roles especificas.

    Uso:
        current_user: User = Depends(require_roles('admin'))
    """

    def _role_dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise ForbiddenException('Permissao insuficiente para esta acao')
        return current_user

    return _role_dependency


def get_activity_logger(db: Session = Depends(get_db)) -> ActivityLogger:
    """Dependency que fornece o registrador de atividades (auditoria)."""
    return ActivityLogger(AuditLogRepository(db))

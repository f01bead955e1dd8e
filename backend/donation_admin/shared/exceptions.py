class DomainException(Exception):
    """Excecao base da aplicacao, convertida no envelope JSON de erro."""

    status_code: int = 500
    default_message: str = 'Erro interno do servidor'

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Excecao para recurso nao encontrado (HTTP 404)."""

    status_code = 404
    default_message = 'Recurso nao encontrado'


class UnauthorizedException(DomainException):
    """Excecao para acesso nao autorizado (HTTP 401)."""

    status_code = 401
    default_message = 'Nao autorizado'


class ForbiddenException(DomainException):
    """Excecao para acesso proibido (HTTP 403)."""

    status_code = 403
    default_message = 'Acesso proibido'


class BadRequestException(DomainException):
    """Excecao para requisicao invalida (HTTP 400)."""

    status_code = 400
    default_message = 'Requisicao invalida'

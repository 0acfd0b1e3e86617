"""
Domain errors

Every error raised by the stores and workflows derives from BarbershopError and
carries the HTTP status the API answers with. main.py registers one exception
handler that renders them as {"error": message}.
"""

from typing import Optional


class BarbershopError(Exception):
    """Base class for all domain errors"""

    status_code = 500
    default_message = "Erro interno do servidor."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadInput(BarbershopError):
    status_code = 400
    default_message = "Dados inválidos."


class Conflict(BarbershopError):
    status_code = 400
    default_message = "Conflito com um registro existente."


class SlotTaken(Conflict):
    default_message = "Este horário acabou de ser reservado!"


class DuplicateEmail(Conflict):
    default_message = "Erro ao cadastrar: e-mail já existe."


class NotFound(BarbershopError):
    status_code = 400
    default_message = "Registro não encontrado."


class AccountNotFound(NotFound):
    default_message = "E-mail não encontrado."


class AppointmentNotFound(NotFound):
    status_code = 404
    default_message = "Agendamento não encontrado."


class InvalidCredentials(BarbershopError):
    status_code = 400
    default_message = "Senha incorreta."


class InvalidOrExpiredToken(BarbershopError):
    status_code = 400
    default_message = "Token inválido ou expirado."


class GatewayError(BarbershopError):
    """Raised when the payment gateway fails, times out or answers unexpectedly"""

    status_code = 500
    default_message = "Erro ao gerar pagamento."


class StoreError(BarbershopError):
    status_code = 500
    default_message = "Erro ao salvar os dados."


class NotificationError(BarbershopError):
    """Raised by the email transport; never escapes email_service"""

    default_message = "Erro ao enviar e-mail."


class RateLimited(BarbershopError):
    status_code = 429
    default_message = "Muitas tentativas. Tente novamente mais tarde."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        super().__init__(message)
        self.headers = {"Retry-After": str(retry_after)}

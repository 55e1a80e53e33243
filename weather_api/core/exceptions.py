"""
Application exceptions.

Services raise these at their boundary; the handlers registered in
``weather_api.main`` turn them into ``{"error": true, "message": ...}``
responses with the matching status code.
"""

from typing import Iterable, List, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that are safe to show to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Erro interno do servidor"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """
    Bad input shape or format.

    Holds one message per failing field; ``message`` joins them so the
    client receives a single line.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Dados inválidos"

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__(", ".join(self.errors))


class DuplicateEmailError(AppError):
    """Email already belongs to another account."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "E-mail já cadastrado"


class NotFoundError(AppError):
    """Requested user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Usuário não encontrado"


class AuthError(AppError):
    """Missing, invalid or expired token, or wrong credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Não autorizado"

"""
Input validation for account payloads.

Each check collects every field-level problem before raising, so a client
sees all of them in one ``ValidationError`` message.
"""

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from weather_api.core.exceptions import ValidationError
from weather_api.schemas.auth import UserCreate, UserLogin, UserUpdate

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6

NAME_TOO_SHORT = "Nome deve ter no mínimo 2 caracteres"
INVALID_EMAIL = "Formato de e-mail inválido"
PASSWORD_TOO_SHORT = "Senha deve ter no mínimo 6 caracteres"
CITY_REQUIRED = "Cidade é obrigatória"


def is_valid_email(email: Optional[str]) -> bool:
    """Syntax-only email check (no DNS lookups)."""
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _raise_if(errors: List[str]) -> None:
    if errors:
        raise ValidationError(errors)


def validate_registration(payload: UserCreate) -> None:
    """Validate a registration payload."""
    if not (payload.name and payload.email and payload.password and payload.city):
        raise ValidationError(["Nome, e-mail, senha e cidade são obrigatórios"])

    errors = []
    if len(payload.name.strip()) < MIN_NAME_LENGTH:
        errors.append(NAME_TOO_SHORT)
    if not is_valid_email(payload.email):
        errors.append(INVALID_EMAIL)
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)
    if not payload.city.strip():
        errors.append(CITY_REQUIRED)
    _raise_if(errors)


def validate_login(payload: UserLogin) -> None:
    """Validate a login payload."""
    if not (payload.email and payload.password):
        raise ValidationError(["Email e senha são obrigatórios"])

    errors = []
    if not is_valid_email(payload.email):
        errors.append(INVALID_EMAIL)
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)
    _raise_if(errors)


def validate_update(payload: UserUpdate) -> None:
    """Validate only the fields present in a profile update."""
    present = payload.model_fields_set
    errors = []

    if "name" in present and payload.name is not None and len(payload.name.strip()) < MIN_NAME_LENGTH:
        errors.append(NAME_TOO_SHORT)
    if "email" in present and payload.email is not None and not is_valid_email(payload.email):
        errors.append(INVALID_EMAIL)
    if "password" in present and payload.password and len(payload.password) < MIN_PASSWORD_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)
    if "city" in present and payload.city is not None and not payload.city.strip():
        errors.append(CITY_REQUIRED)
    _raise_if(errors)

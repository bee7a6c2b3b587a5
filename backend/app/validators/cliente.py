"""
Clientes API — Cliente Payload Validation
===========================================

What:  Field-level validation of create/update payloads.
Why:   Every invalid field must be reported in one response, each message
       prefixed with the upper-cased field name. A plain function over the raw
       JSON object keeps the rules explicit and testable without HTTP.
How:   `validate_cliente()` walks the fields in declaration order and returns
       a list of FieldError(field, message) pairs. `parse_cliente()` raises an
       aggregated ValidationError or returns a ClienteRequest.
"""

from datetime import date, datetime
from typing import Any, Dict, List, NamedTuple

from email_validator import EmailNotValidError, validate_email

from app.exceptions import ValidationError
from app.schemas.cliente import ClienteRequest

NOMBRE_MIN = 4
NOMBRE_MAX = 12

MSG_REQUIRED = "no puede estar vacío"
MSG_NOT_TEXT = "debe ser un texto"
MSG_NOMBRE_SIZE = f"el tamaño tiene que estar entre {NOMBRE_MIN} y {NOMBRE_MAX}"
MSG_EMAIL_FORMAT = "no es una dirección de correo bien formada"
MSG_DATE_FORMAT = "debe ser una fecha válida (AAAA-MM-DD)"


class FieldError(NamedTuple):
    field: str
    message: str

    def format(self) -> str:
        return f"El campo [{self.field.upper()}] {self.message}"


def _check_text(payload: Dict[str, Any], field: str, errors: List[FieldError]) -> bool:
    """Required non-blank string. Returns True when the value can be checked further."""
    value = payload.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append(FieldError(field, MSG_REQUIRED))
        return False
    if not isinstance(value, str):
        errors.append(FieldError(field, MSG_NOT_TEXT))
        return False
    return True


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(value)
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        # Full ISO timestamps are accepted; only the date part is kept
        return datetime.fromisoformat(text).date()


def validate_cliente(payload: Dict[str, Any]) -> List[FieldError]:
    """
    Check a create/update payload.

    Rules:
        nombre     required, NOMBRE_MIN..NOMBRE_MAX characters
        apellido   required
        email      required, syntactically valid address
        createdAt  required, ISO date

    Returns:
        Every violation found, in field order. Empty list means valid.
    """
    errors: List[FieldError] = []

    if _check_text(payload, "nombre", errors):
        if not NOMBRE_MIN <= len(payload["nombre"].strip()) <= NOMBRE_MAX:
            errors.append(FieldError("nombre", MSG_NOMBRE_SIZE))

    _check_text(payload, "apellido", errors)

    if _check_text(payload, "email", errors):
        try:
            validate_email(payload["email"].strip(), check_deliverability=False)
        except EmailNotValidError:
            errors.append(FieldError("email", MSG_EMAIL_FORMAT))

    created_at = payload.get("createdAt")
    if created_at is None or (isinstance(created_at, str) and not created_at.strip()):
        errors.append(FieldError("createdAt", MSG_REQUIRED))
    else:
        try:
            _parse_date(created_at)
        except ValueError:
            errors.append(FieldError("createdAt", MSG_DATE_FORMAT))

    return errors


def parse_cliente(payload: Dict[str, Any]) -> ClienteRequest:
    """
    Validate and convert a payload.

    Raises:
        ValidationError: with one formatted message per invalid field.
    """
    errors = validate_cliente(payload)
    if errors:
        raise ValidationError(
            errors=[e.format() for e in errors],
            context={"fields": [e.field for e in errors]},
        )
    return ClienteRequest(
        nombre=payload["nombre"].strip(),
        apellido=payload["apellido"].strip(),
        email=payload["email"].strip(),
        created_at=_parse_date(payload["createdAt"]),
    )

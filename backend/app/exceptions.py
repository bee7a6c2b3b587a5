"""
Clientes API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the error scenarios of the API.
Why:   Services raise typed errors; global handlers registered in main.py turn
       them into the `{message, error?, errors?}` body with the right status.
How:   Each exception carries a user-facing message plus an optional context
       dict that is logged but never returned.

Exception Hierarchy:
    ClientesApiError (base)
    ├── ValidationError     → 400 Bad Request   {message, errors}
    ├── NotFoundError       → 404 Not Found     {message}
    ├── DatabaseError       → 500 Server Error  {message, error}
    └── FileStorageError    → 500 Server Error  {message, error}
"""

from typing import Any, Dict, List, Optional


# ── User-facing messages ──────────────────────────────────────────────────
MSG_BAD_REQUEST = "La petición contiene errores."
MSG_NOT_FOUND = "No se encontro el cliente."
MSG_QUERY_FAILED = "Se produjo un error al consultar en la base de datos."
MSG_INSERT_FAILED = "Se produjo un error al insertar en la base de datos."
MSG_UPDATE_FAILED = "Se produjo un error al editar en la base de datos."
MSG_DELETE_FAILED = "Se produjo un error al eliminar en la base de datos."
MSG_UPLOAD_FAILED = "Se produjo un error al subir la imagen."
MSG_UPLOAD_OK = "Se ha subido correctamente la foto."


def describe_error(exc: BaseException) -> str:
    """
    Render an exception as "<ExceptionType>: <most specific cause>".

    SQLAlchemy wraps driver errors (`exc.orig`); chained exceptions keep the
    root in `__cause__`. The deepest message is the one worth showing.
    """
    cause: BaseException = exc
    seen = {id(exc)}
    while True:
        inner = getattr(cause, "orig", None) or cause.__cause__
        if inner is None or id(inner) in seen:
            break
        seen.add(id(inner))
        cause = inner
    detail = str(cause).splitlines()[0] if str(cause) else type(cause).__name__
    return f"{type(exc).__name__}: {detail}"


class ClientesApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return)
        context:  Additional debug info (logged, NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Se produjo un error inesperado.",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(ClientesApiError):
    """
    Raised when a request payload fails field validation.

    All invalid fields are reported together, already formatted as
    "El campo [FIELD] <message>".
    """

    status_code = 400

    def __init__(
        self,
        errors: List[str],
        message: str = MSG_BAD_REQUEST,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors)

    def to_body(self) -> Dict[str, Any]:
        return {"errors": self.errors, "message": self.message}


class NotFoundError(ClientesApiError):
    """Raised when no client exists for the requested id."""

    status_code = 404

    def __init__(
        self,
        resource_id: Optional[int] = None,
        message: str = MSG_NOT_FOUND,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(ClientesApiError):
    """
    Raised when a store operation fails.

    `error` carries the exception text and its most specific cause and is
    returned to the client alongside the operation-specific message.
    """

    def __init__(
        self,
        message: str = MSG_QUERY_FAILED,
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.error = error

    def to_body(self) -> Dict[str, Any]:
        body = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class FileStorageError(ClientesApiError):
    """Raised when an uploaded image cannot be written to the upload directory."""

    def __init__(
        self,
        message: str = MSG_UPLOAD_FAILED,
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.error = error

    def to_body(self) -> Dict[str, Any]:
        body = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body

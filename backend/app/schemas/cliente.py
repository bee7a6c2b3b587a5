"""
Clientes API — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract with the front-end.
Why:   Automatic serialization and OpenAPI documentation of the responses.
How:   Python attributes use snake_case; the JSON keys the front-end expects
       (`createdAt`, `totalElements`, ...) are declared as serialization
       aliases, which FastAPI applies when rendering `response_model`s.

Note:
    Request bodies are NOT validated by these models directly. The raw JSON
    object is checked by `app.validators.cliente.validate_cliente`, which
    aggregates per-field messages; only a payload that passed is turned into
    a `ClienteRequest`.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ClienteRequest(BaseModel):
    """Validated create/update payload. `id` and `imagen` are never taken from the client."""
    nombre: str
    apellido: str
    email: str
    created_at: date


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ClienteResponse(BaseModel):
    """
    Full client record.
    Returned by GET /api/clientes/{id}.
    """
    id: int = Field(description="Store-assigned identifier")
    nombre: str = Field(description="First name")
    apellido: str = Field(description="Last name")
    email: str = Field(description="Email address")
    created_at: date = Field(serialization_alias="createdAt", description="Creation date (YYYY-MM-DD)")
    imagen: Optional[str] = Field(default=None, description="Photo filename in the upload directory")

    model_config = {"from_attributes": True}


class ClienteListItem(BaseModel):
    """Read-only list projection, built per request from a stored Cliente."""
    id: int
    nombre: str
    apellido: str
    email: str
    created_at: date = Field(serialization_alias="createdAt")
    imagen: Optional[str] = None

    model_config = {"from_attributes": True}


class SortInfo(BaseModel):
    field: str = Field(description="JSON name of the sort field")
    direction: str = Field(description="asc or desc")


class ClientePage(BaseModel):
    """
    One page of ClienteListItem plus paging metadata.
    Returned by GET /api/clientes/paginated.

    `number` is zero-based, matching the `page` query parameter.
    """
    content: List[ClienteListItem]
    number: int = Field(description="Zero-based page index")
    size: int = Field(description="Requested page size")
    total_elements: int = Field(serialization_alias="totalElements")
    total_pages: int = Field(serialization_alias="totalPages")
    number_of_elements: int = Field(serialization_alias="numberOfElements")
    first: bool
    last: bool
    empty: bool
    sort: SortInfo


class MessageResponse(BaseModel):
    """Success body for uploads: `{}` for an empty file, else a message."""
    message: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {
            "errors": ["El campo [EMAIL] no puede estar vacío"],
            "message": "La petición contiene errores."
        }
    """
    message: str = Field(description="Human-readable error description")
    error: Optional[str] = Field(default=None, description="Underlying exception and cause")
    errors: Optional[List[str]] = Field(default=None, description="One entry per invalid field")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uploads: str = Field(description="writable or unwritable")
    uptime_seconds: float

"""
Clientes API — Cliente Route Handlers
=======================================

What:  HTTP endpoints of the `clientes` resource.
Why:   Entry point for the front-end's client list, form and photo upload.
How:   Extracts path/query/body/multipart data, delegates to ClienteService,
       and picks the status code. Errors raised by the service are rendered
       by the global exception handlers in main.py.

Route Inventory (all under settings.api_prefix):
    GET    /clientes             list all           200
    GET    /clientes/paginated   list one page      200
    GET    /clientes/{id}        get one            200 / 404
    POST   /clientes             create             201 / 400
    PUT    /clientes/{id}        update             201 / 400 / 404
    DELETE /clientes/{id}        delete             204 / 404
    POST   /clientes/upload      set photo          201 / 404
"""

import logging
from typing import Any, AsyncGenerator, Dict, List

from fastapi import APIRouter, Body, Depends, File, Form, Path, Query, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.repositories.cliente_store import ClienteStore, SqlAlchemyClienteStore
from app.schemas.cliente import (
    ClienteListItem,
    ClientePage,
    ClienteResponse,
    ErrorResponse,
    MessageResponse,
)
from app.services.cliente_service import (
    DEFAULT_LIMIT,
    DEFAULT_ORDER,
    DEFAULT_PAGE,
    DEFAULT_SORT,
    MAX_INT,
    cliente_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.api_prefix, tags=["Clientes"])

_ERRORS = {
    400: {"description": "Invalid request", "model": ErrorResponse},
    404: {"description": "Client not found", "model": ErrorResponse},
    500: {"description": "Database or storage error", "model": ErrorResponse},
}

_PAYLOAD_EXAMPLE = {
    "nombre": "Juan",
    "apellido": "Pérez",
    "email": "juan.perez@gmail.com",
    "createdAt": "2021-01-22",
}


async def get_cliente_store(
    db: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ClienteStore, None]:
    """Per-request ClienteStore bound to the request's session."""
    yield SqlAlchemyClienteStore(db)


@router.get(
    "/clientes",
    response_model=List[ClienteListItem],
    responses={500: _ERRORS[500]},
    summary="List all clients",
)
async def list_clientes(
    store: ClienteStore = Depends(get_cliente_store),
) -> List[ClienteListItem]:
    return await cliente_service.list_all(store)


# Declared before /clientes/{id} so "paginated" is not parsed as an id
@router.get(
    "/clientes/paginated",
    response_model=ClientePage,
    responses={400: _ERRORS[400], 500: _ERRORS[500]},
    summary="List clients one page at a time",
)
async def list_clientes_paginated(
    page: int = Query(default=DEFAULT_PAGE, ge=0, le=MAX_INT, description="Zero-based page index"),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_INT, description="Page size"),
    sort: str = Query(default=DEFAULT_SORT, description="Field to sort by"),
    order: str = Query(
        default=DEFAULT_ORDER,
        description="'asc' for ascending; any other value sorts descending",
    ),
    store: ClienteStore = Depends(get_cliente_store),
) -> ClientePage:
    return await cliente_service.list_paged(store, page=page, limit=limit, sort=sort, order=order)


@router.get(
    "/clientes/{id}",
    response_model=ClienteResponse,
    responses={404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Get one client",
)
async def get_cliente(
    cliente_id: int = Path(..., alias="id", description="Client id"),
    store: ClienteStore = Depends(get_cliente_store),
) -> ClienteResponse:
    return await cliente_service.get_by_id(store, cliente_id)


@router.post(
    "/clientes",
    status_code=201,
    response_class=Response,
    responses={201: {"description": "Client created"}, 400: _ERRORS[400], 500: _ERRORS[500]},
    summary="Create a client",
)
async def create_cliente(
    payload: Dict[str, Any] = Body(..., examples=[_PAYLOAD_EXAMPLE]),
    store: ClienteStore = Depends(get_cliente_store),
) -> Response:
    await cliente_service.create(store, payload)
    return Response(status_code=201)


@router.put(
    "/clientes/{id}",
    status_code=201,
    response_class=Response,
    responses={201: {"description": "Client updated"}, **_ERRORS},
    summary="Update a client",
)
async def update_cliente(
    cliente_id: int = Path(..., alias="id", description="Client id"),
    payload: Dict[str, Any] = Body(..., examples=[_PAYLOAD_EXAMPLE]),
    store: ClienteStore = Depends(get_cliente_store),
) -> Response:
    await cliente_service.update(store, cliente_id, payload)
    return Response(status_code=201)


@router.delete(
    "/clientes/{id}",
    status_code=204,
    response_class=Response,
    responses={204: {"description": "Client deleted"}, 404: _ERRORS[404], 500: _ERRORS[500]},
    summary="Delete a client and its photo",
)
async def delete_cliente(
    cliente_id: int = Path(..., alias="id", description="Client id"),
    store: ClienteStore = Depends(get_cliente_store),
) -> Response:
    await cliente_service.delete(store, cliente_id)
    return Response(status_code=204)


@router.post(
    "/clientes/upload",
    status_code=201,
    response_model=MessageResponse,
    response_model_exclude_none=True,
    responses={**_ERRORS},
    summary="Upload a client photo",
)
async def upload_imagen(
    image: UploadFile = File(..., description="Photo of the client"),
    cliente_id: int = Form(..., alias="id", description="Client id"),
    store: ClienteStore = Depends(get_cliente_store),
) -> MessageResponse:
    """
    Replace the photo of a client.

    An empty file is accepted and changes nothing (201 with `{}`).
    """
    content = await image.read()
    logger.info(
        "Received upload for cliente %s: filename=%s, size=%d bytes",
        cliente_id,
        image.filename or "unknown",
        len(content),
    )
    try:
        return await cliente_service.upload_image(store, cliente_id, content, image.filename)
    finally:
        await image.close()

"""
Clientes API — Cliente Service
================================

What:  The client resource operations: list, page, get, create, update,
       delete and photo upload.
Why:   Keeps request handling rules out of the route layer so they can be
       tested with an in-memory store.
How:   Each method receives the ClienteStore for the current request,
       performs one or more store calls and translates data-access failures
       into DatabaseError with an operation-specific message.

Ordering rules:
    update:  validate payload → load by id → overwrite → save
    delete:  load by id → delete image file → delete record
    upload:  empty file short-circuits → load by id → write new file →
             delete previous file → set imagen → save

There is no compensation: if save() fails after the new photo was written,
the file stays on disk and the record keeps its previous image.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.exceptions import (
    MSG_DELETE_FAILED,
    MSG_INSERT_FAILED,
    MSG_QUERY_FAILED,
    MSG_UPDATE_FAILED,
    MSG_UPLOAD_OK,
    DatabaseError,
    NotFoundError,
    ValidationError,
    describe_error,
)
from app.models.cliente import Cliente
from app.repositories.cliente_store import SORTABLE_FIELDS, ClienteStore
from app.schemas.cliente import (
    ClienteListItem,
    ClientePage,
    ClienteResponse,
    MessageResponse,
    SortInfo,
)
from app.services.file_service import FileService, file_service
from app.validators.cliente import FieldError, parse_cliente

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 0
DEFAULT_LIMIT = 5
DEFAULT_SORT = "id"
DEFAULT_ORDER = "desc"

# 32-bit signed INTEGER bound; page * limit then always fits a 64-bit OFFSET
MAX_INT = 2_147_483_647


def _store_failure(message: str, exc: Exception) -> DatabaseError:
    logger.error("%s %s", message, describe_error(exc))
    return DatabaseError(
        message=message,
        error=describe_error(exc),
        context={"error_type": type(exc).__name__},
    )


class ClienteService:
    """
    Business logic for the `clientes` resource.

    Stateless apart from the FileService it writes photos through; the store
    is passed in per call because it wraps the request's session.
    """

    def __init__(self, files: Optional[FileService] = None):
        self.files = files or file_service

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_all(self, store: ClienteStore) -> List[ClienteListItem]:
        """All clients in store order, mapped to list items."""
        try:
            rows = await store.find_all()
        except SQLAlchemyError as e:
            raise _store_failure(MSG_QUERY_FAILED, e)
        return [ClienteListItem.model_validate(row) for row in rows]

    async def list_paged(
        self,
        store: ClienteStore,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        sort: str = DEFAULT_SORT,
        order: str = DEFAULT_ORDER,
    ) -> ClientePage:
        """
        One page of clients.

        Only the exact string "asc" sorts ascending; anything else
        (including "ASC") is descending.

        Raises:
            ValidationError: unknown sort field
            DatabaseError: store failure
        """
        if sort not in SORTABLE_FIELDS:
            raise ValidationError(
                errors=[
                    FieldError(
                        "sort",
                        f"no es un campo válido para ordenar ({', '.join(SORTABLE_FIELDS)})",
                    ).format()
                ],
                context={"sort": sort},
            )
        descending = order != "asc"

        try:
            rows, total = await store.find_page(page, limit, sort, descending)
        except SQLAlchemyError as e:
            raise _store_failure(MSG_QUERY_FAILED, e)

        total_pages = (total + limit - 1) // limit if limit else 0
        return ClientePage(
            content=[ClienteListItem.model_validate(row) for row in rows],
            number=page,
            size=limit,
            total_elements=total,
            total_pages=total_pages,
            number_of_elements=len(rows),
            first=page == 0,
            last=page + 1 >= total_pages,
            empty=not rows,
            sort=SortInfo(field=sort, direction="desc" if descending else "asc"),
        )

    async def get_by_id(self, store: ClienteStore, cliente_id: int) -> ClienteResponse:
        cliente = await self._find(store, cliente_id, MSG_QUERY_FAILED)
        if cliente is None:
            raise NotFoundError(resource_id=cliente_id)
        return ClienteResponse.model_validate(cliente)

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(self, store: ClienteStore, payload: Dict[str, Any]) -> Cliente:
        """
        Validate and insert a new client.

        Raises:
            ValidationError: one message per invalid field
            DatabaseError: insert failed (e.g. duplicate email)
        """
        data = parse_cliente(payload)
        cliente = Cliente(
            nombre=data.nombre,
            apellido=data.apellido,
            email=data.email,
            created_at=data.created_at,
        )
        try:
            cliente = await store.save(cliente)
        except SQLAlchemyError as e:
            raise _store_failure(MSG_INSERT_FAILED, e)
        logger.info("Cliente %s created", cliente.id)
        return cliente

    async def update(
        self,
        store: ClienteStore,
        cliente_id: int,
        payload: Dict[str, Any],
    ) -> Cliente:
        """
        Overwrite apellido, nombre, email and createdAt of an existing client.

        Payload validation runs before the lookup, so an invalid payload for
        an unknown id is a ValidationError, not a NotFoundError.
        """
        data = parse_cliente(payload)

        cliente = await self._find(store, cliente_id, MSG_UPDATE_FAILED)
        if cliente is None:
            raise NotFoundError(resource_id=cliente_id)

        cliente.apellido = data.apellido
        cliente.nombre = data.nombre
        cliente.email = data.email
        cliente.created_at = data.created_at
        try:
            cliente = await store.save(cliente)
        except SQLAlchemyError as e:
            raise _store_failure(MSG_UPDATE_FAILED, e)
        logger.info("Cliente %s updated", cliente_id)
        return cliente

    async def delete(self, store: ClienteStore, cliente_id: int) -> None:
        """
        Remove the client's photo (best-effort), then the record.

        A photo that cannot be removed is logged by FileService and does not
        stop the record deletion.
        """
        cliente = await self._find(store, cliente_id, MSG_DELETE_FAILED)
        if cliente is None:
            raise NotFoundError(resource_id=cliente_id)

        await self.files.delete_image(cliente.imagen)
        try:
            await store.delete(cliente)
        except SQLAlchemyError as e:
            raise _store_failure(MSG_DELETE_FAILED, e)
        logger.info("Cliente %s deleted", cliente_id)

    async def upload_image(
        self,
        store: ClienteStore,
        cliente_id: int,
        content: bytes,
        filename: Optional[str],
    ) -> MessageResponse:
        """
        Replace the client's photo.

        Returns:
            An empty MessageResponse for empty content (nothing changes),
            otherwise the success message.

        Raises:
            ValidationError: content larger than settings.max_file_size
            NotFoundError: unknown client id
            FileStorageError: the new file could not be written
            DatabaseError: the record could not be read or saved
        """
        if not content:
            logger.info("Empty upload for cliente %s ignored", cliente_id)
            return MessageResponse()

        if len(content) > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise ValidationError(
                errors=[FieldError("image", f"supera el tamaño máximo de {max_mb:.0f}MB").format()],
                context={"size": len(content)},
            )

        cliente = await self._find(store, cliente_id, MSG_UPDATE_FAILED)
        if cliente is None:
            raise NotFoundError(resource_id=cliente_id)

        new_filename = await self.files.store_image(content, filename)
        await self.files.delete_image(cliente.imagen)

        cliente.imagen = new_filename
        try:
            await store.save(cliente)
        except SQLAlchemyError as e:
            raise _store_failure(MSG_UPDATE_FAILED, e)
        logger.info("Cliente %s photo set to %s", cliente_id, new_filename)
        return MessageResponse(message=MSG_UPLOAD_OK)

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    async def _find(store: ClienteStore, cliente_id: int, failure_message: str) -> Optional[Cliente]:
        try:
            return await store.find_by_id(cliente_id)
        except SQLAlchemyError as e:
            raise _store_failure(failure_message, e)


# ── Singleton Instance ────────────────────────────────────────────────────
cliente_service = ClienteService()

"""
Clientes API — Cliente SQLAlchemy Model
=========================================

What:  ORM model representing the `clientes` table.
Why:   Maps Python objects to database rows for the store.
How:   Inherits from the declarative Base; Alembic reads it for migrations.
Who:   Used by SqlAlchemyClienteStore and by Alembic.

Table Design:
    - id: Integer autoincrement — identity is assigned by the database only
    - nombre / apellido / email: Plain strings, validated before they get here
    - email: UNIQUE — a duplicate insert fails in the store and surfaces as 500
    - created_at: DATE supplied by the client (not a server default)
    - imagen: Filename inside the upload directory, NULL until a photo is uploaded
"""

from datetime import date
from typing import Optional

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Cliente(Base):
    """
    A customer record.

    Lifecycle:
        1. Inserted by POST /clientes (imagen = NULL)
        2. Overwritten field-by-field by PUT /clientes/{id} (id and imagen kept)
        3. imagen replaced by POST /clientes/upload
        4. Deleted together with its image file by DELETE /clientes/{id}
    """

    __tablename__ = "clientes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    nombre: Mapped[str] = mapped_column(String(12), nullable=False)

    apellido: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    created_at: Mapped[date] = mapped_column(Date, nullable=False)

    imagen: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    def __repr__(self) -> str:
        return f"<Cliente(id={self.id}, email='{self.email}', imagen={self.imagen!r})>"

"""
Modello SQLAlchemy per i documenti dell'archivio
Progetto: CRM Utenze
"""


from __future__ import annotations
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from crm.models import Base
from crm.models.mixins import TimestampMixin


class StoredDocument(Base, TimestampMixin):
    """
    Documento JSON appartenente a una collezione.

    Attributes:
        collection: Nome della collezione (clients, contracts, appointments,
            office_tasks, config)
        id: Identificativo del documento, univoco nella collezione
        data: Contenuto del documento (senza l'id)
    """

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        doc="Nome della collezione",
    )

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        doc="Identificativo del documento",
    )

    data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Contenuto JSON del documento",
    )

    def to_dict(self) -> dict[str, Any]:
        """Restituisce il documento con l'id incluso, come lo vede il dominio."""
        return {"id": self.id, **(self.data or {})}

    def __repr__(self) -> str:
        return f"StoredDocument(collection={self.collection!r}, id={self.id!r})"

"""
Modelli Database SQLAlchemy
Progetto: CRM Utenze

L'archivio è di tipo documentale: ogni entità (cliente, contratto,
appuntamento, attività) è salvata come documento JSON in un'unica
tabella, indicizzata per collezione e id.
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


from crm.models.document import StoredDocument

__all__ = [
    "Base",
    "StoredDocument",
]

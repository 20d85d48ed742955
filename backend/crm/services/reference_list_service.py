"""
Service per le liste di riferimento
Progetto: CRM Utenze

Ogni lista è salvata come documento di configurazione con nome fisso
({"values": [...]}). Alla prima lettura, se il documento manca, viene
creato con i valori iniziali.

La rimozione di un valore non modifica le entità che lo usano: quei
valori diventano "legacy" e restano leggibili.
"""

import logging

from crm.schemas.reference_list import (
    DEFAULT_VALUES,
    ReferenceList,
    ReferenceListKind,
    ReferenceValue,
)
from crm.services.crm_session import CrmSession, store_operation

# Logger per questo modulo
logger = logging.getLogger(__name__)


class ReferenceListService:
    """Lettura e modifica idempotente di fornitori, tipi operazione e stati."""

    def __init__(self, session: CrmSession) -> None:
        self.session = session

    async def list_values(self, kind: ReferenceListKind) -> list[str]:
        """
        Valori correnti della lista, creando quelli iniziali se assente.

        Raises:
            TransientStoreError: Se l'archivio non è raggiungibile
        """
        async with store_operation(f"lettura lista {kind.value}"):
            document = await self.session.store.get_config(kind.value)

        if document is None:
            values = ReferenceList.of(DEFAULT_VALUES[kind])
            await self._save(kind, values)
            logger.info("Lista %s inizializzata con %s valori", kind.value, len(values.values))
        else:
            values = ReferenceList.of(document.get("values") or [])
            self.session.set_reference_list(kind, values)

        return list(values.values)

    async def add(self, kind: ReferenceListKind, value: str) -> list[str]:
        """Aggiunge un valore (nessuna scrittura se già presente)."""
        current = self.session.reference_list(kind)
        updated = current.with_added(value)
        if updated == current:
            logger.debug("Valore '%s' già presente in %s", value, kind.value)
            return list(current.values)

        await self._save(kind, updated)
        logger.info("Aggiunto '%s' a %s", value.strip(), kind.value)
        return list(updated.values)

    async def remove(self, kind: ReferenceListKind, value: str) -> list[str]:
        """Rimuove un valore (nessuna scrittura se assente)."""
        current = self.session.reference_list(kind)
        updated = current.with_removed(value)
        if updated == current:
            logger.debug("Valore '%s' non presente in %s", value, kind.value)
            return list(current.values)

        await self._save(kind, updated)
        logger.info("Rimosso '%s' da %s", value.strip(), kind.value)
        return list(updated.values)

    def tag(self, kind: ReferenceListKind, value: str) -> ReferenceValue:
        """Indica se un valore salvato appartiene ancora alla lista."""
        return self.session.reference_list(kind).tag(value)

    async def _save(self, kind: ReferenceListKind, values: ReferenceList) -> None:
        async with store_operation(f"salvataggio lista {kind.value}"):
            await self.session.store.set_config(kind.value, {"values": list(values.values)})
        self.session.set_reference_list(kind, values)

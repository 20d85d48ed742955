"""
Stato dell'interfaccia
Progetto: CRM Utenze

Preferenze di visibilità dei widget e promemoria di verifica archiviati.
Ogni blob è un documento di configurazione con nome fisso, riscritto per
intero a ogni modifica. Un documento mancante o malformato viene letto
come valore di default.

Gli errori dell'archivio (EntityStoreError) non vengono convertiti qui:
se ne occupa la sessione che chiama questi metodi.
"""

import logging
from typing import Any, Optional

from crm.schemas.dashboard import WIDGET_IDS, default_widget_visibility
from crm.services.entity_store import DocumentStore

# Logger per questo modulo
logger = logging.getLogger(__name__)

WIDGET_VISIBILITY = "widget_visibility"
DISMISSED_CHECKUPS = "dismissed_checkups"


# ------------------------------------------------------------
# Lettura dei documenti
# ------------------------------------------------------------

def parse_widget_visibility(document: Optional[dict[str, Any]]) -> dict[str, bool]:
    """
    Visibilità dei widget: tutti visibili per default.

    Le chiavi sconosciute e i valori non booleani vengono ignorati.
    """
    visibility = default_widget_visibility()
    if document is None:
        return visibility

    widgets = document.get("widgets") if isinstance(document, dict) else None
    if not isinstance(widgets, dict):
        logger.warning("Formato visibilità widget non valido, uso i valori di default")
        return visibility

    for widget_id, visible in widgets.items():
        if widget_id in WIDGET_IDS and isinstance(visible, bool):
            visibility[widget_id] = visible
    return visibility


def parse_dismissed_checkups(document: Optional[dict[str, Any]]) -> frozenset[str]:
    """Chiavi dei promemoria archiviati; insieme vuoto se il documento manca."""
    if document is None:
        return frozenset()

    keys = document.get("keys") if isinstance(document, dict) else None
    if not isinstance(keys, list):
        logger.warning("Formato promemoria archiviati non valido, uso un insieme vuoto")
        return frozenset()
    return frozenset(item for item in keys if isinstance(item, str) and item)


class UiStateService:
    """Lettura e scrittura dei blob di stato dell'interfaccia."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    # ------------------------------------------------------------
    # Visibilità widget
    # ------------------------------------------------------------

    async def load_widget_visibility(self) -> dict[str, bool]:
        return parse_widget_visibility(await self.store.get_config(WIDGET_VISIBILITY))

    async def save_widget_visibility(self, visibility: dict[str, bool]) -> dict[str, bool]:
        """Aggiorna solo i widget indicati, lasciando invariati gli altri."""
        current = await self.load_widget_visibility()
        for widget_id, visible in visibility.items():
            if widget_id in WIDGET_IDS:
                current[widget_id] = bool(visible)
        await self.store.set_config(WIDGET_VISIBILITY, {"widgets": current})
        logger.info("Visibilità widget salvata")
        return current

    # ------------------------------------------------------------
    # Promemoria archiviati
    # ------------------------------------------------------------

    async def load_dismissed_checkups(self) -> frozenset[str]:
        return parse_dismissed_checkups(await self.store.get_config(DISMISSED_CHECKUPS))

    async def dismiss_checkup(self, key: str) -> frozenset[str]:
        """Aggiunge la chiave all'insieme archiviato e lo riscrive."""
        dismissed = (await self.load_dismissed_checkups()) | {key}
        await self.store.set_config(DISMISSED_CHECKUPS, {"keys": sorted(dismissed)})
        logger.info("Promemoria archiviato: %s", key)
        return dismissed

    async def clear_dismissed_checkups(self) -> None:
        await self.store.set_config(DISMISSED_CHECKUPS, {"keys": []})
        logger.info("Promemoria archiviati azzerati")

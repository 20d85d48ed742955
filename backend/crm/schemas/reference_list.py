"""
Liste di riferimento gestite dall'utente
Progetto: CRM Utenze

Fornitori, tipi di operazione e stati appuntamento sono insiemi ordinati
di stringhe uniche (confronto case-insensitive). Le entità conservano il
valore come stringa semplice: un valore rimosso dalla lista resta valido
sui record esistenti e viene marcato come "legacy".
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReferenceListKind(str, Enum):
    """Liste disponibili (usate anche come nome del documento di configurazione)."""
    PROVIDERS = "providers"
    OPERATION_TYPES = "operation_types"
    APPOINTMENT_STATUSES = "appointment_statuses"


DEFAULT_VALUES: dict[ReferenceListKind, tuple[str, ...]] = {
    ReferenceListKind.PROVIDERS: (
        "Enel", "Duferco", "Edison", "Lenergia", "A2A",
        "TIM", "Vodafone", "WindTre", "Iliad", "Fastweb",
    ),
    ReferenceListKind.OPERATION_TYPES: ("Nuova Attivazione", "Switch", "Voltura", "Subentro"),
    ReferenceListKind.APPOINTMENT_STATUSES: ("Da fare", "Completato", "Annullato"),
}


def _key(value: str) -> str:
    return value.strip().casefold()


class ReferenceList(BaseModel):
    """
    Value object immutabile: ogni modifica restituisce una nuova lista.

    I valori sono sempre privi di spazi esterni, unici senza distinzione
    tra maiuscole e minuscole e ordinati alfabeticamente.
    """

    model_config = ConfigDict(frozen=True)

    values: tuple[str, ...] = ()

    @field_validator("values", mode="before")
    @classmethod
    def normalize_values(cls, v):
        if v is None:
            return ()
        seen: dict[str, str] = {}
        for item in v:
            if not isinstance(item, str):
                continue
            text = item.strip()
            if text and _key(text) not in seen:
                seen[_key(text)] = text
        return tuple(sorted(seen.values(), key=_key))

    @classmethod
    def of(cls, values: Iterable[str]) -> "ReferenceList":
        return cls(values=tuple(values))

    def contains(self, value: Optional[str]) -> bool:
        if not value or not value.strip():
            return False
        return _key(value) in {_key(v) for v in self.values}

    def with_added(self, value: str) -> "ReferenceList":
        """Aggiunge il valore; nessun effetto se già presente."""
        if self.contains(value):
            return self
        return ReferenceList(values=self.values + (value,))

    def with_removed(self, value: str) -> "ReferenceList":
        """Rimuove il valore; nessun effetto se assente."""
        if not self.contains(value):
            return self
        return ReferenceList(values=tuple(v for v in self.values if _key(v) != _key(value)))

    def tag(self, value: Optional[str]) -> "ReferenceValue":
        """Marca un valore salvato come noto o legacy, senza mai rifiutarlo."""
        text = (value or "").strip()
        return ReferenceValue(value=text, is_legacy=bool(text) and not self.contains(text))


class ReferenceValue(BaseModel):
    """Valore di un'entità confrontato con la lista corrente."""

    value: str
    is_legacy: bool = False


class ReferenceValueIn(BaseModel):
    """Payload per aggiunta/rimozione di un valore."""

    value: str = Field(..., min_length=1, max_length=100)

    @field_validator("value", mode="before")
    @classmethod
    def strip_value(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ReferenceListRead(BaseModel):
    kind: ReferenceListKind
    values: list[str]

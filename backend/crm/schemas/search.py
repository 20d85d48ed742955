"""
Schemas Pydantic per la ricerca rapida
Progetto: CRM Utenze
"""

from pydantic import BaseModel, Field

from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead


class SearchResults(BaseModel):
    """Clienti e contratti corrispondenti, nell'ordine dell'archivio."""

    query: str = ""
    clients: list[ClientRead] = Field(default_factory=list)
    contracts: list[ContractRead] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.clients and not self.contracts

"""
Ricerca rapida su clienti e contratti
Progetto: CRM Utenze

Confronto per sottostringa senza distinzione tra maiuscole e minuscole.
Nessun indice e nessun ranking: l'ordine è quello dello snapshot.
Una ricerca vuota (o di soli spazi) non restituisce nulla.
"""

from typing import Iterable, Optional

from crm.schemas.client import ClientRead
from crm.schemas.contract import ContractRead
from crm.schemas.search import SearchResults


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.casefold()


def client_matches(client: ClientRead, needle: str) -> bool:
    """Nome, cognome, email o codice fiscale."""
    return (
        _contains(client.first_name, needle)
        or _contains(client.last_name, needle)
        or _contains(client.email, needle)
        or _contains(client.fiscal_code, needle)
    )


def contract_matches(contract: ContractRead, needle: str) -> bool:
    """Fornitore o codice contratto."""
    return _contains(contract.provider, needle) or _contains(contract.contract_code, needle)


def search(
    query: Optional[str],
    clients: Iterable[ClientRead],
    contracts: Iterable[ContractRead],
    min_length: int = 1,
) -> SearchResults:
    """Clienti e contratti che contengono il testo cercato."""
    text = (query or "").strip()
    if not text or len(text) < min_length:
        return SearchResults(query=text)

    needle = text.casefold()
    return SearchResults(
        query=text,
        clients=[c for c in clients if client_matches(c, needle)],
        contracts=[c for c in contracts if contract_matches(c, needle)],
    )

"""
Router per la ricerca rapida
Progetto: CRM Utenze
"""

from typing import Optional

from fastapi import APIRouter, Query

from crm.core.deps import Session
from crm.schemas.search import SearchResults
from crm.services.search_service import search

router = APIRouter(
    prefix="/search",
    tags=["Ricerca"],
)


@router.get(
    "/",
    name="ricerca",
    summary="Cerca clienti e contratti",
    response_model=SearchResults,
)
async def quick_search(
    session: Session,
    q: Optional[str] = Query(None, description="Testo da cercare"),
) -> SearchResults:
    return search(q, session.clients, session.contracts, session.config.search_min_query_length)

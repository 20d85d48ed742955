"""
API v1 Routes
Progetto: CRM Utenze

Router versione 1 dell'API. Tutti i moduli tranne l'accesso
richiedono un access token valido.
"""

from fastapi import APIRouter, Depends

from crm.api.v1 import (
    appointments, auth, bill_splitter, clients, contracts, dashboard, office_tasks, reference_lists, search, session
)
from crm.core.deps import get_current_user

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

protected = [Depends(get_current_user)]

# Includi i router dei moduli
api_v1_router.include_router(auth.router)
api_v1_router.include_router(clients.router, dependencies=protected)
api_v1_router.include_router(contracts.router, dependencies=protected)
api_v1_router.include_router(appointments.router, dependencies=protected)
api_v1_router.include_router(office_tasks.router, dependencies=protected)
api_v1_router.include_router(reference_lists.router, dependencies=protected)
api_v1_router.include_router(dashboard.router, dependencies=protected)
api_v1_router.include_router(bill_splitter.router, dependencies=protected)
api_v1_router.include_router(search.router, dependencies=protected)
api_v1_router.include_router(session.router, dependencies=protected)

# Esportazione
__all__ = ["api_v1_router"]

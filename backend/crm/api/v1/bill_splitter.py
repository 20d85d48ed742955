"""
Router per la divisione delle bollette
Progetto: CRM Utenze

Calcolo senza stato: nulla viene salvato nell'archivio.
"""

from fastapi import APIRouter

from crm.schemas.bill_split import BillSplitRequest, BillSplitResult
from crm.services.bill_splitter import split_bill

router = APIRouter(
    prefix="/bill-splitter",
    tags=["Divisione bollette"],
)


@router.post(
    "/calculate",
    name="bolletta_dividi",
    summary="Calcola le quote dei partecipanti",
    response_model=BillSplitResult,
)
async def calculate_split(data: BillSplitRequest) -> BillSplitResult:
    return split_bill(data)

"""
Divisione bollette tra più partecipanti
Progetto: CRM Utenze

Due metodi:
- semplice: costo unitario = importo / consumo totale in bolletta;
  quota = consumo del partecipante x costo unitario
- avanzato: quote fisse (fissa + potenza + altri oneri) divise in parti
  uguali; tariffa variabile = (importo - quote fisse) / consumo totale;
  quota = parte fissa + consumo x tariffa variabile

Il denominatore è sempre il consumo totale dichiarato in bolletta, non la
somma dei consumi dei partecipanti. Se il consumo totale manca o è zero
si usa 1 come denominatore. La differenza tra consumo dichiarato e somma
dei partecipanti è solo informativa.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from crm.core.exceptions import BusinessValidationError, NotFoundError
from crm.schemas.bill_split import (
    BillSplitRequest,
    BillSplitResult,
    Participant,
    ParticipantShare,
    SplitMethod,
)

ZERO = Decimal("0")
CENT = Decimal("0.01")
RATE_PRECISION = Decimal("0.000001")
CONSUMPTION_TOLERANCE = Decimal("0.1")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def split_bill(request: BillSplitRequest) -> BillSplitResult:
    """
    Calcola le quote dei partecipanti.

    Funzione pura: il risultato dipende solo dalla richiesta e va
    ricalcolato a ogni modifica di un qualsiasi dato.
    """
    total_bill = request.total_bill or ZERO
    declared = request.total_consumption or ZERO
    denominator = declared if declared > ZERO else Decimal("1")
    count = len(request.participants)

    if request.method == SplitMethod.ADVANCED:
        total_fixed = (request.fixed_fee or ZERO) + (request.power_fee or ZERO) + (request.other_fee or ZERO)
        fixed_per_person = total_fixed / count
        rate = (total_bill - total_fixed) / denominator
    else:
        total_fixed = ZERO
        fixed_per_person = ZERO
        rate = total_bill / denominator

    shares = []
    for participant in request.participants:
        consumption = participant.consumption or ZERO
        variable = consumption * rate
        shares.append(
            ParticipantShare(
                id=participant.id,
                name=participant.name,
                consumption=consumption,
                fixed_share=_money(fixed_per_person),
                variable_share=_money(variable),
                amount=_money(fixed_per_person + variable),
            )
        )

    participants_consumption = sum((s.consumption for s in shares), ZERO)
    diff = declared - participants_consumption

    return BillSplitResult(
        method=request.method,
        unit_cost=rate.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP),
        total_fixed=_money(total_fixed),
        fixed_per_person=_money(fixed_per_person),
        shares=shares,
        shares_total=sum((s.amount for s in shares), ZERO),
        participants_consumption=participants_consumption,
        consumption_diff=diff,
        is_consumption_match=abs(diff) < CONSUMPTION_TOLERANCE,
        is_consumption_over=diff < -CONSUMPTION_TOLERANCE,
    )


class BillSplitter:
    """
    Stato modificabile del modulo di divisione.

    Ogni lettura di result ricalcola da zero: non esistono quote
    memorizzate che possano risultare non aggiornate.
    """

    def __init__(self) -> None:
        self.method = SplitMethod.ADVANCED
        self.clear()

    def clear(self) -> None:
        """Svuota importi e partecipanti (tornano due); il metodo scelto resta."""
        self.total_bill: Optional[Decimal] = None
        self.total_consumption: Optional[Decimal] = None
        self.fixed_fee: Optional[Decimal] = None
        self.power_fee: Optional[Decimal] = None
        self.other_fee: Optional[Decimal] = None
        self.participants: list[Participant] = [Participant(id=1), Participant(id=2)]

    def set_method(self, method: SplitMethod) -> None:
        self.method = method

    def set_bill(
        self,
        total_bill: Optional[Decimal] = None,
        total_consumption: Optional[Decimal] = None,
        fixed_fee: Optional[Decimal] = None,
        power_fee: Optional[Decimal] = None,
        other_fee: Optional[Decimal] = None,
    ) -> None:
        self.total_bill = total_bill
        self.total_consumption = total_consumption
        self.fixed_fee = fixed_fee
        self.power_fee = power_fee
        self.other_fee = other_fee

    def add_participant(self, name: str = "") -> Participant:
        next_id = max((p.id for p in self.participants), default=0) + 1
        participant = Participant(id=next_id, name=name)
        self.participants.append(participant)
        return participant

    def update_participant(
        self,
        participant_id: int,
        name: Optional[str] = None,
        consumption: Union[Decimal, str, None] = None,
    ) -> Participant:
        """
        Modifica nome e/o consumo con la stessa validazione del payload API.

        Raises:
            ValidationError: Se il consumo è negativo o non numerico
            NotFoundError: Se il partecipante non esiste
        """
        index = self._index_of(participant_id)
        current = self.participants[index]
        updated = Participant.model_validate(
            {
                "id": current.id,
                "name": current.name if name is None else name,
                "consumption": current.consumption if consumption is None else consumption,
            }
        )
        self.participants[index] = updated
        return updated

    def remove_participant(self, participant_id: int) -> None:
        """
        Raises:
            BusinessValidationError: Se è l'ultimo partecipante rimasto
            NotFoundError: Se il partecipante non esiste
        """
        index = self._index_of(participant_id)
        if len(self.participants) == 1:
            raise BusinessValidationError("Devi avere almeno un partecipante")
        del self.participants[index]

    def _index_of(self, participant_id: int) -> int:
        for index, participant in enumerate(self.participants):
            if participant.id == participant_id:
                return index
        raise NotFoundError(f"Partecipante {participant_id} non trovato")

    @property
    def request(self) -> BillSplitRequest:
        return BillSplitRequest(
            method=self.method,
            total_bill=self.total_bill,
            total_consumption=self.total_consumption,
            fixed_fee=self.fixed_fee,
            power_fee=self.power_fee,
            other_fee=self.other_fee,
            participants=list(self.participants),
        )

    @property
    def result(self) -> BillSplitResult:
        return split_bill(self.request)

"""
Schemas Pydantic per il progetto CRM Utenze

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
dei dati in ingresso e la serializzazione delle risposte API.
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from crm.schemas import ClientRead, ContractRead, etc.

from crm.schemas.client import (
    Address,
    ClientCreate,
    ClientList,
    ClientRead,
    ClientUpdate,
    Iban,
    IbanType,
)
from crm.schemas.contract import (
    ContractCreate,
    ContractList,
    ContractListFilter,
    ContractPaidUpdate,
    ContractRead,
    ContractSortKey,
    ContractType,
    ContractUpdate,
    CustomerType,
)
from crm.schemas.appointment import (
    AppointmentCreate,
    AppointmentList,
    AppointmentRead,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from crm.schemas.office_task import (
    OfficeTaskCreate,
    OfficeTaskList,
    OfficeTaskRead,
    OfficeTaskUpdate,
)
from crm.schemas.reference_list import (
    ReferenceList,
    ReferenceListKind,
    ReferenceListRead,
    ReferenceValue,
    ReferenceValueIn,
)
from crm.schemas.dashboard import (
    ChartPoint,
    ChartSeries,
    CheckupDismiss,
    CheckupItem,
    CheckupList,
    CheckupType,
    CommissionFilter,
    CommissionReport,
    CommissionSummary,
    DashboardSummary,
    ExpiringContract,
    ExpiryStatus,
    ExpiryStatusCounts,
    ProviderCardinality,
    ReminderMessage,
    WidgetVisibility,
)
from crm.schemas.bill_split import (
    BillSplitRequest,
    BillSplitResult,
    Participant,
    ParticipantShare,
    SplitMethod,
)
from crm.schemas.search import SearchResults
from crm.schemas.token import CredentialsUpdate, LoginRequest, TokenPayload, TokenResponse

__all__ = [
    # Client schemas
    "Address",
    "ClientCreate",
    "ClientList",
    "ClientRead",
    "ClientUpdate",
    "Iban",
    "IbanType",
    # Contract schemas
    "ContractCreate",
    "ContractList",
    "ContractListFilter",
    "ContractPaidUpdate",
    "ContractRead",
    "ContractSortKey",
    "ContractType",
    "ContractUpdate",
    "CustomerType",
    # Appointment schemas
    "AppointmentCreate",
    "AppointmentList",
    "AppointmentRead",
    "AppointmentStatusUpdate",
    "AppointmentUpdate",
    # OfficeTask schemas
    "OfficeTaskCreate",
    "OfficeTaskList",
    "OfficeTaskRead",
    "OfficeTaskUpdate",
    # Reference lists
    "ReferenceList",
    "ReferenceListKind",
    "ReferenceListRead",
    "ReferenceValue",
    "ReferenceValueIn",
    # Dashboard schemas
    "ChartPoint",
    "ChartSeries",
    "CheckupDismiss",
    "CheckupItem",
    "CheckupList",
    "CheckupType",
    "CommissionFilter",
    "CommissionReport",
    "CommissionSummary",
    "DashboardSummary",
    "ExpiringContract",
    "ExpiryStatus",
    "ExpiryStatusCounts",
    "ProviderCardinality",
    "ReminderMessage",
    "WidgetVisibility",
    # Bill splitter schemas
    "BillSplitRequest",
    "BillSplitResult",
    "Participant",
    "ParticipantShare",
    "SplitMethod",
    # Search
    "SearchResults",
    # Token schemas
    "CredentialsUpdate",
    "LoginRequest",
    "TokenPayload",
    "TokenResponse",
]

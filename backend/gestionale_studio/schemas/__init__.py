"""
Schemas Pydantic per il Gestionale Studio Legale

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
e serializzazione delle richieste e risposte API.
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from gestionale_studio.schemas import InvoiceRead, ClientRead, etc.

from gestionale_studio.schemas.common import ApiModel, NumberPreview
from gestionale_studio.schemas.client import (
    ClientCreate,
    ClientList,
    ClientRead,
    ClientUpdate,
)
from gestionale_studio.schemas.case import (
    CaseCreate,
    CaseLogCreate,
    CaseLogRead,
    CaseNumberingRead,
    CaseNumberingUpdate,
    CaseRead,
    CaseTypeNumberingRead,
    CaseTypeNumberingUpdate,
    CaseUpdate,
    ExpenseCreate,
    ExpenseRead,
)
from gestionale_studio.schemas.invoice import (
    AttachExpenses,
    InvoiceBalance,
    InvoiceCreate,
    InvoiceFromExpenses,
    InvoiceLineCreate,
    InvoiceLineRead,
    InvoiceRead,
    InvoiceStatus,
    InvoiceTotals,
    InvoiceUpdate,
    PaymentCreate,
    PaymentRead,
)
from gestionale_studio.schemas.deadline import DeadlineCreate, DeadlineRead, DeadlineUpdate
from gestionale_studio.schemas.studio import StudioRead, StudioUpdate
from gestionale_studio.schemas.report import DashboardReport, MonthlyTotal

__all__ = [
    "ApiModel",
    "NumberPreview",
    "ClientCreate",
    "ClientList",
    "ClientRead",
    "ClientUpdate",
    "CaseCreate",
    "CaseLogCreate",
    "CaseLogRead",
    "CaseNumberingRead",
    "CaseNumberingUpdate",
    "CaseRead",
    "CaseTypeNumberingRead",
    "CaseTypeNumberingUpdate",
    "CaseUpdate",
    "ExpenseCreate",
    "ExpenseRead",
    "DeadlineCreate",
    "DeadlineRead",
    "DeadlineUpdate",
    "AttachExpenses",
    "InvoiceBalance",
    "InvoiceCreate",
    "InvoiceFromExpenses",
    "InvoiceLineCreate",
    "InvoiceLineRead",
    "InvoiceRead",
    "InvoiceStatus",
    "InvoiceTotals",
    "InvoiceUpdate",
    "PaymentCreate",
    "PaymentRead",
    "StudioRead",
    "StudioUpdate",
    "DashboardReport",
    "MonthlyTotal",
]

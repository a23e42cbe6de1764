"""
Schemas Pydantic per le Pratiche
Progetto: Gestionale Studio Legale

Contiene:
- Schemas per Case (creazione, aggiornamento, lettura)
- Schemas per il registro attività (CaseLog)
- Schemas per le spese di pratica (Expense)
- Schemas per la configurazione della numerazione pratiche
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator

from gestionale_studio.core.money import ZERO, to_money
from gestionale_studio.models.invoice import InvoiceLineType
from gestionale_studio.schemas.common import ApiModel


# -------------------------------------------------------------------
# Schemas per Case
# -------------------------------------------------------------------

class CaseBase(ApiModel):
    """Campi comuni della pratica."""

    client_id: Optional[str] = Field(None, description="Cliente assistito")
    subject: str = Field("", description="Oggetto della pratica")
    court: str = ""
    section: str = ""
    judge: str = ""
    rg_number: str = Field("", description="Numero di ruolo generale")
    proceeding_type: str = Field("giudiziale", description="giudiziale / stragiudiziale")
    value: Decimal = Field(ZERO, description="Valore della causa")
    notes: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def normalize_value(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("client_id", mode="before")
    @classmethod
    def empty_client(cls, v: Any) -> Any:
        return v or None


class CaseCreate(CaseBase):
    """
    Schema per la creazione di una pratica.

    Se manual_number è valorizzato (e la numerazione manuale è abilitata)
    viene usato al posto del progressivo, che resta invariato.
    """

    case_type: str = Field("civile", description="Tipo pratica (civile, penale, ...)")
    manual_number: Optional[str] = Field(None, description="Numero assegnato a mano")


class CaseUpdate(ApiModel):
    """Schema per l'aggiornamento di una pratica: il numero non è modificabile."""

    client_id: Optional[str] = None
    subject: Optional[str] = None
    court: Optional[str] = None
    section: Optional[str] = None
    judge: Optional[str] = None
    rg_number: Optional[str] = None
    proceeding_type: Optional[str] = None
    status: Optional[str] = Field(None, description="aperta / chiusa")
    value: Optional[Decimal] = None
    notes: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def normalize_value(cls, v: Any) -> Optional[Decimal]:
        return None if v is None else to_money(v)


class CaseRead(CaseBase):
    """Schema per la lettura di una pratica."""

    id: str
    number: str
    case_type: str
    status: str
    created_at: datetime.datetime
    updated_at: datetime.datetime


# -------------------------------------------------------------------
# Schemas per CaseLog
# -------------------------------------------------------------------

class CaseLogCreate(ApiModel):
    """Voce libera del registro attività."""

    action: str = "nota"
    detail: str = ""


class CaseLogRead(ApiModel):
    id: str
    case_id: str
    action: str
    detail: str
    category: Optional[str] = None
    created_at: datetime.datetime


# -------------------------------------------------------------------
# Schemas per Expense
# -------------------------------------------------------------------

class ExpenseCreate(ApiModel):
    """Spesa sostenuta per la pratica. L'importo deve essere > 0."""

    date: Optional[datetime.date] = None
    description: str = ""
    amount: Decimal = ZERO
    type: InvoiceLineType = InvoiceLineType.SPESA
    document_ref: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> InvoiceLineType:
        return InvoiceLineType.coerce(v, InvoiceLineType.SPESA)


class ExpenseRead(ApiModel):
    id: str
    case_id: Optional[str] = None
    date: datetime.date
    description: str
    amount: Decimal
    type: InvoiceLineType
    document_ref: str = ""
    billed_invoice_id: Optional[str] = None


# -------------------------------------------------------------------
# Schemas per la numerazione pratiche
# -------------------------------------------------------------------

class CaseTypeNumberingUpdate(ApiModel):
    """
    Modifica di una famiglia di numerazione.

    next_number forza il prossimo progressivo dell'anno corrente: il
    contatore viene impostato a next_number - 1, solo se il risultato è >= 0.
    """

    prefix: Optional[str] = Field(None, min_length=1, max_length=20)
    pad: Optional[int] = Field(None, ge=1, le=10)
    next_number: Optional[int] = None

    @field_validator("prefix", mode="before")
    @classmethod
    def strip_prefix(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v


class CaseNumberingUpdate(ApiModel):
    """Modifica della configurazione numerazione pratiche (campi assenti = invariati)."""

    allow_manual: Optional[bool] = None
    separator: Optional[str] = Field(None, max_length=3)
    case_types: dict[str, CaseTypeNumberingUpdate] = Field(default_factory=dict)


class CaseTypeNumberingRead(ApiModel):
    prefix: str
    pad: int
    next_number: int = Field(..., description="Prossimo progressivo dell'anno corrente")
    preview: str = Field(..., description="Prossimo numero completo")


class CaseNumberingRead(ApiModel):
    allow_manual: bool
    separator: str
    year: int
    case_types: dict[str, CaseTypeNumberingRead]

"""
Schemas Pydantic per la Fatturazione
Progetto: Gestionale Studio Legale

Contiene:
- Enum: InvoiceStatus
- Schemas per InvoiceLine e Payment
- Schemas per Invoice (creazione, aggiornamento, lettura con campi ricalcolati)
- InvoiceTotals / InvoiceBalance: risultati del motore di calcolo
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from gestionale_studio.core.money import ZERO, to_money
from gestionale_studio.models.invoice import InvoiceLineType
from gestionale_studio.schemas.common import ApiModel


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class InvoiceStatus(str, Enum):
    """Stato calcolato della fattura."""
    EMESSA = "emessa"
    PARZIALE = "parziale"
    PAGATA = "pagata"


# -------------------------------------------------------------------
# Risultati del calcolo
# -------------------------------------------------------------------

class InvoiceTotals(ApiModel):
    """Totali della fattura, tutti arrotondati al centesimo."""

    imponibile: Decimal = Field(ZERO, description="Somma delle righe")
    cassa: Decimal = Field(ZERO, description="Contributo cassa previdenziale")
    iva: Decimal = Field(ZERO, description="IVA su imponibile + cassa")
    ritenuta: Decimal = Field(ZERO, description="Ritenuta d'acconto su imponibile")
    bollo: Decimal = Field(ZERO, description="Marca da bollo")
    totale: Decimal = Field(ZERO, description="Totale documento")


class InvoiceBalance(ApiModel):
    """Situazione incassi della fattura."""

    totals: InvoiceTotals
    paid: Decimal = Field(..., description="Somma dei pagamenti")
    residuo: Decimal = Field(..., description="Totale meno pagato")
    status: InvoiceStatus
    overdue: bool = Field(..., description="Scaduta con residuo da incassare")


# -------------------------------------------------------------------
# Schemas per InvoiceLine
# -------------------------------------------------------------------

class InvoiceLineCreate(ApiModel):
    """Schema per una riga inserita a mano."""

    type: InvoiceLineType = Field(
        InvoiceLineType.MANUAL,
        description="Tipo riga: manual/onorario, spesa, anticipo, rimborso",
    )
    description: str = Field("", max_length=500, description="Descrizione della riga")
    amount: Decimal = Field(ZERO, description="Importo (accetta '1.234,56', '€ 10,00', ...)")

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> InvoiceLineType:
        return InvoiceLineType.coerce(v, InvoiceLineType.MANUAL)

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Decimal:
        amount = to_money(v)
        if amount < 0:
            raise ValueError("L'importo della riga non può essere negativo")
        return amount


class InvoiceLineRead(ApiModel):
    """Schema per la lettura di una riga fattura."""

    id: str
    type: InvoiceLineType
    description: str
    amount: Decimal
    expense_id: Optional[str] = Field(None, description="Spesa di origine")


# -------------------------------------------------------------------
# Schemas per Payment
# -------------------------------------------------------------------

class PaymentCreate(ApiModel):
    """
    Schema per registrare un incasso.

    L'importo viene normalizzato qui; il controllo "> 0" e il limite al
    residuo sono applicati dal service.
    """

    amount: Decimal = Field(ZERO, description="Importo incassato")
    date: Optional[datetime.date] = Field(None, description="Data incasso (default: oggi)")

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Decimal:
        return to_money(v)


class PaymentRead(ApiModel):
    """Schema per la lettura di un incasso."""

    id: str
    date: datetime.date
    amount: Decimal


# -------------------------------------------------------------------
# Schemas per Invoice
# -------------------------------------------------------------------

class InvoiceCreate(ApiModel):
    """
    Schema per la creazione di una fattura.

    Le righe possono arrivare a mano (lines), da spese di pratica
    (expense_ids) o entrambe. Se number è vuoto il numero viene preso
    dalla numerazione automatica.
    """

    client_id: str = Field(..., description="Cliente intestatario")
    case_id: Optional[str] = Field(None, description="Pratica collegata")
    number: Optional[str] = Field(None, description="Numero manuale (opzionale)")
    date: Optional[datetime.date] = Field(None, description="Data emissione (default: oggi)")
    due_date: Optional[datetime.date] = Field(None, description="Data scadenza")
    lines: list[InvoiceLineCreate] = Field(default_factory=list)
    expense_ids: list[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("case_id", "number", "due_date", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class InvoiceFromExpenses(InvoiceCreate):
    """Fattura generata a partire da spese di pratica, con righe extra opzionali."""

    extra_lines: list[InvoiceLineCreate] = Field(default_factory=list)


class AttachExpenses(ApiModel):
    """Spese da riportare in una fattura esistente."""

    expense_ids: list[str] = Field(default_factory=list)


class InvoiceUpdate(ApiModel):
    """
    Schema per l'aggiornamento di una fattura.

    Permette solo date e note: righe e pagamenti hanno endpoint dedicati.
    Per togliere la scadenza inviare esplicitamente dueDate = null.
    """

    date: Optional[datetime.date] = None
    due_date: Optional[datetime.date] = None
    notes: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class InvoiceRead(ApiModel):
    """
    Fattura serializzata con i campi derivati ricalcolati.

    È anche l'input del modulo di stampa PDF.
    """

    id: str
    number: str
    date: datetime.date
    due_date: Optional[datetime.date] = None
    client_id: str
    case_id: Optional[str] = None
    lines: list[InvoiceLineRead] = Field(default_factory=list)
    payments: list[PaymentRead] = Field(default_factory=list)
    notes: str = ""
    attached_expense_ids: list[str] = Field(default_factory=list)
    totals: InvoiceTotals
    paid: Decimal
    residuo: Decimal
    status: InvoiceStatus
    overdue: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime

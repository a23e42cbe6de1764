"""
Modelli per le Pratiche
Progetto: Gestionale Studio Legale

Contiene:
- Case: pratica (fascicolo) civile o penale
- CaseLog: voce del registro attività della pratica
- Expense: spesa sostenuta per una pratica, fatturabile una sola volta
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator

from gestionale_studio.core.money import ZERO, to_money
from gestionale_studio.models.invoice import InvoiceLineType
from gestionale_studio.models.mixins import TimestampMixin, UUIDMixin


class Case(UUIDMixin, TimestampMixin):
    """
    Pratica dello studio.

    Attributes:
        number: numero pratica (automatico, es. PR-CIV-2025-0001, o manuale)
        client_id: cliente assistito
        subject: oggetto della pratica
        court: autorità giudiziaria
        section: sezione
        judge: giudice
        rg_number: numero di ruolo generale
        case_type: tipo pratica (civile, penale, ...)
        proceeding_type: giudiziale / stragiudiziale
        status: aperta / chiusa
        value: valore della causa
        notes: note libere
    """

    number: str
    client_id: Optional[str] = None
    subject: str = ""
    court: str = ""
    section: str = ""
    judge: str = ""
    rg_number: str = ""
    case_type: str = "civile"
    proceeding_type: str = "giudiziale"
    status: str = "aperta"
    value: Decimal = ZERO
    notes: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def normalize_value(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("case_type", "proceeding_type", mode="before")
    @classmethod
    def lower(cls, v: Any) -> str:
        return str(v or "").strip().lower()


class CaseLog(UUIDMixin):
    """Voce del registro attività di una pratica."""

    case_id: str
    action: str = "nota"
    detail: str = ""
    category: Optional[str] = None
    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


class Expense(UUIDMixin):
    """
    Spesa sostenuta per una pratica.

    billed_invoice_id è valorizzato quando la spesa è stata riportata in una
    fattura: finché è impostato la spesa non può essere fatturata di nuovo.
    """

    case_id: Optional[str] = None
    date: datetime.date = Field(default_factory=datetime.date.today)
    description: str = ""
    amount: Decimal = ZERO
    type: InvoiceLineType = InvoiceLineType.SPESA
    document_ref: str = ""
    billed_invoice_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> InvoiceLineType:
        return InvoiceLineType.coerce(v, InvoiceLineType.SPESA)

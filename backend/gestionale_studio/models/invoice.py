"""
Modelli per la Fatturazione
Progetto: Gestionale Studio Legale

Contiene:
- InvoiceLineType: tipi di riga (onorario/manuale, spesa, anticipo, rimborso)
- InvoiceLine: riga della fattura
- Payment: incasso registrato sulla fattura
- Invoice: fattura
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator

from gestionale_studio.core.money import ZERO, to_money
from gestionale_studio.models.mixins import TimestampMixin, UUIDMixin


class InvoiceLineType(str, Enum):
    """Tipi di riga della fattura (e delle spese di pratica)."""
    MANUAL = "manual"
    ONORARIO = "onorario"
    SPESA = "spesa"
    ANTICIPO = "anticipo"
    RIMBORSO = "rimborso"

    @classmethod
    def coerce(cls, value: Any, default: "InvoiceLineType") -> "InvoiceLineType":
        """Converte valori liberi o storici in un tipo valido."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text == "expense":
            return cls.SPESA
        try:
            return cls(text)
        except ValueError:
            return default


class InvoiceLine(UUIDMixin):
    """
    Riga della fattura.

    Attributes:
        id: identificativo della riga
        type: tipo di riga
        description: descrizione stampata in fattura
        amount: importo (>= 0), già normalizzato e arrotondato al centesimo
        expense_id: spesa di pratica da cui la riga è stata generata, se presente
    """

    type: InvoiceLineType = InvoiceLineType.MANUAL
    description: str = ""
    amount: Decimal = ZERO
    expense_id: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> InvoiceLineType:
        return InvoiceLineType.coerce(v, InvoiceLineType.MANUAL)

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Decimal:
        return to_money(v)


class Payment(UUIDMixin):
    """Incasso registrato su una fattura (importo > 0)."""

    date: datetime.date = Field(default_factory=datetime.date.today)
    amount: Decimal = ZERO

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, v: Any) -> Decimal:
        return to_money(v)


class Invoice(UUIDMixin, TimestampMixin):
    """
    Fattura dello studio.

    Sono salvati solo i dati di origine: righe, pagamenti e scadenza.
    Totali, pagato, residuo, stato e flag di scadenza si ottengono da
    services/invoice_calc.py ad ogni lettura, con le aliquote correnti
    dello studio.

    Attributes:
        number: numero leggibile univoco (es. FAT-2025-0001)
        date: data emissione
        due_date: data scadenza (opzionale)
        client_id: cliente intestatario (obbligatorio)
        case_id: pratica collegata (opzionale, stesso cliente)
        lines: righe in ordine di inserimento
        payments: incassi in ordine di registrazione
        notes: note libere
        attached_expense_ids: spese di pratica fatturate con questa fattura
    """

    number: str
    date: datetime.date = Field(default_factory=datetime.date.today)
    due_date: Optional[datetime.date] = None
    client_id: str
    case_id: Optional[str] = None
    lines: List[InvoiceLine] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    notes: str = ""
    attached_expense_ids: List[str] = Field(default_factory=list)

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date(cls, v: Any) -> Any:
        return v or None

    def find_line(self, line_id: str) -> Optional[InvoiceLine]:
        return next((line for line in self.lines if line.id == line_id), None)

    def find_payment(self, payment_id: str) -> Optional[Payment]:
        return next((p for p in self.payments if p.id == payment_id), None)

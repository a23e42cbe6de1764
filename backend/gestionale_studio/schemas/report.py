"""
Schemas Pydantic per i Report
Progetto: Gestionale Studio Legale
"""

from decimal import Decimal

from pydantic import Field

from gestionale_studio.schemas.common import ApiModel


class DashboardReport(ApiModel):
    """Riepilogo per la dashboard, calcolato sui totali ricalcolati."""

    clients: int = Field(..., description="Numero clienti")
    cases: int = Field(..., description="Numero pratiche")
    open_cases: int = Field(..., description="Pratiche aperte")
    invoices: int = Field(..., description="Numero fatture")
    invoiced_total: Decimal = Field(..., description="Totale fatturato")
    collected_total: Decimal = Field(..., description="Totale incassato")
    outstanding_total: Decimal = Field(..., description="Totale da incassare (insoluti)")
    overdue_invoices: int = Field(..., description="Fatture scadute con residuo")
    unbilled_expenses: Decimal = Field(..., description="Spese di pratica non ancora fatturate")
    deadlines_this_month: int = Field(0, description="Scadenze del mese corrente")


class MonthlyTotal(ApiModel):
    """Fatturato e incassato di un mese (YYYY-MM)."""

    month: str
    label: str = Field(..., description="Mese abbreviato in italiano")
    invoiced: Decimal
    collected: Decimal
    count: int

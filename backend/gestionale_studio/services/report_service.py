"""
Service per i Report
Progetto: Gestionale Studio Legale

Riepiloghi calcolati sempre dai totali ricalcolati delle fatture (mai da
totali salvati), con le aliquote correnti dello studio.
"""

import datetime
import logging
from typing import Optional

from gestionale_studio.core.money import ZERO, round2
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.schemas.report import DashboardReport, MonthlyTotal
from gestionale_studio.services.invoice_calc import compute_balance

# Logger per questo modulo
logger = logging.getLogger(__name__)

MONTH_LABELS = (
    "gen", "feb", "mar", "apr", "mag", "giu",
    "lug", "ago", "set", "ott", "nov", "dic",
)


def _last_months(today: datetime.date, count: int) -> list[tuple[int, int]]:
    """(anno, mese) degli ultimi `count` mesi, dal più vecchio al corrente."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


class ReportService:
    """Dashboard e andamento mensile del fatturato."""

    def dashboard(self, store: JsonStore, today: Optional[datetime.date] = None) -> DashboardReport:
        """Riepilogo generale; outstanding somma i residui positivi."""
        today = today or datetime.date.today()
        invoiced = collected = outstanding = ZERO
        overdue = 0
        for invoice in store.data.invoices:
            balance = compute_balance(invoice, store.data.studio, today)
            invoiced += balance.totals.totale
            collected += balance.paid
            if balance.residuo > ZERO:
                outstanding += balance.residuo
            if balance.overdue:
                overdue += 1

        unbilled = sum(
            (e.amount for e in store.data.expenses if not e.billed_invoice_id),
            ZERO,
        )

        return DashboardReport(
            clients=len(store.data.clients),
            cases=len(store.data.cases),
            open_cases=sum(1 for c in store.data.cases if c.status == "aperta"),
            invoices=len(store.data.invoices),
            invoiced_total=round2(invoiced),
            collected_total=round2(collected),
            outstanding_total=round2(outstanding),
            overdue_invoices=overdue,
            unbilled_expenses=round2(unbilled),
            deadlines_this_month=sum(
                1 for d in store.data.deadlines
                if (d.date.year, d.date.month) == (today.year, today.month)
            ),
        )

    def monthly_totals(
        self,
        store: JsonStore,
        months: int = 12,
        today: Optional[datetime.date] = None,
    ) -> list[MonthlyTotal]:
        """
        Fatturato (per data fattura) e incassato (per data pagamento)
        degli ultimi `months` mesi, mese corrente incluso.
        """
        today = today or datetime.date.today()
        buckets: dict[tuple[int, int], dict] = {
            key: {"invoiced": ZERO, "collected": ZERO, "count": 0}
            for key in _last_months(today, months)
        }

        for invoice in store.data.invoices:
            key = (invoice.date.year, invoice.date.month)
            if key in buckets:
                totale = compute_balance(invoice, store.data.studio, today).totals.totale
                buckets[key]["invoiced"] += totale
                buckets[key]["count"] += 1
            for payment in invoice.payments:
                pkey = (payment.date.year, payment.date.month)
                if pkey in buckets:
                    buckets[pkey]["collected"] += payment.amount

        return [
            MonthlyTotal(
                month=f"{year}-{month:02d}",
                label=MONTH_LABELS[month - 1],
                invoiced=round2(values["invoiced"]),
                collected=round2(values["collected"]),
                count=values["count"],
            )
            for (year, month), values in buckets.items()
        ]

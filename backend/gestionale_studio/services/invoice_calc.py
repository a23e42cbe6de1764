"""
Motore di calcolo della fattura
Progetto: Gestionale Studio Legale

Funzioni pure, senza accesso all'archivio:
- compute_totals: imponibile, cassa, IVA, ritenuta, bollo, totale
- compute_paid / compute_residuo / derive_status / is_overdue
- compute_balance: tutto quanto sopra per una fattura
- cap_payment: limite dell'incasso al residuo

Ogni campo monetario è arrotondato una sola volta, nel punto in cui viene
calcolato, a partire da somme non arrotondate.

I totali si calcolano sempre con le aliquote CORRENTI dello studio: se
l'aliquota IVA cambia, cambiano anche i totali mostrati delle fatture già
emesse. È il comportamento voluto del gestionale, non una cache sbagliata.
"""

import datetime
from decimal import Decimal
from typing import Iterable, Optional

from gestionale_studio.core.money import ZERO, parse_money, round2
from gestionale_studio.models import Invoice, InvoiceLine, Payment, StudioSettings
from gestionale_studio.schemas.invoice import InvoiceBalance, InvoiceStatus, InvoiceTotals

# Soglia di legge per la marca da bollo (imponibile >= 77,47 €)
STAMP_DUTY_THRESHOLD = Decimal("77.47")

# Importo della marca da bollo se lo studio non ne ha configurato uno
DEFAULT_STAMP_DUTY = Decimal("2.00")

HUNDRED = Decimal("100")


def compute_totals(lines: Iterable[InvoiceLine], tax: StudioSettings) -> InvoiceTotals:
    """
    Calcola i totali della fattura.

    Formule:
        imponibile = somma righe
        cassa      = imponibile × cassa% / 100
        iva        = (imponibile + cassa) × iva% / 100
        ritenuta   = imponibile × ritenuta% / 100
        bollo      = importo studio (default 2,00) se imponibile >= 77,47, altrimenti 0
        totale     = imponibile + cassa + iva + bollo − ritenuta

    L'IVA si applica su imponibile PIÙ cassa: è la regola storica dei
    documenti dello studio, da confermare con il commercialista dello studio.

    Args:
        lines: righe della fattura (importi già normalizzati)
        tax: anagrafica studio con le aliquote correnti

    Returns:
        InvoiceTotals: totali arrotondati al centesimo
    """
    imponibile = round2(sum((parse_money(line.amount) for line in lines), ZERO))
    cassa = round2(imponibile * parse_money(tax.cassa_perc) / HUNDRED)
    iva = round2((imponibile + cassa) * parse_money(tax.iva_perc) / HUNDRED)
    ritenuta = round2(imponibile * parse_money(tax.ritenuta_perc) / HUNDRED)

    if imponibile >= STAMP_DUTY_THRESHOLD:
        bollo = round2(tax.bollo if tax.bollo is not None else DEFAULT_STAMP_DUTY)
    else:
        bollo = round2(ZERO)

    totale = round2(imponibile + cassa + iva + bollo - ritenuta)

    return InvoiceTotals(
        imponibile=imponibile,
        cassa=cassa,
        iva=iva,
        ritenuta=ritenuta,
        bollo=bollo,
        totale=totale,
    )


def compute_paid(payments: Iterable[Payment]) -> Decimal:
    """Somma degli incassi."""
    return round2(sum((parse_money(p.amount) for p in payments), ZERO))


def compute_residuo(totale: Decimal, paid: Decimal) -> Decimal:
    """Residuo da incassare (può essere negativo solo con dati storici incoerenti)."""
    return round2(parse_money(totale) - parse_money(paid))


def derive_status(totale: Decimal, paid: Decimal, residuo: Decimal) -> InvoiceStatus:
    """
    Stato della fattura:
    - 'pagata': residuo <= 0 (anche una fattura a totale zero)
    - 'parziale': 0 < pagato < totale
    - 'emessa': negli altri casi
    """
    if residuo <= 0:
        return InvoiceStatus.PAGATA
    if ZERO < paid < totale:
        return InvoiceStatus.PARZIALE
    return InvoiceStatus.EMESSA


def is_overdue(
    due_date: Optional[datetime.date],
    residuo: Decimal,
    today: Optional[datetime.date] = None,
) -> bool:
    """Scaduta: ha una scadenza, residuo > 0 e la scadenza è prima di oggi."""
    if due_date is None or residuo <= 0:
        return False
    if isinstance(due_date, datetime.datetime):
        due_date = due_date.date()
    today = today or datetime.date.today()
    return due_date < today


def cap_payment(requested: Decimal, residuo: Decimal) -> Decimal:
    """
    Limita un incasso al residuo.

    Un incasso superiore al residuo non è un errore: viene registrato solo
    il residuo. Chi chiama deve rendere visibile la differenza (log attività).
    """
    return residuo if requested > residuo else requested


def compute_balance(
    invoice: Invoice,
    tax: StudioSettings,
    today: Optional[datetime.date] = None,
) -> InvoiceBalance:
    """Ricalcola totali, pagato, residuo, stato e scadenza di una fattura."""
    totals = compute_totals(invoice.lines, tax)
    paid = compute_paid(invoice.payments)
    residuo = compute_residuo(totals.totale, paid)
    return InvoiceBalance(
        totals=totals,
        paid=paid,
        residuo=residuo,
        status=derive_status(totals.totale, paid, residuo),
        overdue=is_overdue(invoice.due_date, residuo, today),
    )

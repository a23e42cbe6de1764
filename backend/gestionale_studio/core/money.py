"""
Normalizzazione importi
Progetto: Gestionale Studio Legale

Unico punto di ingresso per trasformare un importo arbitrario (numero o
stringa con simbolo di valuta, spazi, separatori italiani o anglosassoni)
in un Decimal, e per l'arrotondamento al centesimo.

Regole di parsing delle stringhe:
- vengono rimossi i simboli di valuta (€ $ £) e gli spazi
- se compaiono sia "." che "," il punto è separatore delle migliaia e la
  virgola è il separatore decimale ("1.234,56" → 1234.56)
- se compare solo "," è il separatore decimale ("10,50" → 10.50)
- se compare solo "." la stringa resta invariata ("1234.56" → 1234.56)
- si legge il prefisso numerico più lungo; se non c'è, l'importo vale 0

Un importo non interpretabile, o fuori dal range di un float ("1e400"),
non solleva mai eccezioni: vale 0.
"""

import logging
import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

_STRIP_RE = re.compile(r"[€$£\s]")
_NUMBER_PREFIX_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_money(value: Any) -> Decimal:
    """
    Converte un importo in Decimal senza arrotondare.

    Args:
        value: numero, stringa o None

    Returns:
        Decimal: l'importo, oppure 0 se non interpretabile
    """
    # bool è una sottoclasse di int, ma non è un importo
    if isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() and _in_float_range(value) else ZERO
    if isinstance(value, int):
        return Decimal(value) if _in_float_range(value) else ZERO
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else ZERO
    if value is None:
        return ZERO
    if not isinstance(value, str):
        return ZERO

    text = _STRIP_RE.sub("", value)
    if not text:
        return ZERO

    if "," in text and "." in text:
        text = text.replace(".", "").replace(",", ".", 1)
    elif "," in text:
        text = text.replace(",", ".", 1)

    match = _NUMBER_PREFIX_RE.match(text)
    if not match:
        logger.warning("Importo non interpretabile %r: considerato 0", value)
        return ZERO

    amount = Decimal(match.group(0))
    return amount if _in_float_range(amount) else ZERO


def _in_float_range(amount: Any) -> bool:
    """Vero se l'importo è finito anche come float ("1e400" non lo è)."""
    try:
        return math.isfinite(float(amount))
    except OverflowError:
        return False


def round2(value: Any) -> Decimal:
    """
    Arrotonda al centesimo, metà lontano da zero (1.005 → 1.01, -1.005 → -1.01).

    Lavorando su Decimal il valore scalato è esatto e non serve la
    correzione con epsilon necessaria con i float. round2(round2(x)) == round2(x).
    """
    amount = value if isinstance(value, Decimal) else parse_money(value)
    if not amount.is_finite():
        return ZERO.quantize(CENT)
    # quantize richiede che il risultato stia nella precisione del contesto
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value: Any) -> Decimal:
    """Normalizza e arrotonda: la forma con cui ogni importo viene salvato."""
    return round2(parse_money(value))

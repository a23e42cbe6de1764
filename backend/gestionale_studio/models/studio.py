"""
Modelli per l'anagrafica e le impostazioni dello studio
Progetto: Gestionale Studio Legale

Contiene:
- StudioSettings: dati dello studio e aliquote (cassa, IVA, ritenuta, bollo)
- CaseTypeNumbering / CaseNumberingConfig: numerazione delle pratiche
- AppSettings: contenitore delle impostazioni salvate nel documento
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from gestionale_studio.core.money import ZERO, parse_money, to_money
from gestionale_studio.models import Document


class StudioSettings(Document):
    """
    Anagrafica dello studio e configurazione fiscale.

    Le percentuali sono espresse in punti (22 = 22%). bollo è l'importo fisso
    della marca da bollo: None significa "non configurato" e vale il default
    di legge (2,00).
    """

    name: str = "Studio Legale"
    address: str = ""
    vat_number: str = ""
    fiscal_code: str = ""
    email: str = ""
    pec: str = ""
    phone: str = ""
    iban: str = ""
    cassa_perc: Decimal = ZERO
    iva_perc: Decimal = ZERO
    ritenuta_perc: Decimal = ZERO
    bollo: Optional[Decimal] = None

    @field_validator("cassa_perc", "iva_perc", "ritenuta_perc", mode="before")
    @classmethod
    def normalize_perc(cls, v: Any) -> Decimal:
        return parse_money(v)

    @field_validator("bollo", mode="before")
    @classmethod
    def normalize_bollo(cls, v: Any) -> Optional[Decimal]:
        if v is None or v == "":
            return None
        return to_money(v)


class CaseTypeNumbering(Document):
    """Prefisso e cifre del progressivo per un tipo di pratica."""

    prefix: str
    pad: int = 4


def _default_case_types() -> Dict[str, CaseTypeNumbering]:
    return {
        "civile": CaseTypeNumbering(prefix="PR-CIV", pad=4),
        "penale": CaseTypeNumbering(prefix="PR-PEN", pad=4),
    }


class CaseNumberingConfig(Document):
    """
    Configurazione della numerazione pratiche.

    Attributes:
        allow_manual: se True è possibile assegnare un numero a mano
        separator: separatore tra prefisso, anno e progressivo
        case_types: famiglie di numerazione per tipo pratica
    """

    allow_manual: bool = True
    separator: str = "-"
    case_types: Dict[str, CaseTypeNumbering] = Field(default_factory=_default_case_types)

    @field_validator("case_types", mode="after")
    @classmethod
    def merge_defaults(cls, v: Dict[str, CaseTypeNumbering]) -> Dict[str, CaseTypeNumbering]:
        """civile e penale esistono sempre, anche in documenti parziali."""
        merged = _default_case_types()
        merged.update({key.lower(): value for key, value in v.items()})
        return merged

    @field_validator("separator", mode="before")
    @classmethod
    def default_separator(cls, v: Any) -> str:
        return v or "-"


class AppSettings(Document):
    """Impostazioni applicative salvate nel documento JSON."""

    case_numbering: CaseNumberingConfig = Field(default_factory=CaseNumberingConfig)

"""
Schemas Pydantic per l'anagrafica dello Studio
Progetto: Gestionale Studio Legale

Le aliquote sono espresse in punti percentuali (22 = 22%).
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator

from gestionale_studio.core.money import parse_money, to_money
from gestionale_studio.schemas.common import ApiModel

HUNDRED = Decimal("100")


def _percentage(v: Any) -> Optional[Decimal]:
    if v is None:
        return None
    perc = parse_money(v)
    if perc < 0 or perc > HUNDRED:
        raise ValueError("La percentuale deve essere compresa tra 0 e 100")
    return perc


class StudioUpdate(ApiModel):
    """Aggiornamento parziale di anagrafica e configurazione fiscale."""

    name: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    vat_number: Optional[str] = None
    fiscal_code: Optional[str] = None
    email: Optional[str] = None
    pec: Optional[str] = None
    phone: Optional[str] = None
    iban: Optional[str] = None
    cassa_perc: Optional[Decimal] = Field(None, description="Cassa previdenziale (%)")
    iva_perc: Optional[Decimal] = Field(None, description="IVA (%)")
    ritenuta_perc: Optional[Decimal] = Field(None, description="Ritenuta d'acconto (%)")
    bollo: Optional[Decimal] = Field(None, description="Importo marca da bollo")

    @field_validator("cassa_perc", "iva_perc", "ritenuta_perc", mode="before")
    @classmethod
    def validate_perc(cls, v: Any) -> Optional[Decimal]:
        return _percentage(v)

    @field_validator("bollo", mode="before")
    @classmethod
    def validate_bollo(cls, v: Any) -> Optional[Decimal]:
        if v is None or v == "":
            return None
        amount = to_money(v)
        if amount < 0:
            raise ValueError("L'importo del bollo non può essere negativo")
        return amount

    @field_validator("iban", mode="before")
    @classmethod
    def normalize_iban(cls, v: Any) -> Any:
        return v.replace(" ", "").upper() if isinstance(v, str) else v


class StudioRead(ApiModel):
    name: str
    address: str = ""
    vat_number: str = ""
    fiscal_code: str = ""
    email: str = ""
    pec: str = ""
    phone: str = ""
    iban: str = ""
    cassa_perc: Decimal
    iva_perc: Decimal
    ritenuta_perc: Decimal
    bollo: Optional[Decimal] = Field(None, description="None = importo di legge (2,00)")

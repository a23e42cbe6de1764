"""
Schemas Pydantic per l'anagrafica Clienti
Progetto: Gestionale Studio Legale
"""
# Definisce gli schemi di validazione e serializzazione per l'API.

import datetime
import re
from typing import Any, Optional

from codicefiscale import codicefiscale
from pydantic import EmailStr, Field, field_validator

from gestionale_studio.core.exceptions import BusinessValidationError
from gestionale_studio.schemas.common import ApiModel


# -------------------------------------------------------------------
# Funzioni di normalizzazione e validazione
# -------------------------------------------------------------------

def _check_partita_iva(piva: str) -> bool:
    """
    Controllo della cifra finale di una Partita IVA italiana (11 cifre).

    Cifre in posizione dispari sommate, in posizione pari raddoppiate
    (meno 9 se > 9); la cifra di controllo chiude la somma a multiplo di 10.
    """
    if len(piva) != 11 or not piva.isdigit():
        return False

    s = sum(int(piva[i]) for i in range(0, 10, 2))
    for i in range(1, 10, 2):
        c = 2 * int(piva[i])
        if c > 9:
            c -= 9
        s += c

    return (10 - (s % 10)) % 10 == int(piva[10])


def normalize_fiscal_code(value: Optional[str]) -> str:
    """
    Normalizza e valida il Codice Fiscale.

    Accetta anche una Partita IVA (11 cifre), usata come codice fiscale
    dalle società.

    Raises:
        BusinessValidationError: codice non valido
    """
    normalized = (value or "").strip().upper()
    if not normalized:
        return ""
    if normalized.isdigit():
        if not _check_partita_iva(normalized):
            raise BusinessValidationError("Codice Fiscale numerico non valido")
        return normalized
    if not codicefiscale.is_valid(normalized):
        raise BusinessValidationError("Codice Fiscale non valido")
    return normalized


def normalize_vat_number(value: Optional[str]) -> str:
    """
    Normalizza la Partita IVA: rimuove spazi e il prefisso 'IT'.

    Raises:
        BusinessValidationError: formato o cifra di controllo errati
    """
    normalized = re.sub(r"\s+", "", value or "").upper()
    if normalized.startswith("IT"):
        normalized = normalized[2:]
    if not normalized:
        return ""
    if not _check_partita_iva(normalized):
        raise BusinessValidationError("Partita IVA non valida")
    return normalized


def normalize_phone(value: Optional[str]) -> str:
    """Telefono senza spazi: '+' opzionale seguito da sole cifre."""
    normalized = (value or "").strip().replace(" ", "")
    if normalized and not re.match(r"^\+?\d+$", normalized):
        raise ValueError("Numero di telefono non valido")
    return normalized


def _empty_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


# -------------------------------------------------------------------
# Schemas
# -------------------------------------------------------------------

class ClientBase(ApiModel):
    """Campi comuni del cliente."""

    name: str = Field(..., min_length=1, max_length=255, description="Nome e cognome o ragione sociale")
    fiscal_code: str = Field("", max_length=16, description="Codice Fiscale")
    vat_number: str = Field("", max_length=13, description="Partita IVA")
    email: Optional[EmailStr] = Field(None, description="Indirizzo email")
    pec: Optional[EmailStr] = Field(None, description="Posta elettronica certificata")
    phone: str = Field("", max_length=20, description="Telefono")
    address: str = Field("", max_length=255, description="Indirizzo completo")
    notes: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("fiscal_code", mode="before")
    @classmethod
    def validate_fiscal_code(cls, v: Any) -> str:
        return normalize_fiscal_code(v)

    @field_validator("vat_number", mode="before")
    @classmethod
    def validate_vat_number(cls, v: Any) -> str:
        return normalize_vat_number(v)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> str:
        return normalize_phone(v)

    @field_validator("email", "pec", mode="before")
    @classmethod
    def empty_email(cls, v: Any) -> Any:
        return _empty_to_none(v)


class ClientCreate(ClientBase):
    """Schema per la creazione di un cliente: il nome è obbligatorio."""


class ClientUpdate(ApiModel):
    """
    Schema per l'aggiornamento parziale di un cliente.

    I campi non inviati restano invariati.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    fiscal_code: Optional[str] = None
    vat_number: Optional[str] = None
    email: Optional[EmailStr] = None
    pec: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("fiscal_code", mode="before")
    @classmethod
    def validate_fiscal_code(cls, v: Any) -> Optional[str]:
        return None if v is None else normalize_fiscal_code(v)

    @field_validator("vat_number", mode="before")
    @classmethod
    def validate_vat_number(cls, v: Any) -> Optional[str]:
        return None if v is None else normalize_vat_number(v)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> Optional[str]:
        return None if v is None else normalize_phone(v)

    @field_validator("email", "pec", mode="before")
    @classmethod
    def empty_email(cls, v: Any) -> Any:
        return _empty_to_none(v)


class ClientRead(ApiModel):
    """
    Schema per la lettura di un cliente.

    I contatti sono stringhe semplici: i documenti storici possono
    contenere valori che oggi non passerebbero la validazione.
    """

    id: str
    name: str
    fiscal_code: str = ""
    vat_number: str = ""
    email: str = ""
    pec: str = ""
    phone: str = ""
    address: str = ""
    notes: str = ""
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ClientList(ApiModel):
    """Lista paginata dei clienti."""

    items: list[ClientRead]
    total: int
    page: int
    per_page: int

"""
Schemas Pydantic per le Scadenze
Progetto: Gestionale Studio Legale

Contiene:
- DeadlineCreate: nuova scadenza o udienza
- DeadlineUpdate: modifica parziale
- DeadlineRead: lettura
"""

from __future__ import annotations

import datetime
import re
from typing import Any, Optional

from pydantic import Field, field_validator

from gestionale_studio.schemas.common import ApiModel

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def normalize_time(v: Any) -> Any:
    """Orario HH:MM oppure stringa vuota ("9:30" diventa "09:30")."""
    if v is None:
        return v
    text = str(v).strip()
    if not text:
        return ""
    if len(text) == 4 and text[1] == ":":
        text = "0" + text
    if not _TIME_RE.match(text):
        raise ValueError("Orario non valido: usare il formato HH:MM")
    return text


# -------------------------------------------------------------------
# Schemas per Deadline
# -------------------------------------------------------------------

class DeadlineCreate(ApiModel):
    """
    Schema per la creazione di una scadenza.

    Senza data la scadenza è fissata ad oggi.
    """

    case_id: Optional[str] = Field(None, description="Pratica collegata")
    date: Optional[datetime.date] = Field(None, description="Giorno della scadenza")
    time: str = Field("", description="Orario HH:MM (opzionale)")
    type: str = Field("scadenza", max_length=100, description="udienza, deposito, termine perentorio, ...")
    title: str = Field("", max_length=200)
    note: str = ""

    @field_validator("case_id", "date", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, v: Any) -> Any:
        return normalize_time(v) or ""

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> Any:
        return str(v or "").strip() or "scadenza"


class DeadlineUpdate(ApiModel):
    """Schema per l'aggiornamento (tutti i campi opzionali)."""

    case_id: Optional[str] = None
    date: Optional[datetime.date] = None
    time: Optional[str] = None
    type: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=200)
    note: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, v: Any) -> Any:
        return normalize_time(v)


class DeadlineRead(ApiModel):
    """Schema per la lettura di una scadenza."""

    id: str
    case_id: Optional[str] = None
    date: datetime.date
    time: str
    type: str
    title: str
    note: str
    completed: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime

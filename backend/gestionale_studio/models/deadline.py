"""
Modello Deadline
Progetto: Gestionale Studio Legale

Scadenze e udienze dello studio, collegate o meno a una pratica.
"""

import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from gestionale_studio.models.mixins import TimestampMixin, UUIDMixin


class Deadline(UUIDMixin, TimestampMixin):
    """
    Scadenza o udienza.

    Attributes:
        case_id: pratica collegata (opzionale)
        date: giorno della scadenza
        time: orario HH:MM, vuoto se non indicato
        type: scadenza, udienza, deposito, termine perentorio, ...
        title: titolo breve
        note: note libere
        completed: scadenza evasa
    """

    case_id: Optional[str] = None
    date: datetime.date = Field(default_factory=datetime.date.today)
    time: str = ""
    type: str = "scadenza"
    title: str = ""
    note: str = ""
    completed: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def default_date(cls, v: Any) -> Any:
        return v or datetime.date.today()

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> Any:
        return v or "scadenza"

    def sort_key(self) -> tuple[datetime.date, str]:
        return self.date, self.time

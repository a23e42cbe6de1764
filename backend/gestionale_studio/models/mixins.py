"""
Mixin per i modelli
Progetto: Gestionale Studio Legale

Mixin riutilizzabili per aggiungere campi comuni ai record.
"""

import datetime
import uuid

from pydantic import Field

from gestionale_studio.models import Document


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class TimestampMixin(Document):
    """
    Mixin per i timestamp di creazione e aggiornamento.

    Aggiunge i campi:
    - created_at: data/ora di creazione record (impostato automaticamente)
    - updated_at: data/ora ultimo aggiornamento (aggiornato con touch())
    """

    created_at: datetime.datetime = Field(default_factory=_utcnow)
    updated_at: datetime.datetime = Field(default_factory=_utcnow)

    def touch(self) -> None:
        """Aggiorna updated_at all'istante corrente."""
        self.updated_at = _utcnow()


class UUIDMixin(Document):
    """
    Mixin per ID UUID generato lato applicazione.

    Gli id sono salvati come stringhe: il documento JSON li tratta come
    identificativi opachi.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

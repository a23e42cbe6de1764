"""
Service Layer per le Scadenze
Progetto: Gestionale Studio Legale

Scadenze e udienze: elenco per pratica o per intervallo di date, in ordine
cronologico, e CRUD. Le scadenze create su una pratica finiscono anche nel
registro attività della pratica.
"""

import datetime
import logging
from typing import Optional

from gestionale_studio.core.exceptions import BusinessValidationError, NotFoundError
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import Deadline
from gestionale_studio.schemas.deadline import DeadlineCreate, DeadlineUpdate
from gestionale_studio.services.case_service import record_case_activity

# Logger per questo modulo
logger = logging.getLogger(__name__)


class DeadlineService:
    """Service per la gestione delle scadenze."""

    def get_all(
        self,
        store: JsonStore,
        case_id: Optional[str] = None,
        date_from: Optional[datetime.date] = None,
        date_to: Optional[datetime.date] = None,
    ) -> list[Deadline]:
        """
        Lista scadenze ordinate per data e orario.

        Args:
            case_id: solo le scadenze della pratica
            date_from: dal giorno (incluso)
            date_to: al giorno (incluso)
        """
        deadlines = store.data.deadlines
        if case_id:
            deadlines = [d for d in deadlines if d.case_id == case_id]
        if date_from:
            deadlines = [d for d in deadlines if d.date >= date_from]
        if date_to:
            deadlines = [d for d in deadlines if d.date <= date_to]
        return sorted(deadlines, key=Deadline.sort_key)

    def get_by_id(self, store: JsonStore, deadline_id: str) -> Deadline:
        """
        Recupera una scadenza per ID.

        Raises:
            NotFoundError: Scadenza non trovata
        """
        deadline = store.data.find_deadline(deadline_id)
        if not deadline:
            raise NotFoundError(f"Scadenza {deadline_id} non trovata")
        return deadline

    def _ensure_case(self, store: JsonStore, case_id: Optional[str]) -> None:
        if case_id and not store.data.find_case(case_id):
            raise BusinessValidationError(f"Pratica {case_id} non trovata")

    def create(self, store: JsonStore, data: DeadlineCreate) -> Deadline:
        """
        Crea una scadenza.

        Raises:
            BusinessValidationError: pratica inesistente
        """
        self._ensure_case(store, data.case_id)

        deadline = Deadline(**data.model_dump())
        store.data.deadlines.append(deadline)
        if deadline.case_id:
            record_case_activity(
                store, deadline.case_id, "scadenza-creata",
                f"{deadline.type}: {deadline.date.isoformat()} - {deadline.title}",
                category="scadenza",
            )

        store.save()
        logger.info("Creata scadenza %s del %s", deadline.id, deadline.date)
        return deadline

    def update(self, store: JsonStore, deadline_id: str, data: DeadlineUpdate) -> Deadline:
        """
        Aggiorna una scadenza. I campi non inviati restano invariati.

        Raises:
            NotFoundError: Scadenza non trovata
            BusinessValidationError: pratica inesistente
        """
        deadline = self.get_by_id(store, deadline_id)
        update_data = data.model_dump(exclude_unset=True)
        self._ensure_case(store, update_data.get("case_id"))

        for field, value in update_data.items():
            if value is None and field != "case_id":
                continue
            setattr(deadline, field, value)
        deadline.touch()

        store.save()
        logger.info("Scadenza %s aggiornata: %s", deadline.id, ", ".join(sorted(update_data)))
        return deadline

    def delete(self, store: JsonStore, deadline_id: str) -> None:
        """
        Elimina una scadenza.

        Raises:
            NotFoundError: Scadenza non trovata
        """
        deadline = self.get_by_id(store, deadline_id)
        store.data.deadlines.remove(deadline)
        store.save()
        logger.info("Eliminata scadenza %s", deadline_id)

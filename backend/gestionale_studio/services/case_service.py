"""
Service Layer per le Pratiche
Progetto: Gestionale Studio Legale

Definisce la logica di business per le pratiche dello studio:
- CRUD con numerazione automatica o manuale
- Registro attività (log) della pratica
- Spese sostenute per la pratica, poi riportabili in fattura
"""

import datetime
import logging
from typing import Optional

from gestionale_studio.core.exceptions import BusinessValidationError, NotFoundError
from gestionale_studio.core.money import ZERO
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import Case, CaseLog, Expense, Invoice
from gestionale_studio.schemas.case import (
    CaseCreate,
    CaseLogCreate,
    CaseUpdate,
    ExpenseCreate,
)
from gestionale_studio.services.sequence_service import SequenceService

# Logger per questo modulo
logger = logging.getLogger(__name__)


def record_case_activity(
    store: JsonStore,
    case_id: str,
    action: str,
    detail: str,
    category: Optional[str] = None,
) -> CaseLog:
    """
    Aggiunge una voce al registro attività della pratica.

    Non salva: la voce viene scritta insieme alla modifica che la genera.
    """
    entry = CaseLog(case_id=case_id, action=action, detail=detail, category=category)
    store.data.logs.append(entry)
    return entry


class CaseService:
    """
    Service per la gestione delle pratiche.

    Implementa:
    - Numero pratica assegnato alla creazione e non più modificabile
    - Eliminazione che stacca le fatture collegate e scarta le spese non fatturate
    - Registro attività in ordine cronologico
    """

    def __init__(self, sequences: Optional[SequenceService] = None) -> None:
        self.sequences = sequences or SequenceService()

    # ------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------

    def get_all(
        self,
        store: JsonStore,
        client_id: Optional[str] = None,
        status_filter: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Case]:
        """
        Lista pratiche, più recenti prima.

        Args:
            client_id: solo le pratiche del cliente
            status_filter: aperta / chiusa
            search: testo cercato in numero, oggetto, ufficio giudiziario e RG
        """
        cases = store.data.cases
        if client_id:
            cases = [c for c in cases if c.client_id == client_id]
        if status_filter:
            wanted = status_filter.strip().lower()
            cases = [c for c in cases if c.status.lower() == wanted]
        if search:
            term = search.strip().lower()
            cases = [
                c for c in cases
                if any(term in (v or "").lower() for v in (c.number, c.subject, c.court, c.rg_number))
            ]
        return sorted(cases, key=lambda c: c.created_at, reverse=True)

    def get_by_id(self, store: JsonStore, case_id: str) -> Case:
        """
        Recupera una pratica per ID.

        Raises:
            NotFoundError: Pratica non trovata
        """
        case = store.data.find_case(case_id)
        if not case:
            raise NotFoundError(f"Pratica {case_id} non trovata")
        return case

    def preview_number(self, store: JsonStore, case_type: Optional[str] = None) -> str:
        """Prossimo numero automatico per il tipo pratica, senza consumarlo."""
        return self.sequences.preview_number(store, case_type)

    def create(self, store: JsonStore, data: CaseCreate) -> Case:
        """
        Crea una nuova pratica.

        Steps:
        1. Verifica il cliente, se indicato
        2. Assegna il numero (manuale o progressivo del tipo pratica)
        3. Registra l'attività e salva

        Raises:
            BusinessValidationError: cliente inesistente o numerazione manuale disabilitata
            DuplicateError: numero manuale già in uso
        """
        if data.client_id and not store.data.find_client(data.client_id):
            raise BusinessValidationError(f"Cliente {data.client_id} non trovato")

        case_type = self.sequences.resolve_case_type(store, data.case_type)
        number = self.sequences.assign_case_number(store, case_type, data.manual_number)

        case = Case(
            number=number,
            case_type=case_type,
            **data.model_dump(exclude={"case_type", "manual_number"}),
        )
        store.data.cases.append(case)
        record_case_activity(
            store, case.id, "creazione-pratica",
            f"Creata pratica: {case.number} - {case.subject}",
        )

        store.save()
        logger.info("Creata pratica %s (%s)", case.number, case.case_type)
        return case

    def update(self, store: JsonStore, case_id: str, data: CaseUpdate) -> Case:
        """
        Aggiorna i dati di una pratica. Il numero non si modifica.

        Raises:
            NotFoundError: Pratica non trovata
            BusinessValidationError: nuovo cliente inesistente
        """
        case = self.get_by_id(store, case_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("client_id") and not store.data.find_client(update_data["client_id"]):
            raise BusinessValidationError(f"Cliente {update_data['client_id']} non trovato")

        for field, value in update_data.items():
            if value is None and field != "client_id":
                continue
            if field in ("status", "proceeding_type"):
                value = value.strip().lower()
            setattr(case, field, value)
        case.touch()

        record_case_activity(store, case.id, "modifica-pratica", "Pratica modificata")
        store.save()
        logger.info("Pratica %s aggiornata: %s", case.number, ", ".join(sorted(update_data)))
        return case

    def delete(self, store: JsonStore, case_id: str) -> None:
        """
        Elimina una pratica.

        Le fatture collegate restano (sono documenti fiscali) ma perdono il
        riferimento alla pratica, come le scadenze; le spese non ancora
        fatturate vengono eliminate, quelle fatturate restano legate alla
        fattura. Il registro attività è conservato.

        Raises:
            NotFoundError: Pratica non trovata
        """
        case = self.get_by_id(store, case_id)

        detached = 0
        for invoice in store.data.invoices:
            if invoice.case_id == case.id:
                invoice.case_id = None
                invoice.touch()
                detached += 1

        before = len(store.data.expenses)
        store.data.expenses = [
            e for e in store.data.expenses
            if e.case_id != case.id or e.billed_invoice_id
        ]
        dropped = before - len(store.data.expenses)

        for deadline in store.data.deadlines:
            if deadline.case_id == case.id:
                deadline.case_id = None

        store.data.cases.remove(case)
        record_case_activity(store, case.id, "elimina-pratica", f"Pratica {case.number} eliminata")

        store.save()
        logger.info(
            "Pratica %s eliminata (%s fatture staccate, %s spese rimosse)",
            case.number, detached, dropped,
        )

    # ------------------------------------------------------------
    # Registro attività
    # ------------------------------------------------------------

    def get_logs(self, store: JsonStore, case_id: str) -> list[CaseLog]:
        """Registro attività in ordine cronologico."""
        self.get_by_id(store, case_id)
        logs = [entry for entry in store.data.logs if entry.case_id == case_id]
        return sorted(logs, key=lambda entry: entry.created_at)

    def add_log(self, store: JsonStore, case_id: str, data: CaseLogCreate) -> CaseLog:
        self.get_by_id(store, case_id)
        entry = record_case_activity(store, case_id, data.action or "nota", data.detail, category="nota")
        store.save()
        return entry

    # ------------------------------------------------------------
    # Spese
    # ------------------------------------------------------------

    def get_expenses(
        self,
        store: JsonStore,
        case_id: str,
        unbilled_only: bool = False,
    ) -> list[Expense]:
        self.get_by_id(store, case_id)
        expenses = [e for e in store.data.expenses if e.case_id == case_id]
        if unbilled_only:
            expenses = [e for e in expenses if not e.billed_invoice_id]
        return sorted(expenses, key=lambda e: e.date)

    def add_expense(self, store: JsonStore, case_id: str, data: ExpenseCreate) -> Expense:
        """
        Registra una spesa della pratica.

        Raises:
            NotFoundError: Pratica non trovata
            BusinessValidationError: importo <= 0
        """
        case = self.get_by_id(store, case_id)
        if not data.amount > ZERO:
            raise BusinessValidationError("L'importo della spesa deve essere maggiore di zero")

        expense = Expense(
            case_id=case.id,
            date=data.date or datetime.date.today(),
            description=data.description,
            amount=data.amount,
            type=data.type,
            document_ref=data.document_ref,
        )
        store.data.expenses.append(expense)
        record_case_activity(
            store, case.id, "spesa-aggiunta",
            f"{expense.description or 'spesa'} € {expense.amount:.2f}",
            category="spesa",
        )

        store.save()
        logger.info("Pratica %s: registrata spesa %s (%s)", case.number, expense.id, expense.amount)
        return expense

    def get_invoices(self, store: JsonStore, case_id: str) -> list[Invoice]:
        self.get_by_id(store, case_id)
        return [i for i in store.data.invoices if i.case_id == case_id]

"""
Service Layer per la Fatturazione
Progetto: Gestionale Studio Legale

Definisce la logica di business per la gestione delle fatture:
creazione (righe manuali e/o spese di pratica), righe, incassi,
numerazione e serializzazione con i totali ricalcolati.

Ogni operazione valida tutto prima di modificare l'archivio e salva
una sola volta alla fine: un errore di validazione lascia il documento
invariato, un errore di scrittura riporta la memoria all'ultimo
salvataggio (vedi JsonStore.save).
"""

import datetime
import logging
from decimal import Decimal
from typing import Iterable, Optional

from gestionale_studio.core.config import settings
from gestionale_studio.core.exceptions import BusinessValidationError, NotFoundError
from gestionale_studio.core.money import ZERO
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import Expense, Invoice, InvoiceLine, Payment
from gestionale_studio.schemas.invoice import (
    AttachExpenses,
    InvoiceCreate,
    InvoiceFromExpenses,
    InvoiceLineCreate,
    InvoiceRead,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentCreate,
)
from gestionale_studio.services.case_service import record_case_activity
from gestionale_studio.services.invoice_calc import cap_payment, compute_balance
from gestionale_studio.services.sequence_service import INVOICE_KIND, SequenceService

# Logger per questo modulo
logger = logging.getLogger(__name__)


def _euro(amount: Decimal) -> str:
    return f"€ {amount:.2f}"


class InvoiceService:
    """
    Service per la gestione delle operazioni sulle fatture.

    Lavora sull'archivio JSON passato come primo argomento,
    senza dipendenze da FastAPI.

    Implementa:
    - Creazione da righe manuali e/o spese di pratica
    - Numerazione progressiva annuale o numero manuale
    - Righe e incassi (con limite al residuo)
    - Stato e scadenza calcolati ad ogni lettura
    """

    def __init__(self, sequences: Optional[SequenceService] = None) -> None:
        self.sequences = sequences or SequenceService()

    # ------------------------------------------------------------
    # Lettura
    # ------------------------------------------------------------

    def serialize(
        self,
        store: JsonStore,
        invoice: Invoice,
        today: Optional[datetime.date] = None,
    ) -> InvoiceRead:
        """
        Fattura con totali, pagato, residuo, stato e scadenza ricalcolati.

        I totali usano le aliquote CORRENTI dello studio.
        """
        balance = compute_balance(invoice, store.data.studio, today)
        return InvoiceRead(
            **invoice.model_dump(),
            totals=balance.totals,
            paid=balance.paid,
            residuo=balance.residuo,
            status=balance.status,
            overdue=balance.overdue,
        )

    def get_all(
        self,
        store: JsonStore,
        client_id: Optional[str] = None,
        case_id: Optional[str] = None,
        status_filter: Optional[InvoiceStatus] = None,
        overdue_only: bool = False,
        today: Optional[datetime.date] = None,
    ) -> list[InvoiceRead]:
        """
        Lista delle fatture, più recenti prima.

        status e overdue sono calcolati, quindi il filtro avviene dopo
        la serializzazione.
        """
        invoices = store.data.invoices
        if client_id:
            invoices = [i for i in invoices if i.client_id == client_id]
        if case_id:
            invoices = [i for i in invoices if i.case_id == case_id]

        items = [self.serialize(store, inv, today) for inv in invoices]
        if status_filter:
            items = [i for i in items if i.status == status_filter]
        if overdue_only:
            items = [i for i in items if i.overdue]

        return sorted(items, key=lambda i: (i.date, i.number), reverse=True)

    def get_by_id(self, store: JsonStore, invoice_id: str) -> Invoice:
        """
        Recupera una fattura per ID.

        Raises:
            NotFoundError: Fattura non trovata
        """
        invoice = store.data.find_invoice(invoice_id)
        if not invoice:
            raise NotFoundError(f"Fattura {invoice_id} non trovata")
        return invoice

    def get_by_number(self, store: JsonStore, number: str) -> Invoice:
        """Recupera una fattura per numero (case-insensitive)."""
        wanted = number.strip().lower()
        for invoice in store.data.invoices:
            if invoice.number.lower() == wanted:
                return invoice
        raise NotFoundError(f"Fattura {number} non trovata")

    def preview_number(self, store: JsonStore, year: Optional[int] = None) -> str:
        """Numero che verrebbe assegnato alla prossima fattura."""
        return self.sequences.preview_number(store, INVOICE_KIND, year)

    # ------------------------------------------------------------
    # Creazione
    # ------------------------------------------------------------

    def create(self, store: JsonStore, data: InvoiceCreate) -> InvoiceRead:
        """
        Crea una fattura da righe manuali e/o spese di pratica.

        Steps:
        1. Verifica cliente (obbligatorio) e pratica (opzionale, stesso cliente)
        2. Verifica numero manuale non duplicato
        3. Verifica spese: esistenti e non già fatturate
        4. Assegna il numero (manuale o progressivo dell'anno della fattura)
        5. Crea righe: prima quelle manuali, poi una per spesa
        6. Marca le spese come fatturate, registra l'attività sulla pratica
        7. Salva

        Raises:
            BusinessValidationError: cliente mancante, pratica di altro cliente,
                spesa già fatturata
            NotFoundError: spesa inesistente
            DuplicateError: numero manuale già in uso
        """
        return self._create(store, data, data.lines, data.expense_ids)

    def create_from_expenses(self, store: JsonStore, data: InvoiceFromExpenses) -> InvoiceRead:
        """
        Crea una fattura partendo dalle spese selezionate.

        Le righe delle spese vengono prima delle eventuali righe extra.

        Raises:
            BusinessValidationError: nessuna spesa selezionata
        """
        if not data.expense_ids:
            raise BusinessValidationError("Nessuna spesa selezionata")
        return self._create(
            store, data, data.extra_lines, data.expense_ids, expenses_first=True
        )

    def _create(
        self,
        store: JsonStore,
        data: InvoiceCreate,
        manual_lines: Iterable[InvoiceLineCreate],
        expense_ids: Iterable[str],
        expenses_first: bool = False,
    ) -> InvoiceRead:
        client = store.data.find_client(data.client_id)
        if not client:
            raise BusinessValidationError("clientId mancante o non valido")

        if data.case_id:
            case = store.data.find_case(data.case_id)
            if not case:
                raise BusinessValidationError("caseId non valido")
            if case.client_id != client.id:
                raise BusinessValidationError("La pratica non appartiene al cliente")

        manual_number = (data.number or "").strip()
        if manual_number:
            self.sequences.ensure_number_available(store, INVOICE_KIND, manual_number)

        expenses = self._collect_billable_expenses(store, expense_ids)

        invoice_date = data.date or datetime.date.today()
        due_date = data.due_date
        if due_date is None and settings.default_payment_terms_days is not None:
            due_date = invoice_date + datetime.timedelta(days=settings.default_payment_terms_days)

        lines = [self._line_from_request(line) for line in manual_lines]
        expense_lines = [self._line_from_expense(expense) for expense in expenses]
        lines = expense_lines + lines if expenses_first else lines + expense_lines

        number = manual_number or self.sequences.next_number(
            store, INVOICE_KIND, invoice_date.year, persist=False
        )

        invoice = Invoice(
            number=number,
            date=invoice_date,
            due_date=due_date,
            client_id=client.id,
            case_id=data.case_id,
            lines=lines,
            notes=data.notes or "",
            attached_expense_ids=[e.id for e in expenses],
        )
        store.data.invoices.append(invoice)

        for expense in expenses:
            expense.billed_invoice_id = invoice.id

        result = self.serialize(store, invoice)
        if invoice.case_id:
            record_case_activity(
                store,
                invoice.case_id,
                "fattura-emessa",
                f"Fattura {invoice.number} per {_euro(result.totals.totale)}",
                category="fattura",
            )

        store.save()
        logger.info(
            "Creata fattura %s (cliente %s, %s righe, totale %s)",
            invoice.number, client.id, len(lines), result.totals.totale,
        )
        return result

    # ------------------------------------------------------------
    # Spese
    # ------------------------------------------------------------

    def _collect_billable_expenses(
        self,
        store: JsonStore,
        expense_ids: Iterable[str],
        invoice: Optional[Invoice] = None,
    ) -> list[Expense]:
        """
        Spese fatturabili, nell'ordine richiesto e senza ripetizioni.

        Raises:
            NotFoundError: spesa inesistente
            BusinessValidationError: spesa già fatturata o di un'altra pratica
        """
        expenses: list[Expense] = []
        seen: set[str] = set()
        for expense_id in expense_ids:
            if expense_id in seen:
                continue
            seen.add(expense_id)

            expense = store.data.find_expense(expense_id)
            if not expense:
                raise NotFoundError(f"Spesa {expense_id} non trovata")
            if expense.billed_invoice_id:
                if invoice is not None and expense.billed_invoice_id == invoice.id:
                    continue
                raise BusinessValidationError(
                    f"La spesa '{expense.description or expense.id}' è già stata fatturata"
                )
            if invoice is not None and invoice.case_id and expense.case_id != invoice.case_id:
                raise BusinessValidationError(
                    f"La spesa '{expense.description or expense.id}' appartiene a un'altra pratica"
                )
            expenses.append(expense)
        return expenses

    def attach_expenses(self, store: JsonStore, invoice_id: str, data: AttachExpenses) -> InvoiceRead:
        """
        Riporta spese di pratica in una fattura esistente.

        Una spesa diventa una riga (tipo, descrizione e importo copiati) e
        riceve il riferimento alla fattura. Spese già presenti in questa
        fattura vengono ignorate.
        """
        invoice = self.get_by_id(store, invoice_id)
        expenses = self._collect_billable_expenses(store, data.expense_ids, invoice)
        if not expenses:
            return self.serialize(store, invoice)

        for expense in expenses:
            invoice.lines.append(self._line_from_expense(expense))
            invoice.attached_expense_ids.append(expense.id)
            expense.billed_invoice_id = invoice.id
        invoice.touch()

        if invoice.case_id:
            record_case_activity(
                store,
                invoice.case_id,
                "fattura-linea",
                f"Riportate {len(expenses)} spese nella fattura {invoice.number}",
                category="fattura",
            )

        store.save()
        logger.info("Fattura %s: riportate %s spese", invoice.number, len(expenses))
        return self.serialize(store, invoice)

    def _release_expense(self, store: JsonStore, invoice: Invoice, expense_id: Optional[str]) -> None:
        if not expense_id:
            return
        expense = store.data.find_expense(expense_id)
        if expense and expense.billed_invoice_id == invoice.id:
            expense.billed_invoice_id = None
        if expense_id in invoice.attached_expense_ids:
            invoice.attached_expense_ids.remove(expense_id)

    @staticmethod
    def _line_from_expense(expense: Expense) -> InvoiceLine:
        return InvoiceLine(
            type=expense.type,
            description=expense.description or "Spesa pratica",
            amount=expense.amount,
            expense_id=expense.id,
        )

    @staticmethod
    def _line_from_request(data: InvoiceLineCreate) -> InvoiceLine:
        return InvoiceLine(type=data.type, description=data.description, amount=data.amount)

    # ------------------------------------------------------------
    # Righe
    # ------------------------------------------------------------

    def add_line(self, store: JsonStore, invoice_id: str, data: InvoiceLineCreate) -> InvoiceRead:
        """
        Aggiunge una riga.

        Raises:
            NotFoundError: fattura non trovata
            BusinessValidationError: importo <= 0
        """
        invoice = self.get_by_id(store, invoice_id)
        if not data.amount > ZERO:
            raise BusinessValidationError("L'importo della riga deve essere maggiore di zero")

        line = self._line_from_request(data)
        invoice.lines.append(line)
        invoice.touch()

        if invoice.case_id:
            record_case_activity(
                store,
                invoice.case_id,
                "fattura-linea",
                f"Aggiunta riga {line.description or line.type.value} {_euro(line.amount)}",
                category="fattura",
            )

        store.save()
        logger.info("Fattura %s: aggiunta riga %s (%s)", invoice.number, line.id, line.amount)
        return self.serialize(store, invoice)

    def remove_line(self, store: JsonStore, invoice_id: str, line_id: str) -> InvoiceRead:
        """
        Rimuove una riga. Se la riga veniva da una spesa, la spesa torna fatturabile.

        Raises:
            NotFoundError: fattura o riga non trovata
        """
        invoice = self.get_by_id(store, invoice_id)
        line = invoice.find_line(line_id)
        if not line:
            raise NotFoundError(f"Riga {line_id} non trovata")

        invoice.lines.remove(line)
        self._release_expense(store, invoice, line.expense_id)
        invoice.touch()

        if invoice.case_id:
            record_case_activity(
                store,
                invoice.case_id,
                "fattura-linea-rimossa",
                f"Rimossa riga {line.description or line.type.value}",
                category="fattura",
            )

        store.save()
        logger.info("Fattura %s: rimossa riga %s", invoice.number, line_id)
        return self.serialize(store, invoice)

    # ------------------------------------------------------------
    # Incassi
    # ------------------------------------------------------------

    def get_payments(self, store: JsonStore, invoice_id: str) -> list[Payment]:
        return list(self.get_by_id(store, invoice_id).payments)

    def add_payment(self, store: JsonStore, invoice_id: str, data: PaymentCreate) -> InvoiceRead:
        """
        Registra un incasso.

        Un importo superiore al residuo viene ridotto al residuo (non è un
        errore): la differenza è segnalata nel log applicativo e nel
        registro attività della pratica.

        Raises:
            NotFoundError: fattura non trovata
            BusinessValidationError: importo <= 0 o fattura già saldata
        """
        invoice = self.get_by_id(store, invoice_id)
        requested = data.amount
        if not requested > ZERO:
            raise BusinessValidationError("L'importo del pagamento deve essere maggiore di zero")

        residuo = compute_balance(invoice, store.data.studio).residuo
        if residuo <= ZERO:
            raise BusinessValidationError(f"La fattura {invoice.number} è già saldata")

        amount = cap_payment(requested, residuo)
        if amount < requested:
            logger.warning(
                "Fattura %s: pagamento di %s ridotto al residuo %s",
                invoice.number, requested, amount,
            )

        payment = Payment(date=data.date or datetime.date.today(), amount=amount)
        invoice.payments.append(payment)
        invoice.touch()

        if invoice.case_id:
            detail = f"Pagamento {_euro(amount)} su fattura {invoice.number}"
            if amount < requested:
                detail += f" (richiesti {_euro(requested)}, ridotto al residuo)"
            record_case_activity(
                store, invoice.case_id, "pagamento-fattura", detail, category="pagamento"
            )

        store.save()
        logger.info("Fattura %s: registrato pagamento %s", invoice.number, amount)
        return self.serialize(store, invoice)

    def remove_payment(self, store: JsonStore, invoice_id: str, payment_id: str) -> InvoiceRead:
        """
        Elimina un incasso (es. per errore di registrazione).

        Raises:
            NotFoundError: fattura o pagamento non trovato
        """
        invoice = self.get_by_id(store, invoice_id)
        payment = invoice.find_payment(payment_id)
        if not payment:
            raise NotFoundError(f"Pagamento {payment_id} non trovato")

        invoice.payments.remove(payment)
        invoice.touch()

        if invoice.case_id:
            record_case_activity(
                store,
                invoice.case_id,
                "pagamento-rimosso",
                f"Rimosso pagamento da {_euro(payment.amount)} sulla fattura {invoice.number}",
                category="pagamento",
            )

        store.save()
        logger.info("Fattura %s: rimosso pagamento %s", invoice.number, payment_id)
        return self.serialize(store, invoice)

    # ------------------------------------------------------------
    # Modifica / eliminazione
    # ------------------------------------------------------------

    def update(self, store: JsonStore, invoice_id: str, data: InvoiceUpdate) -> InvoiceRead:
        """
        Aggiorna data, scadenza e note.

        dueDate presente nel body con valore null rimuove la scadenza.
        """
        invoice = self.get_by_id(store, invoice_id)
        fields = data.model_fields_set

        if data.date is not None:
            invoice.date = data.date
        if "due_date" in fields:
            invoice.due_date = data.due_date
        if data.notes is not None:
            invoice.notes = data.notes
        invoice.touch()

        store.save()
        logger.info("Fattura %s aggiornata (%s)", invoice.number, ", ".join(sorted(fields)))
        return self.serialize(store, invoice)

    def delete(self, store: JsonStore, invoice_id: str) -> None:
        """
        Elimina una fattura.

        Solo se non ci sono incassi registrati. Le spese fatturate tornano
        fatturabili; i contatori di numerazione non vengono toccati.

        Raises:
            NotFoundError: fattura non trovata
            BusinessValidationError: la fattura ha pagamenti registrati
        """
        invoice = self.get_by_id(store, invoice_id)
        if invoice.payments:
            raise BusinessValidationError(
                "Impossibile eliminare una fattura con pagamenti registrati. "
                "Rimuovere prima i pagamenti."
            )

        for expense in store.data.expenses:
            if expense.billed_invoice_id == invoice.id:
                expense.billed_invoice_id = None

        store.data.invoices.remove(invoice)
        if invoice.case_id:
            record_case_activity(
                store,
                invoice.case_id,
                "fattura-eliminata",
                f"Fattura {invoice.number} rimossa",
                category="fattura",
            )

        store.save()
        logger.info("Fattura %s eliminata", invoice.number)

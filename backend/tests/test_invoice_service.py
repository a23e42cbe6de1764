"""
Test per InvoiceService: creazione, righe, incassi, spese ed eliminazione.
"""

import datetime
from decimal import Decimal

import pytest

from gestionale_studio.core.config import Settings
from gestionale_studio.core.exceptions import (
    BusinessValidationError,
    DuplicateError,
    NotFoundError,
)
from gestionale_studio.models import Case
from gestionale_studio.schemas.invoice import (
    AttachExpenses,
    InvoiceCreate,
    InvoiceFromExpenses,
    InvoiceLineCreate,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentCreate,
)
from gestionale_studio.services import invoice_service as invoice_service_module
from gestionale_studio.services.invoice_service import InvoiceService

YEAR = datetime.date.today().year


@pytest.fixture
def service():
    return InvoiceService()


@pytest.fixture
def invoice(studio_store, service, client_record, case_record):
    """Fattura 100 + 50 sulla pratica di esempio (totale 162,32)."""
    return service.create(
        studio_store,
        InvoiceCreate(
            client_id=client_record.id,
            case_id=case_record.id,
            lines=[
                InvoiceLineCreate(type="onorario", description="Atto di citazione", amount="100"),
                InvoiceLineCreate(description="Udienza", amount="50,00"),
            ],
        ),
    )


def _actions(store, case_id):
    return [entry.action for entry in store.data.logs if entry.case_id == case_id]


class TestCreateInvoice:
    """Test creazione fattura."""

    def test_create_with_manual_lines(self, studio_store, invoice, case_record):
        assert invoice.number == f"FAT-{YEAR}-0001"
        assert invoice.totals.totale == Decimal("162.32")
        assert invoice.status == InvoiceStatus.EMESSA
        assert invoice.residuo == Decimal("162.32")
        assert studio_store.data.sequences[f"invoice_{YEAR}"] == 1
        assert "fattura-emessa" in _actions(studio_store, case_record.id)

    def test_create_is_persisted(self, studio_store, invoice):
        raw = studio_store.path.read_text(encoding="utf-8")
        assert invoice.number in raw
        assert '"clientId"' in raw

    def test_year_follows_invoice_date(self, studio_store, service, client_record):
        created = service.create(
            studio_store,
            InvoiceCreate(client_id=client_record.id, date=datetime.date(2023, 12, 31)),
        )
        assert created.number == "FAT-2023-0001"

    def test_missing_client_is_rejected(self, studio_store, service):
        before = studio_store.path.read_bytes()
        with pytest.raises(BusinessValidationError):
            service.create(studio_store, InvoiceCreate(client_id="missing"))
        assert studio_store.data.invoices == []
        assert studio_store.path.read_bytes() == before

    def test_case_of_other_client_is_rejected(self, studio_store, service, other_client, case_record):
        with pytest.raises(BusinessValidationError):
            service.create(
                studio_store,
                InvoiceCreate(client_id=other_client.id, case_id=case_record.id),
            )
        assert studio_store.data.invoices == []
        assert f"invoice_{YEAR}" not in studio_store.data.sequences

    def test_manual_number(self, studio_store, service, client_record, invoice):
        created = service.create(
            studio_store,
            InvoiceCreate(client_id=client_record.id, number="2025/ESTERO/1"),
        )
        assert created.number == "2025/ESTERO/1"
        assert studio_store.data.sequences[f"invoice_{YEAR}"] == 1

    def test_manual_number_duplicate(self, studio_store, service, client_record, invoice):
        with pytest.raises(DuplicateError):
            service.create(
                studio_store,
                InvoiceCreate(client_id=client_record.id, number=invoice.number.lower()),
            )
        assert len(studio_store.data.invoices) == 1

    def test_default_payment_terms(self, studio_store, service, client_record, monkeypatch):
        monkeypatch.setattr(
            invoice_service_module, "settings", Settings(default_payment_terms_days=30)
        )
        created = service.create(
            studio_store,
            InvoiceCreate(client_id=client_record.id, date=datetime.date(2025, 1, 10)),
        )
        assert created.due_date == datetime.date(2025, 2, 9)

    def test_negative_line_is_rejected_by_schema(self):
        with pytest.raises(ValueError):
            InvoiceLineCreate(amount="-10")


class TestExpenses:
    """Test fatturazione delle spese di pratica."""

    def test_create_from_expenses(self, studio_store, service, client_record, case_record, expenses):
        created = service.create_from_expenses(
            studio_store,
            InvoiceFromExpenses(
                client_id=client_record.id,
                case_id=case_record.id,
                expense_ids=[e.id for e in expenses],
                extra_lines=[InvoiceLineCreate(description="Onorario", amount=200)],
            ),
        )

        assert [line.description for line in created.lines] == [
            "Contributo unificato", "Marca notifica", "Onorario",
        ]
        assert created.lines[1].type.value == "anticipo"
        assert created.totals.imponibile == Decimal("325.00")
        assert all(e.billed_invoice_id == created.id for e in expenses)
        assert created.attached_expense_ids == [e.id for e in expenses]

    def test_create_from_expenses_requires_expenses(self, studio_store, service, client_record):
        with pytest.raises(BusinessValidationError):
            service.create_from_expenses(
                studio_store, InvoiceFromExpenses(client_id=client_record.id)
            )

    def test_attach_expenses(self, studio_store, service, invoice, expenses):
        updated = service.attach_expenses(
            studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[0].id])
        )
        assert len(updated.lines) == 3
        assert updated.lines[-1].expense_id == expenses[0].id
        assert updated.totals.imponibile == Decimal("248.00")
        assert expenses[0].billed_invoice_id == invoice.id

    def test_expense_cannot_be_billed_twice(self, studio_store, service, client_record, invoice, expenses):
        service.attach_expenses(studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[0].id]))
        other = service.create(studio_store, InvoiceCreate(client_id=client_record.id))

        with pytest.raises(BusinessValidationError):
            service.attach_expenses(studio_store, other.id, AttachExpenses(expense_ids=[expenses[0].id]))

    def test_attach_is_all_or_nothing(self, studio_store, service, invoice, expenses):
        with pytest.raises(NotFoundError):
            service.attach_expenses(
                studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[0].id, "missing"])
            )
        assert expenses[0].billed_invoice_id is None
        assert len(studio_store.data.find_invoice(invoice.id).lines) == 2

    def test_expense_of_other_case_is_rejected(self, studio_store, service, client_record, invoice, expenses):
        other_case = Case(number="PR-CIV-X", client_id=client_record.id)
        studio_store.data.cases.append(other_case)
        expenses[1].case_id = other_case.id

        with pytest.raises(BusinessValidationError):
            service.attach_expenses(studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[1].id]))

    def test_remove_line_releases_expense(self, studio_store, service, invoice, expenses):
        updated = service.attach_expenses(
            studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[0].id])
        )
        line_id = updated.lines[-1].id

        after = service.remove_line(studio_store, invoice.id, line_id)

        assert len(after.lines) == 2
        assert expenses[0].billed_invoice_id is None
        assert after.attached_expense_ids == []


class TestLines:
    """Test righe fattura."""

    def test_add_line(self, studio_store, service, invoice, case_record):
        updated = service.add_line(
            studio_store, invoice.id, InvoiceLineCreate(type="expense", description="Copie", amount="€ 12,50")
        )
        assert updated.lines[-1].amount == Decimal("12.50")
        assert updated.lines[-1].type.value == "spesa"
        assert updated.totals.imponibile == Decimal("162.50")
        assert "fattura-linea" in _actions(studio_store, case_record.id)

    def test_add_line_zero_amount(self, studio_store, service, invoice):
        with pytest.raises(BusinessValidationError):
            service.add_line(studio_store, invoice.id, InvoiceLineCreate(amount="abc"))

    def test_add_line_unknown_invoice(self, studio_store, service):
        with pytest.raises(NotFoundError):
            service.add_line(studio_store, "missing", InvoiceLineCreate(amount=1))

    def test_remove_unknown_line(self, studio_store, service, invoice):
        with pytest.raises(NotFoundError):
            service.remove_line(studio_store, invoice.id, "missing")


class TestPayments:
    """Test incassi."""

    def test_overpayment_is_capped(self, studio_store, service, invoice, case_record):
        updated = service.add_payment(studio_store, invoice.id, PaymentCreate(amount=200))

        assert updated.paid == Decimal("162.32")
        assert updated.residuo == Decimal("0.00")
        assert updated.status == InvoiceStatus.PAGATA
        assert updated.payments[0].amount == Decimal("162.32")

        log = [e for e in studio_store.data.logs if e.action == "pagamento-fattura"][-1]
        assert "200.00" in log.detail
        assert "ridotto" in log.detail

    def test_partial_payments(self, studio_store, service, invoice):
        service.add_payment(studio_store, invoice.id, PaymentCreate(amount=50))
        updated = service.add_payment(studio_store, invoice.id, PaymentCreate(amount="60,00"))

        assert updated.paid == Decimal("110.00")
        assert updated.residuo == Decimal("52.32")
        assert updated.status == InvoiceStatus.PARZIALE

    def test_non_positive_payment(self, studio_store, service, invoice):
        for amount in (0, "-5", "garbage"):
            with pytest.raises(BusinessValidationError):
                service.add_payment(studio_store, invoice.id, PaymentCreate(amount=amount))
        assert studio_store.data.find_invoice(invoice.id).payments == []

    def test_payment_on_paid_invoice(self, studio_store, service, invoice):
        service.add_payment(studio_store, invoice.id, PaymentCreate(amount="162,32"))
        with pytest.raises(BusinessValidationError):
            service.add_payment(studio_store, invoice.id, PaymentCreate(amount=1))

    def test_remove_payment(self, studio_store, service, invoice, case_record):
        paid = service.add_payment(studio_store, invoice.id, PaymentCreate(amount=50))
        updated = service.remove_payment(studio_store, invoice.id, paid.payments[0].id)

        assert updated.paid == Decimal("0.00")
        assert updated.status == InvoiceStatus.EMESSA
        assert "pagamento-rimosso" in _actions(studio_store, case_record.id)

        with pytest.raises(NotFoundError):
            service.remove_payment(studio_store, invoice.id, "missing")


class TestReadAndUpdate:
    """Test lettura, filtri e aggiornamento."""

    def test_overdue_filter(self, studio_store, service, invoice):
        service.update(
            studio_store, invoice.id, InvoiceUpdate(due_date=datetime.date.today() - datetime.timedelta(days=1))
        )
        assert [i.id for i in service.get_all(studio_store, overdue_only=True)] == [invoice.id]

        service.add_payment(studio_store, invoice.id, PaymentCreate(amount=500))
        assert service.get_all(studio_store, overdue_only=True) == []
        assert len(service.get_all(studio_store, status_filter=InvoiceStatus.PAGATA)) == 1

    def test_clear_due_date(self, studio_store, service, invoice):
        service.update(studio_store, invoice.id, InvoiceUpdate(due_date=datetime.date(2025, 1, 1)))
        updated = service.update(studio_store, invoice.id, InvoiceUpdate.model_validate({"dueDate": None}))
        assert updated.due_date is None

    def test_update_without_due_date_keeps_it(self, studio_store, service, invoice):
        service.update(studio_store, invoice.id, InvoiceUpdate(due_date=datetime.date(2025, 1, 1)))
        updated = service.update(studio_store, invoice.id, InvoiceUpdate(notes="Sollecitare"))
        assert updated.due_date == datetime.date(2025, 1, 1)
        assert updated.notes == "Sollecitare"

    def test_get_by_number(self, studio_store, service, invoice):
        assert service.get_by_number(studio_store, invoice.number.lower()).id == invoice.id
        with pytest.raises(NotFoundError):
            service.get_by_number(studio_store, "FAT-1999-0001")

    def test_tax_change_changes_served_totals(self, studio_store, service, invoice):
        """Le aliquote non sono congelate in fattura: cambiare l'IVA cambia i totali."""
        studio_store.data.studio.iva_perc = Decimal("10")
        stored = studio_store.data.find_invoice(invoice.id)
        assert service.serialize(studio_store, stored).totals.totale == Decimal("143.60")


class TestDeleteInvoice:
    """Test eliminazione fattura."""

    def test_delete_with_payments_is_rejected(self, studio_store, service, invoice):
        service.add_payment(studio_store, invoice.id, PaymentCreate(amount=10))
        with pytest.raises(BusinessValidationError):
            service.delete(studio_store, invoice.id)

    def test_delete_releases_expenses_and_keeps_counter(
        self, studio_store, service, invoice, expenses, case_record
    ):
        service.attach_expenses(studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[0].id]))

        service.delete(studio_store, invoice.id)

        assert studio_store.data.invoices == []
        assert expenses[0].billed_invoice_id is None
        assert studio_store.data.sequences[f"invoice_{YEAR}"] == 1
        assert "fattura-eliminata" in _actions(studio_store, case_record.id)
        assert service.preview_number(studio_store) == f"FAT-{YEAR}-0002"

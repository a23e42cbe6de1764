"""
Test per pratiche, clienti, anagrafica studio e report.
"""

import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from gestionale_studio.core.exceptions import (
    BusinessValidationError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)
from gestionale_studio.models import Invoice, Payment
from gestionale_studio.schemas.case import CaseCreate, CaseLogCreate, CaseUpdate, ExpenseCreate
from gestionale_studio.schemas.client import ClientCreate, ClientUpdate
from gestionale_studio.schemas.invoice import AttachExpenses, InvoiceCreate, InvoiceLineCreate
from gestionale_studio.schemas.studio import StudioUpdate
from gestionale_studio.services.case_service import CaseService
from gestionale_studio.services.client_service import ClientService
from gestionale_studio.services.invoice_service import InvoiceService
from gestionale_studio.services.report_service import ReportService
from gestionale_studio.services.studio_service import StudioService

YEAR = datetime.date.today().year


@pytest.fixture
def cases():
    return CaseService()


@pytest.fixture
def clients():
    return ClientService()


class TestCaseService:
    """Test CRUD pratiche."""

    def test_create_auto_number(self, studio_store, cases, client_record):
        case = cases.create(
            studio_store,
            CaseCreate(client_id=client_record.id, subject="Sfratto", case_type="Penale", value="1.500,00"),
        )
        assert case.number == f"PR-PEN-{YEAR}-0001"
        assert case.case_type == "penale"
        assert case.value == Decimal("1500.00")
        assert studio_store.data.sequences[f"casePenal_{YEAR}"] == 1
        assert cases.get_logs(studio_store, case.id)[0].action == "creazione-pratica"

    def test_create_manual_number(self, studio_store, cases, case_record):
        case = cases.create(studio_store, CaseCreate(manual_number="RG-2025-77"))
        assert case.number == "RG-2025-77"
        assert studio_store.data.sequences[f"caseCivil_{YEAR}"] == 1

    def test_manual_duplicate_leaves_counter(self, studio_store, cases, case_record):
        with pytest.raises(DuplicateError):
            cases.create(studio_store, CaseCreate(manual_number=case_record.number.lower()))
        assert studio_store.data.sequences[f"caseCivil_{YEAR}"] == 1
        assert len(studio_store.data.cases) == 1

    def test_unknown_client(self, studio_store, cases):
        with pytest.raises(BusinessValidationError):
            cases.create(studio_store, CaseCreate(client_id="missing"))
        assert studio_store.data.sequences == {}

    def test_update_keeps_number(self, studio_store, cases, case_record):
        updated = cases.update(
            studio_store, case_record.id, CaseUpdate(status="Chiusa", judge="Dott. Neri")
        )
        assert updated.number == case_record.number
        assert updated.status == "chiusa"
        assert updated.judge == "Dott. Neri"

    def test_delete_detaches_invoices_and_drops_unbilled_expenses(
        self, studio_store, cases, client_record, case_record, expenses
    ):
        invoice = InvoiceService().create(
            studio_store,
            InvoiceCreate(client_id=client_record.id, case_id=case_record.id, expense_ids=[expenses[0].id]),
        )

        cases.delete(studio_store, case_record.id)

        assert studio_store.data.cases == []
        assert studio_store.data.find_invoice(invoice.id).case_id is None
        assert [e.id for e in studio_store.data.expenses] == [expenses[0].id]
        with pytest.raises(NotFoundError):
            cases.get_by_id(studio_store, case_record.id)

    def test_logs_are_chronological(self, studio_store, cases, case_record):
        cases.add_log(studio_store, case_record.id, CaseLogCreate(detail="Telefonata cliente"))
        cases.add_log(studio_store, case_record.id, CaseLogCreate(action="udienza", detail="Rinvio"))

        logs = cases.get_logs(studio_store, case_record.id)
        assert [entry.detail for entry in logs] == ["Telefonata cliente", "Rinvio"]
        assert logs[0].action == "nota"

    def test_expense_amount_must_be_positive(self, studio_store, cases, case_record):
        with pytest.raises(BusinessValidationError):
            cases.add_expense(studio_store, case_record.id, ExpenseCreate(amount="0,00"))

        expense = cases.add_expense(
            studio_store, case_record.id, ExpenseCreate(description="Visura", amount="€ 1.000,5")
        )
        assert expense.amount == Decimal("1000.50")
        assert expense.type.value == "spesa"

    def test_unbilled_expenses(self, studio_store, cases, case_record, expenses, client_record):
        invoice_service = InvoiceService()
        invoice = invoice_service.create(
            studio_store, InvoiceCreate(client_id=client_record.id, case_id=case_record.id)
        )
        invoice_service.attach_expenses(studio_store, invoice.id, AttachExpenses(expense_ids=[expenses[1].id]))

        unbilled = cases.get_expenses(studio_store, case_record.id, unbilled_only=True)
        assert [e.id for e in unbilled] == [expenses[0].id]
        assert [i.id for i in cases.get_invoices(studio_store, case_record.id)] == [invoice.id]


class TestClientService:
    """Test anagrafica clienti."""

    def test_create_and_search(self, studio_store, clients):
        clients.create(studio_store, ClientCreate(name="Beta S.r.l.", vat_number="IT 01234567897"))
        clients.create(studio_store, ClientCreate(name="alfa snc", email=""))

        items, total = clients.get_all(studio_store)
        assert total == 2
        assert [c.name for c in items] == ["alfa snc", "Beta S.r.l."]

        found, _ = clients.get_all(studio_store, search="0123")
        assert found[0].vat_number == "01234567897"

    def test_invalid_fiscal_code(self):
        with pytest.raises(PydanticValidationError):
            ClientCreate(name="Mario Rossi", fiscal_code="RSSMRA85T10H501X")

    def test_valid_fiscal_code_is_normalized(self):
        assert ClientCreate(name="Mario Rossi", fiscal_code=" rssmra85t10h501o ").fiscal_code == "RSSMRA85T10H501O"

    def test_duplicate_client(self, studio_store, clients, client_record):
        with pytest.raises(DuplicateError):
            clients.create(
                studio_store, ClientCreate(name="mario rossi", fiscal_code=client_record.fiscal_code)
            )

    def test_update(self, studio_store, clients, client_record):
        updated = clients.update(studio_store, client_record.id, ClientUpdate(phone="+39 333 1234567"))
        assert updated.phone == "+393331234567"
        assert updated.name == "Mario Rossi"

    def test_delete_with_invoices_is_rejected(self, studio_store, clients, client_record):
        InvoiceService().create(studio_store, InvoiceCreate(client_id=client_record.id))
        with pytest.raises(ConflictError):
            clients.delete(studio_store, client_record.id)

    def test_delete_detaches_cases(self, studio_store, clients, client_record, case_record):
        clients.delete(studio_store, client_record.id)
        assert studio_store.data.clients == []
        assert case_record.client_id is None


class TestStudioService:
    """Test anagrafica e aliquote dello studio."""

    def test_update_tax(self, studio_store):
        studio = StudioService().update(studio_store, StudioUpdate(iva_perc="10", bollo=None))
        assert studio.iva_perc == Decimal("10")
        assert studio.bollo is None
        assert studio.cassa_perc == Decimal("4")

    def test_percentage_out_of_range(self):
        with pytest.raises(PydanticValidationError):
            StudioUpdate(iva_perc=120)


class TestReportService:
    """Test dashboard e andamento mensile."""

    def test_dashboard(self, studio_store, client_record, case_record, expenses):
        service = InvoiceService()
        invoice = service.create(
            studio_store,
            InvoiceCreate(
                client_id=client_record.id,
                lines=[InvoiceLineCreate(amount=100), InvoiceLineCreate(amount=50)],
                due_date=datetime.date.today() - datetime.timedelta(days=10),
            ),
        )
        studio_store.data.find_invoice(invoice.id).payments.append(Payment(amount=60))

        report = ReportService().dashboard(studio_store)

        assert report.clients == 1
        assert report.cases == 1
        assert report.invoices == 1
        assert report.invoiced_total == Decimal("162.32")
        assert report.collected_total == Decimal("60.00")
        assert report.outstanding_total == Decimal("102.32")
        assert report.overdue_invoices == 1
        assert report.unbilled_expenses == Decimal("125.00")

    def test_monthly_totals(self, studio_store, client_record):
        studio_store.data.invoices.append(
            Invoice(
                number="FAT-2025-0001",
                client_id=client_record.id,
                date=datetime.date(2025, 3, 5),
                lines=[{"amount": 100}, {"amount": 50}],
                payments=[{"date": "2025-04-02", "amount": 50}],
            )
        )

        months = ReportService().monthly_totals(studio_store, today=datetime.date(2025, 4, 20))

        assert len(months) == 12
        assert months[0].month == "2024-05"
        assert months[-1].month == "2025-04"
        march = next(m for m in months if m.month == "2025-03")
        assert march.invoiced == Decimal("162.32")
        assert march.label == "mar"
        assert months[-1].collected == Decimal("50.00")

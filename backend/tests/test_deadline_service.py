"""
Test per scadenze e udienze.
"""

import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from gestionale_studio.core.exceptions import BusinessValidationError, NotFoundError
from gestionale_studio.schemas.deadline import DeadlineCreate, DeadlineUpdate
from gestionale_studio.services.case_service import CaseService
from gestionale_studio.services.deadline_service import DeadlineService
from gestionale_studio.services.report_service import ReportService


@pytest.fixture
def deadlines():
    return DeadlineService()


class TestDeadlineService:
    """Test CRUD scadenze."""

    def test_create_defaults(self, studio_store, deadlines):
        """Senza data e tipo: oggi, 'scadenza'."""
        deadline = deadlines.create(studio_store, DeadlineCreate(title="Memoria 183"))
        assert deadline.date == datetime.date.today()
        assert deadline.type == "scadenza"
        assert deadline.time == ""
        assert deadline.completed is False

    def test_create_on_case_writes_activity(self, studio_store, deadlines, case_record):
        deadlines.create(
            studio_store,
            DeadlineCreate(case_id=case_record.id, date="2025-06-12", type="udienza", title="Prima udienza"),
        )
        logs = CaseService().get_logs(studio_store, case_record.id)
        assert logs[-1].action == "scadenza-creata"
        assert logs[-1].detail == "udienza: 2025-06-12 - Prima udienza"

    def test_unknown_case(self, studio_store, deadlines):
        with pytest.raises(BusinessValidationError):
            deadlines.create(studio_store, DeadlineCreate(case_id="missing"))
        assert studio_store.data.deadlines == []

    def test_time_format(self):
        assert DeadlineCreate(time="9:30").time == "09:30"
        with pytest.raises(PydanticValidationError):
            DeadlineCreate(time="25:00")

    def test_list_filters_and_order(self, studio_store, deadlines, case_record):
        deadlines.create(studio_store, DeadlineCreate(date="2025-03-10", time="15:00", title="C"))
        deadlines.create(studio_store, DeadlineCreate(date="2025-03-10", time="09:00", title="B"))
        deadlines.create(studio_store, DeadlineCreate(date="2025-01-02", title="A", case_id=case_record.id))
        deadlines.create(studio_store, DeadlineCreate(date="2025-05-01", title="D"))

        titles = [d.title for d in deadlines.get_all(studio_store)]
        assert titles == ["A", "B", "C", "D"]

        in_range = deadlines.get_all(
            studio_store,
            date_from=datetime.date(2025, 3, 1),
            date_to=datetime.date(2025, 3, 31),
        )
        assert [d.title for d in in_range] == ["B", "C"]

        assert [d.title for d in deadlines.get_all(studio_store, case_id=case_record.id)] == ["A"]

    def test_update_and_delete(self, studio_store, deadlines):
        deadline = deadlines.create(studio_store, DeadlineCreate(title="Deposito"))

        updated = deadlines.update(studio_store, deadline.id, DeadlineUpdate(completed=True, note="Depositato"))
        assert updated.completed is True
        assert updated.note == "Depositato"
        assert updated.title == "Deposito"

        deadlines.delete(studio_store, deadline.id)
        with pytest.raises(NotFoundError):
            deadlines.get_by_id(studio_store, deadline.id)

    def test_case_delete_detaches_deadlines(self, studio_store, deadlines, case_record):
        deadline = deadlines.create(studio_store, DeadlineCreate(case_id=case_record.id))
        CaseService().delete(studio_store, case_record.id)
        assert deadlines.get_by_id(studio_store, deadline.id).case_id is None

    def test_dashboard_counts_current_month(self, studio_store, deadlines):
        today = datetime.date(2025, 3, 15)
        deadlines.create(studio_store, DeadlineCreate(date="2025-03-01"))
        deadlines.create(studio_store, DeadlineCreate(date="2025-03-31"))
        deadlines.create(studio_store, DeadlineCreate(date="2025-04-01"))

        assert ReportService().dashboard(studio_store, today).deadlines_this_month == 2

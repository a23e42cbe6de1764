"""
Test per la numerazione progressiva di fatture e pratiche.
"""

import datetime

import pytest

from gestionale_studio.core.exceptions import BusinessValidationError, DuplicateError
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import Case, Invoice
from gestionale_studio.schemas.case import CaseNumberingUpdate
from gestionale_studio.services.sequence_service import SequenceService, format_number

YEAR = datetime.date.today().year


@pytest.fixture
def sequences():
    return SequenceService()


class TestFormatNumber:

    def test_zero_padding(self):
        assert format_number("FAT", 2025, 7, 4, "-") == "FAT-2025-0007"
        assert format_number("PR-PEN", 2024, 12345, 4, "/") == "PR-PEN/2024/12345"


class TestInvoiceSequence:
    """Test progressivo fatture."""

    def test_next_number_increments_and_persists(self, store, sequences):
        assert sequences.next_number(store, "invoice", 2025) == "FAT-2025-0001"
        assert sequences.next_number(store, "invoice", 2025) == "FAT-2025-0002"

        reloaded = JsonStore(store.path).load()
        assert reloaded.data.sequences["invoice_2025"] == 2

    def test_years_are_independent(self, store, sequences):
        sequences.next_number(store, "invoice", 2024)
        assert sequences.next_number(store, "invoice", 2025) == "FAT-2025-0001"

    def test_preview_has_no_side_effect(self, store, sequences):
        first = sequences.preview_number(store, "invoice", 2025)
        second = sequences.preview_number(store, "invoice", 2025)
        assert first == second == "FAT-2025-0001"
        assert "invoice_2025" not in store.data.sequences

    def test_skips_numbers_already_taken(self, store, sequences):
        store.data.invoices.append(Invoice(number="fat-2025-0001", client_id="c"))
        assert sequences.next_number(store, "invoice", 2025) == "FAT-2025-0002"

    def test_manual_duplicate_is_case_insensitive(self, store, sequences):
        store.data.invoices.append(Invoice(number="FAT-2025-0003", client_id="c"))
        with pytest.raises(DuplicateError):
            sequences.ensure_number_available(store, "invoice", "fat-2025-0003")


class TestCaseSequence:
    """Test progressivo pratiche per tipo."""

    def test_preview_is_stable_until_next(self, store, sequences):
        """Due anteprime di seguito sono uguali; dopo next l'anteprima avanza di uno."""
        first = sequences.preview_number(store, "civile")
        assert sequences.preview_number(store, "civile") == first == f"PR-CIV-{YEAR}-0001"

        assert sequences.next_number(store, "civile") == first
        assert sequences.preview_number(store, "civile") == f"PR-CIV-{YEAR}-0002"

    def test_preview_skips_number_taken_manually(self, store, sequences):
        """Un numero manuale nello slot successivo viene saltato: l'anteprima avanza di due."""
        store.data.cases.append(Case(number=f"pr-civ-{YEAR}-0002"))

        assert sequences.next_number(store, "civile") == f"PR-CIV-{YEAR}-0001"
        assert sequences.preview_number(store, "civile") == f"PR-CIV-{YEAR}-0003"
        assert sequences.next_number(store, "civile") == f"PR-CIV-{YEAR}-0003"
        assert store.data.sequences[f"caseCivil_{YEAR}"] == 3

    def test_families_are_separate(self, store, sequences):
        sequences.next_number(store, "civile")
        assert sequences.next_number(store, "penale") == f"PR-PEN-{YEAR}-0001"
        assert store.data.sequences == {f"caseCivil_{YEAR}": 1, f"casePenal_{YEAR}": 1}

    def test_unknown_or_missing_type_falls_back_to_civile(self, store, sequences):
        assert sequences.preview_number(store, "amministrativo").startswith("PR-CIV-")
        assert sequences.preview_number(store, None).startswith("PR-CIV-")
        assert sequences.preview_number(store, " PENALE ").startswith("PR-PEN-")

    def test_manual_number_leaves_counter_untouched(self, store, sequences):
        number = sequences.assign_case_number(store, "civile", "  RG 123/2025 ")
        assert number == "RG 123/2025"
        assert store.data.sequences == {}

    def test_manual_duplicate_is_rejected(self, store, sequences):
        store.data.cases.append(Case(number=f"PR-CIV-{YEAR}-0007"))
        store.data.sequences[f"caseCivil_{YEAR}"] = 7

        with pytest.raises(DuplicateError):
            sequences.assign_case_number(store, "civile", f"pr-civ-{YEAR}-0007")
        assert store.data.sequences[f"caseCivil_{YEAR}"] == 7

    def test_manual_disabled(self, store, sequences):
        store.data.settings.case_numbering.allow_manual = False
        with pytest.raises(BusinessValidationError):
            sequences.assign_case_number(store, "civile", "X-1")

    def test_auto_assignment_is_not_saved_alone(self, store, sequences):
        """Il contatore viene scritto dal save() di chi crea la pratica."""
        sequences.assign_case_number(store, "penale")
        assert store.data.sequences[f"casePenal_{YEAR}"] == 1
        assert JsonStore(store.path).load().data.sequences == {}


class TestCaseNumberingConfig:
    """Test riconfigurazione numerazione pratiche."""

    def test_force_next_number(self, store, sequences):
        sequences.next_number(store, "penale")
        data = CaseNumberingUpdate.model_validate({"caseTypes": {"civile": {"nextNumber": 10}}})

        result = sequences.update_case_numbering(store, data)

        assert store.data.sequences[f"caseCivil_{YEAR}"] == 9
        assert store.data.sequences[f"casePenal_{YEAR}"] == 1
        assert result.case_types["civile"].preview == f"PR-CIV-{YEAR}-0010"
        assert result.case_types["penale"].next_number == 2

    def test_force_next_number_below_one_is_ignored(self, store, sequences):
        store.data.sequences[f"caseCivil_{YEAR}"] = 4
        data = CaseNumberingUpdate.model_validate({"caseTypes": {"civile": {"nextNumber": 0}}})

        sequences.update_case_numbering(store, data)

        assert store.data.sequences[f"caseCivil_{YEAR}"] == 4

    def test_change_prefix_pad_and_separator(self, store, sequences):
        data = CaseNumberingUpdate.model_validate({
            "separator": "/",
            "caseTypes": {"penale": {"prefix": "PEN", "pad": 2}},
        })
        result = sequences.update_case_numbering(store, data)

        assert result.case_types["penale"].preview == f"PEN/{YEAR}/01"
        assert result.case_types["civile"].prefix == "PR-CIV"

        reloaded = JsonStore(store.path).load()
        assert reloaded.data.settings.case_numbering.case_types["penale"].prefix == "PEN"

    def test_new_case_type_requires_prefix(self, store, sequences):
        with pytest.raises(BusinessValidationError):
            sequences.update_case_numbering(
                store, CaseNumberingUpdate.model_validate({"caseTypes": {"amministrativo": {"pad": 3}}})
            )

        sequences.update_case_numbering(
            store,
            CaseNumberingUpdate.model_validate({"caseTypes": {"amministrativo": {"prefix": "PR-AMM", "pad": 3}}}),
        )
        assert sequences.next_number(store, "amministrativo") == f"PR-AMM-{YEAR}-001"
        assert store.data.sequences[f"caseAmministrativo_{YEAR}"] == 1

    def test_set_counter(self, store, sequences):
        sequences.set_counter(store, "invoice_2025", 41)
        assert sequences.preview_number(store, "invoice", 2025) == "FAT-2025-0042"
        with pytest.raises(BusinessValidationError):
            sequences.set_counter(store, "invoice_2025", -1)

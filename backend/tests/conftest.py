"""
Pytest configuration and fixtures.

Ogni test lavora su un documento JSON nuovo in tmp_path: nessun test
tocca l'archivio configurato in Settings.data_file.
"""

import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.models import Case, Client, Expense, StudioSettings


# ============================================================
# Archivio
# ============================================================


@pytest.fixture
def store(tmp_path):
    """Archivio vuoto su file temporaneo."""
    return JsonStore(tmp_path / "db.json").load()


@pytest.fixture
def tax():
    """Aliquote tipiche: cassa 4%, IVA 22%, ritenuta 20%, bollo 2,00."""
    return StudioSettings(
        name="Studio Legale Bianchi",
        cassa_perc=4,
        iva_perc=22,
        ritenuta_perc=20,
        bollo="2,00",
    )


@pytest.fixture
def studio_store(store, tax):
    """Archivio con l'anagrafica studio configurata."""
    store.data.studio = tax
    store.save()
    return store


# ============================================================
# Dati di esempio
# ============================================================


@pytest.fixture
def client_record(studio_store):
    client = Client(name="Mario Rossi", fiscal_code="RSSMRA85T10H501O")
    studio_store.data.clients.append(client)
    studio_store.save()
    return client


@pytest.fixture
def other_client(studio_store):
    client = Client(name="Anna Verdi")
    studio_store.data.clients.append(client)
    studio_store.save()
    return client


@pytest.fixture
def case_record(studio_store, client_record):
    case = Case(
        number=f"PR-CIV-{datetime.date.today().year}-0001",
        client_id=client_record.id,
        subject="Recupero crediti",
    )
    studio_store.data.cases.append(case)
    studio_store.data.sequences[f"caseCivil_{datetime.date.today().year}"] = 1
    studio_store.save()
    return case


@pytest.fixture
def expenses(studio_store, case_record):
    """Due spese non fatturate sulla pratica di esempio."""
    items = [
        Expense(case_id=case_record.id, description="Contributo unificato", amount="98,00"),
        Expense(case_id=case_record.id, description="Marca notifica", amount=Decimal("27.00"), type="anticipo"),
    ]
    studio_store.data.expenses.extend(items)
    studio_store.save()
    return items


# ============================================================
# API
# ============================================================


@pytest.fixture
def api_client(studio_store):
    """TestClient con l'archivio temporaneo iniettato."""
    from gestionale_studio.main import app

    app.state.store = studio_store
    app.dependency_overrides[get_store] = lambda: studio_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.store = None

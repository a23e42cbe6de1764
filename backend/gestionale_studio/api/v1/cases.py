"""
Router FastAPI per le Pratiche
Progetto: Gestionale Studio Legale

Definisce gli endpoint API per pratiche, numerazione, registro attività,
spese, fatture e scadenze collegate.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.schemas.case import (
    CaseCreate,
    CaseLogCreate,
    CaseLogRead,
    CaseNumberingRead,
    CaseNumberingUpdate,
    CaseRead,
    CaseUpdate,
    ExpenseCreate,
    ExpenseRead,
)
from gestionale_studio.schemas.common import NumberPreview
from gestionale_studio.schemas.deadline import DeadlineCreate, DeadlineRead
from gestionale_studio.schemas.invoice import InvoiceRead
from gestionale_studio.services.case_service import CaseService
from gestionale_studio.services.deadline_service import DeadlineService
from gestionale_studio.services.invoice_service import InvoiceService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/cases",
    tags=["Pratiche"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_case_service() -> CaseService:
    """Dependency per ottenere un'istanza del CaseService."""
    return CaseService()


# -------------------------------------------------------------------
# Numerazione (dichiarati prima di /{case_id})
# -------------------------------------------------------------------

@router.get(
    "/preview-number",
    name="pratica_anteprima_numero",
    summary="Anteprima numero pratica",
    description="Prossimo numero automatico per il tipo pratica. Non consuma il progressivo.",
    response_model=NumberPreview,
    status_code=status.HTTP_200_OK,
)
async def preview_case_number(
    case_type: Optional[str] = Query("civile", alias="caseType", description="Tipo pratica"),
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> NumberPreview:
    return NumberPreview(number=service.preview_number(store, case_type))


@router.get(
    "/numbering-config",
    name="pratiche_numerazione",
    summary="Configurazione numerazione pratiche",
    response_model=CaseNumberingRead,
    status_code=status.HTTP_200_OK,
)
async def get_numbering_config(
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> CaseNumberingRead:
    return service.sequences.get_case_numbering(store)


@router.put(
    "/numbering-config",
    name="pratiche_numerazione_modifica",
    summary="Modifica numerazione pratiche",
    description=(
        "Modifica numerazione manuale, separatore e famiglie per tipo pratica. "
        "nextNumber forza il prossimo progressivo dell'anno corrente."
    ),
    response_model=CaseNumberingRead,
    status_code=status.HTTP_200_OK,
)
async def update_numbering_config(
    data: CaseNumberingUpdate,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> CaseNumberingRead:
    return service.sequences.update_case_numbering(store, data)


# -------------------------------------------------------------------
# CRUD
# -------------------------------------------------------------------

@router.get(
    "/",
    name="pratiche_lista",
    summary="Lista pratiche",
    response_model=list[CaseRead],
    status_code=status.HTTP_200_OK,
)
async def list_cases(
    client_id: Optional[str] = Query(None, alias="clientId", description="Filtra per cliente"),
    status_filter: Optional[str] = Query(None, alias="status", description="aperta / chiusa"),
    search: Optional[str] = Query(None, description="Numero, oggetto, ufficio, RG"),
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> list[CaseRead]:
    cases = service.get_all(store, client_id=client_id, status_filter=status_filter, search=search)
    return [CaseRead.model_validate(c) for c in cases]


@router.get(
    "/{case_id}",
    name="pratica_dettaglio",
    summary="Dettaglio pratica",
    response_model=CaseRead,
    status_code=status.HTTP_200_OK,
)
async def get_case(
    case_id: str,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> CaseRead:
    return CaseRead.model_validate(service.get_by_id(store, case_id))


@router.post(
    "/",
    name="pratica_crea",
    summary="Crea pratica",
    description="Crea una pratica con numero automatico o manuale (se abilitato).",
    response_model=CaseRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_case(
    data: CaseCreate,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> CaseRead:
    return CaseRead.model_validate(service.create(store, data))


@router.put(
    "/{case_id}",
    name="pratica_modifica",
    summary="Modifica pratica",
    response_model=CaseRead,
    status_code=status.HTTP_200_OK,
)
async def update_case(
    case_id: str,
    data: CaseUpdate,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> CaseRead:
    return CaseRead.model_validate(service.update(store, case_id, data))


@router.delete(
    "/{case_id}",
    name="pratica_elimina",
    summary="Elimina pratica",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_case(
    case_id: str,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> None:
    service.delete(store, case_id)


# -------------------------------------------------------------------
# Registro attività
# -------------------------------------------------------------------

@router.get(
    "/{case_id}/logs",
    name="pratica_registro",
    summary="Registro attività",
    response_model=list[CaseLogRead],
    status_code=status.HTTP_200_OK,
)
async def get_case_logs(
    case_id: str,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> list[CaseLogRead]:
    return [CaseLogRead.model_validate(entry) for entry in service.get_logs(store, case_id)]


@router.post(
    "/{case_id}/logs",
    name="pratica_registro_aggiungi",
    summary="Aggiungi nota al registro",
    response_model=CaseLogRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_case_log(
    case_id: str,
    data: CaseLogCreate,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> CaseLogRead:
    return CaseLogRead.model_validate(service.add_log(store, case_id, data))


# -------------------------------------------------------------------
# Spese e fatture
# -------------------------------------------------------------------

@router.get(
    "/{case_id}/expenses",
    name="pratica_spese",
    summary="Spese della pratica",
    response_model=list[ExpenseRead],
    status_code=status.HTTP_200_OK,
)
async def get_case_expenses(
    case_id: str,
    unbilled: bool = Query(False, description="Solo spese non ancora fatturate"),
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> list[ExpenseRead]:
    expenses = service.get_expenses(store, case_id, unbilled_only=unbilled)
    return [ExpenseRead.model_validate(e) for e in expenses]


@router.post(
    "/{case_id}/expenses",
    name="pratica_spesa_aggiungi",
    summary="Registra spesa",
    response_model=ExpenseRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_case_expense(
    case_id: str,
    data: ExpenseCreate,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> ExpenseRead:
    return ExpenseRead.model_validate(service.add_expense(store, case_id, data))


@router.get(
    "/{case_id}/invoices",
    name="pratica_fatture",
    summary="Fatture della pratica",
    response_model=list[InvoiceRead],
    status_code=status.HTTP_200_OK,
)
async def get_case_invoices(
    case_id: str,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> list[InvoiceRead]:
    invoice_service = InvoiceService(service.sequences)
    return [invoice_service.serialize(store, i) for i in service.get_invoices(store, case_id)]


# -------------------------------------------------------------------
# Scadenze collegate
# -------------------------------------------------------------------

@router.get(
    "/{case_id}/deadlines",
    name="pratica_scadenze",
    summary="Scadenze della pratica",
    description="Scadenze e udienze della pratica in ordine cronologico.",
    response_model=list[DeadlineRead],
    status_code=status.HTTP_200_OK,
)
async def get_case_deadlines(
    case_id: str,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> list[DeadlineRead]:
    service.get_by_id(store, case_id)
    deadlines = DeadlineService().get_all(store, case_id=case_id)
    return [DeadlineRead.model_validate(d) for d in deadlines]


@router.post(
    "/{case_id}/deadlines",
    name="pratica_scadenza_aggiungi",
    summary="Aggiungi scadenza alla pratica",
    response_model=DeadlineRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_case_deadline(
    case_id: str,
    data: DeadlineCreate,
    store: JsonStore = Depends(get_store),
    service: CaseService = Depends(get_case_service),
) -> DeadlineRead:
    service.get_by_id(store, case_id)
    deadline = DeadlineService().create(store, data.model_copy(update={"case_id": case_id}))
    return DeadlineRead.model_validate(deadline)

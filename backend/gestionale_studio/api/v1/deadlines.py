"""
Router FastAPI per le Scadenze
Progetto: Gestionale Studio Legale

Definisce gli endpoint API per scadenze e udienze.
"""

import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.schemas.deadline import DeadlineCreate, DeadlineRead, DeadlineUpdate
from gestionale_studio.services.deadline_service import DeadlineService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/deadlines",
    tags=["Scadenze"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_deadline_service() -> DeadlineService:
    """Dependency per ottenere un'istanza del DeadlineService."""
    return DeadlineService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/",
    name="scadenze_lista",
    summary="Lista scadenze",
    description="Scadenze in ordine cronologico, filtrabili per pratica e intervallo di date.",
    response_model=list[DeadlineRead],
    status_code=status.HTTP_200_OK,
)
async def list_deadlines(
    case_id: Optional[str] = Query(None, alias="caseId", description="Filtra per pratica"),
    date_from: Optional[datetime.date] = Query(None, alias="from", description="Dal giorno (incluso)"),
    date_to: Optional[datetime.date] = Query(None, alias="to", description="Al giorno (incluso)"),
    store: JsonStore = Depends(get_store),
    service: DeadlineService = Depends(get_deadline_service),
) -> list[DeadlineRead]:
    deadlines = service.get_all(store, case_id=case_id, date_from=date_from, date_to=date_to)
    return [DeadlineRead.model_validate(d) for d in deadlines]


@router.get(
    "/{deadline_id}",
    name="scadenza_dettaglio",
    summary="Dettaglio scadenza",
    response_model=DeadlineRead,
    status_code=status.HTTP_200_OK,
)
async def get_deadline(
    deadline_id: str,
    store: JsonStore = Depends(get_store),
    service: DeadlineService = Depends(get_deadline_service),
) -> DeadlineRead:
    return DeadlineRead.model_validate(service.get_by_id(store, deadline_id))


@router.post(
    "/",
    name="scadenza_crea",
    summary="Crea scadenza",
    response_model=DeadlineRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_deadline(
    data: DeadlineCreate,
    store: JsonStore = Depends(get_store),
    service: DeadlineService = Depends(get_deadline_service),
) -> DeadlineRead:
    return DeadlineRead.model_validate(service.create(store, data))


@router.put(
    "/{deadline_id}",
    name="scadenza_modifica",
    summary="Modifica scadenza",
    response_model=DeadlineRead,
    status_code=status.HTTP_200_OK,
)
async def update_deadline(
    deadline_id: str,
    data: DeadlineUpdate,
    store: JsonStore = Depends(get_store),
    service: DeadlineService = Depends(get_deadline_service),
) -> DeadlineRead:
    return DeadlineRead.model_validate(service.update(store, deadline_id, data))


@router.delete(
    "/{deadline_id}",
    name="scadenza_elimina",
    summary="Elimina scadenza",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_deadline(
    deadline_id: str,
    store: JsonStore = Depends(get_store),
    service: DeadlineService = Depends(get_deadline_service),
) -> None:
    service.delete(store, deadline_id)

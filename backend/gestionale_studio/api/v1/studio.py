"""
Router FastAPI per l'anagrafica dello Studio
Progetto: Gestionale Studio Legale
"""

import logging

from fastapi import APIRouter, Depends, status

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.schemas.studio import StudioRead, StudioUpdate
from gestionale_studio.services.studio_service import StudioService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/studio",
    tags=["Studio"],
)


def get_studio_service() -> StudioService:
    """Dependency per ottenere un'istanza dello StudioService."""
    return StudioService()


@router.get(
    "/",
    name="studio_dettaglio",
    summary="Anagrafica studio",
    response_model=StudioRead,
    status_code=status.HTTP_200_OK,
)
async def get_studio(
    store: JsonStore = Depends(get_store),
    service: StudioService = Depends(get_studio_service),
) -> StudioRead:
    return StudioRead.model_validate(service.get(store))


@router.put(
    "/",
    name="studio_modifica",
    summary="Modifica anagrafica studio",
    description=(
        "Aggiorna anagrafica e aliquote. Le aliquote valgono per tutte le "
        "fatture, anche quelle già emesse."
    ),
    response_model=StudioRead,
    status_code=status.HTTP_200_OK,
)
async def update_studio(
    data: StudioUpdate,
    store: JsonStore = Depends(get_store),
    service: StudioService = Depends(get_studio_service),
) -> StudioRead:
    return StudioRead.model_validate(service.update(store, data))

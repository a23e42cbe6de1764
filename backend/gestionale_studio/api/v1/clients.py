"""
Router FastAPI per l'anagrafica Clienti
Progetto: Gestionale Studio Legale

Definisce gli endpoint API per la gestione dei clienti.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.schemas.case import CaseRead
from gestionale_studio.schemas.client import (
    ClientCreate,
    ClientList,
    ClientRead,
    ClientUpdate,
)
from gestionale_studio.schemas.invoice import InvoiceRead
from gestionale_studio.services.client_service import ClientService
from gestionale_studio.services.invoice_service import InvoiceService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/clients",
    tags=["Clienti"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_client_service() -> ClientService:
    """
    Dependency per ottenere un'istanza del ClientService.

    Permette di sostituire il service nei test.
    """
    return ClientService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/",
    name="clienti_lista",
    summary="Lista clienti",
    description="Recupera la lista paginata dei clienti con eventuale filtro di ricerca.",
    response_model=ClientList,
    status_code=status.HTTP_200_OK,
)
async def get_clients(
    page: int = Query(1, ge=1, description="Numero pagina"),
    per_page: int = Query(50, ge=1, le=500, alias="perPage", description="Elementi per pagina"),
    search: Optional[str] = Query(None, description="Termine di ricerca"),
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> ClientList:
    """
    Recupera la lista paginata dei clienti.

    Args:
        page: Numero pagina (default 1)
        per_page: Elementi per pagina (default 50, max 500)
        search: Ricerca su nome, codice fiscale, partita IVA, email, telefono
    """
    clients, total = service.get_all(store, page=page, per_page=per_page, search=search)
    return ClientList(
        items=[ClientRead.model_validate(c) for c in clients],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{client_id}",
    name="cliente_dettaglio",
    summary="Dettaglio cliente",
    response_model=ClientRead,
    status_code=status.HTTP_200_OK,
)
async def get_client(
    client_id: str,
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    return ClientRead.model_validate(service.get_by_id(store, client_id))


@router.post(
    "/",
    name="cliente_crea",
    summary="Crea cliente",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    data: ClientCreate,
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    return ClientRead.model_validate(service.create(store, data))


@router.put(
    "/{client_id}",
    name="cliente_modifica",
    summary="Modifica cliente",
    response_model=ClientRead,
    status_code=status.HTTP_200_OK,
)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    return ClientRead.model_validate(service.update(store, client_id, data))


@router.delete(
    "/{client_id}",
    name="cliente_elimina",
    summary="Elimina cliente",
    description="Elimina un cliente senza fatture intestate.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_client(
    client_id: str,
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> None:
    service.delete(store, client_id)


@router.get(
    "/{client_id}/cases",
    name="cliente_pratiche",
    summary="Pratiche del cliente",
    response_model=list[CaseRead],
    status_code=status.HTTP_200_OK,
)
async def get_client_cases(
    client_id: str,
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> list[CaseRead]:
    return [CaseRead.model_validate(c) for c in service.get_cases(store, client_id)]


@router.get(
    "/{client_id}/invoices",
    name="cliente_fatture",
    summary="Fatture del cliente",
    response_model=list[InvoiceRead],
    status_code=status.HTTP_200_OK,
)
async def get_client_invoices(
    client_id: str,
    store: JsonStore = Depends(get_store),
    service: ClientService = Depends(get_client_service),
) -> list[InvoiceRead]:
    service.get_by_id(store, client_id)
    return InvoiceService().get_all(store, client_id=client_id)

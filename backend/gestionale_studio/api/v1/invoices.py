"""
Router FastAPI per la Fatturazione
Progetto: Gestionale Studio Legale

Definisce gli endpoint API per fatture, righe e incassi.
Tutte le risposte riportano totali, residuo, stato e scadenza ricalcolati.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.schemas.common import NumberPreview
from gestionale_studio.schemas.invoice import (
    AttachExpenses,
    InvoiceCreate,
    InvoiceFromExpenses,
    InvoiceLineCreate,
    InvoiceRead,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentCreate,
    PaymentRead,
)
from gestionale_studio.services.invoice_service import InvoiceService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/invoices",
    tags=["Fatture"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_invoice_service() -> InvoiceService:
    """Dependency per ottenere un'istanza dell'InvoiceService."""
    return InvoiceService()


# -------------------------------------------------------------------
# Lettura
# -------------------------------------------------------------------

@router.get(
    "/",
    name="fatture_lista",
    summary="Lista fatture",
    description="Lista delle fatture con filtri per cliente, pratica, stato e scadute.",
    response_model=list[InvoiceRead],
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    client_id: Optional[str] = Query(None, alias="clientId", description="Filtra per cliente"),
    case_id: Optional[str] = Query(None, alias="caseId", description="Filtra per pratica"),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status", description="emessa / parziale / pagata"),
    overdue: bool = Query(False, description="Solo fatture scadute"),
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> list[InvoiceRead]:
    return service.get_all(
        store,
        client_id=client_id,
        case_id=case_id,
        status_filter=status_filter,
        overdue_only=overdue,
    )


@router.get(
    "/preview-number",
    name="fattura_anteprima_numero",
    summary="Anteprima numero fattura",
    description="Numero che verrebbe assegnato alla prossima fattura. Non consuma il progressivo.",
    response_model=NumberPreview,
    status_code=status.HTTP_200_OK,
)
async def preview_invoice_number(
    year: Optional[int] = Query(None, ge=2000, le=2999, description="Anno (default: corrente)"),
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> NumberPreview:
    return NumberPreview(number=service.preview_number(store, year))


@router.get(
    "/number/{number}",
    name="fattura_per_numero",
    summary="Fattura per numero",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def get_invoice_by_number(
    number: str,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.serialize(store, service.get_by_number(store, number))


@router.get(
    "/{invoice_id}",
    name="fattura_dettaglio",
    summary="Dettaglio fattura",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def get_invoice(
    invoice_id: str,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.serialize(store, service.get_by_id(store, invoice_id))


# -------------------------------------------------------------------
# Creazione / modifica
# -------------------------------------------------------------------

@router.post(
    "/",
    name="fattura_crea",
    summary="Crea fattura",
    description="Crea una fattura da righe manuali e/o spese di pratica.",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    data: InvoiceCreate,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.create(store, data)


@router.post(
    "/from-expenses",
    name="fattura_da_spese",
    summary="Genera fattura da spese",
    description="Crea una fattura dalle spese di pratica selezionate, con eventuali righe extra.",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice_from_expenses(
    data: InvoiceFromExpenses,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.create_from_expenses(store, data)


@router.put(
    "/{invoice_id}",
    name="fattura_modifica",
    summary="Modifica fattura",
    description="Modifica data, scadenza e note della fattura.",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def update_invoice(
    invoice_id: str,
    data: InvoiceUpdate,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.update(store, invoice_id, data)


@router.delete(
    "/{invoice_id}",
    name="fattura_elimina",
    summary="Elimina fattura",
    description="Elimina una fattura senza incassi registrati. Le spese tornano fatturabili.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_invoice(
    invoice_id: str,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> None:
    service.delete(store, invoice_id)


@router.post(
    "/{invoice_id}/attach-expenses",
    name="fattura_riporta_spese",
    summary="Riporta spese in fattura",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def attach_expenses(
    invoice_id: str,
    data: AttachExpenses,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.attach_expenses(store, invoice_id, data)


# -------------------------------------------------------------------
# Righe
# -------------------------------------------------------------------

@router.post(
    "/{invoice_id}/lines",
    name="fattura_aggiungi_riga",
    summary="Aggiungi riga",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_line(
    invoice_id: str,
    data: InvoiceLineCreate,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.add_line(store, invoice_id, data)


@router.delete(
    "/{invoice_id}/lines/{line_id}",
    name="fattura_rimuovi_riga",
    summary="Rimuovi riga",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def remove_line(
    invoice_id: str,
    line_id: str,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.remove_line(store, invoice_id, line_id)


# -------------------------------------------------------------------
# Incassi
# -------------------------------------------------------------------

@router.get(
    "/{invoice_id}/payments",
    name="fattura_pagamenti",
    summary="Pagamenti della fattura",
    response_model=list[PaymentRead],
    status_code=status.HTTP_200_OK,
)
async def list_payments(
    invoice_id: str,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> list[PaymentRead]:
    return [PaymentRead.model_validate(p) for p in service.get_payments(store, invoice_id)]


@router.post(
    "/{invoice_id}/payments",
    name="fattura_registra_pagamento",
    summary="Registra pagamento",
    description="Registra un incasso. Un importo oltre il residuo viene ridotto al residuo.",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_payment(
    invoice_id: str,
    data: PaymentCreate,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.add_payment(store, invoice_id, data)


@router.delete(
    "/{invoice_id}/payments/{payment_id}",
    name="fattura_rimuovi_pagamento",
    summary="Rimuovi pagamento",
    response_model=InvoiceRead,
    status_code=status.HTTP_200_OK,
)
async def remove_payment(
    invoice_id: str,
    payment_id: str,
    store: JsonStore = Depends(get_store),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return service.remove_payment(store, invoice_id, payment_id)

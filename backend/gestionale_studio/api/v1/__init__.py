"""
API v1 Routes
Progetto: Gestionale Studio Legale

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from gestionale_studio.api.v1 import cases, clients, deadlines, invoices, reports, studio

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(clients.router)
api_v1_router.include_router(cases.router)
api_v1_router.include_router(deadlines.router)
api_v1_router.include_router(invoices.router)
api_v1_router.include_router(studio.router)
api_v1_router.include_router(reports.router)

# Esportazione
__all__ = ["api_v1_router"]

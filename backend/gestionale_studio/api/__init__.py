"""
API Routes
Progetto: Gestionale Studio Legale

Modulo per l'aggregazione dei router versionati.
"""

from gestionale_studio.api.v1 import api_v1_router

# Esportazione router
__all__ = ["api_v1_router"]

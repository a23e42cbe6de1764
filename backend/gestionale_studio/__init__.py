"""
Gestionale Studio Legale - Backend

Fatturazione, pratiche e clienti di uno studio legale su documento JSON.
"""

__version__ = "1.0.0"

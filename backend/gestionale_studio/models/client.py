"""
Modello Client
Progetto: Gestionale Studio Legale

Anagrafica dei clienti dello studio.
"""

from gestionale_studio.models.mixins import TimestampMixin, UUIDMixin


class Client(UUIDMixin, TimestampMixin):
    """
    Cliente dello studio.

    Attributes:
        name: nome e cognome o ragione sociale
        fiscal_code: codice fiscale
        vat_number: partita IVA
        email: email ordinaria
        pec: posta elettronica certificata
        phone: telefono
        address: indirizzo completo
        notes: note libere
    """

    name: str
    fiscal_code: str = ""
    vat_number: str = ""
    email: str = ""
    pec: str = ""
    phone: str = ""
    address: str = ""
    notes: str = ""

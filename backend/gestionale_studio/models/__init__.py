"""
Modelli del documento JSON
Progetto: Gestionale Studio Legale

Tutti i dati dello studio vivono in un unico documento JSON letto e riscritto
per intero (vedi core/storage.py). Questi modelli pydantic descrivono i
record salvati: le chiavi su disco sono in camelCase, come nei documenti
già esistenti, gli attributi Python in snake_case.

I campi derivati della fattura (totali, pagato, residuo, stato, scaduta)
NON fanno parte dei modelli: vengono ricalcolati ad ogni lettura.
"""

import types
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


def _accepts_none(annotation: Any) -> bool:
    if annotation is Any or annotation is None:
        return True
    return get_origin(annotation) in (Union, types.UnionType) and type(None) in get_args(annotation)


class Document(BaseModel):
    """
    Base class per tutti i record salvati nel documento JSON.

    Un null su un campo che non lo ammette (tipico dei documenti modificati
    a mano o da versioni precedenti) vale come il default del campo; i
    campi di testo obbligatori diventano stringa vuota.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is not None:
            return v
        field = cls.model_fields.get(info.field_name)
        if field is None or _accepts_none(field.annotation):
            return v
        if field.is_required():
            return "" if field.annotation is str else v
        return field.get_default(call_default_factory=True)


# Import modelli implementati
from gestionale_studio.models.client import Client
from gestionale_studio.models.case import Case, CaseLog, Expense
from gestionale_studio.models.deadline import Deadline
from gestionale_studio.models.invoice import Invoice, InvoiceLine, InvoiceLineType, Payment
from gestionale_studio.models.studio import (
    AppSettings,
    CaseNumberingConfig,
    CaseTypeNumbering,
    StudioSettings,
)
from gestionale_studio.models.store import StoreData

__all__ = [
    "Document",
    "Client",
    "Case",
    "CaseLog",
    "Expense",
    "Deadline",
    "Invoice",
    "InvoiceLine",
    "InvoiceLineType",
    "Payment",
    "AppSettings",
    "CaseNumberingConfig",
    "CaseTypeNumbering",
    "StudioSettings",
    "StoreData",
]

"""
Schema base condiviso
Progetto: Gestionale Studio Legale

Il frontend parla in camelCase: gli schemi accettano sia camelCase che
snake_case in ingresso e serializzano in camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base class per gli schemi API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class NumberPreview(ApiModel):
    """Anteprima del prossimo numero assegnato (nessun effetto sul contatore)."""

    number: str = Field(..., description="Numero che verrebbe assegnato ora")

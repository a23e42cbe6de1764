"""
Configurazione applicazione - Settings
Progetto: Gestionale Studio Legale

Definisce le impostazioni dell'applicazione caricate da variabili d'ambiente.
I parametri fiscali dello studio (cassa, IVA, ritenuta, bollo) NON stanno qui:
sono dati dell'anagrafica studio salvati nel documento JSON.
"""


from __future__ import annotations
import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurazione applicazione.

    Carica le impostazioni da variabili d'ambiente.
    Valori di default adatti per sviluppo locale.

    Per ottenere un'istanza singleton:
    - In FastAPI: usa `Depends(get_settings)` per Dependency Injection
    - Altrove: usa `get_settings()` direttamente
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------
    # Configurazione Archivio
    # ------------------------------------------------------------
    data_file: str = Field(
        default="data/db.json",
        description="Percorso del documento JSON con tutti i dati dello studio",
    )

    # ------------------------------------------------------------
    # Configurazione Applicazione
    # ------------------------------------------------------------
    app_name: str = Field(
        default="Gestionale Studio Legale",
        description="Nome applicazione",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Versione applicazione",
    )

    app_env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Ambiente di esecuzione (development | production | testing)",
    )

    debug: bool = Field(
        default=False,
        description="Modalità debug",
    )

    # ------------------------------------------------------------
    # Configurazione CORS
    # ------------------------------------------------------------
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        description="Origini CORS permesse",
    )

    # ------------------------------------------------------------
    # Configurazione Logging
    # ------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Livello logging",
    )

    # ------------------------------------------------------------
    # Configurazione Numerazione Fatture
    # ------------------------------------------------------------
    invoice_number_prefix: str = Field(
        default="FAT",
        description="Prefisso del numero fattura (es. FAT-2025-0001)",
    )

    invoice_number_pad: int = Field(
        default=4,
        description="Cifre del progressivo fattura (zero-padding)",
    )

    invoice_number_separator: str = Field(
        default="-",
        description="Separatore tra prefisso, anno e progressivo",
    )

    default_payment_terms_days: Optional[int] = Field(
        default=None,
        description="Giorni di scadenza predefiniti (None = nessuna scadenza automatica)",
    )

    @property
    def is_production(self) -> bool:
        """Verifica se l'applicazione è in produzione."""
        return self.app_env == "production"

    # ------------------------------------------------------------
    # Validatori
    # ------------------------------------------------------------

    @field_validator("invoice_number_prefix")
    @classmethod
    def validate_invoice_number_prefix(cls, v: str) -> str:
        """Il prefisso non può essere vuoto."""
        v = v.strip()
        if not v:
            raise ValueError("Il prefisso numero fattura non può essere vuoto")
        return v

    @field_validator("invoice_number_pad")
    @classmethod
    def validate_invoice_number_pad(cls, v: int) -> int:
        """Valida le cifre del progressivo (1-10)."""
        if v < 1 or v > 10:
            raise ValueError("invoice_number_pad deve essere compreso tra 1 e 10")
        return v

    @field_validator("default_payment_terms_days")
    @classmethod
    def validate_payment_terms(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("default_payment_terms_days non può essere negativo")
        return v

    @field_validator("data_file")
    @classmethod
    def validate_data_file(cls, v: str) -> str:
        """Emette warning se il path è relativo."""
        if v and not v.startswith("/"):
            logging.getLogger(__name__).warning(
                "data_file è relativo: %s. Usa un percorso assoluto in produzione.", v
            )
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validazione settings obbligatori in produzione."""
        if self.app_env != "production":
            return self

        errors = []

        if self.debug:
            errors.append("- debug: deve essere False in produzione")

        for origin in self.cors_origins:
            if "localhost" in origin or "127.0.0.1" in origin:
                errors.append(
                    f"- cors_origins: l'origine '{origin}' non è consentita in produzione"
                )

        if errors:
            error_msg = "Errore di configurazione in produzione:\n" + "\n".join(errors)
            raise ValueError(error_msg)

        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Restituisce l'istanza singleton delle impostazioni.

    In fase di test, usa get_settings.cache_clear() per resettare.

    Returns:
        Settings: Istanza delle impostazioni applicazione
    """
    return Settings()


# Istanza singleton delle impostazioni per uso diretto in modulo
settings = get_settings()

"""
Archivio su documento JSON
Progetto: Gestionale Studio Legale

Tutti i dati dello studio sono in un unico file JSON, letto all'avvio e
riscritto per intero dopo ogni modifica. Definisce lo store e la dependency
injection per FastAPI.

LIMITE NOTO: non esiste alcun lock attorno al ciclo lettura-modifica-scrittura.
Gli endpoint sono `async def` e girano sull'unico event loop del processo,
quindi le mutazioni sono serializzate solo all'interno di un singolo processo
uvicorn. Con più worker o più processi sullo stesso file l'ultimo salvataggio
vince e le modifiche concorrenti vanno perse.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from gestionale_studio.core.exceptions import StorageError
from gestionale_studio.models import StoreData

# Logger per questo modulo
logger = logging.getLogger(__name__)


class JsonStore:
    """
    Documento JSON tenuto in memoria.

    I service lavorano su `store.data` e chiamano `store.save()` dopo ogni
    mutazione andata a buon fine.

    Example:
        store = JsonStore("data/db.json").load()
        store.data.clients.append(client)
        store.save()
    """

    def __init__(self, path: str | os.PathLike, data: Optional[StoreData] = None) -> None:
        self.path = Path(path)
        self.data = data if data is not None else StoreData()
        # Ultimo stato scritto su disco, per ripristinare la memoria se save() fallisce
        self._persisted: Optional[str] = None

    def load(self) -> "JsonStore":
        """
        Legge il documento dal disco.

        Se il file non esiste viene creato con i valori di default.

        Raises:
            StorageError: file illeggibile o non conforme. Il file non viene
                toccato: va corretto (o ripristinato da backup) prima di ripartire.
        """
        if not self.path.exists():
            logger.info("Archivio %s non trovato: creazione documento vuoto", self.path)
            self.data = StoreData()
            self.save()
            return self

        try:
            raw = self.path.read_text(encoding="utf-8")
            self.data = StoreData.model_validate(json.loads(raw or "{}"))
        except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
            logger.error("Errore lettura archivio %s: %s", self.path, e)
            raise StorageError(f"Archivio {self.path} non leggibile: {e}") from e

        self._persisted = self.data.model_dump_json(by_alias=True)
        logger.info(
            "Archivio caricato: %s clienti, %s pratiche, %s fatture",
            len(self.data.clients), len(self.data.cases), len(self.data.invoices),
        )
        return self

    def save(self) -> None:
        """
        Riscrive l'intero documento (file temporaneo + rename atomico).

        Se la scrittura fallisce la memoria torna all'ultimo stato salvato,
        così una modifica a metà non finisce nel salvataggio successivo.

        Raises:
            OSError: errore di scrittura
        """
        payload = self.data.model_dump_json(by_alias=True, indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            logger.error("Errore scrittura archivio %s", self.path, exc_info=True)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            self._rollback()
            raise

        self._persisted = payload
        logger.debug("Archivio salvato su %s", self.path)

    def _rollback(self) -> None:
        if self._persisted is None:
            return
        self.data = StoreData.model_validate_json(self._persisted)
        logger.warning("Modifiche non salvate annullate: archivio riportato all'ultimo salvataggio")


def get_store(request: Request) -> JsonStore:
    """
    Dependency injection per FastAPI.

    Restituisce lo store creato nel lifespan dell'applicazione.
    Nei test si sostituisce con `app.dependency_overrides[get_store]`.

    Example:
        @router.get("/clients")
        async def list_clients(store: JsonStore = Depends(get_store)):
            ...
    """
    return request.app.state.store

"""
Service per la numerazione progressiva
Progetto: Gestionale Studio Legale

Numeri leggibili, per anno, con progressivo a zero-padding:
    FAT-2025-0001      fatture (prefisso/cifre/separatore da Settings)
    PR-CIV-2025-0001   pratiche civili
    PR-PEN-2025-0001   pratiche penali

I contatori sono salvati in `sequences` del documento, con chiave
"<famiglia>_<anno>" (invoice_2025, caseCivil_2025, casePenal_2025).
Crescono sempre: un numero assegnato non viene mai riusato, nemmeno se la
fattura o la pratica viene eliminata. L'unico modo per abbassarli è la
riconfigurazione amministrativa (update_case_numbering, set_counter).
"""

import datetime
import logging
from typing import Optional

from gestionale_studio.core.config import settings
from gestionale_studio.core.exceptions import BusinessValidationError, DuplicateError
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import CaseNumberingConfig, CaseTypeNumbering
from gestionale_studio.schemas.case import (
    CaseNumberingRead,
    CaseNumberingUpdate,
    CaseTypeNumberingRead,
)

# Logger per questo modulo
logger = logging.getLogger(__name__)

INVOICE_KIND = "invoice"
DEFAULT_CASE_TYPE = "civile"

# Chiavi storiche dei contatori pratiche
CASE_SEQUENCE_BASES = {
    "civile": "caseCivil",
    "penale": "casePenal",
}


def format_number(prefix: str, year: int, counter: int, pad: int, separator: str) -> str:
    """Compone PREFISSO<sep>ANNO<sep>NNNN."""
    return f"{prefix}{separator}{year}{separator}{counter:0{pad}d}"


def _current_year(year: Optional[int]) -> int:
    return year if year is not None else datetime.date.today().year


class SequenceService:
    """
    Service per i numeri di fattura e di pratica.

    Implementa:
    - next_number / preview_number generici per famiglia ("invoice" o tipo pratica)
    - assegnazione numero pratica, automatica o manuale
    - controllo unicità dei numeri manuali (senza distinzione maiuscole/minuscole)
    - riconfigurazione delle famiglie di numerazione pratiche
    """

    # ------------------------------------------------------------
    # Famiglie
    # ------------------------------------------------------------

    def resolve_case_type(self, store: JsonStore, case_type: Optional[str]) -> str:
        """Tipo pratica normalizzato; un tipo mancante o sconosciuto diventa 'civile'."""
        normalized = str(case_type or "").strip().lower()
        if normalized in self._case_config(store).case_types:
            return normalized
        if normalized:
            logger.warning("Tipo pratica '%s' sconosciuto: uso '%s'", case_type, DEFAULT_CASE_TYPE)
        return DEFAULT_CASE_TYPE

    def sequence_key(self, store: JsonStore, kind: Optional[str], year: Optional[int] = None) -> str:
        """Chiave del contatore per famiglia e anno."""
        return f"{self._sequence_base(store, kind)}_{_current_year(year)}"

    def _sequence_base(self, store: JsonStore, kind: Optional[str]) -> str:
        if kind == INVOICE_KIND:
            return INVOICE_KIND
        case_type = self.resolve_case_type(store, kind)
        return CASE_SEQUENCE_BASES.get(case_type, f"case{case_type.capitalize()}")

    def _case_config(self, store: JsonStore) -> CaseNumberingConfig:
        return store.data.settings.case_numbering

    def _format(self, store: JsonStore, kind: Optional[str], year: int, counter: int) -> str:
        if kind == INVOICE_KIND:
            return format_number(
                settings.invoice_number_prefix,
                year,
                counter,
                settings.invoice_number_pad,
                settings.invoice_number_separator,
            )
        config = self._case_config(store)
        family = config.case_types[self.resolve_case_type(store, kind)]
        return format_number(family.prefix, year, counter, family.pad, config.separator)

    def _is_taken(self, store: JsonStore, kind: Optional[str], number: str) -> bool:
        existing = store.data.invoices if kind == INVOICE_KIND else store.data.cases
        wanted = number.strip().lower()
        return any(str(item.number or "").strip().lower() == wanted for item in existing)

    # ------------------------------------------------------------
    # Progressivi
    # ------------------------------------------------------------

    def current_counter(self, store: JsonStore, key: str) -> int:
        return int(store.data.sequences.get(key, 0) or 0)

    def _peek(self, store: JsonStore, kind: Optional[str], year: int) -> tuple[int, str]:
        """
        Prossimo progressivo libero e relativo numero.

        Un numero già occupato (tipicamente da un numero manuale) viene
        saltato, così che il progressivo automatico non produca duplicati.
        """
        counter = self.current_counter(store, self.sequence_key(store, kind, year)) + 1
        number = self._format(store, kind, year, counter)
        while self._is_taken(store, kind, number):
            counter += 1
            number = self._format(store, kind, year, counter)
        return counter, number

    def next_number(
        self,
        store: JsonStore,
        kind: Optional[str],
        year: Optional[int] = None,
        persist: bool = True,
    ) -> str:
        """
        Assegna il prossimo numero della famiglia e incrementa il contatore.

        Args:
            store: archivio
            kind: "invoice" oppure tipo pratica (civile, penale, ...)
            year: anno della numerazione (default: anno corrente)
            persist: se False il contatore è aggiornato solo in memoria e
                verrà scritto dal save() del chiamante insieme al nuovo record

        Returns:
            str: numero assegnato
        """
        year = _current_year(year)
        key = self.sequence_key(store, kind, year)
        counter, number = self._peek(store, kind, year)
        store.data.sequences[key] = counter
        if persist:
            store.save()
        logger.info("Assegnato numero %s (contatore %s = %s)", number, key, counter)
        return number

    def preview_number(self, store: JsonStore, kind: Optional[str], year: Optional[int] = None) -> str:
        """Stesso calcolo di next_number, senza toccare il contatore."""
        _, number = self._peek(store, kind, _current_year(year))
        return number

    # ------------------------------------------------------------
    # Numeri manuali
    # ------------------------------------------------------------

    def ensure_number_available(self, store: JsonStore, kind: Optional[str], number: str) -> None:
        """
        Verifica che un numero manuale non sia già usato nella stessa collezione.

        Raises:
            DuplicateError: numero già presente (confronto case-insensitive)
        """
        if self._is_taken(store, kind, number):
            what = "fattura" if kind == INVOICE_KIND else "pratica"
            raise DuplicateError(f"Numero {what} già utilizzato: {number}")

    def assign_case_number(
        self,
        store: JsonStore,
        case_type: Optional[str],
        manual_number: Optional[str] = None,
    ) -> str:
        """
        Numero per una nuova pratica.

        Con manual_number il progressivo non viene né letto né incrementato.
        Il contatore automatico viene aggiornato solo in memoria: lo scrive
        il save() di chi crea la pratica.

        Raises:
            BusinessValidationError: numerazione manuale disabilitata
            DuplicateError: numero manuale già in uso
        """
        manual = (manual_number or "").strip()
        if manual:
            if not self._case_config(store).allow_manual:
                raise BusinessValidationError("La numerazione manuale delle pratiche è disabilitata")
            self.ensure_number_available(store, case_type, manual)
            return manual
        return self.next_number(store, case_type, persist=False)

    # ------------------------------------------------------------
    # Configurazione
    # ------------------------------------------------------------

    def get_case_numbering(self, store: JsonStore, year: Optional[int] = None) -> CaseNumberingRead:
        """Configurazione corrente con l'anteprima del prossimo numero per tipo."""
        year = _current_year(year)
        config = self._case_config(store)
        case_types = {}
        for case_type, family in config.case_types.items():
            counter, number = self._peek(store, case_type, year)
            case_types[case_type] = CaseTypeNumberingRead(
                prefix=family.prefix,
                pad=family.pad,
                next_number=counter,
                preview=number,
            )
        return CaseNumberingRead(
            allow_manual=config.allow_manual,
            separator=config.separator,
            year=year,
            case_types=case_types,
        )

    def update_case_numbering(
        self,
        store: JsonStore,
        data: CaseNumberingUpdate,
        year: Optional[int] = None,
    ) -> CaseNumberingRead:
        """
        Modifica la numerazione pratiche.

        Solo le famiglie presenti in data.case_types vengono toccate.
        next_number = N imposta il contatore dell'anno a N - 1 se N - 1 >= 0,
        altrimenti la richiesta su quel contatore viene ignorata.
        """
        year = _current_year(year)
        config = self._case_config(store)

        for raw_type, patch in data.case_types.items():
            case_type = raw_type.strip().lower()
            if case_type and case_type not in config.case_types and not patch.prefix:
                raise BusinessValidationError(
                    f"Prefisso obbligatorio per il nuovo tipo pratica '{case_type}'"
                )

        if data.allow_manual is not None:
            config.allow_manual = data.allow_manual
        if data.separator:
            config.separator = data.separator

        for raw_type, patch in data.case_types.items():
            case_type = raw_type.strip().lower()
            if not case_type:
                continue
            family = config.case_types.get(case_type)
            if family is None:
                family = CaseTypeNumbering(prefix=patch.prefix)
                config.case_types[case_type] = family
            if patch.prefix:
                family.prefix = patch.prefix
            if patch.pad is not None:
                family.pad = patch.pad
            if patch.next_number is not None:
                forced = patch.next_number - 1
                if forced >= 0:
                    key = self.sequence_key(store, case_type, year)
                    store.data.sequences[key] = forced
                    logger.info("Contatore %s forzato a %s", key, forced)
                else:
                    logger.info(
                        "Prossimo numero %s ignorato per '%s': deve essere >= 1",
                        patch.next_number, case_type,
                    )

        store.save()
        logger.info("Configurazione numerazione pratiche aggiornata")
        return self.get_case_numbering(store, year)

    def set_counter(self, store: JsonStore, key: str, value: int) -> None:
        """Override amministrativo di un contatore."""
        if value < 0:
            raise BusinessValidationError("Il contatore non può essere negativo")
        store.data.sequences[key] = value
        store.save()
        logger.warning("Contatore %s impostato manualmente a %s", key, value)

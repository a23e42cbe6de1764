"""
Service per l'anagrafica dello Studio
Progetto: Gestionale Studio Legale

Dati dello studio e aliquote fiscali usate da tutte le fatture.
Le aliquote NON sono copiate nelle fatture: una modifica cambia anche i
totali mostrati delle fatture già emesse.
"""

import logging

from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import StudioSettings
from gestionale_studio.schemas.studio import StudioUpdate

# Logger per questo modulo
logger = logging.getLogger(__name__)

TAX_FIELDS = ("cassa_perc", "iva_perc", "ritenuta_perc", "bollo")


class StudioService:
    """Lettura e aggiornamento dell'anagrafica studio."""

    def get(self, store: JsonStore) -> StudioSettings:
        return store.data.studio

    def update(self, store: JsonStore, data: StudioUpdate) -> StudioSettings:
        """
        Aggiorna i campi inviati.

        bollo inviato esplicitamente a null torna all'importo di legge.
        """
        studio = store.data.studio
        update_data = data.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if value is None and field != "bollo":
                continue
            setattr(studio, field, value)

        changed_tax = [f for f in TAX_FIELDS if f in update_data]
        if changed_tax:
            logger.warning(
                "Aliquote studio modificate (%s): i totali di tutte le fatture vengono ricalcolati",
                ", ".join(changed_tax),
            )

        store.save()
        logger.info("Anagrafica studio aggiornata")
        return studio

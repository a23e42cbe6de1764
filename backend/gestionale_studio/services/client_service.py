"""
Service Layer per l'anagrafica Clienti
Progetto: Gestionale Studio Legale

Definisce la logica di business per la gestione dei clienti.
"""

import logging
from typing import Optional

from gestionale_studio.core.exceptions import ConflictError, DuplicateError, NotFoundError
from gestionale_studio.core.storage import JsonStore
from gestionale_studio.models import Case, Client, Invoice
from gestionale_studio.schemas.client import ClientCreate, ClientUpdate

# Logger per questo modulo
logger = logging.getLogger(__name__)


class ClientService:
    """
    Service per la gestione delle operazioni CRUD sui clienti.

    Implementa:
    - Ricerca su nome, codice fiscale, partita IVA, email e telefono
    - Controllo duplicati (stesso nome e stesso codice fiscale)
    - Eliminazione bloccata finché esistono fatture intestate al cliente
    """

    def get_all(
        self,
        store: JsonStore,
        page: int = 1,
        per_page: int = 50,
        search: Optional[str] = None,
    ) -> tuple[list[Client], int]:
        """
        Recupera la lista paginata dei clienti in ordine alfabetico.

        Returns:
            Tuple di (lista clienti, totale count)
        """
        clients = store.data.clients
        if search:
            term = search.strip().lower()
            clients = [
                c for c in clients
                if any(
                    term in (v or "").lower()
                    for v in (c.name, c.fiscal_code, c.vat_number, c.email, c.phone)
                )
            ]

        clients = sorted(clients, key=lambda c: c.name.lower())
        total = len(clients)
        offset = (page - 1) * per_page

        logger.debug("Recuperati clienti pagina %s (%s totali)", page, total)
        return clients[offset:offset + per_page], total

    def get_by_id(self, store: JsonStore, client_id: str) -> Client:
        """
        Recupera un cliente tramite ID.

        Raises:
            NotFoundError: Cliente non trovato
        """
        client = store.data.find_client(client_id)
        if not client:
            raise NotFoundError(f"Cliente {client_id} non trovato")
        return client

    def _ensure_unique(self, store: JsonStore, name: str, fiscal_code: str, exclude_id: Optional[str] = None) -> None:
        wanted = name.strip().lower()
        for other in store.data.clients:
            if other.id == exclude_id:
                continue
            if other.name.strip().lower() == wanted and other.fiscal_code == fiscal_code:
                raise DuplicateError(f"Cliente già presente: {other.name}")

    def create(self, store: JsonStore, data: ClientCreate) -> Client:
        """
        Crea un nuovo cliente.

        Raises:
            DuplicateError: esiste già un cliente con stesso nome e codice fiscale
        """
        self._ensure_unique(store, data.name, data.fiscal_code)

        payload = data.model_dump()
        payload["email"] = payload["email"] or ""
        payload["pec"] = payload["pec"] or ""
        client = Client(**payload)
        store.data.clients.append(client)

        store.save()
        logger.info("Creato cliente %s (%s)", client.name, client.id)
        return client

    def update(self, store: JsonStore, client_id: str, data: ClientUpdate) -> Client:
        """
        Aggiorna un cliente (solo i campi inviati).

        Raises:
            NotFoundError: Cliente non trovato
            DuplicateError: il nuovo nome/codice fiscale collide con un altro cliente
        """
        client = self.get_by_id(store, client_id)
        update_data = data.model_dump(exclude_unset=True)

        name = update_data.get("name") or client.name
        fiscal_code = update_data.get("fiscal_code")
        if fiscal_code is None:
            fiscal_code = client.fiscal_code
        self._ensure_unique(store, name, fiscal_code, exclude_id=client.id)

        for field, value in update_data.items():
            if field == "name" and not value:
                continue
            setattr(client, field, value if value is not None else "")
        client.touch()

        store.save()
        logger.info("Cliente %s aggiornato: %s", client.id, ", ".join(sorted(update_data)))
        return client

    def delete(self, store: JsonStore, client_id: str) -> None:
        """
        Elimina un cliente.

        Le pratiche del cliente restano senza cliente assegnato.

        Raises:
            NotFoundError: Cliente non trovato
            ConflictError: esistono fatture intestate al cliente
        """
        client = self.get_by_id(store, client_id)

        invoices = self.get_invoices(store, client.id)
        if invoices:
            raise ConflictError(
                f"Impossibile eliminare il cliente: {len(invoices)} fatture collegate",
                extra={"invoices": len(invoices)},
            )

        for case in store.data.cases:
            if case.client_id == client.id:
                case.client_id = None
                case.touch()

        store.data.clients.remove(client)
        store.save()
        logger.info("Cliente %s eliminato", client.id)

    def get_cases(self, store: JsonStore, client_id: str) -> list[Case]:
        self.get_by_id(store, client_id)
        return [c for c in store.data.cases if c.client_id == client_id]

    def get_invoices(self, store: JsonStore, client_id: str) -> list[Invoice]:
        return [i for i in store.data.invoices if i.client_id == client_id]

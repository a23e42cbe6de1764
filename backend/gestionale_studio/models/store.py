"""
Radice del documento JSON
Progetto: Gestionale Studio Legale
"""

from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, model_validator

from gestionale_studio.models import Document
from gestionale_studio.models.case import Case, CaseLog, Expense
from gestionale_studio.models.client import Client
from gestionale_studio.models.deadline import Deadline
from gestionale_studio.models.invoice import Invoice
from gestionale_studio.models.studio import AppSettings, StudioSettings

# Nomi italiani usati dalle prime versioni del documento
LEGACY_ALIASES = {
    "fatture": "invoices",
    "clienti": "clients",
    "casi": "cases",
    "scadenze": "deadlines",
}


class StoreData(Document):
    """
    Intero documento dello studio.

    Le collezioni non gestite da questo backend (documenti, attività,
    tutele, ...) sono conservate così come sono e riscritte ad ogni salvataggio.
    """

    model_config = ConfigDict(extra="allow")

    studio: StudioSettings = Field(default_factory=StudioSettings)
    clients: List[Client] = Field(default_factory=list)
    cases: List[Case] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)
    invoices: List[Invoice] = Field(default_factory=list)
    logs: List[CaseLog] = Field(default_factory=list)
    deadlines: List[Deadline] = Field(default_factory=list)
    sequences: Dict[str, int] = Field(default_factory=dict)
    settings: AppSettings = Field(default_factory=AppSettings)

    @model_validator(mode="before")
    @classmethod
    def apply_legacy_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, current in LEGACY_ALIASES.items():
            if not isinstance(data.get(current), list) and isinstance(data.get(legacy), list):
                data[current] = data.pop(legacy)
        for key in ("studio", "settings", "sequences"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------

    def find_client(self, client_id: Optional[str]) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)

    def find_case(self, case_id: Optional[str]) -> Optional[Case]:
        return next((c for c in self.cases if c.id == case_id), None)

    def find_expense(self, expense_id: Optional[str]) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def find_invoice(self, invoice_id: Optional[str]) -> Optional[Invoice]:
        return next((i for i in self.invoices if i.id == invoice_id), None)

    def find_deadline(self, deadline_id: Optional[str]) -> Optional[Deadline]:
        return next((d for d in self.deadlines if d.id == deadline_id), None)

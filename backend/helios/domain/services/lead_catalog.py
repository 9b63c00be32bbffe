"""
Lead Catalog
Ordered, read-mostly collection of leads supplied at process start
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import yaml

from helios.domain.models.lead import Lead, LeadStatus

logger = logging.getLogger(__name__)

COMPLETED_NEXT_ACTION = "Call completed"


class LeadCatalog:
    """
    Lead catalog.

    Only status and next_action ever change after loading, and only
    through mark_completed().
    """

    def __init__(self, leads: Iterable[Lead]):
        self._order: List[str] = []
        self._leads: Dict[str, Lead] = {}
        for lead in leads:
            if lead.id in self._leads:
                raise ValueError(f"Duplicate lead id in catalog: {lead.id}")
            self._order.append(lead.id)
            self._leads[lead.id] = lead
        if not self._order:
            raise ValueError("Lead catalog is empty")

    @classmethod
    def from_yaml(cls, path: Path) -> "LeadCatalog":
        """Load a catalog from a YAML file with a top-level `leads` list"""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        leads = [Lead(**item) for item in data.get("leads", [])]
        logger.info(f"Loaded {len(leads)} leads from {path}")
        return cls(leads)

    def __contains__(self, lead_id: str) -> bool:
        return lead_id in self._leads

    def __len__(self) -> int:
        return len(self._order)

    @property
    def first_id(self) -> str:
        return self._order[0]

    def get(self, lead_id: str) -> Optional[Lead]:
        return self._leads.get(lead_id)

    def require(self, lead_id: str) -> Lead:
        lead = self._leads.get(lead_id)
        if lead is None:
            raise KeyError(f"Unknown lead: {lead_id}")
        return lead

    def list_leads(self) -> List[Lead]:
        """Leads in catalog order"""
        return [self._leads[lead_id] for lead_id in self._order]

    def mark_completed(self, lead_id: str) -> Lead:
        """Set status to completed and next action to the fixed completion label"""
        lead = self.require(lead_id).model_copy(
            update={"status": LeadStatus.COMPLETED, "next_action": COMPLETED_NEXT_ACTION}
        )
        self._leads[lead_id] = lead
        logger.info(f"Lead {lead_id} marked as completed")
        return lead

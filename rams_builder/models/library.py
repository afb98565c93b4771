from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TypeVar

from rams_builder.models.documents import LiftPlan, MasterDocument, RAMSDocument
from rams_builder.models.risk import SEED_HAZARDS, HazardTemplate

_T = TypeVar("_T", HazardTemplate, MasterDocument, RAMSDocument, LiftPlan)


def _upsert(items: List[_T], element: _T) -> None:
    for index, existing in enumerate(items):
        if existing.id == element.id:
            items[index] = element
            return
    items.insert(0, element)


@dataclass
class Library:
    hazards: List[HazardTemplate] = field(default_factory=list)
    master_documents: List[MasterDocument] = field(default_factory=list)
    rams_documents: List[RAMSDocument] = field(default_factory=list)
    lift_plans: List[LiftPlan] = field(default_factory=list)

    @classmethod
    def seeded(cls, hazards: Iterable[HazardTemplate] = SEED_HAZARDS) -> Library:
        return cls(hazards=list(hazards))

    def upsert_hazard(self, hazard: HazardTemplate) -> None:
        _upsert(self.hazards, hazard)

    def upsert_master_document(self, master: MasterDocument) -> None:
        _upsert(self.master_documents, master)

    def upsert_rams_document(self, rams: RAMSDocument) -> None:
        _upsert(self.rams_documents, rams)

    def upsert_lift_plan(self, lift_plan: LiftPlan) -> None:
        _upsert(self.lift_plans, lift_plan)

    def find_rams_document(self, rams_id: object) -> Optional[RAMSDocument]:
        return next((doc for doc in self.rams_documents if doc.id == rams_id), None)

    def lift_plans_for(self, rams_id: object) -> List[LiftPlan]:
        return [plan for plan in self.lift_plans if plan.rams_document_id == rams_id]

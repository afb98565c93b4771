from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from rams_builder.models.risk import RiskEntry
from rams_builder.scoring import RiskReview, classify


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PPEItem(Enum):
    HARDHAT = "hardhat"
    BOOTS = "boots"
    VEST = "vest"
    GLOVES = "gloves"
    GLASSES = "glasses"
    MASK = "mask"
    EAR = "ear"

    @property
    def title(self) -> str:
        return _PPE_TITLES[self]


_PPE_TITLES = {
    PPEItem.HARDHAT: "Hard Hat",
    PPEItem.BOOTS: "Safety Boots",
    PPEItem.VEST: "Hi-Vis Vest",
    PPEItem.GLOVES: "Gloves",
    PPEItem.GLASSES: "Eye Protection",
    PPEItem.MASK: "Dust Mask (FFP3)",
    PPEItem.EAR: "Ear Protection",
}


class LiftCategory(Enum):
    ROUTINE = "Routine"
    COMPLEX = "Complex"
    CRITICAL = "Critical"


@dataclass
class KeyContact:
    name: str = ""
    role: str = ""
    phone: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def is_blank(self) -> bool:
        return not (self.name.strip() or self.role.strip() or self.phone.strip())


@dataclass
class MasterDocument:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    project_name: str = ""
    site_address: str = ""
    client_name: str = ""
    principal_contractor: str = ""
    emergency_contact_name: str = ""
    emergency_contact_phone: str = ""
    nearest_hospital_name: str = ""
    nearest_hospital_address: str = ""
    hospital_directions: str = ""
    map_image: Optional[bytes] = None
    key_contacts: List[KeyContact] = field(default_factory=lambda: [KeyContact()])
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def draft(cls, now: Optional[datetime] = None) -> MasterDocument:
        stamp = now or utc_now()
        return cls(created_at=stamp, updated_at=stamp)


@dataclass
class MethodStep:
    sequence: int
    title: str = ""
    details: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class WorkingAtHeightEquipment:
    equipment: str
    make_model_type: str = ""
    qualifications_needed: str = ""


@dataclass(frozen=True)
class SignatureRecord:
    signer_name: str
    signer_role: str
    signed_at: datetime
    signature_image: bytes
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class RAMSDocument:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    title: str = ""
    reference_code: str = ""
    scope_of_works: str = ""
    prepared_by: str = ""
    approved_by: str = ""
    method_steps: List[MethodStep] = field(default_factory=lambda: [MethodStep(sequence=1)])
    required_ppe: List[PPEItem] = field(default_factory=list)
    plant_equipment_access: List[str] = field(default_factory=list)
    working_at_height_equipment: List[WorkingAtHeightEquipment] = field(default_factory=list)
    specialist_tools: List[str] = field(default_factory=list)
    consumables: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    risk_entries: List[RiskEntry] = field(default_factory=list)
    emergency_first_aid_station: str = "Main site office"
    emergency_assembly_point: str = "Main Gate"
    emergency_contact: str = ""
    requires_lifting_plan: bool = False
    signatures: List[SignatureRecord] = field(default_factory=list)
    category: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def draft(cls, reference_code: str = "", now: Optional[datetime] = None) -> RAMSDocument:
        stamp = now or utc_now()
        return cls(reference_code=reference_code, created_at=stamp, updated_at=stamp)

    @property
    def overall_risk_review(self) -> RiskReview:
        highest = max((entry.residual_score for entry in self.risk_entries), default=0)
        return classify(highest)

    def renumber_method_steps(self) -> None:
        for index, step in enumerate(self.method_steps):
            step.sequence = index + 1


@dataclass
class LiftPlan:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    # Weak reference: no ownership or cascading behaviour.
    rams_document_id: Optional[uuid.UUID] = None
    title: str = ""
    category: LiftCategory = LiftCategory.ROUTINE
    crane_or_plant: str = ""
    load_description: str = ""
    load_weight_kg: float = 0.0
    lifting_accessories: List[str] = field(default_factory=list)
    lift_radius_m: float = 0.0
    boom_length_m: float = 0.0
    setup_location: str = ""
    landing_location: str = ""
    ground_bearing_capacity: str = ""
    wind_limit: str = ""
    communication_method: str = ""
    appointed_person: str = ""
    crane_supervisor: str = ""
    lift_operator: str = ""
    slinger_signaller: str = ""
    method_sequence: List[str] = field(default_factory=lambda: [""])
    exclusion_zone_details: str = ""
    emergency_rescue_plan: str = ""
    permit_references: str = ""
    drawing_image: Optional[bytes] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def draft(cls, now: Optional[datetime] = None) -> LiftPlan:
        stamp = now or utc_now()
        return cls(created_at=stamp, updated_at=stamp)

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from rams_builder.scoring import RiskReview


@dataclass(frozen=True)
class Header:
    brand_title: str
    subtitle: str
    document_reference: Optional[str] = None
    date_of_issue: Optional[str] = None
    revision_label: Optional[str] = None


@dataclass(frozen=True)
class Metadata:
    rams_document: Optional[str] = None
    project: Optional[str] = None
    project_reference: Optional[str] = None
    project_site_address: Optional[str] = None
    prepared_by: Optional[str] = None
    approved_by: Optional[str] = None


@dataclass(frozen=True)
class KeyValueField:
    key: str
    value: Optional[str] = None


@dataclass(frozen=True)
class CoverDetailCard:
    title: str
    fields: List[KeyValueField] = field(default_factory=list)


@dataclass(frozen=True)
class ContentsEntry:
    number: int
    section: str
    reference: Optional[str] = None
    pre_start_critical: Optional[bool] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class RiskBadge:
    score_text: str
    level: RiskReview


@dataclass(frozen=True)
class RiskAssessmentRow:
    initial_risk: RiskBadge
    residual_risk: RiskBadge
    reference: Optional[str] = None
    hazard: Optional[str] = None
    risk_to: Optional[str] = None
    control_measures: Optional[str] = None


@dataclass(frozen=True)
class WorkingAtHeightCompetency:
    equipment: str
    make_model_type: Optional[str] = None
    qualifications_needed: Optional[str] = None


@dataclass(frozen=True)
class MethodStatement:
    sequence_of_works: Optional[str] = None
    emergency_procedures: Optional[str] = None
    first_aid: Optional[str] = None


@dataclass(frozen=True)
class LiftingPlanPreview:
    title: Optional[str] = None
    category: Optional[str] = None
    crane_or_plant: Optional[str] = None
    load_description: Optional[str] = None
    load_weight: Optional[str] = None
    key_notes: Optional[str] = None


@dataclass(frozen=True)
class EmbeddedSectionBody:
    reference: Optional[str] = None
    issued_date: Optional[str] = None
    project_details: List[KeyValueField] = field(default_factory=list)
    mandatory_ppe: List[str] = field(default_factory=list)
    plant_equipment_access: List[str] = field(default_factory=list)
    specialist_tools: List[str] = field(default_factory=list)
    consumables: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    working_at_height_competencies: List[WorkingAtHeightCompetency] = field(default_factory=list)
    risk_assessment_rows: List[RiskAssessmentRow] = field(default_factory=list)
    risk_review_selection: RiskReview = RiskReview.LOW
    method_statement: MethodStatement = field(default_factory=MethodStatement)


@dataclass(frozen=True)
class AssignedSection:
    title: str
    body: EmbeddedSectionBody
    reference: Optional[str] = None
    is_active: bool = True
    pre_start_critical: bool = False
    notes: Optional[str] = None
    lifting_plan_preview: Optional[LiftingPlanPreview] = None


@dataclass(frozen=True)
class Appendix:
    """An appendix carries either embedded image bytes or a document URL."""

    title: str
    caption: Optional[str] = None
    image: Optional[bytes] = None
    public_url: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.image is None) == (self.public_url is None):
            raise ValueError(
                f"Appendix '{self.title}' needs exactly one of image or public_url."
            )

    @property
    def is_image(self) -> bool:
        return self.image is not None


@dataclass(frozen=True)
class SignOffRecord:
    name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    date: Optional[str] = None
    signature_image: Optional[bytes] = None


@dataclass(frozen=True)
class SignOff:
    explanatory_copy: str
    revision_label: Optional[str] = None
    date_of_issue: Optional[str] = None
    records: List[SignOffRecord] = field(default_factory=list)


@dataclass(frozen=True)
class LayoutDocument:
    id: uuid.UUID
    header: Header
    metadata: Metadata
    sign_off: SignOff
    scope_of_works: List[str] = field(default_factory=list)
    cover_detail_cards: List[CoverDetailCard] = field(default_factory=list)
    nearest_hospital_map_image: Optional[bytes] = None
    contents_entries: List[ContentsEntry] = field(default_factory=list)
    assigned_sections: List[AssignedSection] = field(default_factory=list)
    appendices: List[Appendix] = field(default_factory=list)

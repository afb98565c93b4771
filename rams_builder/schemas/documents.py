import uuid
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import ConfigDict, Field

from rams_builder.schemas.base import Items, SchemaModel, Text, Url

UserId = Text(80)


class MasterDocumentStatus(str, Enum):
    DRAFT = "Draft"
    ISSUED = "Issued"
    CLOSED = "Closed"
    ARCHIVED = "Archived"


class MasterTemplateStatus(str, Enum):
    ACTIVE = "Active"
    ARCHIVED = "Archived"


class MasterDocumentCreatePayload(SchemaModel):
    model_config = ConfigDict(title="MasterDocument")

    project_id: uuid.UUID
    title: Optional[Text(200)] = None
    document_reference: Optional[Text(120)] = None


class MasterDocumentUpdatePayload(SchemaModel):
    model_config = ConfigDict(title="MasterDocument")

    title: Optional[Text(200)] = None
    document_reference: Optional[Text(120)] = None
    status: Optional[MasterDocumentStatus] = None


class DocumentAppendix(SchemaModel):
    model_config = ConfigDict(title="DocumentAppendix")

    id: Text(120)
    name: Text(260)
    mime_type: Text(120)
    public_url: Url(4_000)
    storage_path: Text(2_000)
    size: Annotated[int, Field(ge=0, le=21_000_000)]
    uploaded_at: Text(80)
    caption: Optional[Text(300)] = None


class MasterCoverConfig(SchemaModel):
    model_config = ConfigDict(title="MasterCoverConfig")

    project_name: Optional[Text(240)] = None
    project_reference: Optional[Text(120)] = None
    project_site_address: Optional[Text(1_500)] = None
    project_scope_of_works: Optional[Text(20_000)] = None
    date_of_issue: Optional[Text(40)] = None
    planned_start_date: Optional[Text(40)] = None
    planned_start_time: Optional[Text(40)] = None
    expected_duration: Optional[Text(255)] = None
    exact_location: Optional[Text(3_000)] = None
    attachment_plan: Optional[Text(3_000)] = None
    location_plan_appendices: Optional[Items(DocumentAppendix, 50)] = None

    document_prepared_by_user_id: Optional[UserId] = None
    risk_assessments_completed_by_user_id: Optional[UserId] = None
    personnel_user_ids: Optional[Items(UserId, 200)] = None
    site_supervisor_user_id: Optional[UserId] = None
    communication_briefed_by_user_id: Optional[UserId] = None
    communication_recipient_user_ids: Optional[Items(UserId, 200)] = None
    communication_escalation_user_id: Optional[UserId] = None
    communication_delivery_methods: Optional[Items(Text(), 40)] = None
    plant_equipment_tools_items: Optional[Items(Text(), 160)] = None
    materials_hazardous_substances_items: Optional[Items(Text(), 160)] = None

    attachment_plan_asset_url: Optional[Text(4_000)] = None
    attachment_plan_asset_name: Optional[Text(255)] = None
    attachment_plan_asset_type: Optional[Text(120)] = None
    document_prepared_by: Optional[Text(500)] = None
    risk_assessments_completed: Optional[Text(500)] = None

    access_egress_requirements: Optional[Text(12_000)] = None
    personnel_job_titles: Optional[Text(6_000)] = None
    site_supervisor: Optional[Text(6_000)] = None
    plant_equipment_tools: Optional[Text(12_000)] = None
    materials_hazardous_substances: Optional[Text(12_000)] = None
    drawings_technical_info: Optional[Text(12_000)] = None
    waste_removal: Optional[Text(12_000)] = None
    housekeeping_storage: Optional[Text(12_000)] = None
    permits_required: Optional[Text(4_000)] = None
    permit_type: Optional[Text(6_000)] = None
    permit_issued_by: Optional[Text(6_000)] = None
    mandatory_site_ppe: Optional[Text(12_000)] = None
    task_specific_ppe: Optional[Text(12_000)] = None
    nearest_hospital: Optional[Text(1_200)] = None
    # Base64 image payload.
    nearest_hospital_map_image: Optional[Text(4_000_000)] = None

    emergency_rescue: Optional[Text(12_000)] = None
    emergency_rescue_from_height: Optional[Text(12_000)] = None
    emergency_first_aid_point: Optional[Text(12_000)] = None
    emergency_qualified_first_aiders: Optional[Text(12_000)] = None
    emergency_fire_safety_arrangements: Optional[Text(12_000)] = None
    emergency_assembly_points: Optional[Text(12_000)] = None
    awareness_communication: Optional[Text(12_000)] = None
    monitoring_responsible_person: Optional[Text(12_000)] = None
    hav_noise_responsible_person: Optional[Text(12_000)] = None
    amendments_authorised_by: Optional[Text(12_000)] = None
    issued_to_reviewed_by: Optional[Text(12_000)] = None
    emergency_arrangements: Optional[Text(12_000)] = None
    responsibilities: Optional[Text(12_000)] = None
    monitoring_compliance: Optional[Text(12_000)] = None
    key_risk_keywords: Optional[Text(4_000)] = None
    minimum_risk_assessments: Optional[Text(12_000)] = None
    additional_notes: Optional[Text(12_000)] = None


class MasterTemplateSection(SchemaModel):
    model_config = ConfigDict(title="MasterTemplateSection")

    source_rams_library_id: Optional[uuid.UUID] = None
    section_title: Text(200)
    section_reference: Optional[Text(120)] = None
    display_order: Optional[Annotated[int, Field(ge=0)]] = None
    active: Optional[bool] = None
    pre_start_critical: Optional[bool] = None
    requires_lifting_plan: Optional[bool] = None
    notes: Optional[Text(4_000)] = None
    lifting_plan: Optional[dict] = None


class MasterTemplateCreatePayload(SchemaModel):
    model_config = ConfigDict(title="MasterTemplate")

    title: Text(200)
    description: Optional[Text(2_000)] = None
    cover_config: MasterCoverConfig
    sections: List[MasterTemplateSection]


class MasterTemplateUpdatePayload(SchemaModel):
    model_config = ConfigDict(title="MasterTemplate")

    title: Optional[Text(200)] = None
    description: Optional[Text(2_000)] = None
    status: Optional[MasterTemplateStatus] = None
    cover_config: Optional[MasterCoverConfig] = None
    sections: Optional[List[MasterTemplateSection]] = None

from typing import Annotated, List, Optional

from pydantic import ConfigDict, Field, StrictInt

from rams_builder.models.risk import RiskEntry
from rams_builder.schemas.base import Items, SchemaModel, Text

RiskFactor = Annotated[StrictInt, Field(ge=1, le=5)]


class HazardPayload(SchemaModel):
    """A single hazard row as entered in the risk register."""

    model_config = ConfigDict(title="Hazard")

    id: Optional[int] = None
    activity: Text(500)
    hazard: Text(2_000)
    persons_at_risk: Text(500)
    init_l: RiskFactor
    init_s: RiskFactor
    controls: Text(4_000)
    res_l: RiskFactor
    res_s: RiskFactor

    def to_risk_entry(self) -> RiskEntry:
        measures = [line.strip() for line in self.controls.splitlines() if line.strip()]
        return RiskEntry(
            hazard_title=f"{self.activity} - {self.hazard}",
            risk_to=self.persons_at_risk,
            control_measures=measures,
            initial_likelihood=self.init_l,
            initial_severity=self.init_s,
            residual_likelihood=self.res_l,
            residual_severity=self.res_s,
        )


class ProjectDetails(SchemaModel):
    model_config = ConfigDict(title="ProjectDetails")

    project_name: Text(200)
    project_title: Text(200)
    reference: Text(120)
    date: Text(30)
    site_address: Text(500)
    assessor: Text(200)
    supervisor: Text(200)
    description: Text(4_000)


class WorkingAtHeightEquipmentDetail(SchemaModel):
    model_config = ConfigDict(title="WorkingAtHeightEquipmentDetail")

    equipment: Text(120)
    make_model_type: Optional[Text(240)] = None
    qualifications_needed: Optional[Text(240)] = None


class MethodStatementPayload(SchemaModel):
    model_config = ConfigDict(title="MethodStatement")

    sequence: Optional[Text(10_000)] = None
    emergency_procedures: Optional[Text(6_000)] = None
    first_aid: Optional[Text(6_000)] = None


class RAMSPayload(SchemaModel):
    model_config = ConfigDict(title="RAMS")

    project_details: ProjectDetails
    selected_ppe: Items(Text(), 50) = Field(alias="selectedPPE")
    plant_equipment_access: Items(Text(), 100)
    working_at_height_equipment_details: Items(WorkingAtHeightEquipmentDetail, 100)
    specialist_tools: Items(Text(), 100)
    consumables: Items(Text(), 100)
    materials: Items(Text(), 100)
    hazards: Items(HazardPayload, 250)
    method_statement: MethodStatementPayload
    category: Optional[Text(120)] = None
    tags: Optional[Items(Text(50), 25)] = None

    def risk_entries(self) -> List[RiskEntry]:
        return [hazard.to_risk_entry() for hazard in self.hazards]

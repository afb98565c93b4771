from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from rams_builder.exceptions import RamsBuilderError, ValidationFailure
from rams_builder.models.documents import (
    KeyContact,
    LiftCategory,
    LiftPlan,
    MasterDocument,
    MethodStep,
    PPEItem,
    RAMSDocument,
    WorkingAtHeightEquipment,
)
from rams_builder.schemas.base import SchemaModel, Violation, validate
from rams_builder.schemas.documents import DocumentAppendix
from rams_builder.schemas.rams import HazardPayload


@dataclass
class Draft:
    master: MasterDocument
    rams: RAMSDocument
    lift_plan: Optional[LiftPlan] = None
    appendices: List[DocumentAppendix] = field(default_factory=list)


def load_payload(path: Path) -> Any:
    """Read a YAML or JSON file (JSON is valid YAML)."""
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        raise RamsBuilderError(f"File not found: {path}") from None
    except OSError as exc:
        raise RamsBuilderError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise RamsBuilderError(f"{path} is not valid YAML or JSON: {exc}") from exc


def load_draft(path: Path) -> Draft:
    """Parse a draft file into domain entities.

    Hazard rows and appendices pass through their payload schemas; every
    violation in the file is collected before ValidationFailure is raised.
    Image fields name files relative to the draft.
    """
    data = load_payload(path)
    if not isinstance(data, dict):
        raise RamsBuilderError(f"{path} must contain a mapping with 'master' and 'rams' keys.")

    violations: List[Violation] = []
    base_dir = path.parent

    master = _parse_master(_mapping(data.get("master")), base_dir, violations)
    rams = _parse_rams(_mapping(data.get("rams")), violations)

    lift_plan: Optional[LiftPlan] = None
    lift_raw = data.get("liftPlan")
    if isinstance(lift_raw, dict):
        lift_plan = _parse_lift_plan(lift_raw, base_dir, violations)
        lift_plan.rams_document_id = rams.id
        rams.requires_lifting_plan = True

    appendices: List[DocumentAppendix] = []
    for index, raw in enumerate(_list(data.get("appendices"))):
        appendix = _validated(DocumentAppendix, raw, f"appendices[{index}]", violations)
        if appendix is not None:
            appendices.append(appendix)

    if violations:
        raise ValidationFailure(violations)
    return Draft(master=master, rams=rams, lift_plan=lift_plan, appendices=appendices)


def _parse_master(raw: Dict[str, Any], base_dir: Path, violations: List[Violation]) -> MasterDocument:
    contacts = [
        KeyContact(
            name=_as_str(c.get("name")),
            role=_as_str(c.get("role")),
            phone=_as_str(c.get("phone")),
        )
        for c in _list(raw.get("keyContacts"))
        if isinstance(c, dict)
    ]
    return MasterDocument(
        project_name=_as_str(raw.get("projectName")),
        site_address=_as_str(raw.get("siteAddress")),
        client_name=_as_str(raw.get("clientName")),
        principal_contractor=_as_str(raw.get("principalContractor")),
        emergency_contact_name=_as_str(raw.get("emergencyContactName")),
        emergency_contact_phone=_as_str(raw.get("emergencyContactPhone")),
        nearest_hospital_name=_as_str(raw.get("nearestHospitalName")),
        nearest_hospital_address=_as_str(raw.get("nearestHospitalAddress")),
        hospital_directions=_as_str(raw.get("hospitalDirections")),
        map_image=_read_image(raw.get("mapImage"), base_dir, "master.mapImage", violations),
        key_contacts=contacts or [KeyContact()],
    )


def _parse_rams(raw: Dict[str, Any], violations: List[Violation]) -> RAMSDocument:
    rams = RAMSDocument(
        title=_as_str(raw.get("title")),
        reference_code=_as_str(raw.get("referenceCode")),
        scope_of_works=_as_str(raw.get("scopeOfWorks")),
        prepared_by=_as_str(raw.get("preparedBy")),
        approved_by=_as_str(raw.get("approvedBy")),
        plant_equipment_access=_str_list(raw.get("plantEquipmentAccess")),
        specialist_tools=_str_list(raw.get("specialistTools")),
        consumables=_str_list(raw.get("consumables")),
        materials=_str_list(raw.get("materials")),
        emergency_contact=_as_str(raw.get("emergencyContact")),
        category=_as_str(raw.get("category")),
        tags=_str_list(raw.get("tags")),
    )
    if "emergencyFirstAidStation" in raw:
        rams.emergency_first_aid_station = _as_str(raw.get("emergencyFirstAidStation"))
    if "emergencyAssemblyPoint" in raw:
        rams.emergency_assembly_point = _as_str(raw.get("emergencyAssemblyPoint"))

    steps: List[MethodStep] = []
    for index, step in enumerate(_list(raw.get("methodSteps")), start=1):
        if isinstance(step, dict):
            steps.append(MethodStep(
                sequence=index,
                title=_as_str(step.get("title")),
                details=_as_str(step.get("details")),
            ))
        else:
            steps.append(MethodStep(sequence=index, title=_as_str(step)))
    if steps:
        rams.method_steps = steps

    for index, value in enumerate(_list(raw.get("requiredPPE"))):
        try:
            item = PPEItem(_as_str(value))
        except ValueError:
            allowed = ", ".join(p.value for p in PPEItem)
            violations.append(Violation(
                f"rams.requiredPPE[{index}]", "enum", f"Input should be one of {allowed}",
            ))
            continue
        if item not in rams.required_ppe:
            rams.required_ppe.append(item)

    rams.working_at_height_equipment = [
        WorkingAtHeightEquipment(
            equipment=_as_str(w.get("equipment")),
            make_model_type=_as_str(w.get("makeModelType")),
            qualifications_needed=_as_str(w.get("qualificationsNeeded")),
        )
        for w in _list(raw.get("workingAtHeightEquipment"))
        if isinstance(w, dict)
    ]

    for index, row in enumerate(_list(raw.get("hazards"))):
        hazard = _validated(HazardPayload, row, f"rams.hazards[{index}]", violations)
        if hazard is not None:
            rams.risk_entries.append(hazard.to_risk_entry())
    return rams


def _parse_lift_plan(raw: Dict[str, Any], base_dir: Path, violations: List[Violation]) -> LiftPlan:
    category = LiftCategory.ROUTINE
    if raw.get("category") is not None:
        try:
            category = LiftCategory(_as_str(raw.get("category")))
        except ValueError:
            allowed = ", ".join(c.value for c in LiftCategory)
            violations.append(Violation(
                "liftPlan.category", "enum", f"Input should be one of {allowed}",
            ))
    sequence = _str_list(raw.get("methodSequence"))
    return LiftPlan(
        title=_as_str(raw.get("title")),
        category=category,
        crane_or_plant=_as_str(raw.get("craneOrPlant")),
        load_description=_as_str(raw.get("loadDescription")),
        load_weight_kg=_as_float(raw.get("loadWeightKg")),
        lifting_accessories=_str_list(raw.get("liftingAccessories")),
        lift_radius_m=_as_float(raw.get("liftRadiusM")),
        boom_length_m=_as_float(raw.get("boomLengthM")),
        setup_location=_as_str(raw.get("setupLocation")),
        landing_location=_as_str(raw.get("landingLocation")),
        ground_bearing_capacity=_as_str(raw.get("groundBearingCapacity")),
        wind_limit=_as_str(raw.get("windLimit")),
        communication_method=_as_str(raw.get("communicationMethod")),
        appointed_person=_as_str(raw.get("appointedPerson")),
        crane_supervisor=_as_str(raw.get("craneSupervisor")),
        lift_operator=_as_str(raw.get("liftOperator")),
        slinger_signaller=_as_str(raw.get("slingerSignaller")),
        method_sequence=sequence or [""],
        exclusion_zone_details=_as_str(raw.get("exclusionZoneDetails")),
        emergency_rescue_plan=_as_str(raw.get("emergencyRescuePlan")),
        permit_references=_as_str(raw.get("permitReferences")),
        drawing_image=_read_image(raw.get("drawingImage"), base_dir, "liftPlan.drawingImage", violations),
    )


def _validated(
    schema: type,
    raw: Any,
    location: str,
    violations: List[Violation],
) -> Optional[SchemaModel]:
    result = validate(schema, raw)
    prefix = schema.schema_name()
    for violation in result.violations:
        violations.append(Violation(
            field=location + violation.field[len(prefix):],
            rule=violation.rule,
            message=violation.message,
        ))
    return result.value


def _read_image(value: Any, base_dir: Path, location: str, violations: List[Violation]) -> Optional[bytes]:
    if not value:
        return None
    image_path = base_dir / str(value)
    try:
        return image_path.read_bytes()
    except OSError as exc:
        violations.append(Violation(location, "unreadable_file", f"Cannot read {image_path}: {exc.strerror}"))
        return None


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _str_list(value: Any) -> List[str]:
    return [_as_str(item) for item in _list(value) if item is not None]


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0

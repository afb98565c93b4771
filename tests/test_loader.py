from __future__ import annotations

import json
from pathlib import Path

import pytest

from rams_builder.exceptions import RamsBuilderError, ValidationFailure
from rams_builder.loader import load_draft, load_payload
from rams_builder.models.documents import LiftCategory, PPEItem

DRAFT_YAML = """\
master:
  projectName: Riverside Depot
  siteAddress: 1 River Road
  nearestHospitalName: General Hospital
  hospitalDirections: Left onto the A1.
  mapImage: map.png
  keyContacts:
    - name: Jo Smith
      role: Supervisor
      phone: "07700 900001"
rams:
  title: Roof replacement
  referenceCode: RAMS-20240305-0930
  scopeOfWorks: Strip and replace roof sheets.
  preparedBy: Sam Taylor
  requiredPPE: [hardhat, boots, hardhat]
  plantEquipmentAccess: [MEWP]
  emergencyAssemblyPoint: Car park B
  methodSteps:
    - title: Set up
      details: Erect exclusion zone
    - Strip roof
  workingAtHeightEquipment:
    - equipment: MEWP
      qualificationsNeeded: IPAF 3a
  hazards:
    - activity: Roof works
      hazard: Fall from edge
      personsAtRisk: Operatives
      initL: 4
      initS: 5
      controls: |
        Edge protection
        Harness
      resL: 2
      resS: 3
liftPlan:
  title: Sheet delivery
  category: Complex
  craneOrPlant: 25t mobile crane
  loadDescription: Sheet bundles
  loadWeightKg: "850.5"
  appointedPerson: Jo Smith
appendices:
  - id: a1
    name: Permit.pdf
    mimeType: application/pdf
    publicUrl: https://files.example.com/permit.pdf
    storagePath: permits/permit.pdf
    size: 10
    uploadedAt: "2024-03-05"
"""


def _write_draft(tmp_path: Path, text: str = DRAFT_YAML) -> Path:
    (tmp_path / "map.png").write_bytes(b"map-bytes")
    path = tmp_path / "draft.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadPayload:
    def test_reads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "payload.json"
        path.write_text(json.dumps({"title": "x"}), encoding="utf-8")
        assert load_payload(path) == {"title": "x"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RamsBuilderError, match="File not found"):
            load_payload(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed", encoding="utf-8")
        with pytest.raises(RamsBuilderError, match="not valid YAML or JSON"):
            load_payload(path)


class TestLoadDraft:
    def test_master(self, tmp_path: Path) -> None:
        draft = load_draft(_write_draft(tmp_path))
        assert draft.master.project_name == "Riverside Depot"
        assert draft.master.map_image == b"map-bytes"
        assert draft.master.key_contacts[0].phone == "07700 900001"

    def test_rams(self, tmp_path: Path) -> None:
        rams = load_draft(_write_draft(tmp_path)).rams
        assert rams.reference_code == "RAMS-20240305-0930"
        assert rams.required_ppe == [PPEItem.HARDHAT, PPEItem.BOOTS]
        assert [(s.sequence, s.title) for s in rams.method_steps] == [(1, "Set up"), (2, "Strip roof")]
        assert rams.emergency_assembly_point == "Car park B"
        assert rams.emergency_first_aid_station == "Main site office"
        assert rams.working_at_height_equipment[0].qualifications_needed == "IPAF 3a"
        entry = rams.risk_entries[0]
        assert entry.hazard_title == "Roof works - Fall from edge"
        assert entry.control_measures == ["Edge protection", "Harness"]
        assert entry.residual_score == 6

    def test_lift_plan_linked(self, tmp_path: Path) -> None:
        draft = load_draft(_write_draft(tmp_path))
        assert draft.lift_plan is not None
        assert draft.lift_plan.category is LiftCategory.COMPLEX
        assert draft.lift_plan.load_weight_kg == 850.5
        assert draft.lift_plan.rams_document_id == draft.rams.id
        assert draft.rams.requires_lifting_plan is True

    def test_appendices(self, tmp_path: Path) -> None:
        draft = load_draft(_write_draft(tmp_path))
        assert [a.name for a in draft.appendices] == ["Permit.pdf"]

    def test_minimal_draft(self, tmp_path: Path) -> None:
        path = tmp_path / "draft.json"
        path.write_text(json.dumps({"master": {}, "rams": {"title": "Only title"}}), encoding="utf-8")
        draft = load_draft(path)
        assert draft.lift_plan is None
        assert draft.appendices == []
        assert draft.rams.title == "Only title"
        assert len(draft.master.key_contacts) == 1

    def test_collects_all_violations(self, tmp_path: Path) -> None:
        text = (
            DRAFT_YAML
            .replace("resS: 3", "resS: 9")
            .replace("[hardhat, boots, hardhat]", "[hardhat, helmet]")
            .replace("https://files.example.com/permit.pdf", "not a url")
            .replace("category: Complex", "category: Tricky")
            .replace("mapImage: map.png", "mapImage: missing.png")
        )
        with pytest.raises(ValidationFailure) as raised:
            load_draft(_write_draft(tmp_path, text))
        rules = {v.field: v.rule for v in raised.value.violations}
        assert rules == {
            "master.mapImage": "unreadable_file",
            "rams.requiredPPE[1]": "enum",
            "rams.hazards[0].resS": "less_than_equal",
            "liftPlan.category": "enum",
            "appendices[0].publicUrl": "invalid_url",
        }

    def test_boolean_risk_factor_rejected(self, tmp_path: Path) -> None:
        text = DRAFT_YAML.replace("initL: 4", "initL: yes")
        with pytest.raises(ValidationFailure) as raised:
            load_draft(_write_draft(tmp_path, text))
        rules = {v.field: v.rule for v in raised.value.violations}
        assert rules == {"rams.hazards[0].initL": "int_type"}

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "draft.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(RamsBuilderError, match="must contain a mapping"):
            load_draft(path)

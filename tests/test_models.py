from __future__ import annotations

import uuid
from datetime import datetime, timezone

from rams_builder.models.documents import (
    KeyContact,
    LiftPlan,
    MasterDocument,
    MethodStep,
    PPEItem,
    RAMSDocument,
)
from rams_builder.models.library import Library
from rams_builder.models.risk import SEED_HAZARDS, HazardTemplate, RiskEntry
from rams_builder.scoring import RiskReview, classify

NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


def _entry(res_l: int, res_s: int) -> RiskEntry:
    return RiskEntry(hazard_title="Hazard", residual_likelihood=res_l, residual_severity=res_s)


class TestRiskEntry:
    def test_defaults_are_mid_range(self) -> None:
        entry = RiskEntry()
        assert entry.initial_score == 9
        assert entry.residual_score == 4
        assert entry.review is RiskReview.LOW

    def test_scores_are_products(self) -> None:
        for likelihood in range(1, 6):
            for severity in range(1, 6):
                entry = RiskEntry(
                    initial_likelihood=likelihood,
                    initial_severity=severity,
                    residual_likelihood=severity,
                    residual_severity=likelihood,
                )
                assert entry.initial_score == likelihood * severity
                assert entry.residual_score == likelihood * severity
                assert entry.review is classify(entry.residual_score)

    def test_scores_recomputed_after_edit(self) -> None:
        entry = RiskEntry()
        entry.residual_likelihood = 5
        entry.residual_severity = 5
        assert entry.residual_score == 25
        assert entry.review is RiskReview.VERY_HIGH


class TestHazardTemplate:
    def test_seed_table(self) -> None:
        assert len(SEED_HAZARDS) == 5
        assert [h.category for h in SEED_HAZARDS] == [
            "Height", "Electrical", "Manual Handling", "Environment", "Public",
        ]
        assert len({h.id for h in SEED_HAZARDS}) == 5

    def test_make_entry_copies_defaults(self) -> None:
        template = SEED_HAZARDS[0]
        entry = template.make_entry()
        assert entry.hazard_title == template.title
        assert entry.risk_to == template.risk_to_default
        assert entry.control_measures == list(template.control_measures_default)
        assert entry.initial_score == 20
        assert entry.residual_score == 6

    def test_make_entry_is_independent(self) -> None:
        template = SEED_HAZARDS[1]
        first = template.make_entry()
        second = template.make_entry()
        first.control_measures.append("Extra")
        assert first.id != second.id
        assert "Extra" not in second.control_measures
        assert "Extra" not in template.control_measures_default


class TestRAMSDocument:
    def test_draft_defaults(self) -> None:
        rams = RAMSDocument.draft("RAMS-20240305-0930", NOW)
        assert rams.reference_code == "RAMS-20240305-0930"
        assert rams.created_at == NOW
        assert rams.updated_at == NOW
        assert [s.sequence for s in rams.method_steps] == [1]
        assert rams.emergency_first_aid_station == "Main site office"
        assert rams.emergency_assembly_point == "Main Gate"

    def test_overall_review_empty_register(self) -> None:
        assert RAMSDocument().overall_risk_review is RiskReview.VERY_LOW

    def test_overall_review_is_max_residual_regardless_of_order(self) -> None:
        low, high = _entry(2, 2), _entry(4, 4)
        assert RAMSDocument(risk_entries=[low, high]).overall_risk_review is RiskReview.HIGH
        assert RAMSDocument(risk_entries=[high, low]).overall_risk_review is RiskReview.HIGH

    def test_renumber_method_steps(self) -> None:
        rams = RAMSDocument(method_steps=[MethodStep(7), MethodStep(2), MethodStep(2)])
        rams.renumber_method_steps()
        assert [s.sequence for s in rams.method_steps] == [1, 2, 3]

    def test_ppe_titles(self) -> None:
        assert PPEItem.HARDHAT.title == "Hard Hat"
        assert PPEItem.MASK.title == "Dust Mask (FFP3)"


class TestMasterDocument:
    def test_draft_has_one_blank_contact(self) -> None:
        master = MasterDocument.draft(NOW)
        assert len(master.key_contacts) == 1
        assert master.key_contacts[0].is_blank()
        assert master.created_at == NOW

    def test_contact_not_blank(self) -> None:
        assert not KeyContact(phone="0161 000 0000").is_blank()


class TestLiftPlan:
    def test_draft_is_unlinked(self) -> None:
        plan = LiftPlan.draft(NOW)
        assert plan.rams_document_id is None
        assert plan.method_sequence == [""]
        assert plan.drawing_image is None


class TestLibrary:
    def test_seeded_uses_injected_table(self) -> None:
        custom = HazardTemplate("Other", "Noise", "Operatives", ("Ear defenders",), 3, 3, 1, 2)
        library = Library.seeded([custom])
        assert library.hazards == [custom]
        assert Library.seeded().hazards == list(SEED_HAZARDS)

    def test_upsert_inserts_new_at_front(self) -> None:
        library = Library()
        first, second = RAMSDocument(title="First"), RAMSDocument(title="Second")
        library.upsert_rams_document(first)
        library.upsert_rams_document(second)
        assert [doc.title for doc in library.rams_documents] == ["Second", "First"]

    def test_upsert_replaces_in_place(self) -> None:
        library = Library()
        first, second = MasterDocument(project_name="A"), MasterDocument(project_name="B")
        library.upsert_master_document(first)
        library.upsert_master_document(second)
        replacement = MasterDocument(id=first.id, project_name="A2")
        library.upsert_master_document(replacement)
        assert [m.project_name for m in library.master_documents] == ["B", "A2"]

    def test_lift_plans_for(self) -> None:
        rams_id = uuid.uuid4()
        linked = LiftPlan(rams_document_id=rams_id)
        library = Library(lift_plans=[linked, LiftPlan()])
        assert library.lift_plans_for(rams_id) == [linked]

    def test_find_rams_document(self) -> None:
        rams = RAMSDocument(title="Roofing")
        library = Library(rams_documents=[rams])
        assert library.find_rams_document(rams.id) is rams
        assert library.find_rams_document(uuid.uuid4()) is None

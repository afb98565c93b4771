from __future__ import annotations

import copy
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Set

from rams_builder.exceptions import RenderError, ValidationFailure, WorkflowGateFailure
from rams_builder.layout_builder import DEFAULT_BRAND_TITLE, build_layout
from rams_builder.library import LibraryManager
from rams_builder.models.documents import (
    LiftPlan,
    MasterDocument,
    MethodStep,
    PPEItem,
    RAMSDocument,
    SignatureRecord,
    utc_now,
)
from rams_builder.models.layout import LayoutDocument
from rams_builder.models.risk import HazardTemplate, RiskEntry
from rams_builder.public_link import LinkGenerator, PublicLinkService, PublicShareLink
from rams_builder.schemas.base import Violation
from rams_builder.schemas.documents import DocumentAppendix

MASTER_GATE_MESSAGE = (
    "Complete the project name, site address, hospital name and hospital directions "
    "before continuing."
)
RAMS_FIELDS_GATE_MESSAGE = "RAMS title, scope of works and prepared by are required."
RAMS_RISKS_GATE_MESSAGE = "Add at least one hazard/risk assessment."
LIFT_PLAN_GATE_MESSAGE = "Lift plan details are incomplete."


class WizardStep(Enum):
    MASTER_DOCUMENT = "Project & Site Setup"
    RAMS_DOCUMENT = "RAMS & Method Statement"
    LIFT_PLAN = "Lift Plan"
    REVIEW = "Review & Export"

    @property
    def title(self) -> str:
        return self.value


class Renderer(Protocol):
    """Render/export collaborator. Failures are raised as RenderError."""

    def render(self, layout: LayoutDocument) -> Path:
        ...


def reference_code(now: datetime) -> str:
    # Minute granularity: two drafts started in the same minute share a code.
    return f"RAMS-{now:%Y%m%d-%H%M}"


def _blank(value: str) -> bool:
    return not value.strip()


def _positions(indices: Iterable[int], length: int) -> Set[int]:
    # Negative indices count from the end; out-of-range ones raise IndexError.
    positions = range(length)
    return {positions[index] for index in indices}


class Wizard:
    """Guided assembly of a master document, RAMS and optional lift plan.

    Drafts are edited in place through ``master``, ``rams`` and
    ``lift_plan``. Step gates report failures through ``error_message``;
    ``commit()`` hands copies of the drafts to the library.
    """

    def __init__(
        self,
        library_manager: LibraryManager,
        public_link_service: Optional[LinkGenerator] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.library_manager = library_manager
        self.public_link_service = public_link_service or PublicLinkService()
        self.clock = clock
        self.error_message: Optional[str] = None
        self.status_message: Optional[str] = None
        self.public_link: Optional[PublicShareLink] = None
        self._start_drafts()

    def _start_drafts(self) -> None:
        now = self.clock()
        self.master = MasterDocument.draft(now)
        self.rams = RAMSDocument.draft(reference_code(now), now)
        self.lift_plan = LiftPlan.draft(now)
        self._include_lift_plan = False
        self.current_step = WizardStep.MASTER_DOCUMENT

    # Steps

    @property
    def ordered_steps(self) -> List[WizardStep]:
        steps = [WizardStep.MASTER_DOCUMENT, WizardStep.RAMS_DOCUMENT]
        if self._include_lift_plan:
            steps.append(WizardStep.LIFT_PLAN)
        steps.append(WizardStep.REVIEW)
        return steps

    @property
    def include_lift_plan(self) -> bool:
        return self._include_lift_plan

    @include_lift_plan.setter
    def include_lift_plan(self, value: bool) -> None:
        enabled = value and not self._include_lift_plan
        self._include_lift_plan = value
        if self.current_step not in self.ordered_steps:
            # Only the lift plan step can drop out; its predecessor is always present.
            self.current_step = WizardStep.RAMS_DOCUMENT
        elif enabled and self.current_step is WizardStep.REVIEW:
            # A lift plan added from Review must pass its own gate first.
            self.current_step = WizardStep.LIFT_PLAN

    @property
    def step_index(self) -> int:
        return self.ordered_steps.index(self.current_step)

    @property
    def can_go_back(self) -> bool:
        return self.step_index > 0

    @property
    def is_final_step(self) -> bool:
        return self.current_step is self.ordered_steps[-1]

    @property
    def progress(self) -> float:
        """0.0 on the first step, 1.0 on Review."""
        return self.step_index / (len(self.ordered_steps) - 1)

    def validate_current_step(self) -> None:
        step = self.current_step
        if step is WizardStep.MASTER_DOCUMENT:
            master = self.master
            if any(_blank(value) for value in (
                master.project_name,
                master.site_address,
                master.nearest_hospital_name,
                master.hospital_directions,
            )):
                raise WorkflowGateFailure(MASTER_GATE_MESSAGE, step)
        elif step is WizardStep.RAMS_DOCUMENT:
            rams = self.rams
            if any(_blank(value) for value in (rams.title, rams.scope_of_works, rams.prepared_by)):
                raise WorkflowGateFailure(RAMS_FIELDS_GATE_MESSAGE, step)
            if not rams.risk_entries:
                raise WorkflowGateFailure(RAMS_RISKS_GATE_MESSAGE, step)
        elif step is WizardStep.LIFT_PLAN:
            plan = self.lift_plan
            if any(_blank(value) for value in (
                plan.title,
                plan.crane_or_plant,
                plan.load_description,
                plan.appointed_person,
            )):
                raise WorkflowGateFailure(LIFT_PLAN_GATE_MESSAGE, step)

    def go_next(self) -> bool:
        if self.is_final_step:
            return False
        try:
            self.validate_current_step()
        except WorkflowGateFailure as exc:
            self.error_message = str(exc)
            return False
        self.error_message = None
        self.current_step = self.ordered_steps[self.step_index + 1]
        return True

    def go_back(self) -> None:
        if self.can_go_back:
            self.current_step = self.ordered_steps[self.step_index - 1]

    # Method steps

    def add_method_step(self) -> MethodStep:
        step = MethodStep(sequence=len(self.rams.method_steps) + 1)
        self.rams.method_steps.append(step)
        self.rams.renumber_method_steps()
        return step

    def remove_method_steps(self, indices: Iterable[int]) -> None:
        doomed = _positions(indices, len(self.rams.method_steps))
        self.rams.method_steps = [
            step for index, step in enumerate(self.rams.method_steps) if index not in doomed
        ]
        self.rams.renumber_method_steps()

    def move_method_step(self, source: int, destination: int) -> None:
        steps = self.rams.method_steps
        step = steps.pop(source)
        steps.insert(min(destination, len(steps)), step)
        self.rams.renumber_method_steps()

    # Risk register

    def add_risk(self, template: HazardTemplate) -> RiskEntry:
        entry = template.make_entry()
        self.rams.risk_entries.append(entry)
        return entry

    def add_risks(self, templates: Iterable[HazardTemplate]) -> List[RiskEntry]:
        return [self.add_risk(template) for template in templates]

    def add_blank_risk(self) -> RiskEntry:
        entry = RiskEntry()
        self.rams.risk_entries.append(entry)
        return entry

    def remove_risks(self, indices: Iterable[int]) -> None:
        doomed = _positions(indices, len(self.rams.risk_entries))
        self.rams.risk_entries = [
            entry for index, entry in enumerate(self.rams.risk_entries) if index not in doomed
        ]

    # RAMS details

    def toggle_ppe(self, item: PPEItem) -> None:
        if item in self.rams.required_ppe:
            self.rams.required_ppe.remove(item)
        else:
            self.rams.required_ppe.append(item)

    def populate_prepared_by_if_needed(self, name: str) -> None:
        if _blank(self.rams.prepared_by) and not _blank(name):
            self.rams.prepared_by = name.strip()

    def quick_add_approved_by(self, name: str) -> None:
        if not _blank(name):
            self.rams.approved_by = name.strip()

    def add_signature(self, name: str, role: str, image: bytes) -> SignatureRecord:
        name = name.strip()
        role = role.strip()
        violations = []
        if not name:
            violations.append(Violation("Signature.signerName", "blank", "Signer name is required."))
        if not role:
            violations.append(Violation("Signature.signerRole", "blank", "Signer role is required."))
        if violations:
            raise ValidationFailure(violations)
        record = SignatureRecord(
            signer_name=name,
            signer_role=role,
            signed_at=self.clock(),
            signature_image=image,
        )
        self.rams.signatures.append(record)
        return record

    # Library

    def commit(self) -> bool:
        """Save the drafts to the library as Master, RAMS, then lift plan."""
        now = self.clock()
        entities: List[object] = [self.master, self.rams]
        if self._include_lift_plan:
            entities.append(self.lift_plan)
        for entity in entities:
            entity.updated_at = now
            entity.created_at = min(entity.created_at, now)

        self.rams.requires_lifting_plan = self._include_lift_plan
        if self._include_lift_plan:
            self.lift_plan.rams_document_id = self.rams.id

        manager = self.library_manager
        saved = manager.save_master_document(copy.deepcopy(self.master))
        saved = manager.save_rams_document(copy.deepcopy(self.rams)) and saved
        if self._include_lift_plan:
            saved = manager.save_lift_plan(copy.deepcopy(self.lift_plan)) and saved

        if saved:
            self.error_message = None
            self.status_message = "Saved to library."
        else:
            self.error_message = manager.error_message
            self.status_message = None
        return saved

    def reset(self) -> None:
        self._start_drafts()
        self.error_message = None
        self.status_message = None
        self.public_link = None

    # Output

    def build_layout(
        self,
        issued_on: Optional[date] = None,
        *,
        brand_title: str = DEFAULT_BRAND_TITLE,
        revision_label: Optional[str] = None,
        document_appendices: Sequence[DocumentAppendix] = (),
    ) -> LayoutDocument:
        return build_layout(
            self.master,
            self.rams,
            self.lift_plan if self._include_lift_plan else None,
            issued_on=issued_on or self.clock().date(),
            brand_title=brand_title,
            revision_label=revision_label,
            document_appendices=document_appendices,
        )

    def export(self, renderer: Renderer, issued_on: Optional[date] = None) -> Optional[Path]:
        layout = self.build_layout(issued_on)
        try:
            path = renderer.render(layout)
        except RenderError as exc:
            self.error_message = str(exc)
            return None
        self.error_message = None
        self.status_message = f"Exported {path.name}"
        return path

    def generate_public_link(self) -> PublicShareLink:
        self.public_link = self.public_link_service.generate(self.rams, self.clock())
        return self.public_link

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import List, Tuple

from rams_builder.scoring import RiskReview, classify


@dataclass
class RiskEntry:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    hazard_title: str = ""
    risk_to: str = ""
    control_measures: List[str] = field(default_factory=list)
    # Mid-range defaults so an unedited row does not read as "Very Low".
    initial_likelihood: int = 3
    initial_severity: int = 3
    residual_likelihood: int = 2
    residual_severity: int = 2

    @property
    def initial_score(self) -> int:
        return self.initial_likelihood * self.initial_severity

    @property
    def residual_score(self) -> int:
        return self.residual_likelihood * self.residual_severity

    @property
    def review(self) -> RiskReview:
        return classify(self.residual_score)


@dataclass(frozen=True)
class HazardTemplate:
    category: str
    title: str
    risk_to_default: str
    control_measures_default: Tuple[str, ...]
    default_initial_likelihood: int
    default_initial_severity: int
    default_residual_likelihood: int
    default_residual_severity: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def make_entry(self) -> RiskEntry:
        return RiskEntry(
            hazard_title=self.title,
            risk_to=self.risk_to_default,
            control_measures=list(self.control_measures_default),
            initial_likelihood=self.default_initial_likelihood,
            initial_severity=self.default_initial_severity,
            residual_likelihood=self.default_residual_likelihood,
            residual_severity=self.default_residual_severity,
        )


SEED_HAZARDS: Tuple[HazardTemplate, ...] = (
    HazardTemplate(
        id=uuid.UUID("6f1c1b52-0d5e-4c39-9a3e-1f0b5a8e0001"),
        category="Height",
        title="Falling from ladders/scaffold",
        risk_to_default="Operatives and nearby workers",
        control_measures_default=(
            "Ensure level ground",
            "Maintain three points of contact",
            "Use guard rails and inspected access equipment",
        ),
        default_initial_likelihood=4,
        default_initial_severity=5,
        default_residual_likelihood=2,
        default_residual_severity=3,
    ),
    HazardTemplate(
        id=uuid.UUID("6f1c1b52-0d5e-4c39-9a3e-1f0b5a8e0002"),
        category="Electrical",
        title="Contact with live wires",
        risk_to_default="Operatives and supervisors",
        control_measures_default=(
            "Isolate power sources before work",
            "Use 110v equipment where applicable",
            "Complete visual checks before use",
        ),
        default_initial_likelihood=4,
        default_initial_severity=5,
        default_residual_likelihood=2,
        default_residual_severity=2,
    ),
    HazardTemplate(
        id=uuid.UUID("6f1c1b52-0d5e-4c39-9a3e-1f0b5a8e0003"),
        category="Manual Handling",
        title="Heavy lifting of materials",
        risk_to_default="Operatives",
        control_measures_default=(
            "Use trolleys or mechanical aids",
            "Apply two-person lifts for bulky loads",
            "Use correct lifting posture and rest breaks",
        ),
        default_initial_likelihood=3,
        default_initial_severity=4,
        default_residual_likelihood=2,
        default_residual_severity=2,
    ),
    HazardTemplate(
        id=uuid.UUID("6f1c1b52-0d5e-4c39-9a3e-1f0b5a8e0004"),
        category="Environment",
        title="Dust inhalation (Silica)",
        risk_to_default="Operatives and nearby trades",
        control_measures_default=(
            "Use on-tool extraction with M-Class vacuum",
            "Wear FFP3 masks",
            "Dampen dust and clean work area frequently",
        ),
        default_initial_likelihood=4,
        default_initial_severity=4,
        default_residual_likelihood=2,
        default_residual_severity=2,
    ),
    HazardTemplate(
        id=uuid.UUID("6f1c1b52-0d5e-4c39-9a3e-1f0b5a8e0005"),
        category="Public",
        title="Pedestrian access to work area",
        risk_to_default="Public and visitors",
        control_measures_default=(
            "Install barriers and signage",
            "Maintain exclusion zones",
            "Assign banksman for interface points",
        ),
        default_initial_likelihood=5,
        default_initial_severity=4,
        default_residual_likelihood=2,
        default_residual_severity=2,
    ),
)

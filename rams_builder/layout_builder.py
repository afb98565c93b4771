from __future__ import annotations

import string
import uuid
from datetime import date
from typing import Iterable, List, Optional, Sequence

from rams_builder.models.documents import (
    LiftPlan,
    MasterDocument,
    RAMSDocument,
    SignatureRecord,
)
from rams_builder.models.layout import (
    Appendix,
    AssignedSection,
    ContentsEntry,
    CoverDetailCard,
    EmbeddedSectionBody,
    Header,
    KeyValueField,
    LayoutDocument,
    LiftingPlanPreview,
    Metadata,
    MethodStatement,
    RiskAssessmentRow,
    RiskBadge,
    SignOff,
    SignOffRecord,
    WorkingAtHeightCompetency,
)
from rams_builder.models.risk import RiskEntry
from rams_builder.schemas.documents import DocumentAppendix
from rams_builder.scoring import classify

DEFAULT_BRAND_TITLE = "RAMS Builder"
SUBTITLE = "Risk Assessment & Method Statement"
SIGN_OFF_COPY = (
    "By signing below I confirm that I have read and understood this Risk Assessment "
    "and Method Statement, that its contents have been briefed to me, and that I will "
    "follow the control measures and safe system of work it describes."
)
DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y %H:%M"

_LAYOUT_NAMESPACE = uuid.UUID("0b7e3a54-2f0e-4f6c-8f55-7d3c2b1a9e40")


def build_layout(
    master: MasterDocument,
    rams: RAMSDocument,
    lift_plan: Optional[LiftPlan] = None,
    signatures: Optional[Sequence[SignatureRecord]] = None,
    *,
    issued_on: date,
    brand_title: str = DEFAULT_BRAND_TITLE,
    revision_label: Optional[str] = None,
    document_appendices: Iterable[DocumentAppendix] = (),
) -> LayoutDocument:
    """Project a master/RAMS/lift-plan triple onto a renderer-ready layout.

    The result shares no mutable state with its inputs and depends only on
    its arguments: the issue date is supplied by the caller and the document
    id is derived from the source ids.
    """
    if signatures is None:
        signatures = rams.signatures
    issue_date = issued_on.strftime(DATE_FORMAT)
    revision = _text(revision_label)

    section = _build_section(master, rams, lift_plan, issue_date)
    appendices = _build_appendices(master, lift_plan, document_appendices)

    return LayoutDocument(
        id=_document_id(master, rams, lift_plan),
        header=Header(
            brand_title=_text(brand_title) or DEFAULT_BRAND_TITLE,
            subtitle=SUBTITLE,
            document_reference=_text(rams.reference_code),
            date_of_issue=issue_date,
            revision_label=revision,
        ),
        metadata=Metadata(
            rams_document=_text(rams.title),
            project=_text(master.project_name),
            project_reference=_text(rams.reference_code),
            project_site_address=_text(master.site_address),
            prepared_by=_text(rams.prepared_by),
            approved_by=_text(rams.approved_by),
        ),
        scope_of_works=_paragraphs(rams.scope_of_works),
        cover_detail_cards=_build_cover_cards(master, rams),
        nearest_hospital_map_image=master.map_image,
        contents_entries=_build_contents([section], has_appendices=bool(appendices)),
        assigned_sections=[section],
        appendices=appendices,
        sign_off=SignOff(
            explanatory_copy=SIGN_OFF_COPY,
            revision_label=revision,
            date_of_issue=issue_date,
            records=[_sign_off_record(record) for record in signatures],
        ),
    )


def _document_id(
    master: MasterDocument, rams: RAMSDocument, lift_plan: Optional[LiftPlan]
) -> uuid.UUID:
    lift_id = lift_plan.id if lift_plan is not None else "none"
    return uuid.uuid5(_LAYOUT_NAMESPACE, f"{master.id}:{rams.id}:{lift_id}")


def _build_cover_cards(master: MasterDocument, rams: RAMSDocument) -> List[CoverDetailCard]:
    emergency_contact = " ".join(
        part for part in (
            master.emergency_contact_name.strip(),
            f"({master.emergency_contact_phone.strip()})" if master.emergency_contact_phone.strip() else "",
        ) if part
    )
    contacts = [
        KeyValueField(
            key=contact.name.strip() or "Unnamed contact",
            value=_text(", ".join(p for p in (contact.role.strip(), contact.phone.strip()) if p)),
        )
        for contact in master.key_contacts
        if not contact.is_blank()
    ]
    review = rams.overall_risk_review
    return [
        CoverDetailCard(title="Project", fields=[
            KeyValueField("Project", _text(master.project_name)),
            KeyValueField("Site address", _text(master.site_address)),
            KeyValueField("Client", _text(master.client_name)),
            KeyValueField("Principal contractor", _text(master.principal_contractor)),
        ]),
        CoverDetailCard(title="Emergency Arrangements", fields=[
            KeyValueField("Emergency contact", _text(emergency_contact)),
            KeyValueField("First aid station", _text(rams.emergency_first_aid_station)),
            KeyValueField("Assembly point", _text(rams.emergency_assembly_point)),
            KeyValueField("Site emergency contact", _text(rams.emergency_contact)),
        ]),
        CoverDetailCard(title="Nearest Hospital", fields=[
            KeyValueField("Hospital", _text(master.nearest_hospital_name)),
            KeyValueField("Address", _text(master.nearest_hospital_address)),
            KeyValueField("Directions", _text(master.hospital_directions)),
        ]),
        CoverDetailCard(title="Key Contacts", fields=contacts),
        CoverDetailCard(title="Document Control", fields=[
            KeyValueField("Reference", _text(rams.reference_code)),
            KeyValueField("Prepared by", _text(rams.prepared_by)),
            KeyValueField("Approved by", _text(rams.approved_by)),
            KeyValueField("Overall risk review", f"{review.code} {review.title}"),
        ]),
    ]


def _build_section(
    master: MasterDocument,
    rams: RAMSDocument,
    lift_plan: Optional[LiftPlan],
    issue_date: str,
) -> AssignedSection:
    body = EmbeddedSectionBody(
        reference=_text(rams.reference_code),
        issued_date=issue_date,
        project_details=[
            KeyValueField("Project", _text(master.project_name)),
            KeyValueField("Site address", _text(master.site_address)),
            KeyValueField("Scope of works", _text(rams.scope_of_works)),
            KeyValueField("Category", _text(rams.category)),
            KeyValueField("Prepared by", _text(rams.prepared_by)),
            KeyValueField("Approved by", _text(rams.approved_by)),
        ],
        mandatory_ppe=[item.title for item in rams.required_ppe],
        plant_equipment_access=list(rams.plant_equipment_access),
        specialist_tools=list(rams.specialist_tools),
        consumables=list(rams.consumables),
        materials=list(rams.materials),
        working_at_height_competencies=[
            WorkingAtHeightCompetency(
                equipment=item.equipment,
                make_model_type=_text(item.make_model_type),
                qualifications_needed=_text(item.qualifications_needed),
            )
            for item in rams.working_at_height_equipment
        ],
        risk_assessment_rows=[
            _risk_row(index, entry) for index, entry in enumerate(rams.risk_entries, start=1)
        ],
        risk_review_selection=rams.overall_risk_review,
        method_statement=MethodStatement(
            sequence_of_works=_text(_sequence_of_works(rams)),
            emergency_procedures=_text(_emergency_procedures(rams)),
            first_aid=_text(
                f"First aid station: {rams.emergency_first_aid_station.strip()}"
                if rams.emergency_first_aid_station.strip() else ""
            ),
        ),
    )
    return AssignedSection(
        title=_text(rams.title) or "Untitled RAMS",
        reference=_text(rams.reference_code),
        pre_start_critical=False,
        lifting_plan_preview=_lift_preview(lift_plan) if lift_plan is not None else None,
        body=body,
    )


def _risk_row(index: int, entry: RiskEntry) -> RiskAssessmentRow:
    measures = [m.strip() for m in entry.control_measures if m.strip()]
    return RiskAssessmentRow(
        reference=f"H{index}",
        hazard=_text(entry.hazard_title),
        risk_to=_text(entry.risk_to),
        initial_risk=_badge(entry.initial_score),
        control_measures="\n".join(f"- {m}" for m in measures) or None,
        residual_risk=_badge(entry.residual_score),
    )


def _badge(score: int) -> RiskBadge:
    return RiskBadge(score_text=str(score), level=classify(score))


def _sequence_of_works(rams: RAMSDocument) -> str:
    lines: List[str] = []
    for step in sorted(rams.method_steps, key=lambda s: s.sequence):
        title = step.title.strip()
        details = step.details.strip()
        if not title and not details:
            continue
        if title and details:
            lines.append(f"{step.sequence}. {title}: {details}")
        else:
            lines.append(f"{step.sequence}. {title or details}")
    return "\n".join(lines)


def _emergency_procedures(rams: RAMSDocument) -> str:
    slots = (
        ("Assembly point", rams.emergency_assembly_point),
        ("Emergency contact", rams.emergency_contact),
    )
    return "\n".join(f"{label}: {value.strip()}" for label, value in slots if value.strip())


def _lift_preview(lift_plan: LiftPlan) -> LiftingPlanPreview:
    notes = [
        f"{label}: {value.strip()}"
        for label, value in (
            ("Exclusion zone", lift_plan.exclusion_zone_details),
            ("Emergency rescue", lift_plan.emergency_rescue_plan),
            ("Appointed person", lift_plan.appointed_person),
        )
        if value.strip()
    ]
    return LiftingPlanPreview(
        title=_text(lift_plan.title),
        category=lift_plan.category.value,
        crane_or_plant=_text(lift_plan.crane_or_plant),
        load_description=_text(lift_plan.load_description),
        load_weight=f"{lift_plan.load_weight_kg:.1f} kg",
        key_notes="\n".join(notes) or None,
    )


def _build_appendices(
    master: MasterDocument,
    lift_plan: Optional[LiftPlan],
    document_appendices: Iterable[DocumentAppendix],
) -> List[Appendix]:
    pending: List[Appendix] = []
    if master.map_image is not None:
        pending.append(Appendix(title="Site / hospital map", image=master.map_image))
    if lift_plan is not None and lift_plan.drawing_image is not None:
        pending.append(Appendix(title="Lift plan drawing", image=lift_plan.drawing_image))
    for doc in document_appendices:
        pending.append(Appendix(title=doc.name, caption=doc.caption, public_url=doc.public_url))

    lettered: List[Appendix] = []
    for index, appendix in enumerate(pending):
        lettered.append(Appendix(
            title=f"Appendix {_letter(index)} - {appendix.title}",
            caption=appendix.caption,
            image=appendix.image,
            public_url=appendix.public_url,
        ))
    return lettered


def _letter(index: int) -> str:
    letters = string.ascii_uppercase
    if index < len(letters):
        return letters[index]
    return letters[index // len(letters) - 1] + letters[index % len(letters)]


def _build_contents(sections: List[AssignedSection], *, has_appendices: bool) -> List[ContentsEntry]:
    entries = [
        ContentsEntry(
            number=number,
            section=section.title,
            reference=section.reference,
            pre_start_critical=section.pre_start_critical,
            notes=section.notes,
        )
        for number, section in enumerate((s for s in sections if s.is_active), start=1)
    ]
    if has_appendices:
        entries.append(ContentsEntry(number=len(entries) + 1, section="Appendices"))
    entries.append(ContentsEntry(number=len(entries) + 1, section="Sign-off"))
    return entries


def _sign_off_record(record: SignatureRecord) -> SignOffRecord:
    return SignOffRecord(
        name=_text(record.signer_name),
        company=_text(record.signer_role),
        date=record.signed_at.strftime(DATETIME_FORMAT),
        signature_image=record.signature_image,
    )


def _paragraphs(text: str) -> List[str]:
    return [line.strip() for line in text.strip().splitlines() if line.strip()]


def _text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None

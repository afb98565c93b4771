from __future__ import annotations

import re
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Sequence

from rams_builder.exporters.base import BaseExporter
from rams_builder.formatters.markdown_formatter import MarkdownFormatter
from rams_builder.models.layout import (
    Appendix,
    AssignedSection,
    CoverDetailCard,
    KeyValueField,
    LayoutDocument,
    LiftingPlanPreview,
    RiskBadge,
)

NONE_SPECIFIED = "None specified."
NO_SIGNATURES = "No signatures captured."
_UNSAFE_STEM = re.compile(r"[^A-Za-z0-9._-]+")
_IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"GIF8", ".gif"),
    (b"%PDF", ".pdf"),
)


class LayoutExporter(BaseExporter):
    """Renders a layout document as Markdown with a YAML (and JSON) data copy.

    Embedded appendix images are written next to the Markdown file and
    linked from it.
    """

    def render(self, layout: LayoutDocument) -> Path:
        self._ensure_output_dir()
        stem = file_stem(layout)
        self._log(f"Exporting layout {stem}...")

        image_files = self._write_appendix_images(stem, layout.appendices)
        md_content = self._md_formatter.render(
            title=_document_title(layout),
            body=_build_body(layout, image_files),
            frontmatter=_build_frontmatter(layout),
        )
        md_path = self.output_dir / (stem + self._md_formatter.file_extension())
        self._write_markdown(md_path, md_content)
        self._write_data(stem, layout)

        self._log(f"Exporting layout {stem}... done ({len(layout.appendices)} appendices)")
        return md_path

    def _write_appendix_images(self, stem: str, appendices: Sequence[Appendix]) -> Dict[int, str]:
        names: Dict[int, str] = {}
        for index, appendix in enumerate(appendices):
            if appendix.image is None:
                continue
            name = f"{stem}-appendix-{index + 1}{_image_extension(appendix.image)}"
            self._write_bytes(self.output_dir / name, appendix.image)
            names[index] = name
        return names


def file_stem(layout: LayoutDocument) -> str:
    reference = layout.header.document_reference or f"RAMS-{layout.id}"
    return _UNSAFE_STEM.sub("-", reference).strip("-") or f"RAMS-{layout.id}"


def _image_extension(data: bytes) -> str:
    for magic, extension in _IMAGE_SIGNATURES:
        if data.startswith(magic):
            return extension
    return ".bin"


def _document_title(layout: LayoutDocument) -> str:
    name = layout.metadata.rams_document or "Untitled RAMS"
    if layout.header.document_reference:
        return f"{layout.header.document_reference} - {name}"
    return name


def _build_frontmatter(layout: LayoutDocument) -> Dict[str, Any]:
    review = None
    if layout.assigned_sections:
        level = layout.assigned_sections[0].body.risk_review_selection
        review = {"code": level.code, "title": level.title}
    return {
        "id": str(layout.id),
        "brand": layout.header.brand_title,
        "reference": layout.header.document_reference,
        "date_of_issue": layout.header.date_of_issue,
        "revision": layout.header.revision_label,
        "project": layout.metadata.project,
        "site_address": layout.metadata.project_site_address,
        "prepared_by": layout.metadata.prepared_by,
        "approved_by": layout.metadata.approved_by,
        "overall_risk_review": review,
        "signatures": len(layout.sign_off.records),
    }


def _build_body(layout: LayoutDocument, image_files: Dict[int, str]) -> str:
    parts: List[str] = []

    header = layout.header
    parts.append(f"**{header.brand_title}** | {header.subtitle}")
    parts.append("")
    parts.append(_kv_lines([
        KeyValueField("Reference", header.document_reference),
        KeyValueField("Date of issue", header.date_of_issue),
        KeyValueField("Revision", header.revision_label),
    ]))
    parts.append("")

    parts.append("## Scope of Works")
    parts.append("")
    if layout.scope_of_works:
        parts.append("\n\n".join(_wrap_text(p) for p in layout.scope_of_works))
    else:
        parts.append("[//]: # (No scope of works set)")
    parts.append("")

    for card in layout.cover_detail_cards:
        parts.extend(_build_card(card))

    parts.append("## Contents")
    parts.append("")
    for entry in layout.contents_entries:
        line = f"{entry.number}. {entry.section}"
        if entry.reference:
            line += f" ({entry.reference})"
        if entry.pre_start_critical:
            line += " **Pre-start critical**"
        parts.append(line)
    parts.append("")

    for number, section in enumerate((s for s in layout.assigned_sections if s.is_active), start=1):
        parts.extend(_build_section(number, section))

    if layout.appendices:
        parts.append("## Appendices")
        parts.append("")
        for index, appendix in enumerate(layout.appendices):
            parts.append(f"### {appendix.title}")
            parts.append("")
            if appendix.caption:
                parts.append(_wrap_text(appendix.caption))
                parts.append("")
            if appendix.public_url is not None:
                parts.append(f"[{appendix.title}]({appendix.public_url})")
            elif index in image_files:
                parts.append(f"![{appendix.title}]({image_files[index]})")
            parts.append("")

    parts.extend(_build_sign_off(layout))
    return "\n".join(parts)


def _build_card(card: CoverDetailCard) -> List[str]:
    parts = [f"## {card.title}", ""]
    lines = _kv_lines(card.fields)
    if lines:
        parts.append(lines)
    else:
        parts.append(f"[//]: # (No {card.title.lower()} set)")
    parts.append("")
    return parts


def _build_section(number: int, section: AssignedSection) -> List[str]:
    body = section.body
    parts = [f"## {number}. {section.title}", ""]
    if section.notes:
        parts.append(f"> {section.notes}")
        parts.append("")

    parts.append("### Project Details")
    parts.append("")
    parts.append(_kv_lines(body.project_details) or "[//]: # (No project details set)")
    parts.append("")

    if section.lifting_plan_preview is not None:
        parts.extend(_build_lift_preview(section.lifting_plan_preview))

    for heading, items in (
        ("Mandatory PPE", body.mandatory_ppe),
        ("Plant & Equipment Access", body.plant_equipment_access),
        ("Specialist Tools", body.specialist_tools),
        ("Consumables", body.consumables),
        ("Materials", body.materials),
    ):
        parts.append(f"### {heading}")
        parts.append("")
        parts.append(_bullets(items))
        parts.append("")

    parts.append("### Working at Height")
    parts.append("")
    if body.working_at_height_competencies:
        parts.append(MarkdownFormatter.table(
            ["Equipment", "Make / model / type", "Qualifications needed"],
            [
                [c.equipment, c.make_model_type, c.qualifications_needed]
                for c in body.working_at_height_competencies
            ],
        ))
    else:
        parts.append(NONE_SPECIFIED)
    parts.append("")

    parts.append("### Risk Assessment")
    parts.append("")
    if body.risk_assessment_rows:
        parts.append(MarkdownFormatter.table(
            ["Ref", "Hazard", "Risk to", "Initial", "Control measures", "Residual"],
            [
                [
                    row.reference,
                    row.hazard,
                    row.risk_to,
                    _badge(row.initial_risk),
                    row.control_measures,
                    _badge(row.residual_risk),
                ]
                for row in body.risk_assessment_rows
            ],
        ))
    else:
        parts.append("[//]: # (No risk assessments set)")
    parts.append("")
    review = body.risk_review_selection
    parts.append(f"- **Overall risk review:** {review.code} ({review.title})")
    parts.append("")

    statement = body.method_statement
    parts.append("### Method Statement")
    parts.append("")
    for heading, text in (
        ("Sequence of Works", statement.sequence_of_works),
        ("Emergency Procedures", statement.emergency_procedures),
        ("First Aid", statement.first_aid),
    ):
        parts.append(f"#### {heading}")
        parts.append("")
        parts.append(text if text else f"[//]: # (No {heading.lower()} set)")
        parts.append("")
    return parts


def _build_lift_preview(preview: LiftingPlanPreview) -> List[str]:
    parts = ["### Lifting Plan", ""]
    parts.append(_kv_lines([
        KeyValueField("Title", preview.title),
        KeyValueField("Category", preview.category),
        KeyValueField("Crane / plant", preview.crane_or_plant),
        KeyValueField("Load", preview.load_description),
        KeyValueField("Load weight", preview.load_weight),
    ]))
    if preview.key_notes:
        parts.append("")
        parts.append(_bullets(preview.key_notes.splitlines()))
    parts.append("")
    return parts


def _build_sign_off(layout: LayoutDocument) -> List[str]:
    sign_off = layout.sign_off
    parts = ["## Sign-off", "", _wrap_text(sign_off.explanatory_copy), ""]
    details = _kv_lines([
        KeyValueField("Revision", sign_off.revision_label),
        KeyValueField("Date of issue", sign_off.date_of_issue),
    ])
    if details:
        parts.append(details)
        parts.append("")
    if sign_off.records:
        parts.append(MarkdownFormatter.table(
            ["Name", "Company / role", "Email", "Date", "Signature"],
            [
                [r.name, r.company, r.email, r.date, "Signed" if r.signature_image else ""]
                for r in sign_off.records
            ],
        ))
    else:
        parts.append(NO_SIGNATURES)
    return parts


def _kv_lines(items: Sequence[KeyValueField]) -> str:
    return "\n".join(f"- **{item.key}:** {item.value}" for item in items if item.value)


def _bullets(items: Sequence[str]) -> str:
    cleaned = [item.strip() for item in items if item.strip()]
    if not cleaned:
        return NONE_SPECIFIED
    return "\n".join(f"- {item}" for item in cleaned)


def _badge(badge: RiskBadge) -> str:
    return f"{badge.score_text} ({badge.level.code})"


def _wrap_text(text: str) -> str:
    return textwrap.fill(text.strip(), width=120)

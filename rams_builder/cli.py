from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Type

from rams_builder.config import read_config, resolve_output_dir, write_config
from rams_builder.exceptions import RamsBuilderError
from rams_builder.exporters.layout import LayoutExporter
from rams_builder.layout_builder import build_layout
from rams_builder.loader import load_draft, load_payload
from rams_builder.models.config import AppConfig
from rams_builder.models.documents import utc_now
from rams_builder.schemas import (
    HazardPayload,
    MasterCoverConfig,
    MasterDocumentCreatePayload,
    MasterDocumentUpdatePayload,
    MasterTemplateCreatePayload,
    MasterTemplateUpdatePayload,
    RAMSPayload,
    SchemaModel,
    validate,
)
from rams_builder.wizard import reference_code

PAYLOAD_KINDS: Dict[str, Type[SchemaModel]] = {
    "master-create": MasterDocumentCreatePayload,
    "master-update": MasterDocumentUpdatePayload,
    "cover": MasterCoverConfig,
    "template-create": MasterTemplateCreatePayload,
    "template-update": MasterTemplateUpdatePayload,
    "rams": RAMSPayload,
    "hazard": HazardPayload,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rams-builder",
        description="Validate RAMS payloads and render RAMS drafts into layout documents.",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--init", action="store_true",
        help="Initialize configuration in the current directory.",
    )
    group.add_argument(
        "--validate", nargs=2, metavar=("KIND", "FILE"),
        help="Validate a YAML/JSON payload. KIND: " + ", ".join(PAYLOAD_KINDS) + ".",
    )
    group.add_argument(
        "--render", metavar="FILE",
        help="Render a RAMS draft file into the configured output directory.",
    )
    parser.add_argument(
        "--issued-on", metavar="YYYY-MM-DD",
        help="Date of issue printed on the rendered document (default: today).",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Overwrite existing files without confirmation.",
    )
    parser.add_argument(
        "--keep-raw-json", action="store_true",
        help="Also write the layout document as JSON alongside Markdown.",
    )
    return parser


def _run_init() -> None:
    brand_title = input("Enter the brand title printed on documents [RAMS Builder]: ")
    output_dir = input("Enter the output directory [rams]: ")
    revision_label = input("Enter the revision label (optional): ")

    config = AppConfig(
        brand_title=brand_title.strip() or "RAMS Builder",
        output_dir=output_dir.strip() or "rams",
        revision_label=revision_label,
    )

    cwd = Path.cwd()
    write_config(cwd, config)
    resolve_output_dir(cwd, config).mkdir(parents=True, exist_ok=True)

    print("Configuration saved to .rams-builder.ini")
    print(f"Created directory: {config.output_dir}/")


def _run_validate(kind: str, file_name: str) -> None:
    schema = PAYLOAD_KINDS.get(kind)
    if schema is None:
        raise RamsBuilderError(
            f"Unknown payload kind '{kind}'. Choose one of: " + ", ".join(PAYLOAD_KINDS) + "."
        )
    result = validate(schema, load_payload(Path(file_name)))
    if result.ok:
        print("OK")
        return
    for violation in result.violations:
        print(f"{violation.field}: {violation.message} [{violation.rule}]")
    result.raise_for_violations()


def _parse_issue_date(value: Optional[str]) -> date:
    if not value:
        return utc_now().date()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise RamsBuilderError(f"Invalid --issued-on date '{value}'. Use YYYY-MM-DD.") from None


def _run_render(args: argparse.Namespace) -> None:
    cwd = Path.cwd()
    config = read_config(cwd)
    issued_on = _parse_issue_date(args.issued_on)

    draft = load_draft(Path(args.render))
    if not draft.rams.reference_code.strip():
        draft.rams.reference_code = reference_code(utc_now())

    layout = build_layout(
        draft.master,
        draft.rams,
        draft.lift_plan,
        issued_on=issued_on,
        brand_title=config.brand_title,
        revision_label=config.revision_label or None,
        document_appendices=draft.appendices,
    )
    exporter = LayoutExporter(
        resolve_output_dir(cwd, config),
        force=args.force,
        keep_raw_json=args.keep_raw_json,
    )
    exporter.render(layout)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.init:
        _run_init()
    elif args.validate:
        _run_validate(*args.validate)
    elif args.render:
        _run_render(args)
    else:
        parser.print_help()

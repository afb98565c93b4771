from rams_builder.schemas.base import (
    SchemaModel,
    ValidationResult,
    Violation,
    merge_patch,
    validate,
)
from rams_builder.schemas.documents import (
    DocumentAppendix,
    MasterCoverConfig,
    MasterDocumentCreatePayload,
    MasterDocumentStatus,
    MasterDocumentUpdatePayload,
    MasterTemplateCreatePayload,
    MasterTemplateSection,
    MasterTemplateStatus,
    MasterTemplateUpdatePayload,
)
from rams_builder.schemas.rams import HazardPayload, RAMSPayload

__all__ = [
    "DocumentAppendix",
    "HazardPayload",
    "MasterCoverConfig",
    "MasterDocumentCreatePayload",
    "MasterDocumentStatus",
    "MasterDocumentUpdatePayload",
    "MasterTemplateCreatePayload",
    "MasterTemplateSection",
    "MasterTemplateStatus",
    "MasterTemplateUpdatePayload",
    "RAMSPayload",
    "SchemaModel",
    "ValidationResult",
    "Violation",
    "merge_patch",
    "validate",
]

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from rams_builder.models.documents import RAMSDocument, utc_now

BASE_URL = "https://share.ramsbuilder.app"
LINK_LIFETIME = timedelta(days=14)
_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


@dataclass(frozen=True)
class PublicShareLink:
    url: str
    expires_at: datetime
    rams_document_id: uuid.UUID


class LinkGenerator(Protocol):
    def generate(self, rams: RAMSDocument, now: datetime) -> PublicShareLink:
        ...


def slugify(title: str) -> str:
    slug = _UNSAFE.sub("-", title.strip().replace(" ", "-")).lower()
    return slug or "untitled-rams"


class PublicLinkService:
    """Creates read-only share links for a RAMS document."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        token_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_factory = token_factory or (lambda: uuid.uuid4().hex)

    def generate(self, rams: RAMSDocument, now: Optional[datetime] = None) -> PublicShareLink:
        issued = now or utc_now()
        return PublicShareLink(
            url=f"{self.base_url}/{slugify(rams.title)}/{self._token_factory()}",
            expires_at=issued + LINK_LIFETIME,
            rams_document_id=rams.id,
        )

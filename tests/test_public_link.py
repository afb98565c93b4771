from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pytest

from rams_builder.models.documents import RAMSDocument
from rams_builder.public_link import LINK_LIFETIME, PublicLinkService, slugify

NOW = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


class TestSlugify:
    @pytest.mark.parametrize(("title", "expected"), [
        ("Roof Works", "roof-works"),
        ("  My Unsafe/Title #1  ", "my-unsafe-title--1"),
        ("  Padded Title  ", "padded-title"),
        ("Scaffold (Phase 2) & Access", "scaffold--phase-2----access"),
        ("snake_case-ok", "snake_case-ok"),
        ("", "untitled-rams"),
        ("   ", "untitled-rams"),
    ])
    def test_slug(self, title: str, expected: str) -> None:
        assert slugify(title) == expected


class TestPublicLinkService:
    def test_link_format(self) -> None:
        rams = RAMSDocument(title="Roof Works")
        link = PublicLinkService().generate(rams, NOW)
        assert re.fullmatch(r"https://share\.ramsbuilder\.app/roof-works/[0-9a-f]{32}", link.url)
        assert link.rams_document_id == rams.id

    def test_expires_after_fourteen_days(self) -> None:
        link = PublicLinkService().generate(RAMSDocument(), NOW)
        assert LINK_LIFETIME == timedelta(days=14)
        assert link.expires_at == NOW + timedelta(days=14)

    def test_tokens_are_unique(self) -> None:
        service = PublicLinkService()
        rams = RAMSDocument(title="Same")
        assert service.generate(rams, NOW).url != service.generate(rams, NOW).url

    def test_custom_base_and_token(self) -> None:
        service = PublicLinkService("https://links.example.com/", token_factory=lambda: "abc")
        link = service.generate(RAMSDocument(title="Lift"), NOW)
        assert link.url == "https://links.example.com/lift/abc"

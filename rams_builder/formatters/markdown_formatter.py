from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from rams_builder.formatters.base import BaseFormatter, to_plain


class MarkdownFormatter(BaseFormatter):
    _MAX_LINE_LENGTH = 120

    def write(self, data: Any, output_path: Path) -> None:
        """Write rendered Markdown text as is."""
        content = str(data)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)

    def file_extension(self) -> str:
        return ".md"

    @classmethod
    def render(
        cls,
        title: str,
        body: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        parts = []
        if frontmatter:
            fm_text = yaml.safe_dump(
                to_plain(frontmatter),
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            ).rstrip("\n")
            parts.append(f"---\n{fm_text}\n---\n")
        if title:
            parts.append(f"# {title}\n")
        if body:
            wrapped_body = cls._wrap_body(body.rstrip("\n"))
            parts.append(wrapped_body + "\n")
        return "\n".join(parts)

    @staticmethod
    def table(headers: Sequence[str], rows: Sequence[Sequence[Optional[str]]]) -> str:
        """Render a pipe table; multi-line cells are joined with <br>."""

        def cell(value: Optional[str]) -> str:
            text = (value or "").strip()
            return text.replace("|", "\\|").replace("\n", "<br>")

        lines = [
            "| " + " | ".join(headers) + " |",
            "|" + "|".join("---" for _ in headers) + "|",
        ]
        for row in rows:
            lines.append("| " + " | ".join(cell(value) for value in row) + " |")
        return "\n".join(lines)

    @classmethod
    def _wrap_body(cls, body: str) -> str:
        wrapped_lines: List[str] = []
        for line in body.splitlines():
            if cls._should_preserve_line(line):
                wrapped_lines.append(line)
                continue
            wrapped_lines.append(
                textwrap.fill(
                    line,
                    width=cls._MAX_LINE_LENGTH,
                    break_long_words=False,
                    break_on_hyphens=False,
                )
            )
        return "\n".join(wrapped_lines)

    @classmethod
    def _should_preserve_line(cls, line: str) -> bool:
        if not line:
            return True
        if len(line) <= cls._MAX_LINE_LENGTH:
            return True
        # Tables, lists, quotes, code and inline markup must not be reflowed.
        if line.startswith(("#", "- ", "* ", "> ", "|", "```", "    ", "\t", "![")):
            return True
        if "`" in line or "](" in line or "**" in line:
            return True
        return False

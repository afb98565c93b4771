from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from rams_builder.exceptions import RenderError
from rams_builder.formatters.json_formatter import JsonFormatter
from rams_builder.formatters.markdown_formatter import MarkdownFormatter
from rams_builder.formatters.yaml_formatter import YamlFormatter
from rams_builder.models.layout import LayoutDocument


class BaseExporter(ABC):
    def __init__(
        self,
        output_dir: Path,
        *,
        force: bool = False,
        keep_raw_json: bool = False,
    ) -> None:
        self.output_dir = output_dir
        self.force = force
        self.keep_raw_json = keep_raw_json
        self._overwrite_all = False
        self._md_formatter = MarkdownFormatter()
        self._json_formatter = JsonFormatter()
        self._yaml_formatter = YamlFormatter()

    @abstractmethod
    def render(self, layout: LayoutDocument) -> Path:
        """Write the layout document to output_dir and return the main artifact."""
        ...

    def _ensure_output_dir(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderError(f"Cannot create output directory {self.output_dir}: {exc}") from exc

    def _log(self, message: str) -> None:
        print(message)

    def _should_write(self, path: Path) -> bool:
        """Check whether *path* should be written, prompting if needed."""
        if not path.exists():
            return True
        if self.force or self._overwrite_all:
            return True
        while True:
            answer = input(
                f"Overwrite existing {path.name}? [Yes/No/All] "
            ).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in ("a", "all"):
                self._overwrite_all = True
                return True

    def _write_markdown(self, path: Path, content: str) -> None:
        if not self._should_write(path):
            return
        try:
            self._md_formatter.write(content, path)
        except OSError as exc:
            raise RenderError(f"Cannot write {path.name}: {exc}") from exc

    def _write_bytes(self, path: Path, content: bytes) -> None:
        if not self._should_write(path):
            return
        try:
            path.write_bytes(content)
        except OSError as exc:
            raise RenderError(f"Cannot write {path.name}: {exc}") from exc

    def _write_data(self, name: str, data: Any) -> None:
        """Write data as YAML, plus JSON when raw output is kept."""
        try:
            if self.keep_raw_json:
                json_path = self.output_dir / (name + self._json_formatter.file_extension())
                if self._should_write(json_path):
                    self._json_formatter.write(data, json_path)

            yaml_path = self.output_dir / (name + self._yaml_formatter.file_extension())
            if self._should_write(yaml_path):
                self._yaml_formatter.write(data, yaml_path)
        except OSError as exc:
            raise RenderError(f"Cannot write {name}: {exc}") from exc

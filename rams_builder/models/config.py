from __future__ import annotations

from dataclasses import dataclass

from rams_builder.exceptions import ConfigError


@dataclass
class AppConfig:
    brand_title: str
    output_dir: str
    revision_label: str = ""

    def __post_init__(self) -> None:
        self.brand_title = self.brand_title.strip()
        if not self.brand_title:
            raise ConfigError("Brand title cannot be empty.")
        self.output_dir = self.output_dir.strip()
        if not self.output_dir:
            raise ConfigError("Output directory cannot be empty.")
        self.revision_label = self.revision_label.strip()

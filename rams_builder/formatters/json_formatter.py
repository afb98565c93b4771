from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rams_builder.formatters.base import BaseFormatter, to_plain


class JsonFormatter(BaseFormatter):
    def write(self, data: Any, output_path: Path) -> None:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(to_plain(data), f, indent=2, ensure_ascii=False)
            f.write("\n")

    def file_extension(self) -> str:
        return ".json"

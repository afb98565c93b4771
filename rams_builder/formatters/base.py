from __future__ import annotations

import base64
import uuid
from abc import ABC, abstractmethod
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


def to_plain(data: Any) -> Any:
    """Reduce layout and domain values to JSON/YAML-safe primitives.

    Binary payloads (map images, drawings, signatures) become base64 text.
    """
    if is_dataclass(data) and not isinstance(data, type):
        return {f.name: to_plain(getattr(data, f.name)) for f in fields(data)}
    if isinstance(data, dict):
        return {str(key): to_plain(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_plain(item) for item in data]
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, uuid.UUID):
        return str(data)
    if isinstance(data, (datetime, date)):
        return data.isoformat()
    if isinstance(data, (bytes, bytearray)):
        return base64.b64encode(bytes(data)).decode("ascii")
    return data


class BaseFormatter(ABC):
    @abstractmethod
    def write(self, data: Any, output_path: Path) -> None:
        ...

    @abstractmethod
    def file_extension(self) -> str:
        ...

from __future__ import annotations

import configparser
from pathlib import Path

from rams_builder.exceptions import ConfigError
from rams_builder.models.config import AppConfig

CONFIG_FILENAME = ".rams-builder.ini"
_SECTION = "rams_builder"
_REQUIRED_KEYS = ("brand_title", "output_dir")


def config_exists(directory: Path) -> bool:
    return (directory / CONFIG_FILENAME).is_file()


def write_config(directory: Path, config: AppConfig) -> None:
    cp = configparser.ConfigParser()
    cp[_SECTION] = {
        "brand_title": config.brand_title,
        "output_dir": config.output_dir,
        "revision_label": config.revision_label,
    }
    path = directory / CONFIG_FILENAME
    with open(path, "w", encoding="utf-8") as f:
        cp.write(f)


def read_config(directory: Path) -> AppConfig:
    path = directory / CONFIG_FILENAME
    if not path.is_file():
        raise ConfigError(
            "Configuration not found. Run rams-builder --init first."
        )

    cp = configparser.ConfigParser()
    try:
        cp.read(str(path), encoding="utf-8")
    except configparser.Error as exc:
        raise ConfigError(
            f"Invalid configuration format in {CONFIG_FILENAME}. "
            "Run rams-builder --init to reconfigure."
        ) from exc

    if not cp.has_section(_SECTION):
        raise ConfigError(
            f"Invalid configuration: missing [{_SECTION}] section in {CONFIG_FILENAME}."
        )

    for key in _REQUIRED_KEYS:
        if not cp.has_option(_SECTION, key) or not cp.get(_SECTION, key).strip():
            raise ConfigError(
                f"Invalid configuration: missing or empty '{key}' in {CONFIG_FILENAME}. "
                "Run rams-builder --init to reconfigure."
            )

    return AppConfig(
        brand_title=cp.get(_SECTION, "brand_title"),
        output_dir=cp.get(_SECTION, "output_dir"),
        revision_label=cp.get(_SECTION, "revision_label", fallback=""),
    )


def resolve_output_dir(directory: Path, config: AppConfig) -> Path:
    output = Path(config.output_dir)
    return output if output.is_absolute() else directory / output

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from rams_builder.cli import PAYLOAD_KINDS, main
from rams_builder.config import CONFIG_FILENAME, read_config, write_config
from rams_builder.exceptions import ConfigError, RamsBuilderError, ValidationFailure
from rams_builder.models.config import AppConfig

HAZARD = {
    "activity": "Roof works",
    "hazard": "Fall from edge",
    "personsAtRisk": "Operatives",
    "initL": 4,
    "initS": 5,
    "controls": "Edge protection",
    "resL": 2,
    "resS": 3,
}

DRAFT = {
    "master": {
        "projectName": "Riverside Depot",
        "siteAddress": "1 River Road",
        "nearestHospitalName": "General Hospital",
        "hospitalDirections": "Left onto the A1.",
    },
    "rams": {
        "title": "Roof replacement",
        "referenceCode": "RAMS-20240305-0930",
        "scopeOfWorks": "Strip and replace roof sheets.",
        "preparedBy": "Sam Taylor",
        "hazards": [HAZARD],
    },
}


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestNoArgs:
    def test_no_args_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("sys.argv", ["rams-builder"]):
            main()
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()


class TestInit:
    def test_init_creates_config_and_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.chdir(tmp_path)
        answers = iter(["Acme Scaffolding", "documents", "Rev A"])
        with patch("sys.argv", ["rams-builder", "--init"]), \
             patch("builtins.input", side_effect=lambda _prompt: next(answers)):
            main()

        assert (tmp_path / CONFIG_FILENAME).is_file()
        assert (tmp_path / "documents").is_dir()
        config = read_config(tmp_path)
        assert config.brand_title == "Acme Scaffolding"
        assert config.revision_label == "Rev A"
        assert "Configuration saved" in capsys.readouterr().out

    def test_init_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        with patch("sys.argv", ["rams-builder", "--init"]), \
             patch("builtins.input", return_value=""):
            main()

        config = read_config(tmp_path)
        assert config.brand_title == "RAMS Builder"
        assert config.output_dir == "rams"
        assert (tmp_path / "rams").is_dir()


class TestValidate:
    def test_valid_payload_prints_ok(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write_json(tmp_path / "hazard.json", HAZARD)
        with patch("sys.argv", ["rams-builder", "--validate", "hazard", str(path)]):
            main()
        assert capsys.readouterr().out.strip() == "OK"

    def test_invalid_payload_lists_violations(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = _write_json(tmp_path / "hazard.json", dict(HAZARD, initL=6, controls=" "))
        with patch("sys.argv", ["rams-builder", "--validate", "hazard", str(path)]):
            with pytest.raises(ValidationFailure) as raised:
                main()
        out = capsys.readouterr().out
        assert "Hazard.initL:" in out
        assert "[blank]" in out
        assert len(raised.value.violations) == 2

    def test_unknown_kind(self, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "x.json", {})
        with patch("sys.argv", ["rams-builder", "--validate", "widget", str(path)]):
            with pytest.raises(RamsBuilderError, match="Unknown payload kind 'widget'"):
                main()

    def test_every_kind_is_registered(self) -> None:
        assert sorted(PAYLOAD_KINDS) == sorted([
            "master-create", "master-update", "cover",
            "template-create", "template-update", "rams", "hazard",
        ])


class TestRender:
    def test_requires_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = _write_json(tmp_path / "draft.json", DRAFT)
        with patch("sys.argv", ["rams-builder", "--render", str(path)]):
            with pytest.raises(ConfigError):
                main()

    def test_render_writes_documents(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        write_config(tmp_path, AppConfig(brand_title="Acme", output_dir="out", revision_label="Rev C"))
        path = _write_json(tmp_path / "draft.json", DRAFT)

        with patch("sys.argv", [
            "rams-builder", "--render", str(path), "--issued-on", "2024-03-05", "--keep-raw-json",
        ]):
            main()

        md = (tmp_path / "out" / "RAMS-20240305-0930.md").read_text(encoding="utf-8")
        assert "**Acme**" in md
        assert "- **Date of issue:** 05/03/2024" in md
        assert "- **Revision:** Rev C" in md
        assert (tmp_path / "out" / "RAMS-20240305-0930.yaml").is_file()
        assert (tmp_path / "out" / "RAMS-20240305-0930.json").is_file()

    def test_render_generates_missing_reference(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        write_config(tmp_path, AppConfig(brand_title="Acme", output_dir="out"))
        draft = json.loads(json.dumps(DRAFT))
        del draft["rams"]["referenceCode"]
        path = _write_json(tmp_path / "draft.json", draft)

        with patch("sys.argv", ["rams-builder", "--render", str(path), "--force"]):
            main()

        written = [p.name for p in (tmp_path / "out").glob("RAMS-*.md")]
        assert len(written) == 1

    def test_invalid_issue_date(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        write_config(tmp_path, AppConfig(brand_title="Acme", output_dir="out"))
        path = _write_json(tmp_path / "draft.json", DRAFT)
        with patch("sys.argv", ["rams-builder", "--render", str(path), "--issued-on", "05/03/2024"]):
            with pytest.raises(RamsBuilderError, match="Invalid --issued-on date"):
                main()

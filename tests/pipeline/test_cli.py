"""Tests for the apidoc-data command line."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from apidoc_data import cli

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("APIDOC_OUTPUT_DIR", "APIDOC_STRICT_DUPLICATES", "APIDOC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APIDOC_METRICS_ENABLED", "false")


def _write_input(path: Path, records: list[dict[str, object]]) -> Path:
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def _last_json_line(text: str) -> dict[str, object]:
    lines = [line for line in text.splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestBuildCommand:
    """Tests for `apidoc-data build`."""

    def test_writes_all_artifacts(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """A successful build writes documents and pages and prints a summary."""
        source = _write_input(
            tmp_path / "api.json",
            [
                {"name": "Widget", "kind": "class"},
                {"name": "X#ready", "kind": "event"},
                {"name": "Bar", "kind": "unknownKind"},
            ],
        )
        out_dir = tmp_path / "site"

        exit_code = cli.main(["build", str(source), "--out", str(out_dir)])

        assert exit_code == 0
        assert (out_dir / "navigation.json").is_file()
        assert (out_dir / "search-keywords.json").is_file()
        assert sorted(path.name for path in (out_dir / "pages").iterdir()) == ["Widget.json", "X.json"]
        summary = json.loads(capsys.readouterr().out)
        assert summary["pages"] == 2
        assert summary["dropped"] == 1

    def test_output_dir_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """APIDOC_OUTPUT_DIR is used when --out is omitted."""
        monkeypatch.setenv("APIDOC_OUTPUT_DIR", str(tmp_path / "env-out"))
        source = _write_input(tmp_path / "api.json", [{"name": "Widget", "kind": "class"}])

        assert cli.main(["build", str(source)]) == 0
        assert (tmp_path / "env-out" / "pages" / "Widget.json").is_file()

    def test_strict_duplicates(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Duplicate containers fail with a Problem Details payload."""
        source = _write_input(
            tmp_path / "api.json",
            [{"name": "ui/grid", "kind": "class"}, {"name": "ui_grid", "kind": "class"}],
        )

        exit_code = cli.main(
            ["build", str(source), "--out", str(tmp_path / "site"), "--strict-duplicates"]
        )

        assert exit_code == 1
        problem = _last_json_line(capsys.readouterr().err)
        assert problem["code"] == "duplicate-container"
        assert problem["instance"] == "urn:apidoc:cli:build"
        assert problem["type"] == "https://apidoc.dev/problems/duplicate-container"

    def test_invalid_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Unreadable input exits with status 1."""
        source = tmp_path / "api.json"
        source.write_text('{"name": "Widget"}', encoding="utf-8")

        assert cli.main(["build", str(source), "--out", str(tmp_path / "site")]) == 1
        problem = _last_json_line(capsys.readouterr().err)
        assert problem["code"] == "invalid-input"
        assert problem["status"] == 400

    def test_invalid_settings(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Invalid environment settings are reported as configuration errors."""
        monkeypatch.setenv("APIDOC_LOG_LEVEL", "chatty")
        source = _write_input(tmp_path / "api.json", [])

        assert cli.main(["build", str(source)]) == 1
        problem = _last_json_line(capsys.readouterr().err)
        assert problem["code"] == "configuration-error"

    def test_no_validate(self, tmp_path: Path) -> None:
        """--no-validate still writes every artifact."""
        source = _write_input(tmp_path / "api.json", [{"name": "Foo", "kind": "typedef"}])
        out_dir = tmp_path / "site"

        assert cli.main(["build", str(source), "--out", str(out_dir), "--no-validate"]) == 0
        page = json.loads((out_dir / "pages" / "global.json").read_text(encoding="utf-8"))
        assert page["title"] == "Global"


class TestUsage:
    """Argument parsing errors."""

    def test_missing_command(self) -> None:
        """A missing subcommand is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 2

    def test_unknown_log_level(self, tmp_path: Path) -> None:
        """Unknown log levels are rejected by the parser."""
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["build", str(tmp_path / "api.json"), "--log-level", "chatty"])
        assert excinfo.value.code == 2

"""End-to-end tests for the domain entry points and the CLI runner."""

from __future__ import annotations

import json
import sys
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest

from psc_pipeline.config import load_pipeline_config
from psc_pipeline.domains import deficiencies
from psc_pipeline.domains.deficiencies.ingest import IngestionError
from psc_pipeline.run import cli, main
from psc_pipeline.utils.types import PipelineStatus

ROWS = [
    ["Fire doors", "45", "Rotterdam", "NL", "2024-01-03", "Bulk Carrier"],
    ["Fire doors", "30", "Rotterdam", "NL", "2024-02-11", "Bulk Carrier"],
    ["Charts", "10", "Singapore", "SG", "2024-03-09", "Container"],
    ["", "", "", "", "", ""],
]


@pytest.fixture()
def source(write_csv):
    return write_csv(ROWS)


def _config(path, tmp_path):
    return load_pipeline_config("development", overrides={"source_path": str(path), "report_dir": str(tmp_path)})


class TestDomainEntryPoints:
    def test_run_builds_analyzer(self, source, tmp_path) -> None:
        analyzer = deficiencies.run(_config(source, tmp_path))
        assert len(analyzer) == 3
        assert analyzer.common_deficiencies() == [("Fire doors", 2), ("Charts", 1)]

    def test_run_raises_on_missing_source(self, tmp_path) -> None:
        with pytest.raises(IngestionError):
            deficiencies.run(_config(tmp_path / "missing.csv", tmp_path))

    def test_run_tolerates_schema_issues(self, write_csv, tmp_path, caplog) -> None:
        path = write_csv([["Charts", "X1", "Oslo", "NO", "", ""]])
        analyzer = deficiencies.run(_config(path, tmp_path))
        assert analyzer.deficiencies_by_criticality() == {"Unknown": 1}
        assert "data quality issues" in caplog.text

    def test_validate_ok(self, source, tmp_path) -> None:
        result = deficiencies.validate(_config(source, tmp_path))
        assert result["status"] == "ok"
        assert result["row_count"] == 3

    def test_validate_reports_missing_columns(self, write_csv, tmp_path) -> None:
        path = write_csv([["Charts", "10"]], header=["Nature of deficiency", "Reference Code1"])
        result = deficiencies.validate(_config(path, tmp_path))
        assert result["status"] == "error"
        assert "Missing column 'Port Name'" in result["errors"]

    def test_validate_reports_ingestion_failure(self, tmp_path) -> None:
        result = deficiencies.validate(_config(tmp_path / "missing.csv", tmp_path))
        assert result["status"] == "error"
        assert "missing.csv" in result["message"]


class TestCli:
    def test_ask(self, source, capsys) -> None:
        status = main(["--env", "development", "--source", str(source), "--ask", "show detention cases"])
        assert status is PipelineStatus.SUCCESS
        out = capsys.readouterr().out
        assert "Recent Detention Cases:" in out
        assert "Port: Rotterdam, NL" in out

    def test_report_json_saved(self, source, tmp_path, capsys) -> None:
        run_file = tmp_path / "psc.yaml"
        run_file.write_text(f"psc:\n  report_dir: {tmp_path / 'reports'}\n", encoding="utf-8")
        status = main([
            "--config", str(run_file),
            "--source", str(source),
            "--report", "--format", "json", "--save",
        ])
        assert status is PipelineStatus.SUCCESS
        (saved,) = (tmp_path / "reports").glob("*.json")
        assert json.loads(saved.read_text(encoding="utf-8"))["total_records"] == 3

    def test_validate(self, source) -> None:
        assert main(["--source", str(source), "--validate"]) is PipelineStatus.SUCCESS

    def test_ingestion_failure(self, tmp_path, capsys) -> None:
        status = main(["--source", str(tmp_path / "missing.csv"), "--ask", "port"])
        assert status is PipelineStatus.FAILED
        assert "Ingestion failed" in capsys.readouterr().out

    def test_nothing_to_do(self, source) -> None:
        assert main(["--source", str(source)]) is PipelineStatus.SKIPPED

    def test_unknown_env(self) -> None:
        assert main(["--env", "qa", "--validate"]) is PipelineStatus.FAILED

    def test_run_file_with_empty_psc_section(self, source, tmp_path, capsys) -> None:
        run_file = tmp_path / "psc.yaml"
        run_file.write_text("psc:\n", encoding="utf-8")
        status = main(["--config", str(run_file), "--source", str(source), "--ask", "port"])
        assert status is PipelineStatus.SUCCESS
        assert "Rotterdam" in capsys.readouterr().out

    def test_console_script_exits_with_main_status(self) -> None:
        with open(Path(__file__).parents[1] / "pyproject.toml", "rb") as f:
            scripts = tomllib.load(f)["project"]["scripts"]
        assert scripts["psc-pipeline"] == "psc_pipeline.run:cli"

        with patch.object(sys, "argv", ["psc-pipeline", "--env", "qa", "--validate"]):
            with pytest.raises(SystemExit) as info:
                cli()
        assert info.value.code == 1

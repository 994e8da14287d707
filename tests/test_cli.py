"""Tests for CLI commands."""

from __future__ import annotations

import json
import logging
from datetime import timedelta

import pytest
import yaml
from typer.testing import CliRunner

from diettrend.app_logging import configure_logging
from diettrend.cli import app
from diettrend.config import settings as settings_module
from diettrend.config.settings import Settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Isolate commands from any config file in the home directory."""
    monkeypatch.setattr(settings_module, "_settings", Settings())
    yield
    # Handlers created under CliRunner point at its captured streams
    logger = logging.getLogger("diettrend")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestMainCommands:
    """Tests for main CLI commands."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "trend" in result.output.lower()

    def test_trend_requires_path(self) -> None:
        result = runner.invoke(app, ["trend"])
        assert result.exit_code != 0

    def test_trend_missing_file(self, tmp_path) -> None:
        result = runner.invoke(app, ["trend", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1


class TestTrendCommand:
    """Tests for the trend command."""

    def test_trend_json(self, weight_csv, start_day) -> None:
        today = start_day + timedelta(days=13)
        result = runner.invoke(
            app, ["trend", str(weight_csv), "--today", today.isoformat(), "--json"]
        )
        assert result.exit_code == 0

        payload = json.loads(result.output)
        points = payload["data"]["points"]
        assert len(points) == 14 + 14
        assert points[4]["is_interpolated"] is True
        assert points[-1]["is_projected"] is True
        assert payload["data"]["stats"]["weekly_change"] < 0

    def test_trend_table(self, weight_csv, start_day) -> None:
        today = start_day + timedelta(days=13)
        result = runner.invoke(
            app, ["trend", str(weight_csv), "--today", today.isoformat(), "--tail", "5"]
        )
        assert result.exit_code == 0
        assert "Current trend" in result.output
        assert "projected" in result.output

    def test_trend_invalid_date(self, weight_csv) -> None:
        result = runner.invoke(app, ["trend", str(weight_csv), "--today", "soon"])
        assert result.exit_code == 1

    def test_metric_json(self, weight_csv) -> None:
        result = runner.invoke(app, ["metric", str(weight_csv), "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["data"]["delta_7_day"] < 0


class TestBudgetCommand:
    """Tests for the budget command."""

    def test_budget_json(self) -> None:
        result = runner.invoke(
            app,
            ["budget", "--bmr", "2000", "--active", "300", "--eaten", "500",
             "--deficit", "500", "--no-auto", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["daily_goal"] == 1800
        assert data["remaining_energy"] == 1300
        assert data["is_deficit_active"] is True

    def test_auto_deficit_bounds(self) -> None:
        settings_module._settings.deficit.upper_bound = 82.0
        settings_module._settings.deficit.lower_bound = 78.0
        result = runner.invoke(
            app,
            ["budget", "--bmr", "2000", "--auto", "--maintenance-mode",
             "--weight-today", "83", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["is_deficit_active"] is True
        assert data["effective_deficit"] == 500

    def test_compass(self) -> None:
        result = runner.invoke(app, ["compass", "--kcal", "2000", "--sugar", "60"])
        assert result.exit_code == 0
        assert "Sugar" in result.output


class TestLabelCommand:
    """Tests for the label command."""

    def test_label_from_stdin(self) -> None:
        text = "Energie\n1625kJ\nFett\n4,1 g\ngesättigte Fettsäuren\n1,2 g"
        result = runner.invoke(app, ["label", "--json"], input=text)
        assert result.exit_code == 0

        data = json.loads(result.output)["data"]
        assert data["has_data"] is True
        assert data["nutrients"]["fat"] == pytest.approx(4.1)
        assert data["nutrients"]["sat_fat"] == pytest.approx(1.2)

    def test_label_from_file(self, tmp_path) -> None:
        path = tmp_path / "label.txt"
        path.write_text("Protein\n21 g\n", encoding="utf-8")
        result = runner.invoke(app, ["label", str(path)])
        assert result.exit_code == 0
        assert "protein" in result.output

    def test_label_nothing_recognized(self) -> None:
        result = runner.invoke(app, ["label"], input="2024\n")
        assert result.exit_code == 0
        assert "manually" in result.output


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_config_show(self) -> None:
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.output)["trend"]["smoothing"] == 0.1

    def test_config_init(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        result = runner.invoke(app, ["config", "init", "--path", str(path)])
        assert result.exit_code == 0
        assert path.exists()

        again = runner.invoke(app, ["config", "init", "--path", str(path)])
        assert again.exit_code == 1

    def test_invalid_default_config(self, tmp_path, monkeypatch) -> None:
        (tmp_path / "config.yaml").write_text(yaml.dump({"trend": {"smoothing": 2}}))
        monkeypatch.setattr(settings_module, "_default_config_dir", lambda: tmp_path)
        monkeypatch.setattr(settings_module, "_settings", None)

        result = runner.invoke(app, ["budget", "--bmr", "2000"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_invalid_config_option(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("trend: [unclosed\n")

        result = runner.invoke(app, ["--config", str(path), "budget"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_json_output_format_default(self) -> None:
        settings_module._settings.defaults.output_format = "json"
        result = runner.invoke(app, ["budget", "--bmr", "2000", "--no-auto"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["daily_goal"] == 1500


class TestLogging:
    """Tests for logging setup."""

    def test_configure_logging_is_idempotent(self) -> None:
        configure_logging(logging.DEBUG)
        configure_logging(logging.DEBUG)

        logger = logging.getLogger("diettrend")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

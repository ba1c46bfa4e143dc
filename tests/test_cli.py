"""Tests for the click command-line interface."""
import csv
import json

import pytest
from click.testing import CliRunner

from mortgage_calc.main import cli

BASE_ARGS = ["-p", "500k", "-d", "10%", "-r", "5", "--province", "ON", "--municipality", "toronto"]


@pytest.fixture
def runner(monkeypatch):
    for name in ("MORTGAGE_CALC_LOG_LEVEL", "MORTGAGE_CALC_MAX_ROWS",
                 "MORTGAGE_CALC_PROVINCE", "MORTGAGE_CALC_MUNICIPALITY"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestSummaryCommand:
    def test_prints_summary(self, runner):
        result = runner.invoke(cli, ["summary", *BASE_ARGS])
        assert result.exit_code == 0, result.output
        assert "Summary" in result.output
        assert "Total mortgage      : 463950.00" in result.output
        assert "Toronto Municipal Land Transfer Tax : 6475.00" in result.output

    def test_exports_json(self, runner, tmp_path):
        path = tmp_path / "summary.json"
        result = runner.invoke(cli, ["summary", *BASE_ARGS, "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["mortgage_insurance"] == 13950.0

    def test_rejects_other_extensions(self, runner, tmp_path):
        result = runner.invoke(cli, ["summary", *BASE_ARGS, "--output", str(tmp_path / "summary.txt")])
        assert result.exit_code != 0
        assert ".json" in result.output

    def test_invalid_amount(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "lots", "-r", "5"])
        assert result.exit_code != 0
        assert "Invalid amount" in result.output

    def test_down_payment_above_price(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "500k", "-d", "600k", "-r", "5"])
        assert result.exit_code != 0
        assert "Down payment cannot exceed the purchase price" in result.output

    def test_down_payment_equal_to_price(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "500k", "-d", "500k", "-r", "5"])
        assert result.exit_code == 0, result.output
        assert "Total mortgage      : 0.00" in result.output

    def test_term_longer_than_amortization(self, runner):
        result = runner.invoke(cli, ["summary", *BASE_ARGS, "-a", "5", "-t", "6"])
        assert result.exit_code != 0
        assert "Term cannot be longer" in result.output

    def test_default_province_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("MORTGAGE_CALC_PROVINCE", "AB")
        monkeypatch.setenv("MORTGAGE_CALC_MUNICIPALITY", "none")
        result = runner.invoke(cli, ["summary", "-p", "500k", "-d", "20%", "-r", "5"])
        assert result.exit_code == 0, result.output
        assert "Alberta Transfer Fee : 0.00" in result.output


class TestScheduleCommand:
    def test_prints_schedule(self, runner):
        result = runner.invoke(cli, ["schedule", *BASE_ARGS])
        assert result.exit_code == 0, result.output
        assert "Year\tStartBal\tPrincipal\tInterest\tExtra\tEndBal" in result.output

    def test_truncates_rows(self, runner, monkeypatch):
        monkeypatch.setenv("MORTGAGE_CALC_MAX_ROWS", "3")
        result = runner.invoke(cli, ["schedule", *BASE_ARGS])
        assert result.exit_code == 0, result.output
        assert "Schedule has 25 rows; showing first 3 rows." in result.output

    def test_negative_max_rows_shows_whole_schedule(self, runner, monkeypatch):
        monkeypatch.setenv("MORTGAGE_CALC_MAX_ROWS", "-3")
        result = runner.invoke(cli, ["schedule", "-p", "500k", "-d", "20%", "-r", "5"])
        assert result.exit_code == 0, result.output
        assert "showing first" not in result.output
        assert "\n25\t" in result.output

    def test_balance_comparison_with_prepayments(self, runner):
        result = runner.invoke(cli, ["schedule", *BASE_ARGS, "--extra-payment", "500"])
        assert result.exit_code == 0, result.output
        assert "With prepayment" in result.output

    def test_exports_csv(self, runner, tmp_path):
        path = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["schedule", *BASE_ARGS, "--output", str(path)])
        assert result.exit_code == 0, result.output
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Year", "Starting_Balance", "Principal", "Interest", "Extra", "Ending_Balance"]
        assert len(rows) == 26

    def test_exports_json_with_both_schedules(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["schedule", *BASE_ARGS, "--annual-prepayment", "10", "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert len(data["baseline_schedule"]) == 25
        assert len(data["schedule"]) < 25
        assert data["summary"]["comparison"]["years_saved"] > 0


class TestCompareCommand:
    def test_compares_scenarios(self, runner):
        result = runner.invoke(cli, [
            "compare",
            "--scenario1", "-p 500k -d 10% -r 5 --province ON",
            "--scenario2", "-p 500k -d 20% -r 5 --province ON",
        ])
        assert result.exit_code == 0, result.output
        assert "Comparison" in result.output
        assert "total_mortgage" in result.output

    def test_bad_scenario_option(self, runner):
        result = runner.invoke(cli, ["compare", "--scenario1", "-p 500k -r 5 --bogus", "--scenario2", "-p 1 -r 1"])
        assert result.exit_code != 0


def test_provinces_lists_municipalities(runner):
    result = runner.invoke(cli, ["provinces"])
    assert result.exit_code == 0, result.output
    assert "toronto" in result.output
    assert "British Columbia" in result.output

"""Tests for CLI commands."""

from decimal import Decimal

import pytest
from typer.testing import CliRunner

from estax.cli import app
from estax.db.factory import DbConfig, default_registry

runner = CliRunner()

ESTIMATES_CSV = (
    "tax_year,filing_status,expected_agi,expected_deduction,prior_year_tax,se_income,expected_wages\n"
    "2025,S,100000,0,12000,,\n"
    "2025,S,100000,0,12000,100000,50000\n"
)


@pytest.fixture
def db(tmp_path):
    path = tmp_path / "estax.db"
    result = runner.invoke(app, ["init", "--db", str(path)])
    assert result.exit_code == 0, result.output
    return path


@pytest.fixture
def db_with_estimates(db, tmp_path):
    csv_path = tmp_path / "estimates.csv"
    csv_path.write_text(ESTIMATES_CSV)
    result = runner.invoke(app, ["import-estimates", str(csv_path), "--db", str(db)])
    assert result.exit_code == 0, result.output
    return db


class TestHelp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "1040-ES" in result.output

    @pytest.mark.parametrize(
        "command",
        ["init", "se", "worksheet", "load-brackets", "import-estimates", "list", "show", "calculate", "delete"],
    )
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


class TestInit:
    def test_creates_database(self, db):
        assert db.exists()

    def test_reports_tax_years(self, tmp_path):
        result = runner.invoke(app, ["init", "--db", str(tmp_path / "a" / "estax.db")])
        assert result.exit_code == 0
        assert "Tax years: 2024, 2025" in result.output


class TestSeCommand:
    def test_se_worksheet(self):
        result = runner.invoke(app, ["se", "--se-income", "100000", "--wages", "50000"])
        assert result.exit_code == 0, result.output
        assert "$92,350.00" in result.output
        assert "$14,129.55" in result.output
        assert "$7,064.78" in result.output

    def test_below_threshold(self):
        result = runner.invoke(app, ["se", "--se-income", "400"])
        assert result.exit_code == 0
        assert "no SE tax due" in result.output

    def test_unknown_year(self):
        result = runner.invoke(app, ["se", "--se-income", "1000", "--year", "1990"])
        assert result.exit_code == 1
        assert "1990" in result.output

    def test_log_level(self):
        result = runner.invoke(app, ["--log-level", "debug", "se", "--se-income", "1000"])
        assert result.exit_code == 0

    def test_invalid_log_level(self):
        result = runner.invoke(app, ["--log-level", "loud", "se", "--se-income", "1000"])
        assert result.exit_code == 1


class TestWorksheetCommand:
    def test_single_standard_deduction(self):
        result = runner.invoke(app, ["worksheet", "--agi", "100000", "--prior-year-tax", "12000"])
        assert result.exit_code == 0, result.output
        assert "$85,000.00" in result.output
        assert "$13,614.00" in result.output
        assert "$12,000.00" in result.output
        assert "REQUIRED" in result.output

    def test_chained_with_se(self):
        result = runner.invoke(
            app,
            [
                "worksheet",
                "--agi", "100000",
                "--prior-year-tax", "12000",
                "--se-income", "100000",
                "--wages", "50000",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "$14,129.55" in result.output
        assert "$27,743.55" in result.output

    def test_farmer(self):
        result = runner.invoke(
            app, ["worksheet", "--agi", "100000", "--prior-year-tax", "20000", "--farmer"]
        )
        assert result.exit_code == 0
        assert "$9,076.00" in result.output

    def test_invalid_filing_status(self):
        result = runner.invoke(
            app, ["worksheet", "--agi", "1", "--prior-year-tax", "0", "-s", "WIDOW"]
        )
        assert result.exit_code == 1
        assert "Invalid filing status" in result.output

    def test_non_numeric_amount(self):
        result = runner.invoke(app, ["worksheet", "--agi", "lots", "--prior-year-tax", "0"])
        assert result.exit_code != 0


class TestLoadBrackets:
    def test_load(self, db, tmp_path):
        csv_path = tmp_path / "brackets.csv"
        csv_path.write_text(
            "tax_year,schedule,min_income,max_income,base_tax,rate\n"
            "2025,Y-1,0,20000,0,0.10\n"
            "2025,Y-1,20000,,2000,0.25\n"
        )
        result = runner.invoke(app, ["load-brackets", str(csv_path), "--db", str(db)])
        assert result.exit_code == 0, result.output
        assert "Loaded 4 bracket rows" in result.output

    def test_validation_failure(self, db, tmp_path):
        csv_path = tmp_path / "brackets.csv"
        csv_path.write_text(
            "tax_year,schedule,min_income,max_income,base_tax,rate\n"
            "2025,X,0,10000,0,0.10\n"
            "2025,X,12000,,1000,0.20\n"
        )
        result = runner.invoke(app, ["load-brackets", str(csv_path), "--db", str(db)])
        assert result.exit_code == 1
        assert "failed validation" in result.output

    def test_unknown_schedule(self, db, tmp_path):
        csv_path = tmp_path / "brackets.csv"
        csv_path.write_text("tax_year,schedule,min_income,max_income,base_tax,rate\n2025,Q,0,,0,0.1\n")
        result = runner.invoke(app, ["load-brackets", str(csv_path), "--db", str(db)])
        assert result.exit_code == 1
        assert "Invalid schedule: Q" in result.output

    def test_missing_file(self, db, tmp_path):
        result = runner.invoke(app, ["load-brackets", str(tmp_path / "none.csv"), "--db", str(db)])
        assert result.exit_code == 1

    def test_loaded_schedule_survives_reopening(self, db, tmp_path):
        csv_path = tmp_path / "brackets.csv"
        csv_path.write_text(
            "tax_year,schedule,min_income,max_income,base_tax,rate\n"
            "2025,X,0,50000,0,0.10\n"
            "2025,X,50000,,5000,0.20\n"
        )
        result = runner.invoke(app, ["load-brackets", str(csv_path), "--db", str(db)])
        assert result.exit_code == 0, result.output

        estimates = tmp_path / "estimates.csv"
        estimates.write_text(ESTIMATES_CSV)
        result = runner.invoke(app, ["import-estimates", str(estimates), "--db", str(db)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["calculate", "1", "--db", str(db)])
        assert result.exit_code == 0, result.output
        assert "Tax from rate schedule:    $12,000.00" in result.output

        repo = default_registry().create(DbConfig(connection_string=str(db)))
        brackets = repo.get_tax_brackets(2025, 1)
        repo.close()
        assert [b.tax_rate for b in brackets] == [Decimal("0.10"), Decimal("0.20")]

    def test_failed_load_changes_nothing(self, db, tmp_path):
        csv_path = tmp_path / "brackets.csv"
        csv_path.write_text(
            "tax_year,schedule,min_income,max_income,base_tax,rate\n"
            "2025,X,0,,0,0.10\n"
            "2031,X,0,,0,0.10\n"
        )
        result = runner.invoke(app, ["load-brackets", str(csv_path), "--db", str(db)])
        assert result.exit_code == 1
        assert "Tax year 2031 not found" in result.output

        repo = default_registry().create(DbConfig(connection_string=str(db)))
        assert len(repo.get_tax_brackets(2025, 1)) == 7
        repo.close()


class TestSavedEstimates:
    def test_import(self, db, tmp_path):
        csv_path = tmp_path / "estimates.csv"
        csv_path.write_text(ESTIMATES_CSV)
        result = runner.invoke(app, ["import-estimates", str(csv_path), "--db", str(db)])
        assert result.exit_code == 0
        assert "Imported 2 estimate(s): ids 1, 2" in result.output

    def test_import_bad_status(self, db, tmp_path):
        csv_path = tmp_path / "estimates.csv"
        csv_path.write_text("tax_year,filing_status,expected_agi,expected_deduction\n2025,ZZ,1,0\n")
        result = runner.invoke(app, ["import-estimates", str(csv_path), "--db", str(db)])
        assert result.exit_code == 1
        assert "Unrecognised filing status 'ZZ' on row 1" in result.output

    def test_list(self, db_with_estimates):
        result = runner.invoke(app, ["list", "--db", str(db_with_estimates)])
        assert result.exit_code == 0
        assert "Saved estimates" in result.output
        assert "100,000.00" in result.output

    def test_list_empty(self, db):
        result = runner.invoke(app, ["list", "--db", str(db)])
        assert result.exit_code == 0
        assert "No saved estimates" in result.output

    def test_calculate_then_show(self, db_with_estimates):
        result = runner.invoke(app, ["calculate", "2", "--db", str(db_with_estimates)])
        assert result.exit_code == 0, result.output
        assert "$14,129.55" in result.output
        assert "$27,743.55" in result.output

        result = runner.invoke(app, ["show", "2", "--db", str(db_with_estimates)])
        assert result.exit_code == 0
        assert "Estimate #2: 2025 Single" in result.output
        assert "$   27,743.55" in result.output
        assert "$   12,000.00" in result.output

    def test_show_missing(self, db):
        result = runner.invoke(app, ["show", "99", "--db", str(db)])
        assert result.exit_code == 1
        assert "Estimate not found: 99" in result.output

    def test_delete(self, db_with_estimates):
        result = runner.invoke(app, ["delete", "1", "--db", str(db_with_estimates)])
        assert result.exit_code == 0
        assert "Deleted estimate #1" in result.output
        result = runner.invoke(app, ["delete", "1", "--db", str(db_with_estimates)])
        assert result.exit_code == 1

    def test_requires_database(self, tmp_path):
        result = runner.invoke(app, ["list", "--db", str(tmp_path / "missing.db")])
        assert result.exit_code == 1
        assert "estax init" in result.output


class TestLargeAmounts:
    def test_worksheet_with_very_large_agi(self):
        result = runner.invoke(app, ["worksheet", "--agi", "1e30", "--prior-year-tax", "0"])
        assert result.exit_code == 0, result.output
        assert "Taxable income:" in result.output

"""Typer CLI interface for estax."""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import NoReturn

import typer

from estax.exceptions import EstaxError

DEFAULT_DB = Path.home() / ".estax" / "estax.db"
DEFAULT_YEAR = 2025

app = typer.Typer(
    name="estax",
    help="estax: Form 1040-ES estimated tax and self-employment tax worksheets.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level: DEBUG, INFO, WARNING, ERROR",
    ),
) -> None:
    """estax: Form 1040-ES estimated tax and self-employment tax worksheets."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        typer.echo(f"Error: Invalid log level '{log_level}'", err=True)
        raise typer.Exit(1)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _decimal(raw: str | None, option: str) -> Decimal | None:
    """Parse a money/rate option straight to Decimal (never via float)."""
    if raw is None:
        return None
    try:
        return Decimal(raw.replace(",", "").replace("$", ""))
    except InvalidOperation:
        raise typer.BadParameter(f"not a number: {raw!r}", param_hint=option) from None


def _filing_status(code: str):
    from estax.models.enums import FilingStatus

    try:
        return FilingStatus(code.upper())
    except ValueError:
        valid = ", ".join(s.value for s in FilingStatus)
        _fail(f"Invalid filing status '{code}'. Valid: {valid}")


def _open_repo(db: Path, must_exist: bool = True):
    from estax.db.factory import DbConfig, default_registry

    if must_exist and str(db) != ":memory:" and not db.exists():
        _fail(f"No database found at {db}. Run `estax init` first.")
    return default_registry().create(DbConfig(backend="sqlite", connection_string=str(db)))


def _fmt(value: Decimal | None) -> str:
    return "-" if value is None else f"${value:>12,.2f}"


DB_OPTION = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file")


@app.command()
def init(db: Path = DB_OPTION) -> None:
    """Create the database and load the built-in reference tables."""
    try:
        repo = _open_repo(db, must_exist=False)
    except EstaxError as exc:
        _fail(str(exc))
    years = repo.list_tax_years()
    repo.close()
    typer.echo(f"Database ready: {db}")
    typer.echo(f"Tax years: {', '.join(str(y) for y in years)}")


@app.command()
def se(
    se_income: str = typer.Option(..., "--se-income", help="Net profit from self-employment"),
    crp_payments: str = typer.Option("0", "--crp", help="Conservation Reserve Program payments"),
    wages: str = typer.Option("0", "--wages", help="Wages subject to Social Security tax"),
    year: int = typer.Option(DEFAULT_YEAR, "--year", "-y", help="Tax year"),
) -> None:
    """Run the Self-Employment Tax and Deduction Worksheet."""
    from estax.engines.brackets import get_tax_year_config
    from estax.engines.self_employment import SeWorksheet
    from estax.models.worksheets import SeWorksheetConfig
    from estax.reports.worksheet_summary import WorksheetSummaryGenerator

    try:
        config = get_tax_year_config(year)
    except ValueError as exc:
        _fail(str(exc))

    try:
        result = SeWorksheet(SeWorksheetConfig.from_tax_year_config(config)).calculate(
            se_income=_decimal(se_income, "--se-income"),
            crp_payments=_decimal(crp_payments, "--crp"),
            wages=_decimal(wages, "--wages"),
        )
    except EstaxError as exc:
        _fail(str(exc))

    typer.echo(WorksheetSummaryGenerator().render(se=result, tax_year=year))


@app.command()
def worksheet(
    agi: str = typer.Option(..., "--agi", help="Expected adjusted gross income"),
    prior_year_tax: str = typer.Option(..., "--prior-year-tax", help="Prior-year total tax"),
    year: int = typer.Option(DEFAULT_YEAR, "--year", "-y", help="Tax year"),
    filing_status: str = typer.Option(
        "S",
        "--filing-status",
        "-s",
        help="Filing status: S, MFJ, MFS, HOH, QSS",
    ),
    itemized: str = typer.Option("0", "--itemized", help="Itemized deductions (0 = use standard)"),
    standard: str | None = typer.Option(
        None,
        "--standard",
        help="Standard deduction (defaults to the amount for the year and status)",
    ),
    qbi: str = typer.Option("0", "--qbi", help="Qualified business income deduction"),
    amt: str = typer.Option("0", "--amt", help="Alternative minimum tax"),
    credits: str = typer.Option("0", "--credits", help="Nonrefundable credits"),
    other_taxes: str = typer.Option("0", "--other-taxes", help="Other taxes"),
    refundable_credits: str = typer.Option("0", "--refundable-credits", help="Refundable credits"),
    withholding: str = typer.Option("0", "--withholding", help="Expected income tax withholding"),
    se_income: str | None = typer.Option(
        None,
        "--se-income",
        help="Net SE profit; runs the SE worksheet and carries SE tax to line 9",
    ),
    crp_payments: str = typer.Option("0", "--crp", help="Conservation Reserve Program payments"),
    wages: str = typer.Option("0", "--wages", help="Wages subject to Social Security tax"),
    farmer: bool = typer.Option(False, "--farmer", help="Farmer or fisher (66 2/3% rule)"),
) -> None:
    """Run the Estimated Tax Worksheet, optionally chained with the SE worksheet."""
    from estax.engines.brackets import (
        build_tax_brackets,
        get_standard_deduction,
        get_tax_year_config,
    )
    from estax.engines.estimated_tax import EstimatedTaxWorksheet
    from estax.engines.self_employment import SeWorksheet
    from estax.models.worksheets import EstimatedTaxWorksheetInput, SeWorksheetConfig
    from estax.reports.worksheet_summary import WorksheetSummaryGenerator

    status = _filing_status(filing_status)
    try:
        config = get_tax_year_config(year)
    except ValueError as exc:
        _fail(str(exc))

    standard_amount = _decimal(standard, "--standard")
    if standard_amount is None:
        standard_amount = get_standard_deduction(year, status).amount

    try:
        se_result = None
        if se_income is not None:
            se_result = SeWorksheet(SeWorksheetConfig.from_tax_year_config(config)).calculate(
                se_income=_decimal(se_income, "--se-income"),
                crp_payments=_decimal(crp_payments, "--crp"),
                wages=_decimal(wages, "--wages"),
            )

        data = EstimatedTaxWorksheetInput(
            adjusted_gross_income=_decimal(agi, "--agi"),
            itemized_deduction=_decimal(itemized, "--itemized"),
            standard_deduction=standard_amount,
            qbi_deduction=_decimal(qbi, "--qbi"),
            alternative_minimum_tax=_decimal(amt, "--amt"),
            credits=_decimal(credits, "--credits"),
            self_employment_tax=(
                se_result.self_employment_tax if se_result is not None else Decimal("0")
            ),
            other_taxes=_decimal(other_taxes, "--other-taxes"),
            refundable_credits=_decimal(refundable_credits, "--refundable-credits"),
            prior_year_tax=_decimal(prior_year_tax, "--prior-year-tax"),
            withholding=_decimal(withholding, "--withholding"),
            is_farmer_or_fisher=farmer,
            required_payment_threshold=config.required_payment_threshold,
        )
        result = EstimatedTaxWorksheet(build_tax_brackets(year, status)).calculate(data)
    except EstaxError as exc:
        _fail(str(exc))

    typer.echo(
        WorksheetSummaryGenerator().render(
            worksheet=result,
            se=se_result,
            tax_year=year,
            filing_status=status,
        )
    )


@app.command(name="load-brackets")
def load_brackets(
    csv_file: Path = typer.Argument(..., help="Rate schedule CSV file"),
    db: Path = DB_OPTION,
) -> None:
    """Load (or replace) tax brackets from a rate schedule CSV.

    \b
    Columns: tax_year,schedule,min_income,max_income,base_tax,rate
    Schedules: X (S), Y-1 (MFJ, QSS), Y-2 (MFS), Z (HOH)
    """
    from estax.ingestion.brackets_csv import TaxBracketCsvAdapter

    adapter = TaxBracketCsvAdapter()
    try:
        records = adapter.parse(csv_file)
    except FileNotFoundError as exc:
        _fail(str(exc))
    except EstaxError as exc:
        _fail(str(exc))

    errors = adapter.validate(records)
    if errors:
        for message in errors:
            typer.echo(f"  - {message}", err=True)
        _fail(f"{csv_file.name} failed validation ({len(errors)} problem(s))")

    repo = _open_repo(db, must_exist=False)
    try:
        inserted = adapter.load(repo, records)
    except EstaxError as exc:
        _fail(str(exc))
    finally:
        repo.close()
    typer.echo(f"Loaded {inserted} bracket rows from {csv_file.name}")


@app.command(name="import-estimates")
def import_estimates(
    csv_file: Path = typer.Argument(..., help="Estimates CSV file"),
    db: Path = DB_OPTION,
) -> None:
    """Import saved estimates from a CSV file.

    \b
    Required columns: tax_year, filing_status, expected_agi, expected_deduction
    Optional columns: expected_qbi_deduction, expected_amt, expected_credits,
      expected_other_taxes, expected_withholding, prior_year_tax, se_income,
      expected_crp_payments, expected_wages
    """
    from estax.ingestion.estimates_csv import EstimateCsvAdapter

    adapter = EstimateCsvAdapter()
    try:
        records = adapter.parse(csv_file)
    except FileNotFoundError as exc:
        _fail(str(exc))
    except EstaxError as exc:
        _fail(str(exc))

    errors = adapter.validate(records)
    if errors:
        for message in errors:
            typer.echo(f"  - {message}", err=True)
        _fail(f"{csv_file.name} failed validation ({len(errors)} problem(s))")

    repo = _open_repo(db, must_exist=False)
    try:
        saved = adapter.load(repo, records)
    except EstaxError as exc:
        _fail(str(exc))
    finally:
        repo.close()
    typer.echo(f"Imported {len(saved)} estimate(s): ids {', '.join(str(e.id) for e in saved)}")


@app.command(name="list")
def list_cmd(
    year: int | None = typer.Option(None, "--year", "-y", help="Only show this tax year"),
    db: Path = DB_OPTION,
) -> None:
    """List saved estimates, newest first."""
    from rich.console import Console
    from rich.table import Table

    from estax.models.enums import FilingStatus

    repo = _open_repo(db)
    estimates = repo.list_estimates(year)
    repo.close()

    console = Console()
    if not estimates:
        console.print("No saved estimates.")
        return

    table = Table(title="Saved estimates")
    table.add_column("ID", justify="right")
    table.add_column("Year")
    table.add_column("Status")
    table.add_column("AGI", justify="right")
    table.add_column("SE Tax", justify="right")
    table.add_column("Total Tax", justify="right")
    table.add_column("Required", justify="right")
    for est in estimates:
        table.add_row(
            str(est.id),
            str(est.tax_year),
            FilingStatus.from_id(est.filing_status_id).value,
            f"{est.expected_agi:,.2f}",
            "-" if est.calculated_se_tax is None else f"{est.calculated_se_tax:,.2f}",
            "-" if est.calculated_total_tax is None else f"{est.calculated_total_tax:,.2f}",
            (
                "-"
                if est.calculated_required_payment is None
                else f"{est.calculated_required_payment:,.2f}"
            ),
        )
    console.print(table)


@app.command()
def show(
    estimate_id: int = typer.Argument(..., help="Saved estimate id"),
    db: Path = DB_OPTION,
) -> None:
    """Show one saved estimate."""
    from estax.models.enums import FilingStatus

    repo = _open_repo(db)
    try:
        est = repo.get_estimate(estimate_id)
    except EstaxError as exc:
        _fail(str(exc))
    finally:
        repo.close()

    typer.echo(f"Estimate #{est.id}: {est.tax_year} "
               f"{FilingStatus.from_id(est.filing_status_id).display_name}")
    typer.echo("")
    typer.echo("INPUTS")
    typer.echo(f"  Expected AGI:          {_fmt(est.expected_agi)}")
    typer.echo(f"  Expected Deduction:    {_fmt(est.expected_deduction)}")
    typer.echo(f"  QBI Deduction:         {_fmt(est.expected_qbi_deduction)}")
    typer.echo(f"  AMT:                   {_fmt(est.expected_amt)}")
    typer.echo(f"  Credits:               {_fmt(est.expected_credits)}")
    typer.echo(f"  Other Taxes:           {_fmt(est.expected_other_taxes)}")
    typer.echo(f"  Withholding:           {_fmt(est.expected_withholding)}")
    typer.echo(f"  Prior-Year Tax:        {_fmt(est.prior_year_tax)}")
    typer.echo(f"  SE Income:             {_fmt(est.se_income)}")
    typer.echo(f"  CRP Payments:          {_fmt(est.expected_crp_payments)}")
    typer.echo(f"  Wages:                 {_fmt(est.expected_wages)}")
    typer.echo("")
    typer.echo("CALCULATED")
    typer.echo(f"  SE Tax:                {_fmt(est.calculated_se_tax)}")
    typer.echo(f"  Total Estimated Tax:   {_fmt(est.calculated_total_tax)}")
    typer.echo(f"  Required Payment:      {_fmt(est.calculated_required_payment)}")
    typer.echo(f"  Updated:               {est.updated_at.isoformat()}")


@app.command()
def calculate(
    estimate_id: int = typer.Argument(..., help="Saved estimate id"),
    farmer: bool = typer.Option(False, "--farmer", help="Farmer or fisher (66 2/3% rule)"),
    db: Path = DB_OPTION,
) -> None:
    """Run a saved estimate through both worksheets and store the totals."""
    from estax.engines.estimator import TaxEstimator
    from estax.reports.worksheet_summary import WorksheetSummaryGenerator

    repo = _open_repo(db)
    try:
        calculation = TaxEstimator(repo).calculate_and_save(estimate_id, farmer)
    except EstaxError as exc:
        _fail(str(exc))
    finally:
        repo.close()

    typer.echo(WorksheetSummaryGenerator().render_calculation(calculation))


@app.command()
def delete(
    estimate_id: int = typer.Argument(..., help="Saved estimate id"),
    db: Path = DB_OPTION,
) -> None:
    """Delete a saved estimate."""
    repo = _open_repo(db)
    try:
        repo.delete_estimate(estimate_id)
    except EstaxError as exc:
        _fail(str(exc))
    finally:
        repo.close()
    typer.echo(f"Deleted estimate #{estimate_id}")

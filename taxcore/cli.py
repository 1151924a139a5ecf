"""Typer CLI interface for taxcore."""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import NoReturn, TypeVar

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.table import Table

from taxcore.engines import (
    AMTEngine,
    LotSelector,
    QuarterlyEstimator,
    ScheduleDEngine,
    StateTaxEngine,
    TaxEstimator,
    TaxLossHarvester,
    WashSaleChecker,
)
from taxcore.engines.brackets import get_ordinary_brackets
from taxcore.engines.money import to_decimal
from taxcore.engines.progressive import apply_brackets
from taxcore.exceptions import DataValidationError, InputFileError, TaxComputationError
from taxcore.models import (
    AmtInput,
    CapitalLossCarryover,
    FilingStatus,
    IncomeSummary,
    LotSelectionMethod,
    Position,
    PurchaseRecord,
    QuarterlyPaymentMade,
    SaleRecord,
    ScheduleDInput,
    TaxLot,
    parse_filing_status,
)
from taxcore.reports import (
    AMTWorksheetGenerator,
    LotComparisonGenerator,
    QuarterlyScheduleGenerator,
    TaxSummaryGenerator,
)

app = typer.Typer(
    name="taxcore",
    help="taxcore: federal/state tax liability, AMT, capital gains and estimated payments.",
    no_args_is_help=True,
)
console = Console()

ModelT = TypeVar("ModelT", bound=BaseModel)


# ---------------------------------------------------------------------------
# Input file shapes
# ---------------------------------------------------------------------------


class WashSaleFile(BaseModel):
    sales: list[SaleRecord]
    purchases: list[PurchaseRecord] = []


class LotsFile(BaseModel):
    lots: list[TaxLot]


class QuarterlyFile(BaseModel):
    projected_income: IncomeSummary
    prior_year_tax: Decimal
    payments_made: list[QuarterlyPaymentMade] = []


class HarvestFile(BaseModel):
    positions: list[Position]
    recent_purchases: list[PurchaseRecord] = []


def _load(path: Path, model: type[ModelT]) -> ModelT:
    """Read and validate a JSON input file."""
    try:
        raw = path.read_text()
    except OSError as exc:
        raise InputFileError(str(path), exc.strerror or str(exc)) from exc
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise DataValidationError(path.name, str(exc)) from exc


def _fail(exc: TaxComputationError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


def _filing_status(value: str) -> FilingStatus:
    status, note = parse_filing_status(value)
    if note:
        typer.echo(f"Warning: {note}", err=True)
    return status


def _as_date(value: datetime | None) -> date:
    return value.date() if value is not None else date.today()


def _dump(payload: BaseModel | list[BaseModel]) -> None:
    if isinstance(payload, list):
        typer.echo(json.dumps([item.model_dump(mode="json") for item in payload], indent=2))
    else:
        typer.echo(payload.model_dump_json(indent=2))


FILING_STATUS_OPTION = typer.Option(
    "SINGLE",
    "--filing-status",
    "-s",
    help="Filing status: SINGLE, MFJ, MFS, HOH",
)
JSON_OPTION = typer.Option(False, "--json", help="Output as JSON")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine detail to stderr"),
) -> None:
    """taxcore: federal/state tax liability, AMT, capital gains and estimated payments."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


@app.command()
def estimate(
    income_file: Path = typer.Argument(..., help="JSON file with the income summary"),
    year: int = typer.Option(2025, "--year", "-y", help="Tax year"),
    filing_status: str = FILING_STATUS_OPTION,
    state: str | None = typer.Option(None, "--state", help="Two-letter state code"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Estimate federal (and optional state) tax liability."""
    try:
        income = _load(income_file, IncomeSummary)
    except TaxComputationError as exc:
        _fail(exc)

    result = TaxEstimator().estimate(year, _filing_status(filing_status), income, state)
    if json_output:
        _dump(result)
        return
    typer.echo(TaxSummaryGenerator().render(result))


@app.command(name="state-tax")
def state_tax(
    state_code: str = typer.Argument(..., help="Two-letter state code"),
    taxable_income: float = typer.Argument(..., help="State taxable income"),
    year: int = typer.Option(2025, "--year", "-y", help="Tax year"),
    filing_status: str = FILING_STATUS_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """Compute state income tax for one jurisdiction."""
    result = StateTaxEngine().compute(
        state_code, to_decimal(taxable_income), _filing_status(filing_status), year
    )
    if json_output:
        _dump(result)
        return

    typer.echo(f"=== {result.state_code} State Tax ({result.regime.value}) ===")
    typer.echo(f"  Taxable Income:  ${result.taxable_income:>12,.2f}")
    typer.echo(f"  State Tax:       ${result.state_tax:>12,.2f}")
    typer.echo(f"  Effective Rate:  {result.effective_rate * 100:>12.2f}%")
    typer.echo(f"  Marginal Rate:   {result.marginal_rate * 100:>12.2f}%")
    if result.brackets:
        table = Table(title="Brackets", show_header=True)
        table.add_column("From", justify="right")
        table.add_column("To", justify="right")
        table.add_column("Rate", justify="right")
        for bracket in result.brackets:
            upper = f"${bracket.max:,.0f}" if bracket.max is not None else "and up"
            table.add_row(f"${bracket.min:,.0f}", upper, f"{bracket.rate * 100:.3g}%")
        console.print(table)
    for note in result.notes:
        typer.echo(f"  Note: {note}")


@app.command()
def amt(
    taxable_income: float = typer.Option(..., "--taxable-income", help="Regular taxable income"),
    regular_tax: float | None = typer.Option(
        None,
        "--regular-tax",
        help="Regular federal tax before AMT (default: ordinary bracket tax on taxable income)",
    ),
    iso_spread: float = typer.Option(0.0, "--iso-spread", help="ISO bargain element"),
    salt: float = typer.Option(0.0, "--salt", help="State and local tax deduction add-back"),
    pab_interest: float = typer.Option(
        0.0, "--pab-interest", help="Tax-exempt private activity bond interest"
    ),
    other_adjustments: float = typer.Option(0.0, "--other", help="Other AMT adjustments"),
    year: int = typer.Option(2025, "--year", "-y", help="Tax year"),
    filing_status: str = FILING_STATUS_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """Compute Alternative Minimum Tax (Form 6251)."""
    status = _filing_status(filing_status)
    income = to_decimal(taxable_income)
    if regular_tax is None:
        regular = apply_brackets(income, get_ordinary_brackets(year, status))
    else:
        regular = to_decimal(regular_tax)
    amt_input = AmtInput(
        taxable_income=income,
        filing_status=status,
        state_and_local_tax_deduction=to_decimal(salt),
        tax_exempt_interest_from_pabs=to_decimal(pab_interest),
        incentive_stock_option_bargain_element=to_decimal(iso_spread),
        other_adjustments=to_decimal(other_adjustments),
        regular_tax=regular,
        tax_year=year,
    )
    result = AMTEngine().compute(amt_input)
    if json_output:
        _dump(result)
        return
    typer.echo(AMTWorksheetGenerator().render(amt_input, result))


@app.command(name="schedule-d")
def schedule_d(
    short_term: float = typer.Option(0.0, "--st", help="Short-term gain (loss)"),
    long_term: float = typer.Option(0.0, "--lt", help="Long-term gain (loss)"),
    st_carryover: float = typer.Option(
        0.0, "--st-carryover", help="Short-term loss carryover in (negative)"
    ),
    lt_carryover: float = typer.Option(
        0.0, "--lt-carryover", help="Long-term loss carryover in (negative)"
    ),
    distributions: float = typer.Option(
        0.0, "--distributions", help="Capital gain distributions"
    ),
    filing_status: str = FILING_STATUS_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """Net capital gains and losses and compute the carryover."""
    schedule_input = ScheduleDInput(
        short_term_gain_loss=to_decimal(short_term),
        long_term_gain_loss=to_decimal(long_term),
        capital_loss_carryover=CapitalLossCarryover(
            short_term=to_decimal(st_carryover),
            long_term=to_decimal(lt_carryover),
        ),
        capital_gain_distributions=to_decimal(distributions),
    )
    result = ScheduleDEngine().compute(schedule_input, _filing_status(filing_status))
    if json_output:
        _dump(result)
        return

    carry = result.carryover_to_next_year
    typer.echo("=== Schedule D ===")
    typer.echo(f"  Net Short-Term:        ${result.net_short_term_gain_loss:>12,.2f}")
    typer.echo(f"  Net Long-Term:         ${result.net_long_term_gain_loss:>12,.2f}")
    typer.echo(f"  Net Capital Gain/Loss: ${result.net_capital_gain_loss:>12,.2f}")
    typer.echo(f"  Loss Deduction:        ${result.capital_loss_deduction:>12,.2f}")
    typer.echo(f"  ST Carryover Out:      ${carry.short_term:>12,.2f}")
    typer.echo(f"  LT Carryover Out:      ${carry.long_term:>12,.2f}")
    preferential = "yes" if result.qualifies_for_preferential_rates else "no"
    typer.echo(f"  Preferential Rates:    {preferential}")


@app.command(name="wash-sale")
def wash_sale(
    input_file: Path = typer.Argument(..., help="JSON file with 'sales' and 'purchases'"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Check loss sales against replacement purchases for wash sales."""
    try:
        data = _load(input_file, WashSaleFile)
    except TaxComputationError as exc:
        _fail(exc)

    checker = WashSaleChecker()
    result = checker.check(data.sales, data.purchases)
    if json_output:
        _dump(result)
        return

    if result.compliant:
        typer.echo("No wash sales found.")
        return
    table = Table(title="Wash Sale Violations", show_header=True)
    table.add_column("Sold Lot")
    table.add_column("Symbol")
    table.add_column("Sale Date")
    table.add_column("Replacement")
    table.add_column("Disallowed", justify="right")
    table.add_column("Safe After")
    for v in result.violations:
        table.add_row(
            v.sold_lot_id,
            v.symbol,
            v.sale_date.isoformat(),
            f"{v.replacement_lot_id} ({v.replacement_date.isoformat()})",
            f"${v.disallowed_loss:,.2f}",
            checker.earliest_safe_repurchase_date(v.sale_date).isoformat(),
        )
    console.print(table)
    typer.echo(f"Total disallowed loss: ${result.total_disallowed_loss:,.2f}")


@app.command()
def lots(
    lots_file: Path = typer.Argument(..., help="JSON file with a 'lots' list"),
    quantity: float = typer.Option(..., "--quantity", "-q", help="Shares to sell"),
    price: float = typer.Option(..., "--price", "-p", help="Sale price per share"),
    as_of: datetime | None = typer.Option(
        None, "--as-of", formats=["%Y-%m-%d"], help="Sale date (default: today)"
    ),
    method: list[LotSelectionMethod] | None = typer.Option(
        None, "--method", "-m", help="Methods to compare (default: fifo, lifo)"
    ),
    lot_ids: list[str] | None = typer.Option(
        None, "--lot-id", help="Lot ids for specific identification, in order"
    ),
    marginal_rate: float = typer.Option(0.32, "--marginal-rate", help="Short-term rate"),
    long_term_rate: float = typer.Option(0.15, "--long-term-rate", help="Long-term rate"),
    json_output: bool = JSON_OPTION,
) -> None:
    """Compare FIFO, LIFO and specific-id lot selection for a proposed sale."""
    try:
        data = _load(lots_file, LotsFile)
    except TaxComputationError as exc:
        _fail(exc)

    methods = list(method) if method else [LotSelectionMethod.FIFO, LotSelectionMethod.LIFO]
    if lot_ids and LotSelectionMethod.SPECIFIC_ID not in methods:
        methods.append(LotSelectionMethod.SPECIFIC_ID)

    results = LotSelector().compare_strategies(
        data.lots,
        to_decimal(quantity),
        to_decimal(price),
        _as_date(as_of),
        to_decimal(marginal_rate),
        to_decimal(long_term_rate),
        methods=methods,
        specific_lot_ids=lot_ids,
    )
    if json_output:
        _dump(results)
        return
    typer.echo(LotComparisonGenerator().render(results))


@app.command()
def quarterly(
    input_file: Path = typer.Argument(
        ..., help="JSON file with 'projected_income', 'prior_year_tax' and 'payments_made'"
    ),
    year: int = typer.Option(2025, "--year", "-y", help="Tax year"),
    filing_status: str = FILING_STATUS_OPTION,
    state: str | None = typer.Option(None, "--state", help="Two-letter state code"),
    as_of: datetime | None = typer.Option(
        None, "--as-of", formats=["%Y-%m-%d"], help="Current date (default: today)"
    ),
    json_output: bool = JSON_OPTION,
) -> None:
    """Build the quarterly estimated payment schedule."""
    try:
        data = _load(input_file, QuarterlyFile)
    except TaxComputationError as exc:
        _fail(exc)

    result = QuarterlyEstimator().calculate(
        year,
        _filing_status(filing_status),
        data.projected_income,
        data.prior_year_tax,
        data.payments_made,
        _as_date(as_of),
        state,
    )
    if json_output:
        _dump(result)
        return
    typer.echo(QuarterlyScheduleGenerator().render(result))


@app.command()
def harvest(
    positions_file: Path = typer.Argument(
        ..., help="JSON file with 'positions' and optional 'recent_purchases'"
    ),
    as_of: datetime | None = typer.Option(
        None, "--as-of", formats=["%Y-%m-%d"], help="Evaluation date (default: today)"
    ),
    min_loss: float = typer.Option(100.0, "--min-loss", help="Minimum unrealized loss"),
    marginal_rate: float = typer.Option(0.32, "--marginal-rate", help="Short-term rate"),
    long_term_rate: float = typer.Option(0.15, "--long-term-rate", help="Long-term rate"),
    json_output: bool = JSON_OPTION,
) -> None:
    """List tax-loss harvesting candidates, largest savings first."""
    try:
        data = _load(positions_file, HarvestFile)
    except TaxComputationError as exc:
        _fail(exc)

    candidates = TaxLossHarvester().find_candidates(
        data.positions,
        _as_date(as_of),
        min_loss=to_decimal(min_loss),
        marginal_rate=to_decimal(marginal_rate),
        long_term_rate=to_decimal(long_term_rate),
        recent_purchases=data.recent_purchases,
    )
    if json_output:
        _dump(candidates)
        return

    if not candidates:
        typer.echo("No harvesting candidates found.")
        return
    table = Table(title="Tax-Loss Harvesting Candidates", show_header=True)
    table.add_column("Symbol")
    table.add_column("Lot")
    table.add_column("Term")
    table.add_column("Loss", justify="right")
    table.add_column("Savings", justify="right")
    table.add_column("Wash Risk")
    for c in candidates:
        table.add_row(
            c.symbol,
            c.lot_id,
            c.holding_period.value,
            f"${c.unrealized_loss:,.2f}",
            f"${c.estimated_tax_savings:,.2f}",
            "YES" if c.wash_sale_risk else "no",
        )
    console.print(table)
    for c in candidates:
        typer.echo(f"  - {c.rationale}")

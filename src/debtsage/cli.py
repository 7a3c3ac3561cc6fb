"""Command line interface for DebtSage."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click

from .config import BaseConfig
from .domain.repositories import DebtRepository
from .infra.database import bootstrap_database
from .infra.repositories.debt import DebtNotFoundError, SQLModelDebtRepository, StaleDebtError
from .logging_config import setup_logging
from .models.debt import Debt
from .services.accounts import DebtCategory
from .services.debts import PayoffProjection, project_payoff
from .services.export_csv import export_schedule_csv
from .services.money import format_duration, format_percentage
from .services.portfolio import debt_progress, summarize
from .services.scenarios import compare_strategies
from .services.strategy import PayoffStrategy
from .services.validation import DebtValidationError


class DecimalType(click.ParamType):
    """Parse exact decimal amounts instead of floats."""

    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).replace(",", "").lstrip("$"))
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid amount", param, ctx)


DECIMAL = DecimalType()
STRATEGY_CHOICE = click.Choice([s.value for s in PayoffStrategy], case_sensitive=False)


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _repo(ctx: click.Context) -> DebtRepository:
    return ctx.obj["repo"]


def _config(ctx: click.Context) -> BaseConfig:
    return ctx.obj["config"]


def _usage_error(exc: DebtValidationError) -> click.BadParameter:
    return click.BadParameter(exc.args[0], param_hint=f"'{exc.field}'")


def _accounts(ctx: click.Context):
    return [debt.to_account() for debt in _repo(ctx).list_all()]


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Track debts, record payments and project a debt-free date."""

    ctx.ensure_object(dict)
    config = ctx.obj.get("config") or BaseConfig()
    ctx.obj["config"] = config
    setup_logging(config)
    _engine, session_factory = bootstrap_database(config)
    ctx.obj["repo"] = SQLModelDebtRepository(session_factory)


@main.command("add")
@click.argument("name")
@click.option("--balance", type=DECIMAL, required=True, help="Current balance")
@click.option("--rate", type=DECIMAL, required=True, help="Annual rate as a fraction (0.2499)")
@click.option("--minimum", type=DECIMAL, default=Decimal("0"), show_default=True)
@click.option("--original", type=DECIMAL, default=None, help="Original balance (defaults to balance)")
@click.option(
    "--category",
    type=click.Choice([c.value for c in DebtCategory]),
    default=DebtCategory.OTHER.value,
    show_default=True,
)
@click.option("--due-day", type=click.IntRange(1, 31), default=1, show_default=True)
@click.pass_context
def add_debt(ctx, name, balance, rate, minimum, original, category, due_day) -> None:
    """Add a debt."""

    debt = Debt(
        name=name,
        current_balance=balance,
        original_balance=original,
        interest_rate=rate,
        minimum_payment=minimum,
        category=DebtCategory(category),
        due_day=due_day,
    )
    try:
        created = _repo(ctx).create(debt)
    except DebtValidationError as exc:
        raise _usage_error(exc) from exc
    click.echo(f"Added debt #{created.id}: {created.name} ({_money(created.current_balance)})")


@main.command("list")
@click.pass_context
def list_debts(ctx) -> None:
    """List debts with their progress."""

    debts = _accounts(ctx)
    if not debts:
        click.echo("No debts recorded.")
        return
    for debt in debts:
        click.echo(
            f"#{debt.id:<4} {debt.name:<24} {debt.status.value:<9} "
            f"{_money(debt.current_balance):>14} {format_percentage(debt.interest_rate):>8} "
            f"min {_money(debt.minimum_payment)}  {debt_progress(debt)}% paid"
        )


@main.command("summary")
@click.pass_context
def summary(ctx) -> None:
    """Show totals for active debts."""

    result = summarize(_accounts(ctx))
    click.echo(f"Active debts:      {result.debt_count}")
    click.echo(f"Total balance:     {_money(result.total_balance)}")
    click.echo(f"Original balance:  {_money(result.total_original_balance)}")
    click.echo(f"Minimum payments:  {_money(result.total_minimum_payment)}")
    click.echo(f"Progress:          {result.progress_percent}%")
    if result.highest_rate_debt is not None:
        top = result.highest_rate_debt
        click.echo(f"Highest rate:      {top.name} ({format_percentage(top.interest_rate)})")


def _parse_start(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


def _echo_projection(projection: PayoffProjection, *, show_schedule: bool) -> None:
    click.echo(f"Strategy:          {projection.strategy.value}")
    click.echo(f"Monthly budget:    {_money(projection.monthly_budget)}")
    if projection.converged:
        click.echo(f"Debt free in:      {format_duration(projection.months_to_payoff)}")
        click.echo(f"Debt-free date:    {projection.payoff_date.isoformat()}")
    else:
        click.echo(
            f"Debts will not pay off within {len(projection.schedule)} months "
            "at the current payment level."
        )
    click.echo(f"Total interest:    {_money(projection.total_interest_paid)}")
    if show_schedule:
        for period in projection.schedule:
            click.echo(
                f"{period.period_date.isoformat()}  pay {_money(period.total_payment):>12}  "
                f"interest {_money(period.total_interest):>10}  "
                f"left {_money(period.remaining_balance):>14}  target #{period.target_debt_id}"
            )


def _projection_options(func):
    func = click.option(
        "--start",
        "start",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        default=None,
        help="Start date YYYY-MM-DD",
    )(func)
    func = click.option("--max-months", type=int, default=None, help="Simulation limit")(func)
    func = click.option("--extra", type=DECIMAL, default=Decimal("0"), show_default=True)(func)
    return func


@main.command("project")
@click.option("--strategy", type=STRATEGY_CHOICE, default=None)
@_projection_options
@click.option("--schedule/--no-schedule", "show_schedule", default=False)
@click.pass_context
def project(ctx, strategy, extra, max_months, start, show_schedule) -> None:
    """Project the debt-free date under a strategy."""

    config = _config(ctx)
    try:
        projection = project_payoff(
            _accounts(ctx),
            strategy or config.DEFAULT_STRATEGY,
            extra,
            config.MAX_MONTHS if max_months is None else max_months,
            start_date=_parse_start(start),
        )
    except DebtValidationError as exc:
        raise _usage_error(exc) from exc
    _echo_projection(projection, show_schedule=show_schedule)


@main.command("compare")
@_projection_options
@click.pass_context
def compare(ctx, extra, max_months, start) -> None:
    """Compare avalanche and snowball side by side."""

    config = _config(ctx)
    try:
        results = compare_strategies(
            _accounts(ctx),
            extra,
            start_date=_parse_start(start),
            max_months=config.MAX_MONTHS if max_months is None else max_months,
        )
    except DebtValidationError as exc:
        raise _usage_error(exc) from exc
    for strategy, projection in results.items():
        click.echo(
            f"{strategy.value:<10} {format_duration(projection.months_to_payoff):>10}  "
            f"interest {_money(projection.total_interest_paid)}"
        )


@main.command("pay")
@click.argument("debt_id", type=int)
@click.argument("amount", type=DECIMAL)
@click.pass_context
def pay(ctx, debt_id, amount) -> None:
    """Record a payment against a debt."""

    try:
        result = _repo(ctx).record_payment(debt_id, amount)
    except DebtValidationError as exc:
        raise _usage_error(exc) from exc
    except DebtNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    except StaleDebtError as exc:
        raise click.ClickException(str(exc)) from exc

    payment = result.payment
    click.echo(
        f"Paid {_money(payment.amount)}: principal {_money(payment.principal_paid)}, "
        f"interest {_money(payment.interest_paid)}. "
        f"Balance now {_money(result.updated_debt.current_balance)}."
    )
    if result.unapplied > 0:
        click.echo(f"{_money(result.unapplied)} exceeded the amount owed and was not applied.")
    if result.paid_off:
        click.echo("Debt paid off!")


@main.command("export-schedule")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--strategy", type=STRATEGY_CHOICE, default=None)
@_projection_options
@click.pass_context
def export_schedule(ctx, output, strategy, extra, max_months, start) -> None:
    """Write the projected payoff schedule to a CSV file."""

    config = _config(ctx)
    try:
        projection = project_payoff(
            _accounts(ctx),
            strategy or config.DEFAULT_STRATEGY,
            extra,
            config.MAX_MONTHS if max_months is None else max_months,
            start_date=_parse_start(start),
        )
    except DebtValidationError as exc:
        raise _usage_error(exc) from exc
    path = export_schedule_csv(projection=projection, output_path=output)
    click.echo(f"Export written: {path}")


if __name__ == "__main__":  # pragma: no cover
    main()

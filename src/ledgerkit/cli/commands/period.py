"""Fiscal period commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.periods import FiscalPeriodService
from ledgerkit.utils.date_parser import parse_date, period_bounds


@click.group()
def period_group():
    """Manage fiscal periods."""
    pass


@period_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--start", "start_str", help="First day of the period")
@click.option("--end", "end_str", help="Last day of the period")
@click.option("--span", help="Derive dates from YYYY (fiscal year) or YYYY-MM (month)")
@click.option("--start-month", type=click.IntRange(1, 12), default=1, show_default=True,
              help="Month the fiscal year starts in, used with --span YYYY")
@click.pass_context
def create_period(ctx, name: str, start_str: str | None, end_str: str | None, span: str | None, start_month: int):
    """Create a fiscal period.

    Either give explicit --start and --end dates or a --span.

    Examples:
        ledgerkit period create FY2024 --span 2024
        ledgerkit period create FY2025 --span 2025 --start-month 3
        ledgerkit period create "March 2024" --start 2024-03-01 --end 2024-03-31
    """
    db = ctx.obj["db"]
    service = FiscalPeriodService(db)

    try:
        if span is not None:
            start_date, end_date = period_bounds(span, start_month=start_month)
        elif start_str is not None and end_str is not None:
            start_date, end_date = parse_date(start_str), parse_date(end_str)
        else:
            raise click.UsageError("Provide --span, or both --start and --end")

        period_id = service.create_period(
            company_id=ctx.obj["company_id"], name=name, start_date=start_date, end_date=end_date
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created fiscal period '{name}' {start_date} to {end_date} (ID: {period_id})")


@period_group.command("list")
@click.pass_context
def list_periods(ctx):
    """List fiscal periods ordered by start date."""
    db = ctx.obj["db"]
    service = FiscalPeriodService(db)

    periods = service.list_periods(ctx.obj["company_id"])
    if not periods:
        click.echo("No fiscal periods found.")
        return

    click.echo("\nFiscal periods:")
    click.echo("-" * 60)
    for p in periods:
        status = "closed" if p.is_closed else "open"
        click.echo(f"ID: {p.id:3d} | {p.name:15s} | {p.start_date} to {p.end_date} | {status}")


@period_group.command("close")
@click.argument("period_id", type=int)
@click.pass_context
def close_period(ctx, period_id: int):
    """Close a fiscal period to new transactions."""
    db = ctx.obj["db"]
    service = FiscalPeriodService(db)

    try:
        service.close_period(ctx.obj["company_id"], period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Closed fiscal period {period_id}")


def register_commands(cli):
    """Register fiscal period commands with main CLI."""
    cli.add_command(period_group, name="period")

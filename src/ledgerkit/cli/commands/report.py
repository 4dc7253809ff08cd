"""Reporting commands."""

from decimal import Decimal

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.entities import ZERO
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.ledger import LedgerService


def _fmt(amount: Decimal) -> str:
    """Format an amount for a report column; zero renders blank."""
    if amount == ZERO:
        return ""
    return f"{amount:,.2f}"


@click.group()
def report_group():
    """Show trial balances and account ledgers."""
    pass


@report_group.command("trial-balance")
@click.argument("period_id", type=int)
@click.option("--by-nature", is_flag=True, help="Also show closing totals per account nature")
@click.pass_context
def trial_balance(ctx, period_id: int, by_nature: bool):
    """Show the trial balance of a fiscal period."""
    db = ctx.obj["db"]
    service = LedgerService(db)
    company_id = ctx.obj["company_id"]

    try:
        entries = service.trial_balance(company_id, period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No balances for this period.")
        return

    totals = service.trial_balance_totals(entries)

    click.echo("\nTrial Balance:")
    click.echo("-" * 114)
    click.echo(
        f"{'Code':<8} {'Account':<30} {'Opening':>14} {'Debits':>14} {'Credits':>14} "
        f"{'Dr':>14} {'Cr':>14}"
    )
    click.echo("-" * 114)
    for e in entries:
        click.echo(
            f"{e.account_code:<8} {e.account_name[:30]:<30} {e.opening_balance:>14,.2f} "
            f"{_fmt(e.period_debits):>14} {_fmt(e.period_credits):>14} "
            f"{_fmt(e.debit_column):>14} {_fmt(e.credit_column):>14}"
        )
    click.echo("=" * 114)
    click.echo(f"{'Total':<84} {totals.total_debits:>14,.2f} {totals.total_credits:>14,.2f}")
    if totals.is_balanced:
        click.echo("Trial balance is balanced.")
    else:
        click.echo(f"Trial balance is NOT balanced (difference {totals.difference:,.2f}).")

    if by_nature:
        click.echo("\nBy nature:")
        for nature, amount in service.balances_by_nature(company_id, period_id).items():
            click.echo(f"  {nature.value:<12} {amount:>14,.2f}")


@report_group.command("ledger")
@click.argument("period_id", type=int)
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.pass_context
def ledger(ctx, period_id: int, account_code: str):
    """Show the general ledger of one account for a fiscal period."""
    db = ctx.obj["db"]
    service = LedgerService(db)

    try:
        account_ledger = service.ledger_lines(ctx.obj["company_id"], period_id, account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nLedger: {account_ledger.account_code} {account_ledger.account_name}")
    click.echo("-" * 100)
    click.echo(f"{'Date':<10} {'Reference':<10} {'Description':<32} {'Debit':>14} {'Credit':>14} {'Balance':>14}")
    click.echo("-" * 100)
    click.echo(f"{'':<10} {'':<10} {'Opening balance':<32} {'':>14} {'':>14} {account_ledger.opening_balance:>14,.2f}")
    for line in account_ledger.lines:
        click.echo(
            f"{line.entry_date!s:<10} {line.reference:<10} {(line.description or '')[:32]:<32} "
            f"{_fmt(line.debit_amount):>14} {_fmt(line.credit_amount):>14} {line.running_balance:>14,.2f}"
        )
    click.echo("=" * 100)
    click.echo(
        f"{'':<10} {'':<10} {'Closing balance':<32} {account_ledger.period_debits:>14,.2f} "
        f"{account_ledger.period_credits:>14,.2f} {account_ledger.closing_balance:>14,.2f}"
    )


def register_commands(cli):
    """Register reporting commands with main CLI."""
    cli.add_command(report_group, name="report")

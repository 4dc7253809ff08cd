"""Journal entry commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.journal_sync import JournalSyncService
from ledgerkit.domain.ledger import LedgerService
from ledgerkit.utils.amount_parser import parse_amount


@click.group()
def journal_group():
    """Generate journal entries."""
    pass


@journal_group.command("sync")
@click.option("--period", "period_id", type=int, help="Only sync this fiscal period")
@click.pass_context
def sync(ctx, period_id: int | None):
    """Post classified transactions that have no journal entry yet.

    Stops at the first transaction that cannot be posted and keeps nothing
    from the run.
    """
    db = ctx.obj["db"]
    service = JournalSyncService(db, created_by=ctx.obj["settings"].created_by)

    try:
        created = service.sync_journal_entries(ctx.obj["company_id"], period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {created} journal entr{'ies' if created != 1 else 'y'}")


@journal_group.command("regenerate")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def regenerate(ctx, yes: bool):
    """Delete and rebuild all transaction journal entries.

    Opening balance entries are kept. Transactions that cannot be posted are
    reported and skipped.
    """
    if not yes and not click.confirm("Delete and regenerate all transaction journal entries?"):
        click.echo("Regeneration cancelled.")
        return

    db = ctx.obj["db"]
    service = JournalSyncService(db, created_by=ctx.obj["settings"].created_by)

    result = service.regenerate_all_journal_entries(ctx.obj["company_id"])
    click.echo(f"Deleted {result.deleted_count}, created {result.created_count} journal entries")
    if result.has_failures:
        click.echo(f"Skipped {len(result.skipped)} transaction(s):", err=True)
        for skipped in result.skipped:
            click.echo(f"  {skipped.transaction_id}: {skipped.reason}", err=True)
        ctx.exit(1)


@journal_group.command("opening-balance")
@click.argument("period_id", type=int)
@click.argument("amount_str", metavar="AMOUNT")
@click.option("--equity", "equity_code", default="3300", show_default=True, help="Balancing equity account code")
@click.pass_context
def opening_balance(ctx, period_id: int, amount_str: str, equity_code: str):
    """Record the opening bank balance of a fiscal period.

    Replaces any opening balance previously recorded for the period.

    Examples:
        ledgerkit journal opening-balance 1 15000.00
        ledgerkit journal opening-balance 1 "2500.00 DR" --equity 3200
    """
    db = ctx.obj["db"]
    service = LedgerService(db)

    try:
        amount = parse_amount(amount_str)
        entry = service.create_opening_balance_entry(
            company_id=ctx.obj["company_id"],
            fiscal_period_id=period_id,
            amount=amount,
            equity_account_code=equity_code,
            created_by=ctx.obj["settings"].created_by,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded opening balance {amount} as {entry.reference}")


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")

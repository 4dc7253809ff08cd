"""Main CLI entry point."""

import logging

import click
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.errors import DomainError
from ledgerkit.settings import LOG_LEVELS, Settings

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    period,
    rule,
    transaction,
    classify,
    journal,
    report,
)



@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides LEDGERKIT_LOG_LEVEL environment variable)",
)
@click.option(
    "--company",
    "company_id",
    type=int,
    help="Company ID to work on (overrides LEDGERKIT_COMPANY_ID environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None, company_id: int | None):
    """Ledgerkit - Bank transaction classification and bookkeeping.

    Classify bank statement lines with mapping rules, post them as balanced
    journal entries and report trial balances and account ledgers.
    """
    ctx.ensure_object(dict)

    try:
        settings = Settings.from_env()
    except DomainError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.obj["settings"] = settings
    ctx.obj["company_id"] = company_id if company_id is not None else settings.company_id

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path or settings.db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
period.register_commands(cli)
rule.register_commands(cli)
transaction.register_commands(cli)
classify.register_commands(cli)
journal.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

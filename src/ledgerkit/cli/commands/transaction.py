"""Bank transaction commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.entities import ZERO
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage bank transactions."""
    pass


@transaction_group.command("add")
@click.argument("period_id", type=int)
@click.argument("date_str", metavar="DATE")
@click.argument("amount_str", metavar="AMOUNT")
@click.argument("description", metavar="DESCRIPTION")
@click.pass_context
def add_transaction(ctx, period_id: int, date_str: str, amount_str: str, description: str):
    """Record a bank statement line.

    A positive AMOUNT is money in (credit), a negative AMOUNT is money out
    (debit). Statement suffixes CR/DR are understood.

    Examples:
        ledgerkit transaction add 1 2024-03-05 1000.00 "INTEREST RECEIVED"
        ledgerkit transaction add 1 2024-03-06 -- -45.50 "MONTHLY BANK FEE"
        ledgerkit transaction add 1 2024-03-07 "45.50 DR" "MONTHLY BANK FEE"
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        txn_date = parse_date(date_str)
        amount = parse_amount(amount_str)
    except ValueError as e:
        handle_domain_error(ctx, e)

    debit_amount = -amount if amount < ZERO else ZERO
    credit_amount = amount if amount > ZERO else ZERO

    try:
        transaction_id = service.create_transaction(
            company_id=ctx.obj["company_id"],
            fiscal_period_id=period_id,
            transaction_date=txn_date,
            description=description,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--period", "period_id", type=int, help="Fiscal period ID")
@click.option("--unclassified", is_flag=True, help="Only show unclassified transactions")
@click.option("--classified", is_flag=True, help="Only show classified transactions")
@click.pass_context
def list_transactions(ctx, period_id: int | None, unclassified: bool, classified: bool):
    """List bank transactions in date order."""
    if classified and unclassified:
        click.echo("Error: --classified and --unclassified are mutually exclusive", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    service = TransactionService(db)

    filter_classified = True if classified else (False if unclassified else None)
    transactions = service.list_transactions(
        company_id=ctx.obj["company_id"], fiscal_period_id=period_id, classified=filter_classified
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5s}  {'Date':10s}  {'Amount':>12s}  {'Class.':8s}  Description")
    click.echo("-" * 80)
    for txn in transactions:
        amount = txn.amount if txn.is_credit else -txn.amount
        if txn.has_account_pair:
            target = "pair"
        else:
            target = txn.account_code or "-"
        click.echo(
            f"{txn.id:5d}  {txn.transaction_date}  {amount:12.2f}  {target:8s}  {txn.description or ''}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")

"""Transaction classification commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.classifier import ClassificationService
from ledgerkit.domain.errors import DomainError


@click.group()
def classify_group():
    """Classify bank transactions."""
    pass


@classify_group.command("auto")
@click.argument("period_id", type=int)
@click.pass_context
def auto_classify(ctx, period_id: int):
    """Apply mapping rules to unclassified transactions of a period.

    Transactions no rule matches stay unclassified.
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)
    company_id = ctx.obj["company_id"]

    try:
        count = service.auto_classify(company_id, period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    remaining = service.count_unclassified(company_id, period_id)
    click.echo(f"Classified {count} transaction{'s' if count != 1 else ''}")
    if remaining:
        click.echo(f"{remaining} transaction{'s' if remaining != 1 else ''} still unclassified")


@classify_group.command("set")
@click.argument("transaction_id", type=int)
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.pass_context
def set_account(ctx, transaction_id: int, account_code: str):
    """Classify a transaction to one account; the bank is the other side."""
    db = ctx.obj["db"]
    service = ClassificationService(db)

    try:
        service.classify_manually(transaction_id, account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Classified transaction {transaction_id} to {account_code}")


@classify_group.command("pair")
@click.argument("transaction_id", type=int)
@click.argument("debit_code", metavar="DEBIT_CODE")
@click.argument("credit_code", metavar="CREDIT_CODE")
@click.pass_context
def set_pair(ctx, transaction_id: int, debit_code: str, credit_code: str):
    """Classify a transaction with an explicit debit and credit account."""
    db = ctx.obj["db"]
    chart = ChartOfAccountsService(db)
    service = ClassificationService(db)
    company_id = ctx.obj["company_id"]

    try:
        debit_account = chart.require_account(company_id, debit_code)
        credit_account = chart.require_account(company_id, credit_code)
        service.classify_with_pair(transaction_id, debit_account.id, credit_account.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Classified transaction {transaction_id}: debit {debit_code}, credit {credit_code}")


@classify_group.command("clear")
@click.argument("transaction_id", type=int)
@click.pass_context
def clear(ctx, transaction_id: int):
    """Remove the classification of a transaction."""
    db = ctx.obj["db"]
    service = ClassificationService(db)

    try:
        service.clear_classification(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Cleared classification of transaction {transaction_id}")


@classify_group.command("reclassify")
@click.argument("period_id", type=int)
@click.pass_context
def reclassify(ctx, period_id: int):
    """Re-apply the current rules to a period's transactions.

    Transactions with an explicit debit/credit pair are left alone.
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)

    try:
        changed = service.reclassify_all(ctx.obj["company_id"], period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Reclassified {changed} transaction{'s' if changed != 1 else ''}")


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify_group, name="classify")

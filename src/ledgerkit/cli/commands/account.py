"""Chart of accounts commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.entities import AccountNature
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.rules import MappingRuleService


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--nature",
    type=click.Choice([n.value for n in AccountNature]),
    required=True,
    help="Account nature",
)
@click.option("--bank", is_flag=True, help="Mark as the bank/cash account used for postings")
@click.pass_context
def create_account(ctx, code: str, name: str, nature: str, bank: bool):
    """Create a new account.

    Examples:
        ledgerkit account create 1230 "Bank" --nature asset --bank
        ledgerkit account create 7200 "Bank Charges" --nature expense
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        account_id = service.create_account(
            company_id=ctx.obj["company_id"], code=code, name=name, nature=nature, is_bank=bank
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account {code} '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide deactivated accounts")
@click.pass_context
def list_accounts(ctx, active_only: bool):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    accounts = service.list_accounts(ctx.obj["company_id"], active_only=active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        flags = []
        if acc.is_bank:
            flags.append("bank")
        if not acc.is_active:
            flags.append("inactive")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{acc.code:8s} | {acc.name:35s} | {acc.nature.value:9s}{suffix}")


@account_group.command("deactivate")
@click.argument("code", metavar="CODE")
@click.pass_context
def deactivate_account(ctx, code: str):
    """Deactivate an account so nothing new can be posted to it."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        service.deactivate_account(ctx.obj["company_id"], code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated account {code}")


@account_group.command("init-chart")
@click.option("--with-rules", is_flag=True, help="Also seed the default mapping rules")
@click.pass_context
def init_chart(ctx, with_rules: bool):
    """Create the default chart of accounts.

    Accounts that already exist are left untouched, so this is safe to run
    more than once.
    """
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]

    created = ChartOfAccountsService(db).initialize_chart_of_accounts(company_id)
    click.echo(f"Created {created} account{'s' if created != 1 else ''}")

    if with_rules:
        rules_created = MappingRuleService(db).initialize_default_rules(company_id)
        click.echo(f"Created {rules_created} mapping rule{'s' if rules_created != 1 else ''}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")

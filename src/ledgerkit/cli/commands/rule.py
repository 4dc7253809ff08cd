"""Mapping rule commands."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.entities import MatchType
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.rules import MappingRuleService


@click.group()
def rule_group():
    """Manage mapping rules."""
    pass


@rule_group.command("add")
@click.argument("pattern", metavar="PATTERN")
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.option("--name", help="Rule name (defaults to the pattern)")
@click.option("--priority", type=int, default=0, show_default=True, help="Higher priorities are tried first")
@click.option(
    "--match",
    "match_type",
    type=click.Choice([m.value for m in MatchType]),
    default=MatchType.CONTAINS.value,
    show_default=True,
    help="How the pattern is compared with descriptions",
)
@click.pass_context
def add_rule(ctx, pattern: str, account_code: str, name: str | None, priority: int, match_type: str):
    """Add a rule mapping descriptions to an account.

    Matching ignores case.

    Examples:
        ledgerkit rule add "BANK FEE" 7200 --priority 10
        ledgerkit rule add "^SALARY" 7100 --match regex
    """
    db = ctx.obj["db"]
    service = MappingRuleService(db)

    try:
        rule_id = service.create_rule(
            company_id=ctx.obj["company_id"],
            name=name or pattern,
            pattern=pattern,
            account_code=account_code,
            priority=priority,
            match_type=match_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created rule {rule_id}: {match_type} '{pattern}' -> {account_code} (priority {priority})")


@rule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List rules in evaluation order."""
    db = ctx.obj["db"]
    service = MappingRuleService(db)

    rules = service.list_rules(ctx.obj["company_id"])
    if not rules:
        click.echo("No mapping rules found.")
        return

    click.echo("\nMapping rules:")
    click.echo("-" * 80)
    for r in rules:
        status = "" if r.is_active else " [inactive]"
        click.echo(
            f"ID: {r.id:3d} | P{r.priority:<4d} | {r.match_type.value:11s} | "
            f"{r.pattern:30s} -> {r.account_code}{status}"
        )


@rule_group.command("deactivate")
@click.argument("rule_id", type=int)
@click.pass_context
def deactivate_rule(ctx, rule_id: int):
    """Deactivate a rule."""
    db = ctx.obj["db"]
    service = MappingRuleService(db)

    try:
        service.deactivate_rule(ctx.obj["company_id"], rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated rule {rule_id}")


def register_commands(cli):
    """Register mapping rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")

"""CLI entry point for scope-authz.

Invoked as::

    scope-authz [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m scope_authz.cli.main

Commands
--------
- catalog show   Print the permission catalog as a tree or JSON listing
- check          Decide whether a role/grant set grants a permission path
- resolve        Print the effective scope claims for a role/grant set
- validate       Load a catalog (and roles) and report configuration errors
- version        Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from scope_authz.catalog.catalog import PermissionCatalog
from scope_authz.catalog.loader import CatalogLoader
from scope_authz.catalog.permission import Permission
from scope_authz.errors import AuthorizationError
from scope_authz.evaluation.strategies import strategy_names

if TYPE_CHECKING:
    from scope_authz.convenience import AuthorizationEngine
    from scope_authz.evaluation.resolver import ResolutionResult

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _parse_params(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in values:
        name, separator, value = item.partition("=")
        if not separator or not name.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}")
        parsed[name.strip()] = value.strip()
    return parsed


def _engine_options(func: Callable[..., None]) -> Callable[..., None]:
    """Options shared by commands that build an engine."""
    options = [
        click.option(
            "--catalog",
            "-c",
            "catalog_path",
            required=True,
            type=click.Path(exists=True, dir_okay=False),
            help="Path to the permission catalog YAML.",
        ),
        click.option(
            "--roles",
            "-r",
            "roles_path",
            default=None,
            type=click.Path(exists=True, dir_okay=False),
            help="Path to the role definitions YAML.",
        ),
        click.option(
            "--role",
            "role_codes",
            multiple=True,
            help="Role code to assign (repeatable).",
        ),
        click.option(
            "--param",
            "-p",
            "params",
            multiple=True,
            callback=_parse_params,
            help="Role parameter as NAME=VALUE (repeatable).",
        ),
        click.option(
            "--grant",
            "-g",
            "grants",
            multiple=True,
            help="Direct grant directive, e.g. 'deny:api:auth:apikeys:revoke' (repeatable).",
        ),
        click.option(
            "--precedence",
            type=click.Choice(strategy_names()),
            default="most_specific",
            show_default=True,
            help="Precedence strategy for competing directives.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_directives(
    catalog_path: str,
    roles_path: str | None,
    role_codes: tuple[str, ...],
    params: dict[str, str],
    grants: tuple[str, ...],
    precedence: str,
) -> tuple[AuthorizationEngine, ResolutionResult]:
    from scope_authz.convenience import AuthorizationEngine
    from scope_authz.grants.grant import UserPermissionGrant
    from scope_authz.scopes.directive import ScopeDirective

    try:
        engine = AuthorizationEngine.from_files(catalog_path, roles_path, precedence)
        assignments = [
            engine.store.assign_role("cli", code, params) for code in role_codes
        ]
        direct = []
        for token in grants:
            directive = ScopeDirective.parse(token)
            direct.append(UserPermissionGrant(directive.type, directive.pattern))
        result = engine.resolver.resolve_detailed(assignments, direct)
    except AuthorizationError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(2)

    for skipped in result.skipped:
        err_console.print(
            f"[yellow]Skipped[/yellow] {escape(str(skipped.template))} "
            f"(role {escape(skipped.role_code)}): {escape(skipped.reason)}"
        )
    return engine, result


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Scope authorization CLI: catalog, role and permission tools."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from scope_authz import __version__

    console.print(
        Panel(
            f"[bold]scope-authz[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Hierarchical scope-based permission authorization engine.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# catalog group
# ---------------------------------------------------------------------------


@cli.group(name="catalog")
def catalog_group() -> None:
    """Permission catalog commands."""


def _add_branch(tree: Tree, permission: Permission) -> None:
    label = f"[cyan]{':'.join(permission.local_segments)}[/cyan]"
    if permission.is_read:
        label += " [green](read)[/green]"
    elif permission.is_write:
        label += " [magenta](write)[/magenta]"
    if permission.description:
        label += f"  [dim]{permission.description}[/dim]"
    branch = tree.add(label)
    for child in permission.children:
        _add_branch(branch, child)


@catalog_group.command(name="show")
@click.option(
    "--catalog",
    "-c",
    "catalog_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the permission catalog YAML.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the JSON listing instead of a tree.")
def catalog_show_command(catalog_path: str, as_json: bool) -> None:
    """Print the permission catalog."""
    try:
        catalog: PermissionCatalog = CatalogLoader().load(catalog_path)
    except AuthorizationError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(catalog.to_listing(), indent=2))
        return

    tree = Tree(f"[bold]Permission catalog[/bold] ({len(catalog)} nodes)")
    for root in catalog.roots:
        _add_branch(tree, root)
    console.print(tree)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@_engine_options
@click.option("--path", "target", required=True, help="Concrete permission path to check.")
def check_command(
    catalog_path: str,
    roles_path: str | None,
    role_codes: tuple[str, ...],
    params: dict[str, str],
    grants: tuple[str, ...],
    precedence: str,
    target: str,
) -> None:
    """Decide whether the given roles and grants allow a permission path."""
    engine, result = _resolve_directives(
        catalog_path, roles_path, role_codes, params, grants, precedence
    )
    decision = engine.check(result.directives, target)

    status_str = "[green]ALLOW[/green]" if decision.allowed else "[red]DENY[/red]"
    console.print(
        Panel(
            f"{status_str}  {target}\n  {decision.reason}",
            title="Permission Check",
            border_style="blue",
        )
    )

    if decision.matches:
        winning = set(decision.winning)
        table = Table(title="Matching Directives", box=box.SIMPLE)
        table.add_column("Directive", style="cyan")
        table.add_column("Specificity", justify="right")
        table.add_column("Winning")
        for match in decision.matches:
            table.add_row(
                str(match.directive),
                str(match.specificity),
                "yes" if match in winning else "",
            )
        console.print(table)

    sys.exit(0 if decision.allowed else 1)


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


@cli.command(name="resolve")
@_engine_options
@click.option("--json", "as_json", is_flag=True, help="Print the claims as a JSON array.")
def resolve_command(
    catalog_path: str,
    roles_path: str | None,
    role_codes: tuple[str, ...],
    params: dict[str, str],
    grants: tuple[str, ...],
    precedence: str,
    as_json: bool,
) -> None:
    """Print the effective scope claims for the given roles and grants."""
    _, result = _resolve_directives(
        catalog_path, roles_path, role_codes, params, grants, precedence
    )
    claims = [str(directive) for directive in result.directives]
    if as_json:
        click.echo(json.dumps(claims))
        return
    for claim in claims:
        click.echo(claim)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.option(
    "--catalog",
    "-c",
    "catalog_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the permission catalog YAML.",
)
@click.option(
    "--roles",
    "-r",
    "roles_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to the role definitions YAML.",
)
def validate_command(catalog_path: str, roles_path: str | None) -> None:
    """Load the catalog and roles and report any configuration error."""
    from scope_authz.roles.loader import RoleLoader

    try:
        catalog = CatalogLoader().load(catalog_path)
        roles = RoleLoader(catalog).load(roles_path) if roles_path else None
    except AuthorizationError as exc:
        console.print(
            Panel(
                f"[red]INVALID[/red]  {escape(str(exc))}",
                title="Validation",
                border_style="red",
            )
        )
        sys.exit(1)

    summary = f"[green]VALID[/green]  {len(catalog)} permissions"
    if roles is not None:
        summary += f", {len(roles)} roles"
    console.print(Panel(summary, title="Validation", border_style="green"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()

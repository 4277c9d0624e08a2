"""Collection commands.

CLI commands for inspecting the built-in registry and running the
collection filter with settings and command line overrides.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.table import Table

from ..console import console
from ..errors import CollectionFilterError
from ..kuberesource import default_excluded_resource_kinds
from ..kuberesource import disable_excluded_collections
from ..kuberesource import is_required_for_service_discovery
from ..schema import Metadata
from ..schema import Schemas
from ..schema import must_get
from ..schema.registry import describe
from ..settings import FilterSettings
from ..settings import get_settings

logger = logging.getLogger(__name__)


@click.group()
def collections():
    """Inspect and filter collections.

    Examples:

        \b
        # List every known collection
        collection-filter collections list

        \b
        # Show which collections stay enabled
        collection-filter collections filter --service-discovery

        \b
        # Exclude extra kinds and require one output
        collection-filter collections filter --exclude ConfigMap \\
            --require istio/networking/v1alpha3/virtualservices
    """


def _load_metadata() -> Metadata:
    try:
        return must_get()
    except CollectionFilterError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def _schemas_to_rows(schemas: Schemas) -> list[dict[str, Any]]:
    return [
        {"name": s.name, "group": s.group, "kind": s.kind, "disabled": s.disabled}
        for s in sorted(schemas, key=lambda s: s.name)
    ]


@collections.command(name="list")
@click.option("--kube", is_flag=True, help="Only list collections sourced from Kubernetes")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def collections_list(kube: bool, as_json: bool):
    """List the built-in collections."""
    metadata = _load_metadata()
    schemas = metadata.kube_collections() if kube else metadata.collections

    if as_json:
        click.echo(json.dumps(_schemas_to_rows(schemas), indent=2))
        return

    if not len(schemas):
        console.print("[yellow]No collections found.[/yellow]")
        return

    table = Table(title="Collections", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Group", style="yellow")
    table.add_column("Kind")

    for row in _schemas_to_rows(schemas):
        table.add_row(row["name"], row["group"] or "(core)", row["kind"])

    console.print(table)
    if not kube:
        summary = describe(metadata)
        console.print(
            f"\n[dim]{summary['kube_collections']} of {summary['collections']} collections from Kubernetes, "
            f"{summary['transforms']} transforms[/dim]"
        )


@collections.command(name="excluded")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a list")
def collections_excluded(as_json: bool):
    """Show the resource kinds excluded by default."""
    _load_metadata()
    kinds = sorted(default_excluded_resource_kinds())

    if as_json:
        click.echo(json.dumps(kinds))
        return

    console.print("[bold]Excluded by default:[/bold]")
    for kind in kinds:
        console.print(f"  • {kind}")


@collections.command(name="inputs")
@click.argument("names", nargs=-1, required=True)
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Settings file to merge")
def collections_inputs(names: tuple[str, ...], config: Path | None):
    """Show the upstream inputs of the named output collections."""
    metadata = _load_metadata()
    settings = _load_settings(config)
    providers = settings.providers(metadata.transforms)

    inputs = sorted(providers.required_inputs_for(names))
    if not inputs:
        console.print("[yellow]No upstream inputs.[/yellow]")
        return
    for name in inputs:
        click.echo(name)


@collections.command(name="filter")
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Settings file to merge")
@click.option("--exclude", "-x", "exclude", multiple=True, help="Kind to exclude (repeatable, replaces settings)")
@click.option(
    "--no-default-excludes",
    is_flag=True,
    help="Ignore excluded kinds from settings and defaults; only --exclude applies",
)
@click.option(
    "--service-discovery/--no-service-discovery",
    "service_discovery",
    default=None,
    help="Re-enable kinds needed for service discovery",
)
@click.option("--require", "-r", "require", multiple=True, help="Required output collection (repeatable)")
@click.option("--disabled-only", is_flag=True, help="Only show disabled collections")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def collections_filter(
    config: Path | None,
    exclude: tuple[str, ...],
    no_default_excludes: bool,
    service_discovery: bool | None,
    require: tuple[str, ...],
    disabled_only: bool,
    as_json: bool,
):
    """Run the collection filter over the Kubernetes collections."""
    metadata = _load_metadata()
    settings = _load_settings(config)
    providers = settings.providers(metadata.transforms)

    excluded_kinds = _resolve_excluded_kinds(exclude, settings, no_default_excludes)
    enable_service_discovery = (
        service_discovery if service_discovery is not None else settings.enable_service_discovery
    )
    required = list(require) or settings.required_collections or sorted(providers.outputs())

    logger.info(
        "Filtering collections",
        extra={
            "event": "filter",
            "excluded_kinds": excluded_kinds,
            "enable_service_discovery": enable_service_discovery,
            "required_collections": required,
        },
    )
    result = disable_excluded_collections(
        metadata.kube_collections(),
        providers,
        required,
        excluded_kinds,
        enable_service_discovery,
    )
    if disabled_only:
        result = result.disabled()

    if as_json:
        click.echo(json.dumps(_schemas_to_rows(result), indent=2))
        return

    _render_filter_table(result, excluded_kinds, enable_service_discovery)


def _load_settings(config: Path | None) -> FilterSettings:
    try:
        return get_settings(config_file=config).load()
    except CollectionFilterError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def _resolve_excluded_kinds(
    exclude: tuple[str, ...], settings: FilterSettings, no_default_excludes: bool = False
) -> list[str]:
    """Command line kinds win, then settings, then the default excluded kinds."""
    if exclude or no_default_excludes:
        return list(exclude)
    if settings.excluded_kinds is not None:
        return list(settings.excluded_kinds)
    return default_excluded_resource_kinds()


def _render_filter_table(result: Schemas, excluded_kinds: list[str], enable_service_discovery: bool) -> None:
    table = Table(title="Filtered Collections", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Kind")
    table.add_column("Status")

    for s in sorted(result, key=lambda s: s.name):
        if not s.disabled:
            status = "[bold green]enabled[/bold green]"
        elif s.kind in excluded_kinds and not (
            enable_service_discovery and is_required_for_service_discovery(s)
        ):
            status = "[red]excluded[/red]"
        else:
            status = "[yellow]not required[/yellow]"
        table.add_row(s.name, s.kind, status)

    console.print(table)
    console.print(f"\n[dim]{len(result.enabled())} enabled, {len(result.disabled())} disabled[/dim]")

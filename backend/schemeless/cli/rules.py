"""CLI rules command implementation.

This module implements the `schemeless rules` command group for inspecting
the rule tables the validator checks against, optionally extended from a
YAML overrides file.
"""

import json
import sys

from rich.console import Console
from rich.table import Table
import rich_click as click
import yaml

from ..core import RulesLoadError, RuleTables, ValidatorSettings, load_rules

# Create console for rich formatting
console = Console()

_TABLE_TITLES = {
    "schema_elements": "Schema elements",
    "optional_field_properties": "Optional field properties",
    "class_prefixes": "Class namespace prefixes",
    "field_type_classes": "Supported field type classes",
    "deprecated_field_type_classes": "Deprecated field type classes",
    "field_type_properties": "Generic fieldType properties",
    "reserved_names": "Reserved names",
    "constant_names": "Constant names (duplicates allowed)",
}


def _rules_as_dict(rules: RuleTables) -> dict[str, list[str]]:
    return {table: list(getattr(rules, table)) for table in _TABLE_TITLES}


@click.group(name="rules")
def rules_command() -> None:
    """📐 **Rule tables** - Inspect what the validator accepts.

    Commands for listing the schema elements, field properties and field
    type classes the validator recognizes.
    """
    pass


@rules_command.command(name="show")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format for the rule tables",
    show_default=True,
)
@click.option(
    "--rules",
    "rules_file",
    type=click.Path(exists=False, dir_okay=False),
    help="YAML file extending the built-in rule tables",
    metavar="PATH",
)
def show_command(output_format: str, rules_file: str | None) -> None:
    """📋 **Show the effective rule tables.**

    \b
    Examples:
        schemeless rules show
        schemeless rules show --format yaml > rules.yaml
        schemeless rules show --rules extra-rules.yaml
    """
    try:
        rules = load_rules(rules_file or ValidatorSettings().rules_file)
    except RulesLoadError as e:
        console.print(f"❌ [bold red]Cannot load rules:[/bold red] {e}")
        for detail in e.errors:
            console.print(f"   • {detail}")
        sys.exit(4)

    data = _rules_as_dict(rules)

    if output_format == "json":
        click.echo(json.dumps(data, indent=2))
        return
    if output_format == "yaml":
        click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False))
        return

    for table_name, title in _TABLE_TITLES.items():
        table = Table(title=title, show_header=False, title_justify="left")
        table.add_column("value", style="cyan")
        for value in data[table_name]:
            table.add_row(value)
        console.print(table)


__all__ = ["rules_command", "show_command"]

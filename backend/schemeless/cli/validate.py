"""CLI validation command implementation.

This module implements the `schemeless validate` command, validating a Solr
schema file with multiple output formats and detailed error reporting.
"""

import json
from pathlib import Path
import sys
import traceback
from typing import Any, NoReturn

from rich.console import Console
from rich.markup import escape
from rich.table import Table
import rich_click as click
import yaml

from ..core import (
    RulesLoadError,
    ValidatorSettings,
    bind_context,
    clear_context,
    configure_logging,
    load_rules,
)
from ..validation import SchemaValidator, ValidationResult

# Create console for rich formatting - auto-detects if we're in interactive environment
console = Console()


def _should_use_rich_formatting(force_colors: bool = False) -> bool:
    """Determine if we should use rich formatting based on environment."""
    return force_colors or console.is_terminal


def _format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes < 1024:
        return f"{size_bytes} bytes"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def _error_location(result: ValidationResult) -> str | None:
    """Describe the element an error was found in, e.g. ``field 'id'``."""
    error = result.error
    if error is None or error.element is None:
        return None
    if error.name:
        return f"{error.element} '{error.name}'"
    return error.element


def _output_table_format(  # noqa: PLR0912
    result: ValidationResult,
    file_path: str,
    verbose: bool,
    file_size: int,
    force_colors: bool = False,
) -> None:
    """Output validation result in table format."""
    stats = result.stats
    if result.is_valid:
        if _should_use_rich_formatting(force_colors):
            console.print("✅ [bold green]Validation successful[/bold green]")
            console.print()

            info_table = Table(show_header=False, box=None, padding=(0, 1))
            info_table.add_row("[bold]File:[/bold]", f"[cyan]{file_path}[/cyan]")
            info_table.add_row(
                "[bold]Fields:[/bold]", f"[yellow]{stats.fields}[/yellow]"
            )
            info_table.add_row(
                "[bold]Field types:[/bold]", f"[yellow]{stats.field_types}[/yellow]"
            )
            info_table.add_row(
                "[bold]Unique key:[/bold]",
                f"[magenta]{result.unique_key or 'None'}[/magenta]",
            )

            if verbose:
                info_table.add_row(
                    "[bold]File size:[/bold]",
                    f"[dim]{_format_file_size(file_size)}[/dim]",
                )
                info_table.add_row(
                    "[bold]Validated in:[/bold]", f"[dim]{result.duration_ms:.1f}ms[/dim]"
                )
                info_table.add_row(
                    "[bold]Elements:[/bold]", f"[dim]{stats.elements}[/dim]"
                )
                info_table.add_row(
                    "[bold]Dynamic fields:[/bold]", f"[dim]{stats.dynamic_fields}[/dim]"
                )
                info_table.add_row(
                    "[bold]Copy fields:[/bold]", f"[dim]{stats.copy_fields}[/dim]"
                )

            console.print(info_table)
        else:
            # Plain text for non-interactive (CI)
            click.echo("✅ Validation successful")
            click.echo()
            click.echo(f"File: {file_path}")
            click.echo(f"Fields: {stats.fields}")
            click.echo(f"Field types: {stats.field_types}")
            click.echo(f"Unique key: {result.unique_key or 'None'}")
            if verbose:
                click.echo(f"File size: {_format_file_size(file_size)}")
                click.echo(f"Validated in: {result.duration_ms:.1f}ms")
                click.echo(f"Elements: {stats.elements}")
                click.echo(f"Dynamic fields: {stats.dynamic_fields}")
                click.echo(f"Copy fields: {stats.copy_fields}")
        return

    error = result.error
    assert error is not None
    location = _error_location(result)

    if _should_use_rich_formatting(force_colors):
        console.print("❌ [bold red]Validation failed[/bold red]")
        console.print()

        info_table = Table(show_header=False, box=None, padding=(0, 1))
        info_table.add_row("[bold]File:[/bold]", f"[cyan]{file_path}[/cyan]")
        info_table.add_row(
            "[bold red]Error:[/bold red]", f"[red]{error.type.value}[/red]"
        )
        if location:
            info_table.add_row(
                "[bold]Element:[/bold]", f"[bold yellow]{location}[/bold yellow]"
            )
        console.print(info_table)
        console.print()

        error_content = [f"[dim]{escape(error.message)}[/dim]"]
        if error.help:
            error_content.append(f"💡 [italic green]{escape(error.help)}[/italic green]")
        if error.line is not None:
            error_content.append(
                f"📍 [dim]Line {error.line}, Column {error.column or 1}[/dim]"
            )
        console.print("\n".join(error_content))

        if verbose:
            console.print()
            console.print(
                f"[bold]Elements checked before failure:[/bold] {stats.elements}"
            )
    else:
        click.echo("❌ Validation failed")
        click.echo()
        click.echo(f"File: {file_path}")
        click.echo(f"Error: {error.type.value}")
        if location:
            click.echo(f"Element: {location}")
        click.echo()
        click.echo(f"❌ {error.message}")

        if error.help:
            click.echo(f"   💡 Help: {error.help}")

        if error.line is not None:
            click.echo(f"   📍 Line {error.line}, Column {error.column or 1}")

        if verbose:
            click.echo()
            click.echo(f"Elements checked before failure: {stats.elements}")


def _output_compact_format(
    result: ValidationResult,
    file_path: str,
    verbose: bool,
    file_size: int,
    force_colors: bool = False,
) -> None:
    """Output validation result in compact format."""
    rich = _should_use_rich_formatting(force_colors)

    if result.is_valid:
        parts = [
            "✅ VALID",
            f"file={file_path}",
            f"fields={result.stats.fields}",
            f"types={result.stats.field_types}",
        ]
        if verbose:
            parts.extend(
                [
                    f"size={_format_file_size(file_size)}",
                    f"validated={result.duration_ms:.1f}ms",
                    f"elements={result.stats.elements}",
                ]
            )
        if rich:
            parts[0] = "[bold green]✅ VALID[/bold green]"
            console.print(" ".join(parts))
        else:
            click.echo(" ".join(parts))
        return

    error = result.error
    assert error is not None
    parts = ["❌ INVALID", f"file={file_path}", f"error={error.type.value}"]
    if rich:
        parts[0] = "[bold red]❌ INVALID[/bold red]"
        console.print(" ".join(parts))
        console.print(f"  [red]❌[/red] [dim]{escape(error.message)}[/dim]")
    else:
        click.echo(" ".join(parts))
        click.echo(f"  ❌ {error.message}")


def _build_output(
    result: ValidationResult, file_path: str, verbose: bool, file_size: int
) -> dict[str, Any]:
    """Build the structured output shared by the JSON and YAML formats."""
    output: dict[str, Any] = {
        "status": "valid" if result.is_valid else "invalid",
        "file": file_path,
    }

    if result.is_valid:
        output["unique_key"] = result.unique_key
    elif result.error is not None:
        output["error"] = result.error.to_dict()

    if verbose:
        output["file_size"] = file_size
        output["duration_ms"] = round(result.duration_ms, 1)
        output["stats"] = result.stats.to_dict()

    return output


def _output_json_format(
    result: ValidationResult, file_path: str, verbose: bool, file_size: int
) -> None:
    """Output validation result in JSON format."""
    click.echo(json.dumps(_build_output(result, file_path, verbose, file_size), indent=2))


def _output_yaml_format(
    result: ValidationResult, file_path: str, verbose: bool, file_size: int
) -> None:
    """Output validation result in YAML format."""
    click.echo(
        yaml.dump(
            _build_output(result, file_path, verbose, file_size),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    )


def _fail(format: str, error_type: str, message: str, file: str, code: int) -> NoReturn:
    """Report a non-validation failure and exit with ``code``."""
    error_output = {
        "status": "error",
        "error_type": error_type,
        "message": message,
        "file": file,
    }
    if format == "json":
        click.echo(json.dumps(error_output, indent=2))
    elif format == "yaml":
        click.echo(
            yaml.dump(
                error_output, default_flow_style=False, sort_keys=False, allow_unicode=True
            )
        )
    else:
        click.echo(f"❌ {message}")
    sys.exit(code)


def _validate_implementation(  # noqa: PLR0912
    file: str,
    format: str,
    verbose: bool,
    rules_file: str | None,
    strict_attributes: bool,
    force_colors: bool,
) -> None:
    """Validate ``file`` and exit with the documented exit code."""
    file_path = Path(file)
    settings = ValidatorSettings()
    configure_logging(
        environment=settings.environment,
        log_level=settings.log_level,
        json_logs=settings.json_logs,
    )
    bind_context(file=str(file_path))

    try:
        if not file_path.exists():
            if verbose and format not in ("json", "yaml"):
                click.echo(f"Checked path: {file_path.absolute()}")
            _fail(format, "file_not_found", f"File not found: {file}", str(file_path), 2)

        if not file_path.is_file():
            _fail(format, "file_read_error", f"Not a file: {file}", str(file_path), 2)

        file_size = file_path.stat().st_size

        try:
            rules = load_rules(rules_file or settings.rules_file)
        except RulesLoadError as e:
            message = f"Cannot load rules: {e}"
            if e.errors:
                message += " (" + "; ".join(e.errors) + ")"
            _fail(format, "rules_load_error", message, str(file_path), 4)

        validator = SchemaValidator(
            rules,
            settings,
            strict_attributes=True if strict_attributes else None,
        )

        try:
            result = validator.validate_file(file_path)
        except OSError as e:
            _fail(format, "file_read_error", f"Cannot read file: {e}", str(file_path), 2)

        if format == "table":
            _output_table_format(result, str(file_path), verbose, file_size, force_colors)
        elif format == "compact":
            _output_compact_format(result, str(file_path), verbose, file_size, force_colors)
        elif format == "json":
            _output_json_format(result, str(file_path), verbose, file_size)
        elif format == "yaml":
            _output_yaml_format(result, str(file_path), verbose, file_size)

        sys.exit(0 if result.is_valid else 1)

    except KeyboardInterrupt:
        _fail(format, "interrupted", "Validation interrupted", file, 4)
    except Exception as e:
        if format not in ("json", "yaml") and verbose and not settings.is_production:
            click.echo(f"❌ Internal error: {e}")
            click.echo("\nFull traceback:")
            click.echo(traceback.format_exc())
            sys.exit(4)
        _fail(format, "internal_error", f"Internal error: {e}", file, 4)
    finally:
        clear_context()


@click.command("validate")
@click.argument(
    "file",
    type=click.Path(exists=False),
    required=False,
    default="managed-schema.xml",
)
@click.option(
    "--format",
    type=click.Choice(["table", "compact", "json", "yaml"]),
    default="table",
    help="📋 **Output format** for validation results",
    show_default=True,
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="🔍 **Show detailed information** - file size, timing, element counts",
)
@click.option(
    "--rules",
    "rules_file",
    type=click.Path(exists=False, dir_okay=False),
    help="📐 **YAML file extending the built-in rule tables**",
    metavar="PATH",
)
@click.option(
    "--strict-attributes",
    is_flag=True,
    help="⚡ **Reject repeated attribute keys** within one element",
)
@click.option(
    "--force-colors",
    is_flag=True,
    help="🎨 **Force colored output** - useful for testing rich formatting",
    hidden=True,
)
def validate_command(
    file: str,
    format: str,
    verbose: bool,
    rules_file: str | None,
    strict_attributes: bool,
    force_colors: bool,
) -> None:
    """🔍 **Validate a Solr schema file**

    Checks every element of FILE (default: managed-schema.xml) against the
    supported schema constructs, then resolves field types, copyField
    endpoints and the uniqueKey. Validation stops at the first problem.

    **Examples:**

    ```bash
    schemeless validate                        # Validate managed-schema.xml
    schemeless validate conf/schema.xml        # Validate specific file
    schemeless validate --format json          # JSON output
    schemeless validate --rules extra.yaml     # Allow custom field type classes
    ```

    **Exit Codes:**
    - `0`: Validation successful ✅
    - `1`: Validation failed ❌
    - `2`: File not found, not readable, or invalid command line arguments 📁⚠️
    - `4`: Unreadable rules file or internal error 💥
    """
    _validate_implementation(
        file, format, verbose, rules_file, strict_attributes, force_colors
    )

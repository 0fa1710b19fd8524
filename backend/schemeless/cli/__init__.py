"""Command-line interface for schemeless."""

import rich_click as click

from .. import __version__
from .rules import rules_command
from .validate import validate_command

# Configure rich-click styling
click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_COMMAND = "bold green"
click.rich_click.STYLE_SWITCH = "bold blue"


@click.group(name="schemeless")
@click.version_option(version=__version__, prog_name="schemeless")
def main() -> None:
    """🔎 **schemeless** - Semantic validation for Solr schema files.

    Checks schema.xml / managed-schema.xml documents for unsupported
    elements, malformed field declarations, deprecated field types and
    unresolved references before they reach a Solr node.
    """
    pass


main.add_command(validate_command)
main.add_command(rules_command)


if __name__ == "__main__":
    main()


__all__ = ["main"]

"""CLI error handling helpers."""

import click
from sqlalchemy.exc import SQLAlchemyError

from bankbook.domain.errors import DomainError, MappingRequiredError


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError | SQLAlchemyError
) -> None:
    """Render a domain or storage error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, MappingRequiredError):
        click.echo(f"  Headers: {', '.join(error.headers)}", err=True)
        detected = {field: header for field, header in error.detected_mapping.items() if header}
        if detected:
            click.echo("  Detected:", err=True)
            for field, header in detected.items():
                click.echo(f"    {field} = {header}", err=True)
        click.echo("  Use --map FIELD=HEADER to map columns explicitly.", err=True)
    ctx.exit(1)

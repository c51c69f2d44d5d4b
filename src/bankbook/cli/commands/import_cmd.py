"""CSV preview and import commands."""

import click
from sqlalchemy.exc import SQLAlchemyError

from bankbook.cli.account_resolution import resolve_account_or_exit
from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.account import BankAccountService
from bankbook.domain.csv_import import CSVImportService
from bankbook.domain.errors import DomainError


def _parse_map_options(ctx: click.Context, values: tuple[str, ...]) -> dict[str, str] | None:
    if not values:
        return None
    mapping = {}
    for value in values:
        field, sep, header = value.partition("=")
        if not sep or not field.strip():
            click.echo(f"Error: Invalid --map value '{value}', expected FIELD=HEADER", err=True)
            ctx.exit(1)
        mapping[field.strip()] = header.strip()
    return mapping


@click.command("preview")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--rows", default=5, show_default=True, help="Number of rows to show")
@click.pass_context
def preview_csv(ctx, csv_file: str, rows: int):
    """Show the headers and the column mapping detected for a CSV file."""
    service = CSVImportService(ctx.obj["db"])
    try:
        result = service.preview_file(csv_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Headers: {', '.join(result.headers)}")
    click.echo(f"Rows: {len(result.rows)}")
    click.echo("\nDetected mapping:")
    for field, header in result.detected_mapping.to_dict().items():
        if header is None:
            click.echo(f"  {field:13s} -")
        else:
            confidence = result.confidence.get(field, 0.0)
            click.echo(f"  {field:13s} {header} ({confidence:.0%})")
    if not result.detected_mapping.is_usable():
        click.echo("\nMapping is incomplete; pass --map FIELD=HEADER when importing.")

    for row in result.rows[:rows]:
        click.echo("  " + " | ".join(row.values()))


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Bank account name or ID")
@click.option(
    "--map",
    "mappings",
    multiple=True,
    metavar="FIELD=HEADER",
    help="Explicit column mapping, e.g. --map date='Posted On' (repeatable)",
)
@click.pass_context
def import_csv(ctx, csv_file: str, account: str, mappings: tuple[str, ...]):
    """Import bank transactions from a CSV file.

    Columns are detected automatically. When detection fails, pass every
    needed column with --map; an explicit mapping replaces detection.

    Examples:
        bankbook import statement.csv --account Checking
        bankbook import export.csv --account 1 --map date=Posted --map description=Text --map amount=Value
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)
    mapping = _parse_map_options(ctx, mappings)
    service = CSVImportService(db)

    try:
        result = service.import_file(csv_file, account_id, mapping=mapping)
    except (DomainError, SQLAlchemyError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Import ID: {result.import_id}")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Skipped: {result.skipped} rows")
    click.echo(f"  Total: {result.total} rows")


def register_commands(cli):
    """Register preview and import commands with main CLI."""
    cli.add_command(preview_csv)
    cli.add_command(import_csv)

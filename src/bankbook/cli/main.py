"""Main CLI entry point."""

import logging

import click
from bankbook.database.factories import create_sqlite_database

# Import and register all commands at module level
from bankbook.cli.commands import (
    account,
    import_cmd,
    transaction,
    reconcile,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BANKBOOK_DB_PATH environment variable)",
    envvar="BANKBOOK_DB_PATH",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Bankbook - bank statement import and reconciliation.

    Import CSV exports from any bank without defining a format first, then
    reconcile the account against its statements.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
import_cmd.register_commands(cli)
transaction.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

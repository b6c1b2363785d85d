"""CLI commands for the times table trainer."""

import typer

from times_table_trainer.cli.play import list_locales, play, serve

main_app = typer.Typer(
    name="trainer",
    help="Times Table Trainer CLI",
    no_args_is_help=True,
)
main_app.command("play")(play)
main_app.command("locales")(list_locales)
main_app.command("serve")(serve)


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]

"""Flask CLI commands for Expensely."""

from __future__ import annotations

from pathlib import Path

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("expensely-seed")
    @click.option("--demo", is_flag=True, default=False, help="Seed demo users, expenses and messages")
    def expensely_seed(demo: bool) -> None:
        """Seed application data (demo)."""

        if not demo:
            click.echo("No action specified. Use --demo to seed demo data.")
            return

        from .extensions import session_scope
        from .services.seed import run_demo_seed

        if run_demo_seed(session_factory=session_scope):
            click.echo("Demo data seeded.")
        else:
            click.echo("Expenses already exist; demo seed skipped.")

    @app.cli.command("expensely-create-admin")
    @click.option("--username", prompt=True)
    @click.option("--email", prompt=True)
    @click.password_option()
    def expensely_create_admin(username: str, email: str, password: str) -> None:
        """Create an administrator account."""

        from .extensions import session_scope
        from .services.auth import create_user

        try:
            user = create_user(
                username=username,
                email=email,
                password=password,
                role="admin",
                session_factory=session_scope,
            )
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Admin {user.email} created (id={user.id}).")

    @app.cli.command("expensely-export")
    @click.option("--email", required=True, help="Owner of the expenses to export")
    @click.option(
        "--output",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Destination CSV (defaults to expenses_<date>.csv in the working directory)",
    )
    def expensely_export(email: str, output: Path | None) -> None:
        """Export one user's expenses to CSV."""

        from datetime import date

        from .extensions import session_scope
        from .services.auth import get_user_by_email
        from .services.expenses import list_expenses
        from .services.export_csv import export_expenses_csv, export_filename

        user = get_user_by_email(email, session_scope)
        if user is None:
            raise click.ClickException(f"No user with email {email}")

        expenses = list_expenses(user.id, session_factory=session_scope)
        if not expenses:
            raise click.ClickException("No expenses to export")

        path = export_expenses_csv(
            expenses=expenses,
            output_path=output or Path.cwd() / export_filename(date.today()),
        )
        click.echo(f"Export written: {path}")

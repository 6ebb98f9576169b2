"""Command-line utilities for ReviewDesk administration.

Schema creation, development seed data, and profile role management.
Every command needs ``DATABASE__URL``.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel

if TYPE_CHECKING:
    import argparse

    from reviewdesk.db import Database, SqlDocumentStore

console = Console()

SAMPLE_TITLE = "The Water Cycle"
SAMPLE_STUDENT = "Sam Student"
SAMPLE_TEXT = (
    "The water cycle is how water moves around the earth. "
    "Water evaporates from the ocean and forms clouds.\n\n"
    "When the clouds get heavy, the water falls as rain. "
    "The rain goes into rivers and back to the ocean, "
    "and the cycle starts again."
)


def _open_database() -> Database:
    """Return a Database for DATABASE__URL or exit with an error."""
    from reviewdesk.config import get_settings
    from reviewdesk.db import Database

    settings = get_settings()
    if not settings.database.url:
        console.print("[red]Error:[/] DATABASE__URL not set")
        sys.exit(1)
    return Database(settings.database.url, echo=settings.database.echo)


def create_schema() -> None:
    """Create every table that does not exist yet.

    Usage:
        uv run create-schema
    """
    database = _open_database()

    async def _run() -> None:
        try:
            await database.create_schema()
        finally:
            await database.close()

    asyncio.run(_run())
    console.print("[green]Schema ready.[/]")


# ---------------------------------------------------------------------------
# seed-data
# ---------------------------------------------------------------------------


async def _seed_sample_document(store: SqlDocumentStore, owner_id: str) -> None:
    """Add the sample essay with two annotations, unless it already exists."""
    from reviewdesk.annotation import AnnotationDraft

    existing = await store.list_documents_by_owner(owner_id)
    if any(d.title == SAMPLE_TITLE for d in existing):
        console.print(f"[yellow]Sample document exists:[/] {SAMPLE_TITLE}")
        return

    document = await store.create_document(
        owner_id=owner_id,
        title=SAMPLE_TITLE,
        student_name=SAMPLE_STUDENT,
        student_email="student@example.com",
        content=SAMPLE_TEXT,
        source_kind="link",
    )
    marks = [
        ("evaporates", "highlight", None),
        ("get heavy", "suggestion", "Try 'become saturated'."),
    ]
    for phrase, category, comment in marks:
        start = SAMPLE_TEXT.index(phrase)
        draft = AnnotationDraft.from_selection(
            SAMPLE_TEXT, start, start + len(phrase), category, comment
        )
        await store.create_annotation(document.id, owner_id, draft)
    console.print(f"[green]Created[/] sample document '{SAMPLE_TITLE}'")


def seed_data() -> None:
    """Seed the database with demo profiles and a sample document.

    Idempotent: safe to run multiple times. Existing data is reused.

    Usage:
        uv run seed-data
    """
    from reviewdesk.auth.mock import MOCK_PASSWORD, MOCK_USERS, email_to_user_id
    from reviewdesk.config import get_settings
    from reviewdesk.db import SqlDocumentStore

    database = _open_database()
    store = SqlDocumentStore(database)

    async def _seed() -> None:
        try:
            await database.create_schema()
            for email, role in MOCK_USERS.items():
                await store.ensure_profile(email_to_user_id(email), email, role)
                console.print(f"[green]Profile[/] {email} ({role})")
            teacher = next(e for e, r in MOCK_USERS.items() if r == "teacher")
            await _seed_sample_document(store, email_to_user_id(teacher))
        finally:
            await database.close()

    asyncio.run(_seed())

    port = get_settings().app.port
    console.print()
    console.print(
        Panel(
            f"[bold]Login:[/] http://localhost:{port}/login\n"
            f"[bold]Accounts:[/] {', '.join(MOCK_USERS)}\n"
            f"[bold]Password:[/] {MOCK_PASSWORD} (with DEV__DEMO_MODE=true)",
            title="Seed Data Ready",
        )
    )


# ---------------------------------------------------------------------------
# manage-users
# ---------------------------------------------------------------------------


def _build_user_parser() -> argparse.ArgumentParser:
    """Build argparse parser for manage-users subcommands."""
    import argparse

    from reviewdesk.auth import USER_ROLES

    parser = argparse.ArgumentParser(
        prog="manage-users",
        description="List profiles and change application roles.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all profiles")

    role_p = sub.add_parser("set-role", help="Change a user's application role")
    role_p.add_argument("email", help="User email address")
    role_p.add_argument("role", choices=USER_ROLES, help="New role")

    return parser


async def _cmd_list(store: SqlDocumentStore, *, con: Console | None = None) -> None:
    """List profiles as a Rich table."""
    from rich.table import Table

    con = con or console
    profiles = await store.list_profiles()
    if not profiles:
        con.print("[yellow]No profiles found.[/]")
        return

    table = Table(title="Profiles")
    table.add_column("Email", style="cyan")
    table.add_column("Role")
    table.add_column("Created")
    for p in profiles:
        table.add_row(
            p.email,
            "[green]teacher[/]" if p.role == "teacher" else p.role,
            p.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    con.print(table)


async def _cmd_set_role(
    store: SqlDocumentStore, email: str, role: str, *, con: Console | None = None
) -> bool:
    """Set the role for the profile with ``email``. False if none exists."""
    con = con or console
    profile = await store.get_profile_by_email(email)
    if profile is None:
        con.print(f"[red]Error:[/] no profile found with email '{email}'")
        con.print("[dim]User must sign in at least once.[/]")
        return False
    await store.set_role(profile.user_id, role)
    con.print(f"[green]Updated[/] '{profile.email}' to role '{role}'")
    return True


def manage_users() -> None:
    """Manage profiles and roles.

    Usage:
        uv run manage-users <command> [options]

    Commands:
        list                     List all profiles
        set-role <email> <role>  Change a user's role (teacher or student)
    """
    from reviewdesk.db import SqlDocumentStore

    args = _build_user_parser().parse_args(sys.argv[1:])
    database = _open_database()
    store = SqlDocumentStore(database)

    async def _run() -> bool:
        try:
            await database.create_schema()
            match args.command:
                case "list":
                    await _cmd_list(store)
                case "set-role":
                    return await _cmd_set_role(store, args.email, args.role)
            return True
        finally:
            await database.close()

    if not asyncio.run(_run()):
        sys.exit(1)

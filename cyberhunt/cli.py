"""CLI tools for CyberHunt review workflow administration."""

import click

from cyberhunt.core.security import create_session_token
from cyberhunt.core.structured_logging import configure_logging
from cyberhunt.db.base import Base
from cyberhunt.db.enums import Role
from cyberhunt.db.session import SessionLocal, engine
from cyberhunt.schemas.team import TeamMemberCreate
from cyberhunt.services import team_service
from cyberhunt.services.workflow_errors import ReviewWorkflowError


@click.group()
def cli():
    """CyberHunt CLI tools."""
    configure_logging()


@cli.command("init-db")
def init_db():
    """
    Create all tables directly from the models.

    For local SQLite development; deployed databases use alembic migrations.
    """
    import cyberhunt.db.models  # noqa: F401 - registers tables on Base.metadata

    Base.metadata.create_all(bind=engine)
    click.echo("✓ Database tables created")


@cli.command("add-reviewer")
@click.option("--user-id", required=True, type=int, help="Identity-service user id")
@click.option("--username", required=True, help="Display name")
@click.option("--role", default="analyst", show_default=True, help="Team role label")
@click.option("--department", default=None, help="Department")
@click.option(
    "--specialization",
    "specializations",
    multiple=True,
    help="Vulnerability type the reviewer handles (repeatable)",
)
@click.option("--max-assignments", default=10, show_default=True, type=int)
def add_reviewer(user_id, username, role, department, specializations, max_assignments):
    """
    Register a staff user as a reviewer.

    Example:
        python -m cyberhunt.cli add-reviewer --user-id 7 --username alice --specialization XSS
    """
    db = SessionLocal()
    try:
        member = team_service.create_member(
            db,
            TeamMemberCreate(
                user_id=user_id,
                username=username,
                role=role,
                department=department,
                specializations=list(specializations),
                max_assignments=max_assignments,
            ),
        )
        db.commit()
        click.echo(f"✓ Added reviewer {member.username} (id {member.id})")
    except ReviewWorkflowError as e:
        db.rollback()
        raise click.ClickException(str(e))
    finally:
        db.close()


@cli.command("list-reviewers")
@click.option("--include-inactive", is_flag=True, help="Show deactivated reviewers too")
def list_reviewers(include_inactive: bool):
    """Show reviewers with their current load."""
    db = SessionLocal()
    try:
        members = team_service.list_members(db, include_inactive=include_inactive)
        if not members:
            click.echo("No reviewers")
            return
        for m in members:
            state = "" if m.is_active else " (inactive)"
            specs = ", ".join(m.specializations) or "-"
            click.echo(
                f"{m.id:>4}  {m.username:<20} {m.current_assignments}/{m.max_assignments}"
                f"  [{specs}]{state}"
            )
    finally:
        db.close()


@cli.command("mint-token")
@click.option("--user-id", required=True, type=int)
@click.option("--username", required=True)
@click.option(
    "--role",
    required=True,
    type=click.Choice([r.value for r in Role]),
)
def mint_token(user_id: int, username: str, role: str):
    """
    Print a development session token.

    Send it as 'Authorization: Bearer <token>'. Production sessions come
    from the identity service.
    """
    click.echo(create_session_token(user_id, role, username))


if __name__ == "__main__":
    cli()

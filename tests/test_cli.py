"""CLI command tests."""

from click.testing import CliRunner

from cyberhunt.cli import cli
from cyberhunt.core.security import decode_session_token
from cyberhunt.db.models import TeamMember


def test_add_and_list_reviewers(db):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "add-reviewer",
            "--user-id", "77",
            "--username", "carol",
            "--specialization", "XSS",
            "--specialization", "SSRF",
            "--max-assignments", "4",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "carol" in result.output

    member = db.query(TeamMember).filter(TeamMember.user_id == 77).one()
    assert member.specializations == ["SSRF", "XSS"]
    assert member.max_assignments == 4

    listed = runner.invoke(cli, ["list-reviewers"])
    assert listed.exit_code == 0
    assert "carol" in listed.output
    assert "0/4" in listed.output


def test_add_reviewer_twice_fails(db):
    runner = CliRunner()
    args = ["add-reviewer", "--user-id", "77", "--username", "carol"]
    assert runner.invoke(cli, args).exit_code == 0

    result = runner.invoke(cli, args)
    assert result.exit_code != 0
    assert "already a team member" in result.output


def test_mint_token():
    result = CliRunner().invoke(
        cli, ["mint-token", "--user-id", "5", "--username", "dev", "--role", "admin"]
    )
    assert result.exit_code == 0
    assert decode_session_token(result.output.strip())["role"] == "admin"

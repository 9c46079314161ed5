"""Tests for client error parsing, terminal views and the CLI commands."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from jobtrack.client import views
from jobtrack.client.api import ApiClient
from jobtrack.client.cli import build_parser, run_command
from jobtrack.client.errors import ApiError, format_validation_errors, parse_error
from jobtrack.client.store import Notification, Store
from jobtrack.client.tokens import PrefsStorage, TokenStorage
from jobtrack.main import app

BASE_URL = "http://testserver/api/v1"


# -----------------------------------------------------------------------------
# Error parsing
# -----------------------------------------------------------------------------

def test_parse_error_splits_server_messages():
    error = ApiError(400, "Please Provide Company Name, Please Provide Position")

    parsed = parse_error(error)

    assert parsed["message"] == "Please Provide Company Name"
    assert parsed["messages"] == ["Please Provide Company Name", "Please Provide Position"]
    assert parsed["status"] == 400
    assert parsed["is_validation"] is True


def test_parse_error_falls_back_to_status_message():
    assert parse_error(ApiError(404))["message"] == "The requested resource was not found."
    assert parse_error(ApiError(0))["message"] == "Network error. Please check your connection."
    assert parse_error(ApiError(418))["message"] == "An error occurred. Please try again."
    assert parse_error(RuntimeError("boom"))["status"] is None


def test_format_validation_errors_maps_fields():
    errors = format_validation_errors(
        "Please Provide Company Name, Name must be at least 3 characters, "
        "Please Provide Valid Email, Something else entirely"
    )

    assert errors == {
        "company": "Please Provide Company Name",
        "name": "Name must be at least 3 characters",
        "email": "Please Provide Valid Email",
        "general": "Something else entirely",
    }
    assert format_validation_errors(None) == {}


# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

JOBS = [
    {"id": 1, "company": "Acme", "position": "Engineer", "status": "pending",
     "created_at": "2024-03-05T10:00:00", "updated_at": "2024-03-05T10:00:00"},
    {"id": 2, "company": "Globex", "position": "Analyst", "status": "declined",
     "created_at": "2024-03-06T10:00:00", "updated_at": "2024-03-07T10:00:00"},
]


def test_render_job_table():
    text = views.render_job_table(JOBS, total=5)

    assert "Acme" in text and "Globex" in text
    assert "Mar 05, 2024" in text
    assert text.endswith("Showing 2 of 5 jobs")


def test_render_job_table_empty_states():
    assert views.render_job_table([], total=3) == "No jobs match your filters"
    assert views.render_job_table([], total=0).startswith("No jobs yet")


def test_status_badge_colors_only_when_asked():
    assert views.status_badge("declined") == "Declined"
    assert views.status_badge("declined", "dark", color=True) == "\033[91mDeclined\033[0m"


def test_render_stats_percentages():
    text = views.render_stats({"total": 4, "pending": 2, "interviewed": 1, "declined": 1}, {"name": "Alice"})

    assert text.splitlines()[0] == "Applications for Alice"
    assert "(50%)" in text
    assert "(25%)" in text


def test_render_notifications():
    text = views.render_notifications([Notification("error", "Nope"), Notification("success", "Yes")])

    assert text == "✗ Nope\n✓ Yes"


def test_format_date_passes_through_unparseable_values():
    assert views.format_date(None) == "-"
    assert views.format_date("yesterday") == "yesterday"


# -----------------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------------

def test_parser_rejects_unknown_status():
    parser = build_parser()

    assert parser.parse_args(["jobs", "add", "Acme", "Engineer", "--status", "declined"]).status == "declined"
    with pytest.raises(SystemExit):
        parser.parse_args(["jobs", "add", "Acme", "Engineer", "--status", "interview"])


@pytest.fixture
def cli(override_db, tmp_path):
    """Run CLI argv lists in order against one API; returns their exit codes."""
    tokens = TokenStorage(tmp_path / "token")
    prefs = PrefsStorage(tmp_path / "prefs.json")
    parser = build_parser()

    def _run(*commands):
        async def _main():
            codes = []
            for argv in commands:
                api = ApiClient(BASE_URL, tokens, transport=httpx.ASGITransport(app=app))
                async with api:
                    codes.append(await run_command(parser.parse_args(argv), Store(api, prefs)))
            return codes

        return asyncio.run(_main())

    return _run


def test_cli_job_workflow(cli, capsys):
    codes = cli(
        ["register", "Alice", "alice@example.com", "--password", "password123"],
        ["jobs", "add", "Acme", "Engineer"],
        ["jobs", "edit", "1", "--status", "interviewed"],
        ["jobs", "list"],
        ["jobs", "stats"],
    )

    assert codes == [0, 0, 0, 0, 0]
    out, err = capsys.readouterr()
    assert "Welcome, Alice!" in err
    assert "Job updated" in err
    assert "Engineer at Acme" in out
    assert "Showing 1 of 1 jobs" in out
    assert "Interviewed" in out


def test_cli_jobs_require_login(cli, capsys):
    assert cli(["jobs", "list"]) == [1]
    assert "Please login to continue." in capsys.readouterr().err


def test_cli_shows_field_errors(cli, capsys):
    codes = cli(["register", "Al", "not-an-email", "--password", "short"])

    assert codes == [1]
    err = capsys.readouterr().err
    assert "name: Name must be at least 3 characters" in err
    assert "email: Please Provide Valid Email" in err
    assert "password: Password must be at least 8 characters" in err


def test_cli_missing_job(cli, capsys):
    codes = cli(
        ["register", "Alice", "alice@example.com", "--password", "password123"],
        ["jobs", "show", "99"],
    )

    assert codes == [0, 1]
    assert "Job with the id 99 does not exist" in capsys.readouterr().err


def test_cli_logout_forgets_token(cli, tmp_path):
    cli(["register", "Alice", "alice@example.com", "--password", "password123"])
    assert (tmp_path / "token").exists()

    assert cli(["logout"]) == [0]
    assert not (tmp_path / "token").exists()


def test_cli_theme_is_persisted(cli, capsys, tmp_path):
    assert cli(["theme", "toggle"], ["theme"]) == [0, 0]

    assert capsys.readouterr().out.split() == ["dark", "dark"]
    assert PrefsStorage(tmp_path / "prefs.json").get_theme() == "dark"

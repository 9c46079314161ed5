"""
JobTrack client - command line interface.

Usage:
    jobtrack-client register NAME EMAIL [--password PASSWORD]
    jobtrack-client login EMAIL [--password PASSWORD]
    jobtrack-client logout
    jobtrack-client jobs list [--status STATUS] [--search TEXT] [--sort ORDER]
    jobtrack-client jobs show ID
    jobtrack-client jobs add COMPANY POSITION [--status STATUS]
    jobtrack-client jobs edit ID [--company C] [--position P] [--status S]
    jobtrack-client jobs rm ID
    jobtrack-client jobs stats
    jobtrack-client theme [light|dark|toggle]
"""
import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional

from ..config import settings
from ..validation import JOB_STATUSES
from . import store as actions
from . import views
from .api import ApiClient
from .errors import ApiError, format_validation_errors
from .store import Store
from .tokens import PrefsStorage, TokenStorage

logger = logging.getLogger("jobtrack.client")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobtrack-client", description="Track your job applications")
    parser.add_argument("--api", default=settings.client.api_base_url, help="API base URL")
    parser.add_argument("--color", action="store_true", help="Colorize statuses")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Create an account")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password")

    p = sub.add_parser("login", help="Log in")
    p.add_argument("email")
    p.add_argument("--password")

    sub.add_parser("logout", help="Forget the stored session")

    jobs = sub.add_parser("jobs", help="Manage jobs").add_subparsers(dest="jobs_command", required=True)

    p = jobs.add_parser("list", help="List your jobs")
    p.add_argument("--status", choices=("all",) + JOB_STATUSES, default="all")
    p.add_argument("--search", default="")
    p.add_argument("--sort", choices=("latest", "oldest", "a-z", "z-a"))

    p = jobs.add_parser("show", help="Show one job")
    p.add_argument("job_id")

    p = jobs.add_parser("add", help="Add a job")
    p.add_argument("company")
    p.add_argument("position")
    p.add_argument("--status", choices=JOB_STATUSES)

    p = jobs.add_parser("edit", help="Edit a job")
    p.add_argument("job_id")
    p.add_argument("--company")
    p.add_argument("--position")
    p.add_argument("--status", choices=JOB_STATUSES)

    p = jobs.add_parser("rm", help="Delete a job")
    p.add_argument("job_id")

    jobs.add_parser("stats", help="Counts per status")

    p = sub.add_parser("theme", help="Show or change the color theme")
    p.add_argument("theme", nargs="?", choices=("light", "dark", "toggle"))

    return parser


def _print_notifications(store: Store) -> None:
    if store.state.ui.notifications:
        print(views.render_notifications(store.state.ui.notifications), file=sys.stderr)
        store.dispatch(actions.clear_notifications())


def _print_form_errors(error: ApiError) -> None:
    errors = format_validation_errors(error.server_message)
    if len(errors) > 1 or "general" not in errors:
        print(views.render_field_errors(errors), file=sys.stderr)


def _require_login(store: Store) -> bool:
    if not store.state.auth.is_authenticated:
        store.dispatch(actions.notify("Please login to continue.", "error"))
        return False
    return True


async def _run_jobs(store: Store, args) -> int:
    theme = store.state.ui.theme
    cmd = args.jobs_command

    if cmd == "list":
        await store.run(actions.fetch_jobs(sort=args.sort))
        store.dispatch(actions.set_filters(search=args.search, status_filter=args.status))
        print(views.render_job_table(store.visible_jobs(), store.state.jobs.count, theme, args.color))

    elif cmd == "show":
        await store.run(actions.fetch_job(args.job_id))
        print(views.render_job_card(store.state.jobs.current_job, theme, args.color))

    elif cmd == "add":
        data = {"company": args.company, "position": args.position}
        if args.status:
            data["status"] = args.status
        payload = await store.run(actions.create_job(data))
        store.dispatch(actions.notify("Job created", "success"))
        print(views.render_job_card(payload["job"], theme, args.color))

    elif cmd == "edit":
        store.dispatch(actions.open_modal("editJob", args.job_id))
        await store.run(actions.fetch_job(args.job_id))
        current = store.state.jobs.current_job
        data = {
            "company": args.company if args.company is not None else current["company"],
            "position": args.position if args.position is not None else current["position"],
        }
        if args.status:
            data["status"] = args.status
        payload = await store.run(actions.update_job(args.job_id, data))
        store.dispatch(actions.close_modal())
        store.dispatch(actions.notify("Job updated", "success"))
        print(views.render_job_card(payload["job"], theme, args.color))

    elif cmd == "rm":
        store.dispatch(actions.open_modal("deleteJob", args.job_id))
        await store.run(actions.delete_job(args.job_id))
        store.dispatch(actions.close_modal())
        store.dispatch(actions.notify(f"Job {args.job_id} deleted", "success"))

    elif cmd == "stats":
        await store.run(actions.fetch_stats())
        print(views.render_stats(store.state.jobs.stats, store.state.auth.user))

    return 0


async def run_command(args, store: Store) -> int:
    """Execute one parsed command against a store; returns the exit code."""
    try:
        if args.command == "register":
            password = args.password or getpass.getpass("Password: ")
            payload = await store.run(actions.register(args.name, args.email, password))
            store.dispatch(actions.notify(f"Welcome, {payload['user']['name']}!", "success"))

        elif args.command == "login":
            password = args.password or getpass.getpass("Password: ")
            payload = await store.run(actions.login(args.email, password))
            store.dispatch(actions.notify(f"Welcome back, {payload['user']['name']}!", "success"))

        elif args.command == "logout":
            store.dispatch(actions.logout())
            store.dispatch(actions.notify("Logged out", "success"))

        elif args.command == "theme":
            if args.theme == "toggle":
                store.dispatch(actions.toggle_theme())
            elif args.theme:
                store.dispatch(actions.set_theme(args.theme))
            print(store.state.ui.theme)

        elif args.command == "jobs":
            if not _require_login(store):
                return 1
            return await _run_jobs(store, args)

        return 0

    except ApiError as e:
        logger.debug(f"Command {args.command} failed with status {e.status}")
        if args.command in ("register", "login") or getattr(args, "jobs_command", None) in ("add", "edit"):
            _print_form_errors(e)
        return 1

    finally:
        _print_notifications(store)


async def _main_async(args) -> int:
    tokens = TokenStorage(settings.client.token_file)
    prefs = PrefsStorage(settings.client.prefs_file)
    async with ApiClient(args.api, tokens) as api:
        store = Store(api, prefs)
        return await run_command(args, store)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)
    return asyncio.run(_main_async(args))


if __name__ == "__main__":
    sys.exit(main())

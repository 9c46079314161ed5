"""
JobTrack client - terminal views.

Pure functions from state to text. They never call the API; the CLI
renders them after the store has been updated.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..validation import JOB_STATUSES

STATUS_LABELS = {
    "pending": "Pending",
    "interviewed": "Interviewed",
    "declined": "Declined",
}

# ANSI colors per theme; "light" terminals get darker tones
STATUS_COLORS = {
    "light": {"pending": "33", "interviewed": "34", "declined": "31"},
    "dark": {"pending": "93", "interviewed": "96", "declined": "91"},
}

NOTIFICATION_PREFIX = {"error": "✗", "success": "✓", "info": "•"}


def _colorize(text: str, code: Optional[str]) -> str:
    if not code:
        return text
    return f"\033[{code}m{text}\033[0m"


def format_date(value: Optional[str]) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value).strftime("%b %d, %Y")
    except ValueError:
        return value


def status_badge(status: str, theme: str = "light", color: bool = False) -> str:
    label = STATUS_LABELS.get(status, status)
    code = STATUS_COLORS.get(theme, {}).get(status) if color else None
    return _colorize(label, code)


def render_job_table(jobs: List[Dict[str, Any]], total: Optional[int] = None,
                     theme: str = "light", color: bool = False) -> str:
    """Jobs as an aligned table, with a "Showing x of y" footer."""
    if not jobs:
        return "No jobs match your filters" if total else "No jobs yet. Add your first one with `jobs add`."

    headers = ["ID", "Company", "Position", "Status", "Applied"]
    rows = [
        [str(job["id"]), job["company"], job["position"],
         STATUS_LABELS.get(job["status"], job["status"]), format_date(job.get("created_at"))]
        for job in jobs
    ]
    widths = [max(len(headers[i]), *(len(row[i]) for row in rows)) for i in range(len(headers))]

    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for job, row in zip(jobs, rows):
        cells = [cell.ljust(w) for cell, w in zip(row, widths)]
        cells[3] = status_badge(job["status"], theme, color) + " " * (widths[3] - len(row[3]))
        lines.append("  ".join(cells).rstrip())

    if total is not None:
        lines.append("")
        lines.append(f"Showing {len(jobs)} of {total} jobs")
    return "\n".join(lines)


def render_job_card(job: Dict[str, Any], theme: str = "light", color: bool = False) -> str:
    return "\n".join([
        f"{job['position']} at {job['company']}",
        f"  Status:  {status_badge(job['status'], theme, color)}",
        f"  Applied: {format_date(job.get('created_at'))}",
        f"  Updated: {format_date(job.get('updated_at'))}",
        f"  ID:      {job['id']}",
    ])


def render_stats(stats: Dict[str, int], user: Optional[Dict[str, Any]] = None) -> str:
    """Per-status counts and their share of the total."""
    total = stats.get("total", 0)
    lines = []
    if user and user.get("name"):
        lines.append(f"Applications for {user['name']}")
    lines.append(f"Total: {total}")
    for status in JOB_STATUSES:
        count = stats.get(status, 0)
        percent = round(count / total * 100) if total else 0
        lines.append(f"  {STATUS_LABELS[status]:<12} {count:>4}  ({percent}%)")
    return "\n".join(lines)


def render_notifications(notifications) -> str:
    return "\n".join(
        f"{NOTIFICATION_PREFIX.get(n.level, '•')} {n.message}" for n in notifications
    )


def render_field_errors(errors: Dict[str, str]) -> str:
    """Inline form errors, one field per line."""
    return "\n".join(f"  {field}: {message}" for field, message in errors.items())

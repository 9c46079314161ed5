"""
JobTrack - Field constraints for users and jobs.

Pure functions: they inspect plain values and return the list of violation
messages, so they can be exercised without a database. Messages avoid commas
because the error boundary joins them with ", " and clients split on ",".
"""
import re
from typing import Any, Dict, List, Optional

from .errors import ValidationError

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
COMPANY_MAX_LENGTH = 50

JOB_STATUSES = ("pending", "interviewed", "declined")
DEFAULT_JOB_STATUS = "pending"

EMAIL_PATTERN = re.compile(
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    return email.strip().lower()


def user_errors(name: Optional[str], email: Optional[str], password: Optional[str]) -> List[str]:
    errors = []

    if _blank(name):
        errors.append("Please Provide the Name")
    else:
        length = len(name.strip())
        if length < NAME_MIN_LENGTH:
            errors.append(f"Name must be at least {NAME_MIN_LENGTH} characters")
        elif length > NAME_MAX_LENGTH:
            errors.append(f"Name cannot exceed {NAME_MAX_LENGTH} characters")

    if _blank(email):
        errors.append("Please Provide Email")
    elif not EMAIL_PATTERN.match(email.strip()):
        errors.append("Please Provide Valid Email")

    if _blank(password):
        errors.append("Please Enter Your Password")
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    return errors


def job_errors(company: Optional[str], position: Optional[str], status: Optional[str] = None) -> List[str]:
    errors = []

    if _blank(company):
        errors.append("Please Provide Company Name")
    elif len(company.strip()) > COMPANY_MAX_LENGTH:
        errors.append(f"Company name cannot exceed {COMPANY_MAX_LENGTH} characters")

    if _blank(position):
        errors.append("Please Provide Position")

    if status is not None and status not in JOB_STATUSES:
        errors.append("Please Provide a Valid Status (pending / interviewed / declined)")

    return errors


def validate_registration(name, email, password) -> None:
    """Raise ValidationError listing every violated user field."""
    errors = user_errors(name, email, password)
    if errors:
        raise ValidationError(errors)


def validate_job(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a job payload for creation.

    Returns the cleaned fields with status defaulted to "pending".
    """
    errors = job_errors(data.get("company"), data.get("position"), data.get("status"))
    if errors:
        raise ValidationError(errors)
    return {
        "company": data["company"].strip(),
        "position": data["position"].strip(),
        "status": data.get("status") or DEFAULT_JOB_STATUS,
    }


def validate_job_update(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a job payload for update.

    Company and position are mandatory on every update, even a status-only
    change. Status is only returned when supplied.
    """
    if _blank(data.get("company")) or _blank(data.get("position")):
        raise ValidationError("Please provide company and position to update job")

    errors = job_errors(data["company"], data["position"], data.get("status"))
    if errors:
        raise ValidationError(errors)

    cleaned = {
        "company": data["company"].strip(),
        "position": data["position"].strip(),
    }
    if data.get("status") is not None:
        cleaned["status"] = data["status"]
    return cleaned

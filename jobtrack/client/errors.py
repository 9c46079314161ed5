"""
JobTrack client - API errors and their user-facing messages.

The server reports validation problems as one comma-joined `msg`; these
helpers split it back up and map each message to the form field it is
about, so views can show it inline.
"""
from typing import Dict, List, Optional

STATUS_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Please login to continue.",
    403: "You do not have permission to perform this action.",
    404: "The requested resource was not found.",
    409: "A conflict occurred. The resource may already exist.",
    422: "Validation failed. Please check your input.",
    429: "Too many requests. Please try again later.",
    500: "Server error. Please try again later.",
    502: "Bad gateway. Please try again later.",
    503: "Service unavailable. Please try again later.",
}

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server. Please try again."

# Checked in order: "Please Provide Company Name" must land on company, not name.
FIELD_KEYWORDS = ("company", "position", "status", "email", "password", "name")


class ApiError(Exception):
    """A failed API call: HTTP status (0 for network failures) and server message."""

    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        self.server_message = message
        super().__init__(message or default_message(status))

    @property
    def message(self) -> str:
        return str(self)


def default_message(status: int) -> str:
    if status == 0:
        return NETWORK_ERROR_MESSAGE
    return STATUS_MESSAGES.get(status, "An error occurred. Please try again.")


def split_messages(message: Optional[str]) -> List[str]:
    if not message:
        return []
    return [part.strip() for part in message.split(",") if part.strip()]


def parse_error(error: Exception) -> Dict:
    """
    Describe any error raised while talking to the API.

    Returns a dict with `message` (first message), `messages`, `status`
    and `is_validation` (more than one server message).
    """
    if isinstance(error, ApiError):
        if error.server_message:
            messages = split_messages(error.server_message)
            return {
                "message": messages[0],
                "messages": messages,
                "status": error.status,
                "is_validation": len(messages) > 1,
            }
        message = default_message(error.status)
        return {"message": message, "messages": [message], "status": error.status, "is_validation": False}

    message = str(error) or "An unexpected error occurred."
    return {"message": message, "messages": [message], "status": None, "is_validation": False}


def format_validation_errors(error_message: Optional[str]) -> Dict[str, str]:
    """Map each comma-separated message onto the field it mentions ("general" otherwise)."""
    errors = {}
    for message in split_messages(error_message):
        lowered = message.lower()
        field = next((f for f in FIELD_KEYWORDS if f in lowered), "general")
        errors.setdefault(field, message)
    return errors

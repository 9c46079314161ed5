#!/usr/bin/env python3
"""
JobTrack - Password Reset CLI

Reset a user's password from the command line.
There is no self-service reset flow, so operators use this instead.

Usage:
    python scripts/reset_password.py user@email.com newpassword123

Existing session tokens stay valid until they expire; tokens are not
tracked server-side.
"""
import sys
import os

# Add project root to path so we can import jobtrack modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from jobtrack.auth.service import auth_service
from jobtrack.database import get_resilient_session, init_db
from jobtrack.validation import user_errors


def reset_password(email: str, new_password: str) -> int:
    errors = [e for e in user_errors("placeholder", email, new_password) if "Name" not in e]
    if errors:
        print(f"Error: {', '.join(errors)}")
        return 1

    init_db()
    with get_resilient_session() as db:
        user = auth_service.find_by_email(db, email)
        if not user:
            print(f"Error: No user found with email '{email}'")
            return 1

        user.hashed_password = auth_service.hash_password(new_password)

    print(f"Password reset successfully for {email}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/reset_password.py <email> <new_password>")
        print("Example: python scripts/reset_password.py user@example.com MyNewPass123")
        sys.exit(1)

    sys.exit(reset_password(sys.argv[1], sys.argv[2]))

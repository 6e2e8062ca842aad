"""Promote an existing account to administrator.

Only administrators can change roles through the API, so the first one has
to be created from the command line with the service-role key.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Set the role of an existing account in public.users.",
    )
    parser.add_argument("email", help="Email of the registered account.")
    parser.add_argument(
        "--role",
        default="admin",
        choices=["admin", "student"],
        help="Role to assign (default: admin).",
    )
    return parser.parse_args()


def set_role(email: str, role: str) -> dict:
    """Update the role of the account registered with ``email``."""
    from app.services.common import SupabaseService
    from app.utils.supabase_client import get_service_client

    db = SupabaseService(get_service_client())
    user = db.select_one("users", {"email": email.strip().lower()}, not_found_label="User")
    rows = db.update("users", {"id": user["id"]}, {"role": role})
    return rows[0] if rows else user


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    from app.utils.errors import AppError

    try:
        user = set_role(args.email, args.role)
    except AppError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        sys.exit(1)
    print(f"{user['email']} is now {args.role}")


if __name__ == "__main__":
    main()

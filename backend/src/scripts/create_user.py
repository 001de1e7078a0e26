#!/usr/bin/env python3
"""
Create or update a staff account in the account directory.

The script is idempotent: an existing account (matched by email) gets its
role, display name and region assignments updated instead of duplicated.
Optionally registers a push token and prints an access token for API use.

Usage:
    python -m backend.src.scripts.create_user --email "rsm.north@example.com" \\
        --name "Priya Shah" --role RSM --region North

Examples:
    # Administrator (notified of every report)
    python -m backend.src.scripts.create_user -e admin@example.com -n "Head Office" -r Admin

    # Regional manager covering two regions, with a browser push token
    python -m backend.src.scripts.create_user -e rsm@example.com -r RSM \\
        --region North --region East --push-token "fcm-token-from-browser"

    # Field staff with an access token for testing the API
    python -m backend.src.scripts.create_user -e field@example.com -r User \\
        --region South --access-token
"""

import argparse
import signal
import sys
from typing import List, Optional

from backend.src.models.user import Region, UserRole


def signal_handler(signum, frame):
    """Handle CTRL+C gracefully."""
    print("\n\nOperation interrupted by user.")
    sys.exit(130)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Create or update a DailyPulse staff account.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Notes:
  - This script is idempotent; running it again updates the account
  - --region replaces the account's region assignments when given
  - --access-token requires JWT_SECRET_KEY to be configured
        """
    )

    parser.add_argument(
        "-e", "--email",
        required=True,
        help="Login email for the account"
    )
    parser.add_argument(
        "-n", "--name",
        help="Display name shown on reports and notifications"
    )
    parser.add_argument(
        "-r", "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.USER.value,
        help="Account role (default: User)"
    )
    parser.add_argument(
        "--region",
        action="append",
        choices=[region.value for region in Region],
        help="Assigned region; repeat for several regions"
    )
    parser.add_argument(
        "--push-token",
        help="FCM registration token to register for the account"
    )
    parser.add_argument(
        "--access-token",
        action="store_true",
        help="Print a signed access token for the account"
    )

    return parser.parse_args(argv)


def validate_email(email: str) -> bool:
    """Basic email validation."""
    if not email or "@" not in email:
        return False
    local, domain = email.rsplit("@", 1)
    return bool(local and domain and "." in domain)


def create_user(
    email: str,
    role: str,
    display_name: Optional[str] = None,
    regions: Optional[List[str]] = None,
    push_token: Optional[str] = None,
    issue_access_token: bool = False,
    session_factory=None,
) -> Optional[str]:
    """
    Create or update an account.

    Args:
        email: Login email (normalized to lowercase)
        role: UserRole value
        display_name: Optional display name
        regions: Region values; None keeps existing assignments
        push_token: Optional FCM token to register
        issue_access_token: If True, print a signed access token
        session_factory: Session factory override (defaults to SessionLocal)

    Returns:
        The account GUID, or None on error
    """
    # Import here to avoid loading database during argument parsing
    from backend.src.config.settings import get_settings
    from backend.src.db.database import SessionLocal
    from backend.src.models.user import User, UserRegion
    from backend.src.services.device_token_service import DeviceTokenService
    from backend.src.services.exceptions import ValidationError
    from backend.src.services.token_service import TokenService

    db = (session_factory or SessionLocal)()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            print(f"\n[EXISTS] User '{email}' already exists, updating")
        else:
            user = User(email=email)
            db.add(user)
            print(f"\n[CREATED] User: {email}")

        user.role = UserRole(role)
        if display_name:
            user.display_name = display_name

        if regions is not None:
            wanted = list(dict.fromkeys(regions))
            # Keep surviving rows so the (user_id, region) unique key is never hit mid-flush
            user.region_assignments = [
                assignment for assignment in user.region_assignments
                if assignment.region in wanted
            ]
            for region in wanted:
                if region not in user.regions:
                    user.region_assignments.append(UserRegion(region=region))

        db.commit()
        db.refresh(user)

        print(f"  GUID: {user.guid}")
        print(f"  Role: {user.role.value}")
        print(f"  Regions: {', '.join(user.regions) or '-'}")

        if push_token:
            DeviceTokenService(db).register_token(user.id, push_token, device_name="cli")
            print("  Push token registered")

        if issue_access_token:
            settings = get_settings()
            try:
                access_token = TokenService(db, settings.jwt_secret_key).create_access_token(
                    user, expires_in_hours=settings.jwt_token_expiry_hours
                )
            except ValidationError as e:
                print(f"\n[ERROR] {e}")
                return None
            print(f"\nAccess token:\n{access_token}")

        return user.guid

    except Exception as e:
        print(f"\n[ERROR] Unexpected error: {e}")
        db.rollback()
        return None
    finally:
        db.close()


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    args = parse_args(argv)

    if not validate_email(args.email):
        print(f"Error: Invalid email format: {args.email}")
        sys.exit(1)

    print("=" * 50)
    print("DailyPulse: Create User")
    print("=" * 50)

    user_guid = create_user(
        email=args.email.strip().lower(),
        role=args.role,
        display_name=args.name,
        regions=args.region,
        push_token=args.push_token,
        issue_access_token=args.access_token,
    )

    if user_guid is None:
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
awsso command-line interface.

    awsso creds PROFILE [--login] [--dry-run] [--backup]
    awsso profiles [--all]
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .aws_profiles import (
    AwsSsoError,
    CredentialsRefresher,
    list_profiles
)
from .utils import configure_logging, render_table

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = ["name", "account id", "role", "region"]


def format_profile_table(profiles) -> str:
    """Format profiles for display."""
    if not profiles:
        return "No AWS SSO profiles found."

    rows = [
        [p.short_name, p.sso_account_id, p.sso_role_name, p.region]
        for p in profiles
    ]
    return render_table(PROFILE_COLUMNS, rows)


def handle_creds(args) -> int:
    """Handle the creds command."""
    refresher = CredentialsRefresher()
    result = refresher.refresh(
        args.profile,
        login=args.login,
        dry_run=args.dry_run,
        backup=args.backup,
    )

    if result.dry_run:
        logger.info(str(result))
    else:
        print(f"✅ {result}")
    return 0


def handle_profiles(args) -> int:
    """Handle the profiles command."""
    profiles = list_profiles(sso_only=not args.all)
    print(format_profile_table(profiles))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="awsso",
        description="AWS SSO helper - refresh short-term credentials from the SSO cache"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Creds command
    creds_parser = subparsers.add_parser("creds", help="Refresh short-term credentials")
    creds_parser.add_argument("profile", help="SSO profile to refresh")
    creds_parser.add_argument("--login", action="store_true",
                              help="Create an AWS SSO login session before fetching credentials")
    creds_parser.add_argument("--dry-run", action="store_true",
                              help="Write the updated credentials file to stdout")
    creds_parser.add_argument("--backup", action="store_true",
                              help="Make a backup before writing to the credentials file "
                                   "(no effect with --dry-run)")
    creds_parser.set_defaults(func=handle_creds)

    # Profiles command
    profiles_parser = subparsers.add_parser("profiles", help="List available SSO profiles")
    profiles_parser.add_argument("--all", "-a", action="store_true",
                                 help="Include profiles without SSO settings")
    profiles_parser.set_defaults(func=handle_profiles)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    try:
        return args.func(args)
    except AwsSsoError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"❌ awsso: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

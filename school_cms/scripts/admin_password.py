#!/usr/bin/env python3
"""
Admin Password Utility
Generates the ADMIN_PASSWORD_HASH for the gallery write endpoints, or checks a
password against the configured hash.

Usage:
    school-cms-password             Prompt for a password and print a new hash
    school-cms-password --check     Prompt for a password and test it against ADMIN_PASSWORD_HASH
"""
import argparse
import getpass
import sys
from typing import Optional, Sequence

from school_cms.utils.auth import hash_password, verify_admin_password


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate or check the CMS admin password hash.")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Test a password against the configured ADMIN_PASSWORD_HASH",
    )
    parser.add_argument("--rounds", type=int, default=12, help="bcrypt cost factor (default: 12)")
    return parser.parse_args(argv)


def generate(rounds: int) -> int:
    print("This will generate a bcrypt hash for your admin password.")
    print("Copy the output to your .env file as ADMIN_PASSWORD_HASH")
    print()

    password = getpass.getpass("Enter admin password: ")
    if not password:
        print("\n❌ Error: Password cannot be empty")
        return 1

    if password != getpass.getpass("Confirm password: "):
        print("\n❌ Error: Passwords do not match")
        return 1

    print("\n⏳ Generating hash (this may take a moment)...")
    hashed = hash_password(password, rounds=rounds)

    print("\n✅ Success! Copy this line to your .env file:\n")
    print(f"ADMIN_PASSWORD_HASH={hashed}")
    print()
    print("⚠️  Keep this hash secret and never commit it to version control!")
    return 0


def check() -> int:
    password = getpass.getpass("Enter password to test: ")
    try:
        matches = verify_admin_password(password)
    except ValueError as e:
        print(f"❌ Error: {str(e)}")
        return 1

    if matches:
        print("✅ Password matches ADMIN_PASSWORD_HASH")
        return 0
    print("❌ Password does not match ADMIN_PASSWORD_HASH")
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function. Returns the process exit code."""
    args = parse_args(argv)

    print("=" * 60)
    print("CMS Admin Password Utility")
    print("=" * 60)
    print()

    if args.check:
        return check()
    return generate(args.rounds)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Print an ADMIN_PASSWORD value (Argon2 hash) for the WellPulse platform admin."""
import getpass
import sys

from wellpulse.core.security import get_password_hash, verify_password

MIN_LENGTH = 12


def main() -> int:
    if len(sys.argv) > 2:
        print("Usage: python hash_password.py ['password']  (prompts when omitted)")
        return 1

    if len(sys.argv) == 2:
        password = sys.argv[1]
    else:
        password = getpass.getpass("Admin password: ")
        if getpass.getpass("Repeat: ") != password:
            print("Passwords do not match")
            return 1

    if len(password) < MIN_LENGTH:
        print(f"Password must be at least {MIN_LENGTH} characters long")
        return 1

    password_hash = get_password_hash(password)
    assert verify_password(password, password_hash)

    print("Add this to your .env file:")
    print(f"ADMIN_PASSWORD='{password_hash}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())

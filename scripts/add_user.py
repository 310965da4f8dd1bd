#!/usr/bin/env python3
"""
Create a vault account from the command line, with the same rules as the signup page.

Usage:
  python scripts/add_user.py --name Ana --email ana@example.com --password secret [--balance 5000]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault.core.utils import format_amount
from vault.domain.accounts import MIN_INITIAL_BALANCE
from vault.services.auth_service import AuthService, RegistrationError


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Create a vault account")
    ap.add_argument("--name", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--balance", default=str(MIN_INITIAL_BALANCE), help="Initial balance (min 5000)")
    args = ap.parse_args(argv)

    try:
        result = AuthService().register(args.name, args.email, args.password, args.balance)
    except RegistrationError as exc:
        raise SystemExit(exc.message)
    print("OK: account created")
    print(f"  Email: {result.user.email}")
    print(f"  Balance: Rs. {format_amount(result.user.balance)}")


if __name__ == "__main__":
    main()

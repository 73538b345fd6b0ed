"""Mint a session token for local testing against the checkpoints API.

Uses the same AUTH_JWT_* settings the server verifies with, so it only works
when server and script share configuration (dev/test environments).

Example:
    python scripts/issue_dev_token.py p-1
    python scripts/issue_dev_token.py ops-1 --admin --minutes 5
"""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from checkpoint_hub.config import settings  # noqa: E402
from checkpoint_hub.core.auth.resolver import create_session_token  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("subject", help="Subject id (becomes owner_id of checkpoints created by a player)")
    p.add_argument("--admin", action="store_true", help=f"Grant the {settings.AUTH_ADMIN_ROLE!r} role")
    p.add_argument("--role", action="append", default=[], help="Extra role (repeatable)")
    p.add_argument("--minutes", type=int, default=settings.AUTH_SESSION_TOKEN_EXPIRE_MINUTES)
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    env = (settings.ENV or "").strip().lower()
    if env not in {"dev", "development", "test", "testing"}:
        print(f"Refusing to mint tokens with ENV={settings.ENV!r}", file=sys.stderr)
        return 2

    roles = list(args.role)
    if args.admin:
        roles.append(settings.AUTH_ADMIN_ROLE)
    token = create_session_token(args.subject, roles=roles, expires_in=timedelta(minutes=args.minutes))
    print(token)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

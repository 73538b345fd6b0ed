"""Create the gameplay_checkpoints table without running Alembic.

Meant for a fresh local SQLite file; deployed databases use `alembic upgrade head`.

Example:
    python scripts/init_sqlite_db.py
    python scripts/init_sqlite_db.py --url sqlite+aiosqlite:///./scratch.db
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from checkpoint_hub.config import settings  # noqa: E402
from checkpoint_hub.db.models import Base  # noqa: E402
from checkpoint_hub.db.session import build_engine  # noqa: E402


async def create_tables(database_url: str) -> list[str]:
    eng = build_engine(database_url)
    try:
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await eng.dispose()
    return sorted(Base.metadata.tables)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("--url", default=settings.DATABASE_URL, help="Database URL (defaults to DATABASE_URL)")
    args = p.parse_args(argv)

    tables = asyncio.run(create_tables(args.url))
    print(f"ready: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

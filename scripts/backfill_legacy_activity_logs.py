# scripts/backfill_legacy_activity_logs.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio

from auditlog.config.logging import configure_logging
from auditlog.config.settings import get_settings
from auditlog.infrastructure.database.session import get_engine, get_session_factory, init_models
from auditlog.infrastructure.legacy.backfill import LEGACY_TABLE, backfill_legacy_activity_logs


async def run(legacy_table: str) -> None:
    # audit_events must exist before rows can be copied into it
    await init_models(get_engine())
    copied = await backfill_legacy_activity_logs(get_session_factory(), legacy_table)
    print(f"Copied {copied} rows from {legacy_table} into audit_events")
    await get_engine().dispose()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    asyncio.run(run(sys.argv[1] if len(sys.argv) > 1 else LEGACY_TABLE))

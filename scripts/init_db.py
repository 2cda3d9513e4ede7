# scripts/init_db.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio

from auditlog.config.settings import get_settings
from auditlog.infrastructure.database.session import get_engine, init_models


async def main() -> None:
    await init_models(get_engine())
    print("Tables created on", get_settings().database_url)
    await get_engine().dispose()


asyncio.run(main())

# scripts/check_db.py
import sys
from pathlib import Path
from sqlalchemy import text

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from auditlog.infrastructure.database.session import get_engine


async def check_connection():
    async with get_engine().begin() as conn:
        result = await conn.execute(text("SELECT count(*) FROM audit_events"))
        print("DB Connected, audit events:", result.scalar())

asyncio.run(check_connection())

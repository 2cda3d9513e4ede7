"""One-time migration of the legacy activity log schema."""

from auditlog.infrastructure.legacy.backfill import (
    backfill_legacy_activity_logs,
    canonicalize_legacy_row,
)

__all__ = ["backfill_legacy_activity_logs", "canonicalize_legacy_row"]

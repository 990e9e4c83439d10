"""Daily reset of every user's nutrition totals."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from diet_tracker.services.ledger import LedgerRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResetReport:
    """Outcome of one reset run."""

    total_users: int
    reset_users: int
    shards_committed: int
    failed: bool


@dataclass
class DailyResetJob:
    """Zeroes calorie and macro totals for all users in grouped writes.

    Goals and pending meal sets are left alone. Each shard of at most
    ``batch_size`` users is one write; a failed shard stops the run but
    keeps the shards already committed. Re-running is always safe since
    the job writes constants.
    """

    repository: LedgerRepository
    batch_size: int = 500

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be positive")

    def reset_all(self) -> ResetReport:
        """Reset every ledger; raises if enumeration fails."""
        user_ids = self.repository.list_user_ids()
        if not user_ids:
            _logger.info("Daily reset: no user records found")
            return ResetReport(0, 0, 0, failed=False)

        reset_users = 0
        shards = 0
        for start in range(0, len(user_ids), self.batch_size):
            shard = user_ids[start : start + self.batch_size]
            try:
                self.repository.reset_totals(shard)
            except Exception:
                _logger.exception(
                    "Daily reset shard failed",
                    extra={
                        "shard_index": shards,
                        "reset_users": reset_users,
                        "total_users": len(user_ids),
                    },
                )
                return ResetReport(len(user_ids), reset_users, shards, failed=True)
            reset_users += len(shard)
            shards += 1

        _logger.info(
            "Daily reset complete: users=%s shards=%s", reset_users, shards
        )
        return ResetReport(len(user_ids), reset_users, shards, failed=False)

    async def run(self) -> ResetReport:
        """Scheduler entrypoint; runs off the event loop and never raises."""
        started_at = datetime.now(tz=UTC)
        try:
            report = await asyncio.to_thread(self.reset_all)
        except Exception:
            _logger.exception("Daily reset failed")
            return ResetReport(0, 0, 0, failed=True)
        elapsed = (datetime.now(tz=UTC) - started_at).total_seconds()
        _logger.info("Daily reset finished in %.2fs", elapsed)
        return report

"""
Batch Runner - walks the pending list one identity at a time.

Skips identities already used, claims the rest through the orchestrator,
aggregates the counters and waits a random delay between identities.
Terminal results are appended to a daily JSONL event log.
"""
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from pointclaim.config import ClaimerConfig
from pointclaim.console import Console
from pointclaim.delay import DelayPolicy
from pointclaim.models import BatchStats, ClaimEvent, ClaimResult, Outcome
from pointclaim.orchestrator import ClaimOrchestrator

log = logging.getLogger(__name__)


class BatchRunner:
    """
    Runs one claim pass over the pending list.

    Features:
    - Strictly sequential, one request in flight
    - Previously used identities never hit the network
    - Random delay between identities, none after the last one
    - Logs events to JSONL files
    """

    def __init__(
        self,
        config: ClaimerConfig,
        orchestrator: ClaimOrchestrator,
        delay: DelayPolicy,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.orchestrator = orchestrator
        self.delay = delay
        self.console = console or Console()

    def run(
        self,
        pending: list[str],
        used: Iterable[str],
        stats: Optional[BatchStats] = None,
    ) -> BatchStats:
        """
        Claim every pending identity not in used.

        Counters go into stats when given, so a caller still has the partial
        counts if the run is interrupted.
        """
        stats = stats if stats is not None else BatchStats()

        if not pending:
            message = f"No usernames found in {self.config.usernames_path}"
            log.error(f"Config error: {message}")
            self.console.config_error(message)
            return stats

        # Grows during the run so a duplicated entry is not claimed twice
        done = set(used)
        total = len(pending)

        log.info(f"Run: {total} pending, {len(done)} already used")
        self._log_event(ClaimEvent(ts=int(time.time()), event="run_start"))

        for index, identity in enumerate(pending):
            self.console.processing(identity, index + 1, total)

            if identity in done:
                self.console.skip(identity)
                stats.skipped += 1
                continue

            result = self.orchestrator.claim(identity)
            stats.record(result)
            self._log_result(result)

            if result.outcome in (Outcome.SUCCESS, Outcome.ALREADY_CLAIMED, Outcome.NOT_FOUND):
                done.add(identity)

            if index < total - 1:
                self.delay.wait(self.delay.random_delay())

        log.info(
            f"Run complete: {stats.processed} processed, {stats.successful} success, "
            f"{stats.failed} failed, {stats.skipped} skipped"
        )
        self._log_event(ClaimEvent(ts=int(time.time()), event="run_end", stats=stats.to_dict()))
        return stats

    def _log_result(self, result: ClaimResult):
        self._log_event(ClaimEvent(
            ts=int(time.time()),
            event=f"claim_{result.status.value}",
            identity=result.identity,
            outcome=result.outcome.value,
            status=result.status.value,
            attempts=result.attempts,
            claimed=result.claimed,
            total=result.total,
            detail=result.detail,
        ))

    def _log_event(self, event: ClaimEvent):
        """Log event to JSONL file."""
        if not self.config.event_log_dir:
            return
        try:
            log_dir = Path(self.config.event_log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            date = datetime.now().strftime("%Y-%m-%d")
            with open(log_dir / f"claims_{date}.jsonl", "a", encoding="utf-8") as f:
                f.write(json.dumps(event.to_dict()) + "\n")
        except OSError as e:
            log.warning(f"Failed to log event: {e}")

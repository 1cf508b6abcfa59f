"""
Claim Orchestrator - per-identity retry loop.

Sends up to max_retry requests for one identity, following the classifier's
verdicts. Side effects (store mutations) happen once, on the terminal
verdict, and are persisted before any cooldown.
"""
import logging
from typing import Optional

from pointclaim.api import ClaimClient
from pointclaim.classifier import OutcomeClassifier
from pointclaim.config import ClaimerConfig
from pointclaim.console import Console
from pointclaim.delay import DelayPolicy
from pointclaim.models import ClaimResult, Directive, Outcome, SideEffect, Verdict
from pointclaim.store import IdentityStore

log = logging.getLogger(__name__)


class ClaimOrchestrator:
    """Drives the claim attempts for a single identity."""

    def __init__(
        self,
        config: ClaimerConfig,
        client: ClaimClient,
        store: IdentityStore,
        delay: DelayPolicy,
        console: Optional[Console] = None,
        classifier: Optional[OutcomeClassifier] = None,
    ):
        self.config = config
        self.client = client
        self.store = store
        self.delay = delay
        self.console = console or Console()
        self.classifier = classifier or OutcomeClassifier(config)

    def claim(self, identity: str) -> ClaimResult:
        max_retry = self.config.max_retry

        for attempt in range(1, max_retry + 1):
            log.debug(f"Claim attempt {attempt}/{max_retry} for @{identity}")
            result = self.client.claim(identity)
            verdict = self.classifier.classify(result, attempt, max_retry)

            if verdict.directive is Directive.RETRY:
                log.info(f"@{identity}: {verdict.outcome.value} on attempt {attempt}, retrying in {verdict.wait_s}s")
                self.delay.wait(verdict.wait_s)
                continue

            return self._finish(identity, verdict, attempt)

        log.warning(f"@{identity}: no terminal answer after {max_retry} attempts")
        self.console.failed(identity)
        return ClaimResult(identity=identity, outcome=Outcome.FAILED, attempts=max_retry)

    def _finish(self, identity: str, verdict: Verdict, attempt: int) -> ClaimResult:
        self._apply(identity, verdict.side_effect)
        self._report(identity, verdict)

        if verdict.wait_s > 0:
            self.delay.wait(verdict.wait_s)

        return ClaimResult(
            identity=identity,
            outcome=verdict.outcome,
            attempts=attempt,
            detail=verdict.detail,
            claimed=verdict.claimed,
            total=verdict.total,
        )

    def _apply(self, identity: str, side_effect: SideEffect):
        if side_effect is SideEffect.MARK_USED:
            self.store.mark_used(identity)
        elif side_effect is SideEffect.REMOVE_PENDING:
            self.store.remove_pending(identity)

    def _report(self, identity: str, verdict: Verdict):
        """One console line per terminal verdict."""
        outcome = verdict.outcome

        if outcome is Outcome.SUCCESS:
            self.console.success(identity, verdict.claimed, verdict.total)
        elif outcome is Outcome.ALREADY_CLAIMED:
            self.console.already_claimed(identity)
        elif outcome is Outcome.NOT_FOUND:
            self.console.removed(identity)
        elif outcome is Outcome.RETRIES_EXHAUSTED:
            self.console.failed(identity)
        elif outcome is Outcome.TRANSPORT_ERROR:
            self.console.error(identity, verdict.detail)
        elif outcome is Outcome.UNKNOWN_RESPONSE:
            self.console.error(identity, "Unknown response")
        else:
            log.warning(f"@{identity}: unknown error ({verdict.detail})")
            self.console.error(identity, "Unknown error")

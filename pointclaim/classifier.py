"""
Outcome Classifier - maps one claim attempt to a Verdict.

The verdict tells the orchestrator whether to retry, which persisted-state
change to make and how long to cool down. Message matching is a
case-insensitive substring test against an ordered rule list; the first
rule that matches wins.
"""
import logging
from typing import Union

from pointclaim.config import ClaimerConfig
from pointclaim.models import (
    ClaimFailure,
    ClaimResponse,
    Directive,
    Outcome,
    SideEffect,
    Verdict,
)

log = logging.getLogger(__name__)

ALREADY_CLAIMED = "already claimed"

# Order matters: "not found" before "unauthorized" before "already claimed"
ERROR_RULES = (
    ("not found", Outcome.NOT_FOUND),
    ("unauthorized", Outcome.UNAUTHORIZED),
    (ALREADY_CLAIMED, Outcome.ALREADY_CLAIMED),
)


class OutcomeClassifier:
    """Classifies claim attempts using the configured cooldowns."""

    def __init__(self, config: ClaimerConfig):
        self.config = config

    def classify(
        self,
        result: Union[ClaimResponse, ClaimFailure],
        attempt: int,
        max_retry: int,
    ) -> Verdict:
        if isinstance(result, ClaimResponse):
            return self._classify_response(result)
        return self._classify_failure(result, attempt, max_retry)

    def _classify_response(self, resp: ClaimResponse) -> Verdict:
        if resp.success:
            return Verdict(
                outcome=Outcome.SUCCESS,
                side_effect=SideEffect.MARK_USED,
                claimed=resp.claimed,
                total=resp.total,
            )

        if ALREADY_CLAIMED in resp.message.lower():
            return self._already_claimed(resp.message)

        # No retry and no cooldown for a payload we don't understand
        return Verdict(outcome=Outcome.UNKNOWN_RESPONSE, detail="Unknown response")

    def _classify_failure(self, failure: ClaimFailure, attempt: int, max_retry: int) -> Verdict:
        # A transport error ends the identity on the first occurrence even though
        # the attempt loop could retry it. Revisit if flaky networks become an issue.
        if failure.is_transport_error:
            return Verdict(
                outcome=Outcome.TRANSPORT_ERROR,
                wait_s=self.config.error_delay,
                detail=failure.error or "Network error",
            )

        message = failure.message.lower()
        outcome = next((o for needle, o in ERROR_RULES if needle in message), Outcome.UNKNOWN_ERROR)

        if outcome is Outcome.NOT_FOUND:
            return Verdict(
                outcome=Outcome.NOT_FOUND,
                side_effect=SideEffect.REMOVE_PENDING,
                detail=failure.message,
            )

        if outcome is Outcome.UNAUTHORIZED:
            if attempt < max_retry:
                log.debug(f"Unauthorized on attempt {attempt}/{max_retry}, retrying")
                return Verdict(
                    outcome=Outcome.UNAUTHORIZED,
                    directive=Directive.RETRY,
                    wait_s=self.config.retry_delay,
                    detail=failure.message,
                )
            return Verdict(
                outcome=Outcome.RETRIES_EXHAUSTED,
                wait_s=self.config.error_delay,
                detail=failure.message,
            )

        if outcome is Outcome.ALREADY_CLAIMED:
            return self._already_claimed(failure.message)

        return Verdict(
            outcome=Outcome.UNKNOWN_ERROR,
            wait_s=self.config.error_delay,
            detail=failure.message or failure.error or "Unknown error",
        )

    @staticmethod
    def _already_claimed(message: str) -> Verdict:
        return Verdict(
            outcome=Outcome.ALREADY_CLAIMED,
            side_effect=SideEffect.MARK_USED,
            detail=message,
        )

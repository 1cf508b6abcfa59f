"""
Data structures for the point claimer.

Responses are parsed into ClaimResponse / ClaimFailure by the API client,
turned into a Verdict by the classifier and reduced to one ClaimResult per
identity by the orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional


class ClaimStatus(Enum):
    """Aggregate bucket reported in the batch summary."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class Outcome(Enum):
    """Classification of one claim attempt (or of a whole identity)."""

    SUCCESS = "success"
    ALREADY_CLAIMED = "already_claimed"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"            # Non-terminal, retried
    RETRIES_EXHAUSTED = "retries_exhausted"
    TRANSPORT_ERROR = "transport_error"
    UNKNOWN_RESPONSE = "unknown_response"
    UNKNOWN_ERROR = "unknown_error"
    FAILED = "failed"                        # Attempt loop ran out
    SKIPPED = "skipped"                      # Already in the used set

    @property
    def status(self) -> ClaimStatus:
        if self is Outcome.SUCCESS:
            return ClaimStatus.SUCCESS
        if self in (Outcome.ALREADY_CLAIMED, Outcome.NOT_FOUND, Outcome.SKIPPED):
            return ClaimStatus.SKIPPED
        return ClaimStatus.FAILED


class Directive(Enum):
    """What the orchestrator does after an attempt."""

    RETRY = "retry"
    TERMINATE = "terminate"


class SideEffect(Enum):
    """Persisted-state mutation attached to a terminal verdict."""

    NONE = "none"
    MARK_USED = "mark_used"
    REMOVE_PENDING = "remove_pending"


@dataclass
class ClaimResponse:
    """Success-path payload (HTTP 2xx)."""

    success: bool
    message: str = ""
    claimed: float = 0
    total: float = 0


@dataclass
class ClaimFailure:
    """
    Failure-path result.

    message is None when no response was received at all (DNS, connection,
    timeout). An HTTP error whose body carries no message has message "".
    """

    message: Optional[str] = None
    status_code: Optional[int] = None
    error: str = ""

    @property
    def is_transport_error(self) -> bool:
        return self.message is None


@dataclass
class Verdict:
    """Classifier decision for a single attempt."""

    outcome: Outcome
    directive: Directive = Directive.TERMINATE
    side_effect: SideEffect = SideEffect.NONE
    wait_s: int = 0
    detail: str = ""
    claimed: float = 0
    total: float = 0


@dataclass
class ClaimResult:
    """Terminal result for one identity."""

    identity: str
    outcome: Outcome
    attempts: int = 0
    detail: str = ""
    claimed: float = 0
    total: float = 0

    @property
    def status(self) -> ClaimStatus:
        return self.outcome.status


@dataclass
class BatchStats:
    """Counters for one run."""

    processed: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0

    def record(self, result: ClaimResult):
        """Count a claim that went through the orchestrator."""
        self.processed += 1
        if result.status is ClaimStatus.SUCCESS:
            self.successful += 1
        elif result.status is ClaimStatus.FAILED:
            self.failed += 1
        else:
            self.skipped += 1

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ClaimEvent:
    """One line of the JSONL event log."""

    ts: int
    event: str
    identity: str = ""
    outcome: str = ""
    status: str = ""
    attempts: int = 0
    claimed: float = 0
    total: float = 0
    detail: str = ""
    stats: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        # Drop empty fields so each event type only carries what it sets
        data = {"ts": self.ts, "event": self.event}
        for key, value in asdict(self).items():
            if key not in data and value not in ("", 0, {}, None):
                data[key] = value
        return data

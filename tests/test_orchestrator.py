"""
Tests for the claim orchestrator.

Scripted client results, recorded waits, real files.
"""

import io
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pointclaim.config import ClaimerConfig
from pointclaim.console import Console
from pointclaim.delay import DelayPolicy
from pointclaim.models import (
    ClaimFailure,
    ClaimResponse,
    ClaimStatus,
    Directive,
    Outcome,
    Verdict,
)
from pointclaim.orchestrator import ClaimOrchestrator
from pointclaim.store import IdentityStore


class ScriptedClient:
    """Returns the queued results in order and counts requests."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def claim(self, identity):
        self.calls.append(identity)
        return self.results.pop(0)

    def close(self):
        pass


class RecordingDelay(DelayPolicy):
    """Records waits instead of sleeping."""

    def __init__(self, config):
        super().__init__(config)
        self.waits = []

    def wait(self, seconds):
        self.waits.append(seconds)


def make(tmp_path, *results, **overrides):
    settings = {"error_delay": 9, "retry_delay": 4, "max_retry": 3}
    settings.update(overrides)
    config = ClaimerConfig(**settings)
    pending = tmp_path / "pending.txt"
    pending.write_text("alice\nbob", encoding="utf-8")
    store = IdentityStore(str(pending), str(tmp_path / "used.txt"))
    client = ScriptedClient(*results)
    delay = RecordingDelay(config)
    out = io.StringIO()
    orchestrator = ClaimOrchestrator(config, client, store, delay, console=Console(out, color=False))
    return orchestrator, client, store, delay, out


def test_success_marks_used_once(tmp_path):
    orchestrator, client, store, delay, out = make(
        tmp_path, ClaimResponse(success=True, claimed=10, total=10)
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.SUCCESS
    assert result.status == ClaimStatus.SUCCESS
    assert result.attempts == 1
    assert client.calls == ["alice"]
    assert store.load_used() == ["alice"]
    assert delay.waits == []
    assert "SUCCESS | @alice | +10 points | Total: 10" in out.getvalue()


def test_unauthorized_every_time_exhausts_retries(tmp_path):
    """Retry cooldown between attempts, error cooldown after the last."""
    unauthorized = ClaimFailure(message="UNAUTHORIZED", status_code=401)
    orchestrator, client, store, delay, out = make(tmp_path, unauthorized, unauthorized, unauthorized)

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.RETRIES_EXHAUSTED
    assert result.status == ClaimStatus.FAILED
    assert result.attempts == 3
    assert client.calls == ["alice", "alice", "alice"]
    assert delay.waits == [4, 4, 9]
    assert store.load_used() == []
    assert out.getvalue().count("FAILED  | @alice | Max retries exceeded") == 1


def test_unauthorized_then_success(tmp_path):
    orchestrator, client, store, delay, _ = make(
        tmp_path,
        ClaimFailure(message="Unauthorized"),
        ClaimResponse(success=True, claimed=5, total=50),
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.SUCCESS
    assert result.attempts == 2
    assert (result.claimed, result.total) == (5, 50)
    assert delay.waits == [4]
    assert store.load_used() == ["alice"]


def test_not_found_removes_without_retry(tmp_path):
    orchestrator, client, store, delay, out = make(
        tmp_path, ClaimFailure(message="User not found", status_code=404)
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.NOT_FOUND
    assert result.status == ClaimStatus.SKIPPED
    assert client.calls == ["alice"]
    assert store.load_pending() == ["bob"]
    assert store.load_used() == []
    assert "REMOVED | @alice | User not found" in out.getvalue()


def test_transport_error_no_retry(tmp_path):
    orchestrator, client, store, delay, out = make(
        tmp_path, ClaimFailure(message=None, error="timed out")
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.TRANSPORT_ERROR
    assert result.status == ClaimStatus.FAILED
    assert client.calls == ["alice"]
    assert delay.waits == [9]
    assert "ERROR   | @alice | timed out" in out.getvalue()


def test_already_claimed_from_error_body(tmp_path):
    orchestrator, client, store, delay, out = make(
        tmp_path, ClaimFailure(message="Already claimed", status_code=400)
    )

    result = orchestrator.claim("bob")

    assert result.outcome == Outcome.ALREADY_CLAIMED
    assert store.load_used() == ["bob"]
    assert delay.waits == []
    assert "SKIPPED | @bob | Already claimed" in out.getvalue()


def test_unknown_error_waits_error_cooldown(tmp_path):
    orchestrator, client, store, delay, out = make(
        tmp_path, ClaimFailure(message="Internal server error", status_code=500)
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.UNKNOWN_ERROR
    assert delay.waits == [9]
    assert "ERROR   | @alice | Unknown error" in out.getvalue()


def test_unknown_response_no_wait(tmp_path):
    orchestrator, client, store, delay, out = make(
        tmp_path, ClaimResponse(success=False, message="try later")
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.UNKNOWN_RESPONSE
    assert delay.waits == []
    assert "ERROR   | @alice | Unknown response" in out.getvalue()


def test_single_attempt_unauthorized_fails_immediately(tmp_path):
    orchestrator, client, store, delay, _ = make(
        tmp_path, ClaimFailure(message="unauthorized"), max_retry=1
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.RETRIES_EXHAUSTED
    assert client.calls == ["alice"]
    assert delay.waits == [9]


class AlwaysRetry:
    """Classifier that never gives a terminal verdict."""

    def classify(self, result, attempt, max_retry):
        return Verdict(outcome=Outcome.UNAUTHORIZED, directive=Directive.RETRY, wait_s=4)


def test_loop_exhaustion_returns_failed(tmp_path):
    """Running out of attempts without a terminal verdict fails the identity."""
    _, client, store, delay, _ = make(
        tmp_path, *[ClaimFailure(message="unauthorized")] * 3
    )
    out = io.StringIO()
    orchestrator = ClaimOrchestrator(
        store=store,
        config=ClaimerConfig(error_delay=9, retry_delay=4, max_retry=3),
        client=client,
        classifier=AlwaysRetry(),
        delay=delay,
        console=Console(out, color=False),
    )

    result = orchestrator.claim("alice")

    assert result.outcome == Outcome.FAILED
    assert result.status == ClaimStatus.FAILED
    assert result.attempts == 3
    assert len(client.calls) == 3
    assert delay.waits == [4, 4, 4]
    assert store.load_used() == []
    assert store.load_pending() == ["alice", "bob"]
    assert out.getvalue().count("Max retries exceeded") == 1

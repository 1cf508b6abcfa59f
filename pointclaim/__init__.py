# Point Claimer
# Claims per-user points for a list of usernames, one at a time

from pointclaim.config import ClaimerConfig, ConfigurationError
from pointclaim.models import BatchStats, ClaimResult, ClaimStatus, Outcome
from pointclaim.store import IdentityStore
from pointclaim.classifier import OutcomeClassifier
from pointclaim.orchestrator import ClaimOrchestrator
from pointclaim.runner import BatchRunner

__all__ = [
    "ClaimerConfig",
    "ConfigurationError",
    "BatchStats",
    "ClaimResult",
    "ClaimStatus",
    "Outcome",
    "IdentityStore",
    "OutcomeClassifier",
    "ClaimOrchestrator",
    "BatchRunner",
]

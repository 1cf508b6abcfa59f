"""
Configuration for the point claimer.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(Exception):
    """Raised when the claimer cannot start with the given settings."""


@dataclass
class ClaimerConfig:
    """Configuration for the point claimer."""

    # === SESSION ===
    # Session cookie copied from a logged-in browser, sent as-is
    cookie: str = os.getenv("COOKIE", "")

    # === TIMING (seconds) ===
    delay_min: int = int(os.getenv("CLAIM_DELAY_MIN", "3"))  # Between identities
    delay_max: int = int(os.getenv("CLAIM_DELAY_MAX", "5"))
    error_delay: int = int(os.getenv("CLAIM_DELAY_ON_ERROR", "3"))  # After a terminal error
    retry_delay: int = int(os.getenv("CLAIM_DELAY_RETRY", "3"))  # Before re-sending on unauthorized

    # === LIMITS ===
    max_retry: int = int(os.getenv("CLAIM_MAX_RETRY", "3"))
    request_timeout_s: float = float(os.getenv("CLAIM_REQUEST_TIMEOUT", "30"))

    # === API ===
    api_url: str = os.getenv(
        "CLAIM_API_URL", "https://addplus.org/api/trpc/users.claimPoints?batch=1"
    )
    site_url: str = os.getenv("CLAIM_SITE_URL", "https://addplus.org")
    user_agent: str = os.getenv("CLAIM_USER_AGENT", "Mozilla/5.0 (Linux; Android 10)")

    # === PATHS ===
    usernames_path: str = os.getenv("CLAIM_USERNAMES_FILE", "usernames.txt")
    used_path: str = os.getenv("CLAIM_USED_FILE", "usernames_used.txt")
    lock_path: str = os.getenv("CLAIM_LOCK_PATH", "data/claimer.lock")
    event_log_dir: str = os.getenv("CLAIM_LOG_DIR", "logs/claims")

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if not self.cookie:
            errors.append("COOKIE not set")

        if self.delay_min < 0:
            errors.append(f"delay_min {self.delay_min} < 0")
        if self.delay_max < self.delay_min:
            errors.append(f"delay_max {self.delay_max} < delay_min {self.delay_min}")
        if self.error_delay < 0:
            errors.append(f"error_delay {self.error_delay} < 0")
        if self.retry_delay < 0:
            errors.append(f"retry_delay {self.retry_delay} < 0")

        if self.max_retry < 1:
            errors.append(f"max_retry {self.max_retry} < 1")
        if self.request_timeout_s <= 0:
            errors.append(f"request_timeout_s {self.request_timeout_s} must be positive")

        if not self.api_url:
            errors.append("CLAIM_API_URL not set")

        return errors

    def require_valid(self):
        """Raise ConfigurationError listing every problem found by validate()."""
        errors = self.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))

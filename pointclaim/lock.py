"""
Single-instance lock so two claimers never rewrite the same lists at once.
"""
import fcntl
import logging
from pathlib import Path

log = logging.getLogger(__name__)


class RunLock:
    """Exclusive, non-blocking file lock."""

    def __init__(self, lock_path: str = "data/claimer.lock"):
        self.lock_path = Path(lock_path)
        self.lock_fd = None

    def acquire(self) -> bool:
        """Acquire exclusive file lock."""
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)

            self.lock_fd = open(self.lock_path, "w")
            fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            return True
        except OSError:
            if self.lock_fd:
                self.lock_fd.close()
                self.lock_fd = None
            return False

    def release(self):
        """Release file lock."""
        if self.lock_fd:
            try:
                fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_UN)
            except OSError as e:
                log.warning(f"Failed to unlock {self.lock_path}: {e}")
            self.lock_fd.close()
            self.lock_fd = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()

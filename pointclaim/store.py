"""
Identity Store - flat-file storage for idempotent claim tracking.

Two newline-delimited text files: the pending usernames and the usernames
already used. Every mutation rewrites the whole file before returning, so a
crash never loses a completed identity.
"""
import logging
import os
from pathlib import Path
from typing import Iterable

log = logging.getLogger(__name__)


class ListFile:
    """A newline-delimited list of identities persisted as a text file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> list[str]:
        """Read entries in file order, stripped, without empty lines."""
        if not self.path.exists():
            return []

        text = self.path.read_text(encoding="utf-8")
        return [line.strip() for line in text.split("\n") if line.strip()]

    def save(self, items: Iterable[str]):
        """Overwrite the file with items, one per line."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a sibling and swap it in, so readers never see a partial file
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write("\n".join(items))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.path)


class IdentityStore:
    """
    Pending list + used set.

    The used file is re-read before each change so entries written by an
    earlier run (or by hand) are never dropped.
    """

    def __init__(self, pending_path: str = "usernames.txt", used_path: str = "usernames_used.txt"):
        self.pending = ListFile(pending_path)
        self.used = ListFile(used_path)

    def load_pending(self) -> list[str]:
        return self.pending.load()

    def load_used(self) -> list[str]:
        return self.used.load()

    def mark_used(self, identity: str) -> bool:
        """Append identity to the used file. Returns False if it was already there."""
        used = self.used.load()
        if identity in used:
            log.debug(f"@{identity} already marked as used")
            return False

        used.append(identity)
        self.used.save(dict.fromkeys(used))
        log.debug(f"Marked @{identity} as used ({len(used)} total)")
        return True

    def remove_pending(self, identity: str) -> bool:
        """Drop every occurrence of identity from the pending file."""
        pending = self.pending.load()
        remaining = [u for u in pending if u != identity]
        if len(remaining) == len(pending):
            log.debug(f"@{identity} not in pending list")
            return False

        self.pending.save(remaining)
        log.debug(f"Removed @{identity} from pending list ({len(remaining)} left)")
        return True

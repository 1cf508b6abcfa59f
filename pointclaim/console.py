"""
Console output - one colored line per notable event.

Purely observational: nothing here feeds back into the claim flow.
"""
import os
import sys
from typing import Optional, TextIO

from pointclaim.config import ClaimerConfig
from pointclaim.models import BatchStats

WIDTH = 60


# ─── Colors ──────────────────────────────────────────────────────────────────

class C:
    """ANSI colors for the terminal."""
    RESET   = "\033[0m"
    BOLD    = "\033[1m"

    RED     = "\033[31m"
    GREEN   = "\033[32m"
    YELLOW  = "\033[33m"
    BLUE    = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN    = "\033[36m"
    GRAY    = "\033[90m"
    BRIGHT_RED   = "\033[91m"
    BRIGHT_GREEN = "\033[92m"

    BG_RED  = "\033[41m"


class Console:
    """Writes status lines to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream or sys.stdout
        if color is None:
            # https://no-color.org/
            color = not os.getenv("NO_COLOR") and self.stream.isatty()
        self.color = color

    def _paint(self, text: str, *codes: str) -> str:
        if not self.color or not codes:
            return text
        return "".join(codes) + text + C.RESET

    def line(self, text: str = "", *codes: str):
        self.stream.write(self._paint(text, *codes) + "\n")
        self.stream.flush()

    def overwrite(self, text: str, *codes: str):
        """Rewrite the current line in place (countdowns)."""
        self.stream.write("\r" + self._paint(text, *codes))
        self.stream.flush()

    def clear_line(self):
        self.stream.write("\r" + " " * 30 + "\r")
        self.stream.flush()

    # ─── Banner ──────────────────────────────────────────────────────────

    def header(self, config: ClaimerConfig):
        self.line("=" * WIDTH, C.MAGENTA)
        self.line("           ADDPLUS POINT CLAIMER", C.MAGENTA)
        self.line("=" * WIDTH, C.MAGENTA)
        self.line(
            f"Delay: {config.delay_min}-{config.delay_max}s | "
            f"Error: {config.error_delay}s | Retry: {config.retry_delay}s",
            C.YELLOW,
        )
        self.line("=" * WIDTH, C.MAGENTA)

    def footer(self, stats: BatchStats):
        self.line("=" * WIDTH, C.MAGENTA)
        self.line(
            f"SUMMARY: {stats.processed} processed | "
            f"{self._paint(str(stats.successful), C.GREEN)} success | "
            f"{self._paint(str(stats.failed), C.RED)} failed | "
            f"{self._paint(str(stats.skipped), C.YELLOW)} skipped",
            C.BOLD,
        )
        self.line("=" * WIDTH, C.MAGENTA)

    # ─── Per identity ────────────────────────────────────────────────────

    def processing(self, identity: str, current: int, total: int):
        self.line(f"[{current:>3}/{total}] 🚀 Processing @{identity}", C.BLUE)

    def success(self, identity: str, claimed: float, total: float):
        self.line(
            f"✅ SUCCESS | @{identity} | +{_fmt(claimed)} points | Total: {_fmt(total)}",
            C.BRIGHT_GREEN,
        )

    def already_claimed(self, identity: str):
        self.line(f"⚠️ SKIPPED | @{identity} | Already claimed", C.YELLOW)

    def removed(self, identity: str):
        self.line(f"❌ REMOVED | @{identity} | User not found", C.BRIGHT_RED)

    def failed(self, identity: str):
        self.line(f"🔥 FAILED  | @{identity} | Max retries exceeded", C.RED)

    def error(self, identity: str, message: str):
        self.line(f"🚨 ERROR   | @{identity} | {message}", C.RED)

    def skip(self, identity: str):
        self.line(f"⏭️ SKIPPED | @{identity} | Previously processed", C.GRAY)

    # ─── Run level ───────────────────────────────────────────────────────

    def config_error(self, message: str):
        self.line(f"❌ ERROR: {message}", C.RED)

    def fatal(self, message: str):
        self.line(self._paint("FATAL ERROR:", C.BG_RED) + " " + self._paint(message, C.RED))


def _fmt(points: float) -> str:
    """Print whole point amounts without a trailing .0"""
    if float(points).is_integer():
        return str(int(points))
    return str(points)

#!/usr/bin/env python3
"""
Point Claimer - Main entry point.

Claims the onboarding points for every username in the pending list,
skipping the ones already recorded in the used list.

USAGE:
    python -m pointclaim.main
    python -m pointclaim.main --usernames list.txt --used done.txt

REQUIREMENTS:
    - COOKIE (session cookie of a logged-in account) in .env
"""
import argparse
import dataclasses
import logging
import sys
from typing import Optional

from pointclaim.api import ClaimClient
from pointclaim.config import ClaimerConfig, ConfigurationError
from pointclaim.console import Console
from pointclaim.delay import DelayPolicy
from pointclaim.lock import RunLock
from pointclaim.models import BatchStats
from pointclaim.orchestrator import ClaimOrchestrator
from pointclaim.runner import BatchRunner
from pointclaim.store import IdentityStore

log = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Claim points for a list of usernames")
    parser.add_argument("--usernames", help="Pending usernames file (one per line)")
    parser.add_argument("--used", help="File of usernames already processed")
    parser.add_argument("--cookie", help="Session cookie (overrides COOKIE)")
    parser.add_argument("--min-delay", type=int, help="Minimum seconds between usernames")
    parser.add_argument("--max-delay", type=int, help="Maximum seconds between usernames")
    parser.add_argument("--max-retry", type=int, help="Attempts per username")
    parser.add_argument("--no-color", action="store_true", help="Plain console output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ClaimerConfig:
    """Environment defaults, overridden by whatever was passed on the command line."""
    overrides = {
        "usernames_path": args.usernames,
        "used_path": args.used,
        "cookie": args.cookie,
        "delay_min": args.min_delay,
        "delay_max": args.max_delay,
        "max_retry": args.max_retry,
    }
    return dataclasses.replace(
        ClaimerConfig(), **{k: v for k, v in overrides.items() if v is not None}
    )


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S"
    )
    # Keep httpx request lines out of the log
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def run(
    config: ClaimerConfig,
    console: Console,
    stats: BatchStats,
    client: Optional[ClaimClient] = None,
) -> BatchStats:
    """Load both lists and claim everything pending."""
    store = IdentityStore(config.usernames_path, config.used_path)
    delay = DelayPolicy(config, console=console)
    client = client or ClaimClient(config)

    try:
        orchestrator = ClaimOrchestrator(config, client, store, delay, console=console)
        runner = BatchRunner(config, orchestrator, delay, console=console)

        pending = store.load_pending()
        used = store.load_used()
        return runner.run(pending, used, stats)
    finally:
        client.close()


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    console = Console(color=False if args.no_color else None)
    config = build_config(args)

    try:
        config.require_valid()
    except ConfigurationError as e:
        log.error(f"Configuration error: {e}")
        console.config_error(str(e))
        return 1

    console.header(config)

    lock = RunLock(config.lock_path)
    if not lock.acquire():
        log.error(f"Could not acquire {config.lock_path}, another instance running?")
        console.fatal(f"Another instance holds {config.lock_path}")
        return 1

    stats = BatchStats()
    try:
        with lock:
            run(config, console, stats)
    except KeyboardInterrupt:
        log.info("Interrupted by user")
    except Exception as e:
        log.exception("Fatal error")
        console.fatal(str(e))
        return 1

    console.footer(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())

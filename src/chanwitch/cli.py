"""Argparse-based CLI for chanwitch.

``chanwitch demo`` opens a few self-closing channels, pushes traffic
through them and waits for them to close on inactivity.
``chanwitch settings`` prints the effective configuration.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import Any

from chanwitch.config import Settings
from chanwitch.core import ChannelRegistry, TimedQueue, open_channel

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Demo
# ---------------------------------------------------------------------------


def _produce(queue: TimedQueue[Any], messages: int) -> None:
    for i in range(messages):
        if not queue.send(i):
            logger.warning(f"Channel {queue.name} closed before message {i}")
            return


def _consume(queue: TimedQueue[Any], counts: dict[str, int]) -> None:
    # Runs until the channel closes itself
    for _ in queue:
        counts[queue.name] = counts.get(queue.name, 0) + 1


def run_demo(
    channels: int,
    messages: int,
    capacity: int,
    idle_timeout: float,
) -> dict[str, int]:
    """Run producer/consumer pairs over *channels* queues.

    Returns the number of messages each channel delivered.
    """
    registry = ChannelRegistry()
    counts: dict[str, int] = {}
    queues = [
        open_channel(
            registry,
            f"channel-{i}",
            capacity=capacity,
            idle_timeout=idle_timeout,
            on_idle_reset=lambda i=i: logger.info(f"channel-{i} still has unread data"),
        )
        for i in range(channels)
    ]

    consumers = [
        threading.Thread(target=_consume, args=(q, counts), daemon=True) for q in queues
    ]
    producers = [
        threading.Thread(target=_produce, args=(q, messages), daemon=True)
        for q in queues
    ]
    for t in consumers + producers:
        t.start()

    print("### Channels")
    print(registry)
    print(f"open: {len(registry)}")

    for t in producers:
        t.join()
    for q in queues:
        if not q.wait_closed(idle_timeout * 3):
            logger.warning(f"Channel {q.name} did not close on its own")
    registry.close_all()
    for t in consumers:
        t.join(idle_timeout)

    for name in sorted(counts):
        print(f"{name}: {counts[name]} received")
    print(f"open: {len(registry)}")
    return counts


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chanwitch",
        description="Named bounded queues that close themselves when idle",
    )
    subparsers = parser.add_subparsers(dest="command")

    p = subparsers.add_parser("demo", help="Run producers and consumers over idle-closing channels")
    p.add_argument("--channels", type=int, default=3, help="Number of channels to open")
    p.add_argument("--messages", type=int, default=5, help="Messages sent per channel")
    p.add_argument(
        "--capacity",
        type=int,
        default=settings.default_capacity,
        help="Buffer size of each channel",
    )
    p.add_argument(
        "--idle-timeout",
        type=float,
        default=settings.idle_timeout,
        help="Seconds of inactivity before a channel closes",
    )

    subparsers.add_parser("settings", help="Print the effective settings")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate handler."""
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = _build_parser(settings)
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "settings":
        print(settings.model_dump_json(indent=2))
        return

    if args.command == "demo":
        if args.capacity < 1 or args.idle_timeout <= 0:
            parser.error("--capacity must be >= 1 and --idle-timeout must be > 0")
        run_demo(args.channels, args.messages, args.capacity, args.idle_timeout)

"""Protean Engine runner for the ordering domain.

In production (event_processing = "async") the order projections are
maintained by the Engine rather than inside the request:
- OutboxProcessor: polls the outbox table and publishes events to Redis
- StreamSubscriptions: reads Redis Streams and invokes the projectors

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine


def _get_domain():
    from ordering.domain import ordering

    ordering.init()
    return ordering


async def run(test_mode: bool = False):
    engine = Engine(_get_domain(), test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="RosterFrame Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()

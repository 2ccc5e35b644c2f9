"""Protean Engine runner for the AutoTradeHub domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls the outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes event handlers
  (the Ledger's reactions to Tracking events, partner notifications)

Usage:
    python src/server.py                   # Run both domain engines
    python src/server.py --domain ledger   # Run only the ledger engine
    python src/server.py --domain tracking # Run only the tracking engine
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine

from shared.logging import configure_logging

DOMAIN_NAMES = ["ledger", "tracking"]

logger = structlog.get_logger(__name__)


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "ledger":
        from ledger.domain import ledger

        ledger.init()
        return ledger
    elif name == "tracking":
        from tracking.domain import tracking

        tracking.init()
        return tracking
    else:
        raise ValueError(f"Unknown domain: {name}")


async def run(domain_names):
    engines = []
    for name in domain_names:
        domain = _get_domain(name)
        engines.append(Engine(domain))
        logger.info("Engine starting", domain=name)

    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="AutoTradeHub Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    configure_logging()
    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()

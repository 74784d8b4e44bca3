"""Protean Engine runner for the logistics domain.

Starts the Engine workers that process events asynchronously in production:
payment settlement events feed the batch aggregator, and shipment events
keep the shipment board projection current.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine


async def run(test_mode: bool = False):
    from logistics.domain import logistics
    from logistics.utils.logging import configure_logging

    configure_logging()
    logistics.init()
    await Engine(logistics, test_mode=test_mode).run()


def main():
    parser = argparse.ArgumentParser(description="Wishlist Logistics Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Drain pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()

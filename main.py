#!/usr/bin/env python3
"""
Class Watch - Main Entry Point
Checks whether a class has room and sends a notification
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from classwatch.errors import ClassWatchError, ConfigError
from classwatch.handlers import CheckRunner, CycleResult, build_notifier
from classwatch.resources import SessionManager
from classwatch.utils import CheckerConfig, CheckScheduler, load_config

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def configure_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class ClassWatch:
    """Main checker controller"""

    def __init__(self, config: CheckerConfig, headless: bool = True):
        self.config = config
        self.headless = headless
        self.runner = CheckRunner(config, build_notifier(config))

    async def check_once(self) -> Optional[CycleResult]:
        """
        Open a browser, log in and run one cycle

        Returns:
            CycleResult, or None if the cycle failed
        """
        async with SessionManager(self.config, headless=self.headless) as session:
            try:
                await session.login()
                return await self.runner.run_cycle(session.page)
            except ClassWatchError as e:
                logger.error(f"Check failed: {e}")
                if self.config.debug:
                    await session.capture_screenshot('debug.png')
                return None

    async def run_once(self) -> int:
        """Single check, returns the process exit code"""
        result = await self.check_once()
        if result is None or not result.state_saved:
            return EXIT_FAILURE
        return EXIT_OK

    async def run_watch(self, interval_minutes: int):
        """Check every interval_minutes until interrupted"""
        scheduler = CheckScheduler(interval_minutes)
        scheduler.add_check_job(self.check_once)
        scheduler.start()

        logger.info("Watching, press Ctrl+C to stop...")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.shutdown()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check a class's availability and notify")
    parser.add_argument('--config', default='config.json', help="Path to config.json (default: %(default)s)")
    parser.add_argument('--headed', action='store_true', help="Show the browser window")
    parser.add_argument('--watch', action='store_true', help="Keep running and check periodically")
    parser.add_argument('--interval', type=int, default=None, help="Minutes between checks in watch mode")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_CONFIG

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    app = ClassWatch(config, headless=not args.headed)

    if args.watch:
        interval = args.interval or config.check_interval_minutes
        try:
            asyncio.run(app.run_watch(interval))
        except KeyboardInterrupt:
            logger.info("Stopped")
        return EXIT_OK

    return asyncio.run(app.run_once())


def cli():
    sys.exit(main())


if __name__ == '__main__':
    cli()

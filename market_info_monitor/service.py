"""Main background service for the market info monitor."""

import signal
import time
from pathlib import Path
from typing import Callable, List, Optional

from .bots import BotRegistry, create_registry
from .config.database import ChannelDirectory
from .config.settings import Settings
from .core.diff import DiffOptions, build_digest
from .core.dispatcher import ChannelLookup, Dispatcher
from .core.fetcher import CatalogFetcher
from .core.monitor import CatalogMonitor
from .core.scheduler import CatalogScheduler
from .exceptions import FetchError
from .models.destination import DeliveryResult
from .utils.logger import get_logger, setup_logger
from .utils.platform import is_windows


class MarketInfoService:
    """Polls the plugin market and pushes change digests to chat channels."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        fetcher: Optional[CatalogFetcher] = None,
        bots: Optional[BotRegistry] = None,
        directory: Optional[ChannelLookup] = None,
        sleep: Callable[[float], None] = time.sleep,
        console: bool = True
    ):
        """Initialize the service.

        Args:
            config_path: Path to configuration file (optional)
            settings: Settings to use instead of loading the configuration file
            fetcher: Catalog fetcher (built from settings if not given)
            bots: Bot registry (built from settings if not given)
            directory: Channel directory (SQLite database from settings if not given)
            sleep: Sleep function used between sends
            console: Whether to log to the console
        """
        self.running = False
        self.config_path = config_path

        # A broken config file must stop the service rather than run it with defaults
        self.settings = settings or Settings.load(config_path)

        self.logger = setup_logger(
            log_file=self.settings.logging.path,
            level=self.settings.logging.level,
            max_size_mb=self.settings.logging.max_size_mb,
            backup_count=self.settings.logging.backup_count,
            console=console
        )

        self.logger.info("Initializing market info monitor service")

        market = self.settings.market

        self.fetcher = fetcher or CatalogFetcher(
            logger=get_logger("fetcher", self.logger),
            endpoint=market.endpoint,
            show_hidden=market.show_hidden,
            timeout=market.timeout,
            retries=market.retries
        )

        self.monitor = CatalogMonitor(
            fetcher=self.fetcher,
            logger=get_logger("monitor", self.logger),
            options=DiffOptions(
                show_deletion=market.show_deletion,
                show_publisher=market.show_publisher,
                show_description=market.show_description
            )
        )

        self.bots = bots if bots is not None else create_registry(
            self.settings.bots, get_logger("bots", self.logger)
        )

        if directory is None:
            directory = ChannelDirectory(self.settings.database.path)
        self.directory = directory

        self.dispatcher = Dispatcher(
            bots=self.bots,
            directory=self.directory,
            logger=get_logger("dispatcher", self.logger),
            delay_seconds=self.settings.dispatch.delay / 1000,
            sleep=sleep
        )

        self.scheduler = CatalogScheduler(
            logger=get_logger("scheduler", self.logger),
            check_function=self.run_cycle,
            interval_ms=self.settings.scheduler.interval
        )

    def run_cycle(self) -> List[DeliveryResult]:
        """Main job: fetch, diff, replace the snapshot and dispatch the digest.

        Returns:
            Delivery results (empty if nothing was dispatched)
        """
        try:
            lines = self.monitor.check()
        except FetchError as e:
            self.logger.error(f"Catalog check failed, keeping previous snapshot: {e}")
            return []

        if not lines:
            self.logger.info("No catalog changes found")
            return []

        content = build_digest(lines)
        self.logger.info(content)

        # Rules are read once per cycle; edits apply from the next cycle.
        destinations = list(self.settings.dispatch.rules)
        return self.dispatcher.dispatch(content, destinations)

    def ready(self) -> None:
        """Seed the snapshot store and start the recurring check.

        A failed seed fetch leaves the store empty; the first successful
        cycle then seeds it instead of producing a digest.
        """
        try:
            self.monitor.seed()
        except FetchError as e:
            self.logger.error(f"Initial catalog fetch failed: {e}")

        self.scheduler.start()

        next_run = self.scheduler.get_next_run_time()
        if next_run:
            self.logger.info(f"Next check scheduled for: {next_run}")

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""

        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, shutting down...")
            self.running = False

        # Windows uses SIGBREAK, Linux/macOS use SIGTERM
        signal.signal(signal.SIGINT, signal_handler)

        if is_windows():
            signal.signal(signal.SIGBREAK, signal_handler)
        else:
            signal.signal(signal.SIGTERM, signal_handler)

    def start(self) -> None:
        """Start the monitoring service and block until shutdown."""
        try:
            self.running = True

            self.setup_signal_handlers()

            self.bots.start_all()
            if len(self.bots) == 0:
                self.logger.warning("No bots configured, digests will only be logged")

            self.ready()

            self.logger.info("Service started successfully")
            self.logger.info("Press Ctrl+C to stop")

            self._keep_alive()

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        except Exception as e:
            self.logger.error(f"Service error: {e}", exc_info=True)
            raise
        finally:
            self.shutdown()

    def _keep_alive(self) -> None:
        """Keep the service alive.

        Windows doesn't support signal.pause(), so we use a sleep loop.
        """
        if is_windows():
            while self.running:
                time.sleep(1)
        else:
            while self.running:
                signal.pause()

    def shutdown(self) -> None:
        """Graceful shutdown: clear the timer and disconnect the bots.

        A cycle that is already running is allowed to finish.
        """
        self.running = False

        self.logger.info("Shutting down service...")

        self.scheduler.stop()
        self.bots.stop_all()

        self.logger.info("Service stopped")


def main():
    """Main entry point."""
    service = MarketInfoService()
    service.start()


if __name__ == "__main__":
    main()

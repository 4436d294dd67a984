"""Background daemon that keeps the dashboard conditions fresh."""

import argparse
import logging
import signal
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import get_config
from .manager import get_condition_manager

LOG_FILE_NAME = "daemon.log"
LOG_MAX_BYTES = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT = 2  # Keep 2 backup files (daemon.log.1, daemon.log.2)
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Path) -> None:
    """Send package logs to a rotating file and to stderr."""
    log_dir.mkdir(parents=True, exist_ok=True)
    package_logger = logging.getLogger("dashboard_conditions")
    package_logger.setLevel(logging.INFO)

    # Rotating file handler
    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(file_handler)

    # Also log to stderr for launchd/systemd
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(stream_handler)


class ConditionDaemon:
    """Periodically refreshes every condition from the configured settings."""

    def __init__(self, config_path: Path | str | None = None):
        self.config = get_config(config_path)
        self.manager = get_condition_manager(self.config.condition_context())
        self.manager.add_listener(self)
        self.running = False

    def on_conditions_changed(self) -> None:
        """Log what the dashboard now shows."""
        visible = self.manager.get_visible_conditions()
        if visible:
            titles = ", ".join(c.title or c.type_id for c in visible)
            logger.info(f"Conditions changed; showing {len(visible)}: {titles}")
        else:
            logger.info("Conditions changed; nothing to show")

    def run_check(self) -> None:
        """Run a single refresh cycle."""
        try:
            # Reload config to pick up new system settings
            self.config.load()
            self.manager.context.settings = dict(self.config.system_settings)
            self.manager.refresh_all()
        except Exception as e:
            logger.error(f"Error during check: {e}")

    def run(self) -> None:
        """Run the daemon loop."""
        interval = self.config.refresh_interval
        logger.info(f"Starting daemon with {interval}s refresh interval")

        self.running = True

        # Set up signal handlers
        def handle_signal(signum, frame):
            logger.info("Received shutdown signal")
            self.running = False

        signal.signal(signal.SIGTERM, handle_signal)
        signal.signal(signal.SIGINT, handle_signal)

        while self.running:
            self.run_check()
            time.sleep(interval)

        self.manager.remove_listener(self)
        logger.info("Daemon stopped")

    def run_once(self) -> None:
        """Run a single check (for testing or one-shot usage)."""
        self.run_check()


def run_daemon(config_path: Path | str | None = None) -> None:
    """Entry point for running the daemon."""
    # Log handlers must exist before the manager reads the state file
    setup_logging(get_config(config_path).log_dir)
    daemon = ConditionDaemon(config_path)
    daemon.run()


def run_check_once(config_path: Path | str | None = None) -> None:
    """Run a single refresh cycle."""
    daemon = ConditionDaemon(config_path)
    daemon.run_once()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Keep dashboard conditions up to date")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--once", action="store_true", help="Run a single refresh and exit")
    args = parser.parse_args(argv)

    if args.once:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        run_check_once(args.config)
    else:
        run_daemon(args.config)


if __name__ == "__main__":
    main()

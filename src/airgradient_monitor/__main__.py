"""
Canonical entry point for the airgradient_monitor package.

Usage:
    airgradient-monitor [CONFIG_PATH]
    python -m airgradient_monitor /etc/airgradient_monitor.toml
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional, Tuple

from airgradient_monitor.config.settings import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    Settings,
    load_settings,
)
from airgradient_monitor.influx_writer import MetricsWriter
from airgradient_monitor.policies import FixedDelay, LogAndContinue
from airgradient_monitor.poller import PollLoop
from airgradient_monitor.sensing.airgradient import AirGradientClient

log = logging.getLogger(__name__)


def setup_logging(config: Settings) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        force=True,
    )
    return None


def bootstrap(settings: Settings) -> Tuple[PollLoop, MetricsWriter, AirGradientClient]:
    """Build the writer and poll loop from settings and start the loop."""
    writer = MetricsWriter(settings.influxdb)
    writer.connect()

    source = AirGradientClient(
        settings.airgradient.url, timeout_secs=settings.airgradient.timeout_secs
    )
    log.info(f"Polling {source.url} every {settings.airgradient.delaysecs}s")

    loop = PollLoop(
        source,
        writer,
        FixedDelay(settings.airgradient.delaysecs),
        LogAndContinue(),
    )
    loop.start()
    return loop, writer, source


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for airgradient_monitor."""
    parser = argparse.ArgumentParser(description="AirGradient to InfluxDB bridge")
    parser.add_argument(
        "config",
        nargs="?",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to the TOML config file (default: {DEFAULT_CONFIG_PATH})",
    )
    args = parser.parse_args(argv)

    # basic logging until the configured level is known
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    log.info(f"Reading config file {args.config}")

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        log.error(f"Startup failed: {e}")
        sys.exit(1)

    setup_logging(settings)
    log.info(f"Read settings {settings!r}")

    loop, writer, source = bootstrap(settings)
    log.info("Starting")

    def sigterm_handler(signum, frame):
        log.info("Received shutdown signal, stopping monitor...")
        loop.stop()
        loop.join()
        writer.disconnect()
        source.close()
        sys.exit(0)

    signal.signal(signal.SIGTERM, sigterm_handler)
    signal.signal(signal.SIGINT, sigterm_handler)
    signal.pause()


if __name__ == "__main__":
    main()

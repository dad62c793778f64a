"""Main CLI entry-point."""
from __future__ import annotations

import asyncio
import sys

from config import MonitorConfig, settings
from core.logging import bootstrap_logging, get_logger, shutdown_logging
from domain.exceptions import ConfigurationError
from infrastructure.notifications import SendGridConfig
from presentation.cli import MonitorCommand, parse_args


def main(argv: list[str]) -> int:
    options, unknown = parse_args(argv)
    bootstrap_logging(
        service="hostmonitor",
        level=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR,
        log_file_name=settings.LOG_FILE,
        console=settings.LOG_CONSOLE,
    )
    log = get_logger(__name__, service="hostmonitor")
    try:
        for arg in unknown:
            log.warning(lambda: "unknown-argument", extra={"argument": arg})

        mapping = settings.as_mapping()
        try:
            config = MonitorConfig.from_mapping(mapping)
            email = SendGridConfig.from_mapping(mapping, timeout_s=config.notify_timeout_s)
        except ConfigurationError as e:
            log.critical(lambda: "configuration-error", extra={"key": e.key, "error": str(e)})
            return 1

        try:
            return asyncio.run(MonitorCommand(config, email).run(options))
        except KeyboardInterrupt:
            log.info(lambda: "interrupted")
            return 0
    finally:
        shutdown_logging()


def run() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(run())

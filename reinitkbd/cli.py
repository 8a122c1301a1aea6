#!/usr/bin/env python3
"""
reinitkbd daemon entry point: watch for keyboards and initialize them
"""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
import threading
import traceback

from __version__ import __version__
from reinitkbd.log import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='reinitkbd',
        description='Run a keyboard initialization command whenever a keyboard is attached',
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode with verbose logging'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config file (default: ~/.config/xsprite/config.json)'
    )
    parser.add_argument(
        '--logfile',
        type=str,
        default=None,
        help='Path to log file (default: ~/.reinitkbd.log)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s ' + __version__
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the reinitkbd daemon"""
    args = parse_args(argv)

    # Import after args parsing to avoid import-time side effects
    from reinitkbd.config import ConfigError, load_config

    try:
        config = load_config(args.config)
    except ConfigError as e:
        setup_logging(debug=args.debug, log_file=args.logfile)
        logging.getLogger('reinitkbd').error("Failed to load config: %s", e)
        return 1

    log = setup_logging(debug=args.debug or config['debug'], log_file=args.logfile)

    log.info(f"{'='*60}")
    log.info(f"reinitkbd started (version {__version__})")
    log.info(f"PID: {os.getpid()}")
    log.info(f"{'='*60}")

    command = config['init_keyboard']
    if command is None:
        log.info("No init_keyboard command configured, nothing to do")
        return 0

    from reinitkbd.reinit import Reinitializer
    from reinitkbd.xinput import XDisplayError, check_display

    try:
        check_display()
    except XDisplayError as e:
        log.error(f"❌ {e}")
        return 1

    stop_event = threading.Event()

    def signal_handler(signum: int, frame) -> None:
        log.info(f"Received {signal.Signals(signum).name}, shutting down...")
        stop_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    reinit = Reinitializer(
        command,
        timeout=config['init_timeout'],
        settle_delay=config['settle_delay'],
    )

    try:
        log.info(f"Watching for keyboards, init command: {command}")
        ok = reinit.run(stop_event)
        return 0 if ok else 1

    except Exception as e:
        log.error(f"❌ Unhandled error: {type(e).__name__}: {e}")
        log.debug(traceback.format_exc())
        return 1

    finally:
        log.info("reinitkbd shutdown")


if __name__ == '__main__':
    sys.exit(main())

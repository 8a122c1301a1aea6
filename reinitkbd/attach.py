#!/usr/bin/env python3
"""
reinitkbd-attach — initialize one keyboard.

Usage: reinitkbd-attach <keyboard-name> <device-node> <xinput-device-id> <vendor-id>:<product-id>

Exit status is 0 when both setxkbmap and xset succeed and 1 otherwise,
including usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys

from __version__ import __version__
from reinitkbd.initializer import EXIT_FAILURE, init_keyboard
from reinitkbd.log import setup_logging


class _AttachArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


_LEADING_FLAGS = ('--debug', '--version', '-h', '--help')


def _positionals_verbatim(argv: list[str]) -> list[str]:
    """Insert '--' after the leading flags.

    Keyboard names and ids are passed through untouched, even when they
    start with '-'.
    """
    argv = list(argv)
    i = 0
    while i < len(argv) and argv[i] in _LEADING_FLAGS:
        i += 1
    if i < len(argv) and argv[i] != '--':
        argv.insert(i, '--')
    return argv


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = _AttachArgumentParser(
        prog='reinitkbd-attach',
        description='Apply keyboard layout and repeat rate to a newly attached keyboard',
    )
    parser.add_argument('name', help='Keyboard name')
    parser.add_argument('device_node', help='Device node, e.g. /dev/input/event5')
    parser.add_argument('xinput_id', help='xinput device id')
    parser.add_argument('vendor_product', help='vendorID:productID, e.g. 046d:c31c')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Show debug messages on stderr'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s ' + __version__
    )
    if argv is None:
        argv = sys.argv[1:]
    return parser.parse_args(_positionals_verbatim(argv))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(debug=args.debug, to_file=False)
    logging.getLogger(__name__).debug("Invoked with %s", vars(args))
    return init_keyboard(args.name, args.device_node, args.xinput_id, args.vendor_product)


if __name__ == '__main__':
    sys.exit(main())

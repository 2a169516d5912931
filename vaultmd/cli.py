"""Command-line entry point."""

import argparse
import logging
from typing import Optional, Sequence

from vaultmd import __version__
from vaultmd import log
from vaultmd.commands import vault as vault_commands
from vaultmd.domain.exceptions import VaultError
from vaultmd.log import logger

logger = logger.getChild(__name__)


def get_main_parser() -> argparse.ArgumentParser:
    parent_parser = argparse.ArgumentParser(add_help=False)
    # Subcommands leave verbose unset unless given, so a main-level -v sticks.
    parent_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Be verbose.",
    )

    parser = argparse.ArgumentParser(
        prog="vaultmd",
        description="Scope-aware versioned store for text artifacts.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Be verbose.",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=__version__
    )
    subparsers = parser.add_subparsers(
        title="Available Commands",
        metavar="COMMAND",
        dest="cmd",
        help="Use `vaultmd COMMAND --help` for command-specific help.",
    )
    subparsers.required = True
    vault_commands.add_parser(subparsers, parent_parser)
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return get_main_parser().parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one command.

    Returns:
        0 on success, 1 when the command fails with a VaultError.
    """
    args = parse_args(argv)
    log.setup(logging.DEBUG if args.verbose else logging.INFO)
    logger.debug("Running %s", args.cmd)

    cmd = args.func(args)
    try:
        return cmd.do_run()
    except VaultError as exc:
        logger.error(str(exc))
        return 1

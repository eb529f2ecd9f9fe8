from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from bootloader import __version__
from bootloader.cli import QUERY_COMMANDS, destroy_command, state_query_command, up_command
from bootloader.config import get_settings
from bootloader.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bootloader",
        description="Provision and tear down BOSH director environments",
    )
    parser.add_argument("--version", action="version", version=f"bootloader {__version__}")
    parser.add_argument(
        "--state-dir",
        "-s",
        default=None,
        help="Directory containing bbl-state.json (default: BOOTLOADER_STATE_DIR or cwd)",
    )
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    subparsers = parser.add_subparsers(dest="command")

    up_parser = subparsers.add_parser("up", help="Deploy an environment, or converge an existing one")
    up_parser.add_argument("--iaas", choices=["gcp", "aws", "azure"], help="IaaS to deploy to")
    up_parser.add_argument("--name", default="", help="Name to assign to the environment")
    up_parser.add_argument(
        "--no-director",
        action="store_true",
        help="Create the infrastructure only, without a jumpbox or director",
    )
    up_parser.add_argument("--ops-file", default="", help="Ops file applied to the director manifest")

    destroy_parser = subparsers.add_parser("destroy", help="Tear down the environment")
    destroy_parser.add_argument(
        "--no-confirm", action="store_true", help="Do not ask for confirmation"
    )
    destroy_parser.add_argument(
        "--skip-if-missing",
        action="store_true",
        help="Exit successfully when there is no state file",
    )

    for command, property_name in QUERY_COMMANDS.items():
        subparsers.add_parser(command, help=f"Print the {property_name}")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    debug = args.debug or get_settings().debug
    configure_logging(logging.DEBUG if debug else logging.WARNING, console=debug)

    if args.command == "up":
        sys.exit(up_command(
            state_dir=args.state_dir,
            iaas=args.iaas,
            name=args.name,
            no_director=args.no_director,
            ops_file=args.ops_file,
        ))

    if args.command == "destroy":
        sys.exit(destroy_command(
            state_dir=args.state_dir,
            no_confirm=args.no_confirm,
            skip_if_missing=args.skip_if_missing,
        ))

    if args.command in QUERY_COMMANDS:
        sys.exit(state_query_command(QUERY_COMMANDS[args.command], state_dir=args.state_dir))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()

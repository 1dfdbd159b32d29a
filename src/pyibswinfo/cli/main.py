#!/usr/bin/env python3
"""ibswinfo: gather information from unmanaged InfiniBand switches.

Reads inventory, status and vitals through the MFT register access tools
and prints them as a report, as ``key : value`` lines, or as JSON. Can also
set the switch node description.

Usage:
    ibswinfo -d SW_MT54000_ibswitch_lid-0x0001
    ibswinfo -d lid-44 -o vitals -T
    ibswinfo -d SW_MT54000_ibswitch_lid-0x0001 -S "rack-12 leaf"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import shutil
import sys

from pyibswinfo import __version__
from pyibswinfo.collector import SwitchInfoCollector
from pyibswinfo.config import QueryConfig
from pyibswinfo.constants import (
    EXIT_ERROR,
    EXIT_OK,
    EXIT_USAGE,
    MAX_DESCRIPTION_LENGTH,
    TOOL_PACKAGES,
)
from pyibswinfo.device import normalize_device
from pyibswinfo.exceptions import ConfigurationError, DependencyError, IbswinfoError
from pyibswinfo.registers.plan import OutputCategory
from pyibswinfo.render import render, render_json
from pyibswinfo.tool_version import require_version
from pyibswinfo.transports import MlxregTransport, SmpQueryPortSource, read_tool_version

_LOGGER = logging.getLogger(__name__)

_CATEGORY_CHOICES = [c.value for c in OutputCategory if c is not OutputCategory.ALL]


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="ibswinfo",
        description="Gather information from unmanaged InfiniBand switches.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ibswinfo -d SW_MT54000_ibswitch_lid-0x0001
      Full report for an MST switch device

  ibswinfo -d lid-44 -o vitals -T
      Uptime, power, temperatures (with QSFP modules) and fan speeds

  ibswinfo -d lid-44 -o status --json
      PSU and fan status as JSON

  ibswinfo -d lid-44 -S "rack-12 leaf"
      Set the node description
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d",
        "--device",
        default="",
        help='MST device path ("mst status" shows devices list) or LID (eg. "-d lid-44")',
    )

    get_group = parser.add_argument_group("Get Info")
    get_group.add_argument(
        "-o",
        "--output",
        choices=_CATEGORY_CHOICES,
        default=None,
        help="Only display inventory, status or vitals information",
    )
    get_group.add_argument(
        "-T",
        "--module-temperatures",
        action="store_true",
        help="Get QSFP modules temperature",
    )
    get_group.add_argument(
        "--json",
        action="store_true",
        help="Print the collected data as JSON",
    )

    set_group = parser.add_argument_group("Set Info")
    set_group.add_argument(
        "-S",
        "--set-description",
        dest="description",
        metavar="DESCRIPTION",
        default=None,
        help=f"Set device description ({MAX_DESCRIPTION_LENGTH} char max.)",
    )

    misc_group = parser.add_argument_group("Miscellaneous")
    misc_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Timeout in seconds for each external command (default: none)",
    )
    misc_group.add_argument(
        "--debug",
        action="store_true",
        help="Log external commands and decoding steps to stderr",
    )
    return parser


def check_privileges() -> None:
    """Register access needs root."""
    if os.geteuid() != 0:
        raise DependencyError("must run as root, aborting.")


def check_dependencies(config: QueryConfig) -> None:
    """Make sure every external tool is installed.

    Raises:
        DependencyError: Naming the first missing tool and its package
    """
    for executable in (config.mst, config.mlxreg, config.smpquery):
        if shutil.which(executable) is None:
            package = TOOL_PACKAGES.get(os.path.basename(executable))
            hint = f", please install {package}" if package else ""
            raise DependencyError(f"{executable} not found{hint}")


def confirm(prompt: str = ">> Confirm? (y/N) ") -> bool:
    """Ask the user for a yes/no confirmation."""
    try:
        reply = input(prompt)
    except EOFError:
        return False
    return reply.strip().lower() in ("y", "yes")


async def run_query(config: QueryConfig, *, as_json: bool = False) -> int:
    """Collect and print one snapshot."""
    version = await read_tool_version(config.mst, config.timeout)
    require_version(version)
    device = normalize_device(config.device)

    collector = SwitchInfoCollector(
        MlxregTransport(device, executable=config.mlxreg, timeout=config.timeout),
        version,
        port_source=SmpQueryPortSource(
            device, executable=config.smpquery, timeout=config.timeout
        ),
        module_temperatures=config.module_temperatures,
    )
    snapshot = await collector.collect(config.output_category)
    print(render_json(snapshot) if as_json else render(snapshot, config.category))
    return EXIT_OK


async def run_set_description(config: QueryConfig, description: str) -> int:
    """Show the current node description, confirm, and set *description*."""
    version = await read_tool_version(config.mst, config.timeout)
    require_version(version, write=True)
    device = normalize_device(config.device)

    collector = SwitchInfoCollector(
        MlxregTransport(device, executable=config.mlxreg, timeout=config.timeout),
        version,
    )
    current = await collector.read_node_description()
    print(f"Device: {device}")
    print(f"  Current node description: {current or ''}")
    print(f"  Set node description to : {description}")
    if not confirm():
        return EXIT_ERROR

    print("Setting new node description... ", end="", flush=True)
    await collector.set_node_description(description)
    print("done!")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = QueryConfig.from_env(
            args.device,
            category=args.output,
            module_temperatures=args.module_temperatures,
            description=args.description,
            timeout=args.timeout,
        )
        config.validate()
    except ConfigurationError as err:
        print(f"error: {err}", file=sys.stderr)
        return EXIT_USAGE

    try:
        check_privileges()
        check_dependencies(config)
        if config.description is not None:
            return asyncio.run(run_set_description(config, config.description))
        return asyncio.run(run_query(config, as_json=args.json))
    except ConfigurationError as err:
        print(f"error: {err}", file=sys.stderr)
        return EXIT_USAGE
    except IbswinfoError as err:
        _LOGGER.debug("Run failed", exc_info=True)
        print(f"error: {err}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

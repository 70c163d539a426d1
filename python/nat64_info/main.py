"""
Entry point of the 'nat64-info' command-line utility.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from nat64_info.args import Nat64Args, parse_args
from nat64_info.constants import CONFIG_FILE
from nat64_info.datamodel import Nat64Config
from nat64_info.discovery import Nat64Discovery
from nat64_info.errors import BaseNat64Error, InvalidAddress
from nat64_info.logging import start_logging
from nat64_info.resolver import Resolver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_NO_NAT64 = 2
EXIT_ERROR = 3


def load_config(args: Nat64Args) -> Nat64Config:
    if args.config:
        config = Nat64Config.from_file(Path(args.config))
    elif CONFIG_FILE.exists():
        config = Nat64Config.from_file(CONFIG_FILE)
    else:
        config = Nat64Config()
    if args.loglevel:
        config.logging.level = args.loglevel  # type: ignore[assignment]
    if args.logtarget:
        config.logging.target = args.logtarget  # type: ignore[assignment]
    return config


async def translate_command(discovery: Nat64Discovery, addresses: List[str]) -> int:
    code = EXIT_OK
    for addr in addresses:
        try:
            ipv6 = await discovery.translate(addr)
        except InvalidAddress as e:
            print(f"{addr} -> invalid address: {e.reason}", file=sys.stderr)
            code = EXIT_INVALID_INPUT
            continue
        print(f"{addr} -> {ipv6 if ipv6 is not None else 'no translation'}")
    return code


async def discover_command(discovery: Nat64Discovery) -> int:
    prefix = await discovery.discover()
    if prefix is None:
        print("no NAT64 prefix discovered")
        return EXIT_NO_NAT64
    print(prefix)
    return EXIT_OK


async def run(args: Nat64Args, config: Nat64Config, resolver: Optional[Resolver] = None) -> int:
    discovery = Nat64Discovery.from_config(config, resolver)
    if args.command == "discover":
        return await discover_command(discovery)
    return await translate_command(discovery, args.addresses)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # startup logging, before the configuration is loaded
    start_logging("nat64-info", args.loglevel or "notice", args.logtarget or "stderr")
    try:
        config = load_config(args)
    except BaseNat64Error as e:
        logger.error(f"Failed to load configuration: {e}")
        return EXIT_ERROR
    start_logging("nat64-info", config.logging.level, config.logging.target)

    try:
        return asyncio.run(run(args, config))
    except BaseNat64Error as e:
        logger.error(f"{e}")
        return EXIT_ERROR

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

from .constants import VERSION


@dataclass
class Nat64Args:
    command: str
    addresses: list[str]
    config: Optional[str]
    loglevel: Optional[str]
    logtarget: Optional[str]


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "nat64-info",
        description="Discover the NAT64 prefix of the current network"
        " and get IPv6 addresses to reach IPv4-only hosts through it.",
    )
    parser.add_argument(
        "-V",
        "--version",
        help="Get version",
        action="version",
        version=VERSION,
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Optional, path to the configuration file (YAML/JSON). Defaults to /etc/nat64-info/config.yaml when it exists.",
        type=str,
        required=False,
        default=None,
    )
    parser.add_argument(
        "--loglevel",
        default=None,
        choices=["debug", "info", "notice", "warning", "error", "critical"],
        help="Logging level, overrides the configuration file.",
    )
    parser.add_argument(
        "--logtarget",
        default=None,
        choices=["stdout", "stderr", "syslog"],
        help="Logging target, overrides the configuration file.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="command type")
    translate = subparsers.add_parser(
        "translate",
        help="Get IPv6 addresses for the given IPv4 addresses.",
        description="Get IPv6 addresses for the given IPv4 addresses using the discovered NAT64 prefix.",
    )
    translate.add_argument("addresses", metavar="ADDRESS", type=str, nargs="+", help="IPv4 address to translate.")
    subparsers.add_parser(
        "discover",
        help="Discover and print the NAT64 prefix.",
        description="Discover the NAT64 prefix of the current network and print it.",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Nat64Args:
    args_ns = create_argument_parser().parse_args(argv)
    return Nat64Args(
        command=args_ns.command,
        addresses=getattr(args_ns, "addresses", []),
        config=args_ns.config,
        loglevel=args_ns.loglevel,
        logtarget=args_ns.logtarget,
    )

# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import argparse
import json
import logging
import sys

from starkex import commands
from starkex.errors import StarkExError

COMMANDS = {
    "account": commands.derive_account,
    "hash": commands.hash_message,
    "sign": commands.sign_hash,
    "verify": commands.verify_signature,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="starkex", description="StarkEx key, message and signature tools")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, func in COMMANDS.items():
        cmd = sub.add_parser(name, help=(func.__doc__ or "").strip().splitlines()[0])
        cmd.add_argument("request", help="JSON request file")
        cmd.add_argument("output", help="JSON artifact file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    try:
        artifact = COMMANDS[args.command](args.request, args.output)
    except (StarkExError, ValueError) as exc:
        logging.getLogger("starkex").error("%s failed: %s", args.command, exc)
        return 1
    print(json.dumps(artifact, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())

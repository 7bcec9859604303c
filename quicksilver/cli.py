#!/usr/bin/env python3
"""quicksilver - Vim-style keyboard navigation engine."""

from __future__ import annotations

import argparse
import logging
import sys

from .blocklist import RuleType

MODE_CHOICES = ["normal", "caret", "visual"]


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="quicksilver",
        description="Vim-style keyboard navigation: chords, hints and caret selection",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Settings file (default: ~/.quicksilver/settings.json)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # labels
    labels_parser = subparsers.add_parser("labels", help="Print the hint labels for a candidate count")
    labels_parser.add_argument("count", type=int, help="Number of candidates")
    labels_parser.add_argument("--alphabet", help="Label symbols (default: from settings)")
    labels_parser.add_argument(
        "--no-single",
        action="store_true",
        help="Always use two-symbol labels",
    )

    # keys
    keys_parser = subparsers.add_parser("keys", help="Show the key bindings")
    keys_parser.add_argument(
        "--mode",
        "-m",
        choices=MODE_CHOICES,
        help="Only show one mode (default: all)",
    )

    # check-url
    check_parser = subparsers.add_parser("check-url", help="Tell whether navigation runs on a URL")
    check_parser.add_argument("url", help="Page URL")

    # block
    block_parser = subparsers.add_parser("block", help="Manage the site blocklist")
    block_subparsers = block_parser.add_subparsers(dest="block_command", help="Blocklist commands")
    block_subparsers.add_parser("list", help="List all rules")
    add_parser = block_subparsers.add_parser("add", help="Add a rule")
    add_parser.add_argument("type", choices=[t.value for t in RuleType], help="Rule type")
    add_parser.add_argument("value", nargs="?", help="Rule value")
    add_parser.add_argument("--url", help="Suggest the value from this page URL")
    toggle_parser = block_subparsers.add_parser("toggle", help="Enable or disable a rule")
    toggle_parser.add_argument("id", help="Rule id")
    delete_parser = block_subparsers.add_parser("delete", help="Delete a rule")
    delete_parser.add_argument("id", help="Rule id")

    # demo
    subparsers.add_parser("demo", help="Launch the Textual demo page")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    # Import commands lazily to speed up --help
    from .commands import (
        cmd_block_add,
        cmd_block_delete,
        cmd_block_list,
        cmd_block_toggle,
        cmd_check_url,
        cmd_demo,
        cmd_keys,
        cmd_labels,
    )

    if args.command == "labels":
        return cmd_labels(args)
    if args.command == "keys":
        return cmd_keys(args)
    if args.command == "check-url":
        return cmd_check_url(args)
    if args.command == "block":
        if args.block_command == "list":
            return cmd_block_list(args)
        elif args.block_command == "add":
            return cmd_block_add(args)
        elif args.block_command == "toggle":
            return cmd_block_toggle(args)
        elif args.block_command == "delete":
            return cmd_block_delete(args)
        else:
            block_parser.print_help()
            return 1
    if args.command == "demo":
        return cmd_demo(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

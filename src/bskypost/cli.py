#!/usr/bin/env python3
"""bskypost - compose Bluesky posts, threads and quotes from the command line"""

from __future__ import annotations

import argparse
import logging

from .commands.auth import cmd_accounts, cmd_login, cmd_logout, cmd_use, cmd_whoami
from .commands.posts import cmd_append, cmd_last, cmd_post, cmd_quote
from .config import Paths


def _add_compose_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("text", nargs="?", default=None, help="Post text (prompted for when omitted)")
    p.add_argument(
        "-i",
        "--image",
        action="append",
        metavar="PATH",
        help="Attach an image file (repeatable, up to 4)",
    )
    p.add_argument(
        "-p",
        "--paste",
        action="store_true",
        help="Attach one or more images from the clipboard (raw image data or a copied file path)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bskypost", description="Compose Bluesky posts, threads and quotes")
    parser.add_argument(
        "--profile",
        help="Profile name to use for this command (overrides active/BSKY_PROFILE)",
        default=None,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command")

    # login
    login_p = subparsers.add_parser("login", help="Login to Bluesky (creates/updates a named profile)")
    login_p.add_argument("--name", help="Profile name to save under (e.g. work, personal)")
    login_p.add_argument("--handle", required=True, help="Your handle (e.g. user.bsky.social)")
    login_p.add_argument("--password", help="App password (prompted for when omitted)")
    login_p.add_argument("--set-active", action="store_true", help="Make this profile the active default")

    # accounts
    subparsers.add_parser("accounts", help="List configured profiles")

    # use
    use_p = subparsers.add_parser("use", aliases=["switch"], help="Set the active profile")
    use_p.add_argument("name", help="Profile name")

    # logout
    logout_p = subparsers.add_parser("logout", help="Remove a saved profile and its post history")
    logout_p.add_argument("name", help="Profile name")

    # whoami
    subparsers.add_parser("whoami", help="Show current profile")

    # post
    post_p = subparsers.add_parser("post", aliases=["p"], help="Create a new post")
    _add_compose_args(post_p)

    # append
    append_p = subparsers.add_parser("append", aliases=["a", "reply"], help="Reply to the last created post")
    _add_compose_args(append_p)
    append_p.add_argument("--to", metavar="POST", help="Reply to this bsky.app URL / at:// URI instead")

    # quote
    quote_p = subparsers.add_parser("quote", aliases=["q"], help="Quote the last created post")
    _add_compose_args(quote_p)
    quote_p.add_argument("--post", metavar="POST", help="Quote this bsky.app URL / at:// URI instead")

    # last
    subparsers.add_parser("last", help="Show the post the next append/quote continues from")

    return parser


COMMANDS = {
    "login": cmd_login,
    "accounts": cmd_accounts,
    "use": cmd_use,
    "switch": cmd_use,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "post": cmd_post,
    "p": cmd_post,
    "append": cmd_append,
    "a": cmd_append,
    "reply": cmd_append,
    "quote": cmd_quote,
    "q": cmd_quote,
    "last": cmd_last,
}


def main(argv: list[str] | None = None, *, paths: Paths | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args.paths = paths or Paths.default()

    if args.command in COMMANDS:
        COMMANDS[args.command](args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()

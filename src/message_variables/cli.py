"""Command-line interface for message bound variables."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .commands import format_help, get_all_command_schemas
from .config import SettingsStore
from .exceptions import MessageVariableError
from .predicates import FieldMatchPredicate
from .session import ChatSession, SessionConfig

LOGGER = logging.getLogger("message_variables.cli")


def _add_common(parser: argparse.ArgumentParser, *, key: bool = True, index: bool = False) -> None:
    parser.add_argument("--chat", required=True, help="Path to the JSONL chat file")
    parser.add_argument("--settings", default="data/settings.yaml", help="Settings YAML path")
    if key:
        parser.add_argument("key", help="Variable name")
    if index:
        parser.add_argument("--index", default=None, help="List index or object key inside the value")
    parser.add_argument(
        "--mes",
        type=int,
        default=None,
        help="Message id, negative numbers count back from the last message",
    )
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Only consider messages where FIELD equals VALUE (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Message bound variables for chat files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    set_parser = subparsers.add_parser("set", help="Set a message bound variable")
    _add_common(set_parser, index=True)
    set_parser.add_argument("value", help="Value to store")
    set_parser.add_argument("--json", action="store_true", help="Parse the value as JSON")

    get_parser = subparsers.add_parser("get", help="Get a message bound variable")
    _add_common(get_parser, index=True)

    get_all_parser = subparsers.add_parser("get-all", help="Get all variables of a message")
    _add_common(get_all_parser, key=False)

    delete_parser = subparsers.add_parser("delete", help="Delete a message bound variable")
    _add_common(delete_parser)

    watch_parser = subparsers.add_parser("watch", help="Mirror the newest message's variables into chat metadata")
    watch_parser.add_argument("--chat", required=True, help="Path to the JSONL chat file")
    watch_parser.add_argument("--settings", default="data/settings.yaml", help="Settings YAML path")
    watch_parser.add_argument("--duration", type=float, default=None, help="Seconds to run (default: until interrupted)")

    subparsers.add_parser("commands", help="List the variable commands")

    settings_parser = subparsers.add_parser("settings", help="Show or change settings")
    settings_parser.add_argument("--settings", default="data/settings.yaml", help="Settings YAML path")
    toggle = settings_parser.add_mutually_exclusive_group()
    toggle.add_argument("--mirror", dest="mirror", action="store_true", default=None, help="Enable mirroring")
    toggle.add_argument("--no-mirror", dest="mirror", action="store_false", help="Disable mirroring")
    settings_parser.add_argument("--poll-interval", type=float, default=None, help="Mirror poll interval in seconds")

    return parser


def _command_args(args: argparse.Namespace) -> dict[str, Any]:
    command_args: dict[str, Any] = {"mes": args.mes}
    if getattr(args, "key", None) is not None:
        command_args["key"] = args.key
    if getattr(args, "index", None) is not None:
        command_args["index"] = args.index
    if args.filter:
        command_args["filter"] = FieldMatchPredicate.parse(args.filter)
    return command_args


_COMMAND_NAMES = {
    "set": "set-message-variable",
    "get": "get-message-variable",
    "get-all": "get-all-message-variables",
    "delete": "delete-message-variable",
}


async def run_variable_command(args: argparse.Namespace) -> int:
    session = ChatSession.open(SessionConfig(chat_path=Path(args.chat), settings_path=Path(args.settings)))
    value = None
    if args.command == "set":
        value = json.loads(args.value) if args.json else args.value

    async with session:
        result = await session.run_command(_COMMAND_NAMES[args.command], _command_args(args), value)

    if not result.success:
        print(f"error: {result.error}", file=sys.stderr)
        return 1
    output = result.result
    if isinstance(output, (dict, list)):
        output = json.dumps(output, ensure_ascii=False)
    if output != "":
        print(output)
    return 0


async def watch(args: argparse.Namespace) -> int:
    session = ChatSession.open(SessionConfig(chat_path=Path(args.chat), settings_path=Path(args.settings)))
    LOGGER.info("Watching %s", args.chat)
    async with session:
        if args.duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(args.duration)
    return 0


def show_commands() -> int:
    for schema in get_all_command_schemas():
        print(format_help(schema))
    return 0


def settings(args: argparse.Namespace) -> int:
    store = SettingsStore(Path(args.settings))
    current = store.load()
    changed = False
    if args.mirror is not None:
        current.mirror_latest_to_metadata = args.mirror
        changed = True
    if args.poll_interval is not None:
        current.poll_interval = args.poll_interval
        changed = True
    if changed:
        store.save(current)
    for name, value in current.to_dict().items():
        print(f"{name}: {value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        if args.command in _COMMAND_NAMES:
            return asyncio.run(run_variable_command(args))
        if args.command == "watch":
            return asyncio.run(watch(args))
        if args.command == "commands":
            return show_commands()
        if args.command == "settings":
            return settings(args)
    except KeyboardInterrupt:
        return 0
    except MessageVariableError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"error: value is not valid JSON: {e}", file=sys.stderr)
        return 1
    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())

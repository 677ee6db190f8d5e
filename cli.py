"""
Command-line shell around a single Watchman instance.

Every change/remember/restore is printed by an event subscriber, so the shell
also shows the event records as subscribers receive them.
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from config import WatchmanSettings, load_settings
from events import CHANGE, REMEMBER, RESTORE, Event
from log_setup import configure_logger
from watchman import Watchman

HELP = """Commands:
 get [name]         show one attribute or all of them
 set name value     set an attribute (value parsed as JSON when possible)
 unset [name]       delete one attribute or all of them
 remember [name]    push the current value/snapshot
 restore [name]     pop and apply the last value/snapshot
 states [name]      show remembered history
 help               show this text
 quit               leave the shell"""


def parse_value(raw: str) -> Any:
    # JSON literals (numbers, booleans, lists...) first, plain text otherwise.
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_assignment(text: str) -> tuple[str, Any]:
    name, sep, raw = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    return name.strip(), parse_value(raw)


def _print_event(_store: Watchman, event: Event, *args: Any) -> None:
    # UI prints events; the store stays UI-agnostic.
    target = event.prop if event.prop is not None else "*"
    print(f"[{event.type}] {target} -> {event.data!r}")


def _format(value: Any) -> str:
    return json.dumps(value, default=repr, sort_keys=True)


def run(settings: Optional[WatchmanSettings] = None, initial: Optional[Mapping[str, Any]] = None) -> None:
    settings = settings or WatchmanSettings()
    store = Watchman(initial, thread_safe=settings.thread_safe)
    for event_name in (CHANGE, REMEMBER, RESTORE):
        store.on(event_name, _print_event)

    print("Watchman shell. Type 'help' for commands.")

    try:
        while True:
            line = input("watchman> ").strip()
            if not line:
                continue

            parts = line.split(maxsplit=2)
            command, rest = parts[0].lower(), parts[1:]
            name = rest[0] if rest else None

            if command == "get":
                print(_format(store.get(name)))

            elif command == "set":
                if len(rest) != 2:
                    print("Usage: set name value")
                    continue
                store.set(rest[0], parse_value(rest[1]))

            elif command == "unset":
                store.unset(name)

            elif command == "remember":
                store.remember(name)

            elif command == "restore":
                store.restore(name)

            elif command == "states":
                print(_format(store.states(name)))

            elif command == "help":
                print(HELP)

            elif command in ("quit", "exit"):
                print("Goodbye.")
                return

            else:
                print(f"Unknown command '{command}'. Type 'help' for commands.")

    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="watchman", description="Interactive Watchman attribute store shell.")
    parser.add_argument("--log-level", help="override WATCHMAN_LOG_LEVEL")
    parser.add_argument("--structured-logs", action="store_true", default=None, help="emit JSON log lines")
    parser.add_argument("--thread-safe", action="store_true", default=None, help="guard the store with a lock")
    parser.add_argument(
        "--set",
        dest="initial",
        action="append",
        type=parse_assignment,
        default=[],
        metavar="NAME=VALUE",
        help="initial attribute (repeatable)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        env_settings = load_settings()
        settings = WatchmanSettings(
            log_level=(args.log_level or env_settings.log_level).upper(),
            structured_logs=env_settings.structured_logs if args.structured_logs is None else True,
            thread_safe=env_settings.thread_safe if args.thread_safe is None else True,
        )
    except ValueError as e:
        parser.error(str(e))
    configure_logger("", settings.log_level, settings.structured_logs)

    run(settings, dict(args.initial))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

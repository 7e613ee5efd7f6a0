#!/usr/bin/env python3
"""Entry point for the mcpadmin CLI."""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from collections import deque
from pathlib import Path
from textwrap import dedent
from typing import Any, Iterable, Sequence

from colorama import Fore, Style, just_fix_windows_console

from mcpadmin import __version__
from mcpadmin.app.servers import AddOutcome, RemoveOutcome, ServerAdminService, ServerDetail, ServerListing
from mcpadmin.domain.servers import (
    AmbiguousSourceError,
    NoMatchingSourceError,
    ServerAdminError,
)
from mcpadmin.settings import RuntimeSettings, SettingsError, load_settings
from mcpadmin.utils.telemetry import clear as telemetry_clear
from mcpadmin.utils.telemetry import iter_events as telemetry_iter
from mcpadmin.utils.telemetry import record_structured_event, summarize as telemetry_summarize

SERVER_COMMANDS = ("list", "show", "add", "remove")
TOP_LEVEL_COMMANDS = SERVER_COMMANDS + ("telemetry",)
GLOBAL_FLAGS = {"--no-color"}
LIST_FLAGS = ("--project", "--json")

HELP_OVERVIEW = dedent(
    """
    Inspect and copy MCP server configs between projects.

    Sources:
      - ~/.claude.json        global registry, keyed by project path (read/write)
      - <project>/.mcp.json   per-project overrides (read-only)

    Examples:
      mcpadmin                      list every server across all projects
      mcpadmin serena               same as `mcpadmin show serena`
      mcpadmin add serena --from api
    """
)

SETTINGS: RuntimeSettings | None = None


def _settings() -> RuntimeSettings:
    global SETTINGS
    if SETTINGS is None:
        SETTINGS = load_settings()
    return SETTINGS


class _Palette:
    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def _wrap(self, text: str, code: str) -> str:
        if not self.enabled:
            return text
        return f"{code}{text}{Style.RESET_ALL}"

    def green(self, text: str) -> str:
        return self._wrap(text, Fore.GREEN)

    def yellow(self, text: str) -> str:
        return self._wrap(text, Fore.YELLOW)

    def red(self, text: str) -> str:
        return self._wrap(text, Fore.RED)

    def dim(self, text: str) -> str:
        return self._wrap(text, Style.DIM)

    def bold(self, text: str) -> str:
        return self._wrap(text, Style.BRIGHT)


def _palette(args: argparse.Namespace) -> _Palette:
    mode = _settings().color
    if getattr(args, "no_color", False):
        mode = "never"
    if mode == "always":
        enabled = True
    elif mode == "never":
        enabled = False
    else:
        enabled = sys.stdout.isatty()
    if enabled:
        just_fix_windows_console()
    return _Palette(enabled)


def _default_project_path(path_arg: str | None) -> str:
    if path_arg:
        return str(Path(path_arg).expanduser().resolve())
    return os.getcwd()


def _shorten_path(path: str) -> str:
    home = str(Path.home())
    if path == home or path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path


def _quoted_list(values: Iterable[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _print_listing(listing: ServerListing, palette: _Palette) -> None:
    if not listing.servers:
        print("No MCP servers found across any projects.")
        return

    print(palette.bold("MCP Servers:"))
    print()
    for summary in listing.servers:
        marker = palette.green("●") if summary.enabled else palette.dim("○")
        name = palette.bold(palette.green(summary.name)) if summary.enabled else summary.name
        suffix = f" {palette.yellow('(multiple configs)')}" if summary.divergent else ""
        print(f"  {marker} {name}{suffix}")

        baseline = summary.records[0].record
        line = f"    {palette.dim(baseline.target_label() + ':')} {baseline.display_target()}"
        if summary.divergent:
            line += f" {palette.dim('(varies)')}"
        print(line)

        print(f"    {palette.dim('used in:')}")
        for entry in summary.records:
            short = _shorten_path(entry.source_project)
            if entry.source_project == listing.project:
                print(f"      {palette.green('→')} {palette.green(short + ' (current)')}")
            else:
                print(f"      - {short}")
        print()

    print(palette.dim(f"Total: {len(listing.servers)} unique MCP servers across all projects"))
    print(palette.dim(f"Current project: {listing.enabled_count} servers enabled"))


def _print_detail(detail: ServerDetail, palette: _Palette) -> None:
    status = (
        palette.green("enabled in current project")
        if detail.enabled
        else palette.yellow("not enabled in current project")
    )
    print(f"{palette.bold('MCP Server:')} {palette.bold(detail.name)}")
    print(f"  {palette.dim('Status:')} {status}")
    print()

    for index, (entry, divergence) in enumerate(zip(detail.records, detail.divergences), start=1):
        record = entry.record
        print(f"  {palette.bold(f'Configuration #{index}:')} {palette.dim(_shorten_path(entry.source_project))}")
        if record.command is not None:
            value = palette.yellow(record.command) if divergence.command else record.command
            print(f"    {palette.dim('command:')} {value}")
        elif record.url is not None:
            value = palette.yellow(record.url) if divergence.url else record.url
            print(f"    {palette.dim('url:')} {value}")

        if record.args:
            if divergence.args:
                rendered = [
                    palette.yellow(json.dumps(arg, ensure_ascii=False))
                    if position in divergence.arg_indices
                    else json.dumps(arg, ensure_ascii=False)
                    for position, arg in enumerate(record.args)
                ]
                print(f"    {palette.dim('args:')} [{', '.join(rendered)}]")
            else:
                print(f"    {palette.dim('args:')} {_quoted_list(record.args)}")

        if record.env:
            env_text = json.dumps(record.env, ensure_ascii=False)
            print(f"    {palette.dim('env:')} {palette.yellow(env_text) if divergence.env else env_text}")
        elif divergence.env_missing:
            print(f"    {palette.dim('env:')} {palette.yellow('(none)')}")
        print()


def _print_add(outcome: AddOutcome, palette: _Palette) -> None:
    if outcome.status == "already-enabled":
        print(f"{palette.yellow('Note:')} MCP server '{outcome.name}' is already enabled in this project")
        return
    print(f"{palette.green('✓')} Added MCP server '{palette.bold(palette.green(outcome.name))}' to current project")
    record = outcome.record
    if record is None:
        return
    if record.command is not None:
        print(f"  {palette.dim('command:')} {record.command}")
    elif record.url is not None:
        print(f"  {palette.dim('url:')} {record.url}")
    if record.args:
        print(f"  {palette.dim('args:')} {_quoted_list(record.args)}")


def _print_remove(outcome: RemoveOutcome, palette: _Palette) -> None:
    if outcome.status == "override":
        filename = outcome.override_path.name if outcome.override_path else "the project override file"
        print(f"{palette.yellow('Note:')} MCP server '{outcome.name}' is defined in local {filename}")
        print(f"  Please remove it manually from {filename}")
        return
    print(f"{palette.green('✓')} Removed MCP server '{palette.bold(palette.green(outcome.name))}' from current project")


def _example_hint(candidates: Sequence[str]) -> str:
    for candidate in candidates:
        tail = Path(candidate).name
        if tail:
            return tail
    return "<project>"


def _print_error(exc: ServerAdminError, palette: _Palette) -> None:
    if isinstance(exc, AmbiguousSourceError):
        print(f"{palette.red('Error:')} {exc}:", file=sys.stderr)
        for candidate in exc.candidates:
            print(f"  {palette.dim('→')} {_shorten_path(candidate)}", file=sys.stderr)
        print(file=sys.stderr)
        print(f"Example: mcpadmin add {exc.name} --from {_example_hint(exc.candidates)}", file=sys.stderr)
        return
    print(f"{palette.red('Error:')} {exc}", file=sys.stderr)
    if isinstance(exc, NoMatchingSourceError):
        print("Available configurations:", file=sys.stderr)
        for candidate in exc.candidates:
            print(f"  - {_shorten_path(candidate)}", file=sys.stderr)
    if exc.remediation:
        print(f"  {exc.remediation}", file=sys.stderr)


def _servers_cmd(args: argparse.Namespace) -> int:
    settings = _settings()
    palette = _palette(args)
    project = _default_project_path(getattr(args, "project", None))
    service = ServerAdminService.from_settings(settings)
    command = args.command
    as_json = getattr(args, "json", False)
    event_context: dict[str, Any] = {"command": command, "path": project}
    if getattr(args, "name", None):
        event_context["name"] = args.name
    record_structured_event(
        settings,
        f"servers.{command}",
        status="start",
        component="servers",
        payload=event_context,
    )
    start = time.perf_counter()

    try:
        if command == "list":
            listing = service.list_servers(project)
            if listing.unreadable_sources:
                event_context["unreadable_sources"] = list(listing.unreadable_sources)
            if as_json:
                _print_json(listing.to_dict())
            else:
                _print_listing(listing, palette)
        elif command == "show":
            detail = service.show(args.name, project)
            if as_json:
                _print_json(detail.to_dict())
            else:
                _print_detail(detail, palette)
        elif command == "add":
            outcome = service.add(args.name, project, hint=getattr(args, "source", None))
            event_context["status"] = outcome.status
            if as_json:
                _print_json(outcome.to_dict())
            else:
                _print_add(outcome, palette)
        elif command == "remove":
            removal = service.remove(args.name, project)
            event_context["status"] = removal.status
            if as_json:
                _print_json(removal.to_dict())
            else:
                _print_remove(removal, palette)
        else:
            print("Unsupported command", file=sys.stderr)
            return 2
    except ServerAdminError as exc:
        duration = (time.perf_counter() - start) * 1000
        record_structured_event(
            settings,
            f"servers.{command}",
            status="error",
            level="error",
            component="servers",
            duration_ms=duration,
            payload=event_context | exc.to_dict(),
        )
        _print_error(exc, palette)
        return 1

    duration = (time.perf_counter() - start) * 1000
    record_structured_event(
        settings,
        f"servers.{command}",
        status="success",
        component="servers",
        duration_ms=duration,
        payload=event_context | {"exit_code": 0},
    )
    return 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    settings = _settings()
    if args.telemetry_command == "report":
        recent = getattr(args, "recent", 0)
        if recent and recent > 0:
            events = list(deque(telemetry_iter(settings), maxlen=recent))
        else:
            events = list(telemetry_iter(settings))
        _print_json(telemetry_summarize(events))
        return 0
    if args.telemetry_command == "tail":
        for evt in deque(telemetry_iter(settings), maxlen=args.limit):
            print(json.dumps(evt, ensure_ascii=False))
        return 0
    if args.telemetry_command == "clear":
        telemetry_clear(settings)
        print("Telemetry log cleared")
        return 0
    print("Unsupported telemetry command", file=sys.stderr)
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpadmin",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"mcpadmin {__version__}")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project", help="Active project path (default: current directory)")
    common.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", parents=[common], help="List all MCP servers across all projects")
    list_cmd.set_defaults(func=_servers_cmd)

    show_cmd = sub.add_parser("show", parents=[common], help="Show every configuration of one MCP server")
    show_cmd.add_argument("name", help="Name of the MCP server")
    show_cmd.set_defaults(func=_servers_cmd)

    add_cmd = sub.add_parser("add", parents=[common], help="Add an MCP server to the current project")
    add_cmd.add_argument("name", help="Name of the MCP server to add")
    add_cmd.add_argument(
        "--from",
        dest="source",
        help="Source project to copy the configuration from (partial path match)",
    )
    add_cmd.set_defaults(func=_servers_cmd)

    remove_cmd = sub.add_parser("remove", parents=[common], help="Remove an MCP server from the current project")
    remove_cmd.add_argument("name", help="Name of the MCP server to remove")
    remove_cmd.set_defaults(func=_servers_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect the local telemetry log")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)
    telemetry_report = telemetry_sub.add_parser("report", help="Print aggregated telemetry stats")
    telemetry_report.add_argument("--recent", type=int, default=0, help="Only summarise the last N events")
    telemetry_report.set_defaults(func=_telemetry_cmd)
    telemetry_tail = telemetry_sub.add_parser("tail", help="Print the last N telemetry events")
    telemetry_tail.add_argument("--limit", type=int, default=20)
    telemetry_tail.set_defaults(func=_telemetry_cmd)
    telemetry_clear_cmd = telemetry_sub.add_parser("clear", help="Remove the telemetry log file")
    telemetry_clear_cmd.set_defaults(func=_telemetry_cmd)

    return parser


def _preprocess_argv(argv: list[str]) -> list[str]:
    """Default to ``list`` and expand ``mcpadmin <name>`` to ``show <name>``.

    Leading ``--project``/``--json`` options also imply ``list``.
    """

    index = 0
    while index < len(argv) and argv[index] in GLOBAL_FLAGS:
        index += 1
    if index == len(argv):
        return [*argv, "list"]
    candidate = argv[index]
    if candidate in LIST_FLAGS or candidate.startswith("--project="):
        return [*argv[:index], "list", *argv[index:]]
    if candidate.startswith("-") or candidate in TOP_LEVEL_COMMANDS:
        return argv
    return [*argv[:index], "show", *argv[index:]]


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    raw_args = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(_preprocess_argv(list(raw_args)))
    try:
        return args.func(args)
    except SettingsError as exc:
        print(f"mcpadmin: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

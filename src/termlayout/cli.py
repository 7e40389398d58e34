"""Command-line interface for termlayout."""

from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
import time
from pathlib import Path

from rich.console import Console

from . import config
from .app import (
    Application,
    AppState,
    EffectRunner,
    KeyPressed,
    TemplateBrowsing,
    TemplateEditing,
    TextSubmitted,
    Tick,
)
from .app.names import (
    find_template,
    generate_numeric_name,
    template_session_name,
    validate_template_name,
)
from .app.view import render, sessions_table, templates_table
from .errors import TermLayoutError, ValidationError
from .layout.models import Template
from .layout.normalizer import normalize_panes
from .layout.preview import render_preview
from .materializer import TemplateMaterializer
from .mux.tmux import TmuxClient
from .store import load_templates, save_templates
from .telemetry import configure_logging, get_logger, metrics
from .terminal import attach_session, available_terminals, default_terminal, validate_terminal

console = Console()
logger = get_logger(__name__)

INTERACTIVE_HELP = (
    "Type key names separated by spaces (e.g. 'j j H', 'enter', 'esc'); "
    "':text' submits text to the active input; Ctrl-D quits."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termlayout",
        description="Manage tmux sessions and pane layout templates.",
    )
    parser.add_argument(
        "-t", "--terminal", help="Terminal emulator used to attach (e.g. kitty, alacritty)"
    )
    parser.add_argument("-V", "--version", action="version", version=f"termlayout {config.VERSION}")
    parser.add_argument("--socket", help="tmux socket path")
    parser.add_argument("--templates-file", type=Path, help="Template file path")
    parser.add_argument("--log-level", help="Log level (default from TERMLAYOUT_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("sessions", help="List tmux sessions")
    sub.add_parser("templates", help="List templates")
    sub.add_parser("ui", help="Interactive session/template browser")

    p = sub.add_parser("new", help="Create a session (a template name builds that template)")
    p.add_argument("name", nargs="?", default="")
    p.add_argument("--no-attach", action="store_true")

    p = sub.add_parser("apply", help="Build a session from a template")
    p.add_argument("template")
    p.add_argument("--session", help="Session name (default: TEMPLATE-<unix time>)")
    p.add_argument("--no-attach", action="store_true")

    p = sub.add_parser("preview", help="Show a template's layout")
    p.add_argument("template")

    p = sub.add_parser("edit", help="Edit a template interactively")
    p.add_argument("template")

    p = sub.add_parser("create-template", help="Create a one-pane template")
    p.add_argument("name")
    p.add_argument("--description", default="")

    p = sub.add_parser("delete-template", help="Delete a template")
    p.add_argument("name")

    p = sub.add_parser("rename", help="Rename a session")
    p.add_argument("old")
    p.add_argument("new")

    p = sub.add_parser("kill", help="Kill a session")
    p.add_argument("name")

    sub.add_parser("kill-all", help="Kill the tmux server")
    return parser


def resolve_terminal(requested: str | None) -> str:
    """Terminal to attach with; raises ValidationError if not on PATH."""
    terminal = requested or default_terminal()
    try:
        validate_terminal(terminal)
    except ValidationError:
        found = available_terminals()
        if found:
            console.print(f"Available terminals: {', '.join(found)}")
        else:
            console.print("No supported terminals found in PATH")
        raise
    return terminal


def _require_template(name: str, templates: list[Template]) -> Template:
    template = find_template(name, templates)
    if template is None:
        raise ValidationError(f"Template '{name}' not found")
    return template


async def _create(args, mux: TmuxClient, templates: list[Template]) -> None:
    sessions = await mux.list_sessions()
    name = args.name.strip()
    if not name:
        name = generate_numeric_name(sessions)
    if any(s.name == name for s in sessions):
        raise ValidationError("Name already exists")

    terminal = None if args.no_attach else resolve_terminal(args.terminal)
    template = find_template(name, templates)
    if template is not None:
        await TemplateMaterializer(mux).materialize(name, template)
        console.print(f"[green]Created session '{name}' from template '{template.name}'[/green]")
    else:
        await mux.create_session(name)
        console.print(f"[green]Created session '{name}'[/green]")
    if terminal:
        attach_session(terminal, name)


async def _apply(args, mux: TmuxClient, templates: list[Template]) -> None:
    template = _require_template(args.template, templates)
    session_name = args.session or template_session_name(template.name, time.time())
    sessions = await mux.list_sessions()
    if any(s.name == session_name for s in sessions):
        raise ValidationError("Name already exists")

    terminal = None if args.no_attach else resolve_terminal(args.terminal)
    result = await TemplateMaterializer(mux).materialize(session_name, template)
    console.print(
        f"[green]Created session '{session_name}' from template '{template.name}'[/green] "
        f"({len(result.handles)} panes)"
    )
    if terminal:
        attach_session(terminal, session_name)


def parse_line(line: str) -> list:
    """Turn one input line into events."""
    if line.startswith(":"):
        return [TextSubmitted(line[1:])]
    return [KeyPressed(key) for key in shlex.split(line)]


async def run_interactive(app: Application, stop_when=None) -> None:
    """Line-driven event loop printing the screen after every line."""
    console.print(INTERACTIVE_HELP, style="dim")
    console.print(render(app.state))
    while not app.state.quitting:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        await app.dispatch(Tick())
        try:
            events = parse_line(line)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            continue
        for event in events:
            await app.dispatch(event)
        console.print(render(app.state))
        if stop_when is not None and stop_when(app.state):
            break


async def _interactive(args, mux: TmuxClient, templates: list[Template], edit: str | None) -> None:
    terminal = args.terminal or default_terminal()
    runner = EffectRunner(mux, terminal, templates_path=args.templates_file)
    state = AppState(
        sessions=tuple(await mux.list_sessions()),
        templates=tuple(templates),
        last_refresh=time.time(),
    )

    stop_when = None
    if edit is not None:
        draft = _require_template(edit, templates).copy()
        normalize_panes(draft.panes)
        state = AppState(
            sessions=state.sessions,
            templates=state.templates,
            mode=TemplateEditing(draft=draft),
            last_refresh=state.last_refresh,
        )

        def stop_when(s: AppState) -> bool:
            return isinstance(s.mode, TemplateBrowsing)

    await run_interactive(Application(state, runner), stop_when=stop_when)


async def _run(args) -> int:
    mux = TmuxClient(socket_path=args.socket)
    templates = load_templates(args.templates_file)
    command = args.command or "sessions"
    logger.debug(f"[CLI] command={command}")

    if command == "sessions":
        console.print(sessions_table(AppState(sessions=tuple(await mux.list_sessions()))))
    elif command == "templates":
        console.print(templates_table(AppState(templates=tuple(templates))))
    elif command == "preview":
        template = _require_template(args.template, templates)
        console.print(render_preview(template.panes).to_rich())
    elif command == "new":
        await _create(args, mux, templates)
    elif command == "apply":
        await _apply(args, mux, templates)
    elif command == "create-template":
        sessions = await mux.list_sessions()
        name = validate_template_name(args.name, sessions, templates)
        templates.append(Template.new_root(name, args.description.strip()))
        save_templates(templates, args.templates_file)
        console.print(f"[green]Template '{name}' created[/green]")
    elif command == "delete-template":
        template = _require_template(args.name, templates)
        templates.remove(template)
        save_templates(templates, args.templates_file)
        console.print(f"[green]Deleted template '{template.name}'[/green]")
    elif command == "rename":
        new = args.new.strip()
        sessions = await mux.list_sessions()
        if not new:
            raise ValidationError("Session name cannot be empty")
        if any(s.name == new for s in sessions) or find_template(new, templates):
            raise ValidationError("Name already exists")
        await mux.rename_session(args.old, new)
        console.print(f"[green]Renamed '{args.old}' to '{new}'[/green]")
    elif command == "kill":
        await mux.kill_session(args.name)
        console.print(f"[green]Deleted session '{args.name}'[/green]")
    elif command == "kill-all":
        await mux.kill_all_sessions()
        console.print("[yellow]All sessions killed[/yellow]")
    elif command == "ui":
        await _interactive(args, mux, templates, edit=None)
    elif command == "edit":
        await _interactive(args, mux, templates, edit=args.template)
    return 0


def main(argv: list[str] | None = None) -> int:
    """入口函数"""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        code = asyncio.run(_run(args))
        logger.debug(f"[CLI] metrics: {metrics.get_all_counters()}")
        return code
    except TermLayoutError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\nStopped")
        return 130


if __name__ == "__main__":
    sys.exit(main())

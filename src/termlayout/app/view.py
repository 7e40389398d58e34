"""Rich rendering of the application state."""

from datetime import datetime

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..layout.preview import render_preview
from ..layout.models import Template
from .state import (
    AppState,
    Browsing,
    Confirming,
    ConfirmAction,
    CreatingSession,
    InputField,
    MessageKind,
    PaneEditing,
    RenamingSession,
    TemplateBrowsing,
    TemplateCreating,
    TemplateEditing,
)

MESSAGE_STYLES = {
    MessageKind.INFO: "bold #1e66f5",
    MessageKind.SUCCESS: "bold #40a02b",
    MessageKind.WARNING: "bold #df8e1d",
    MessageKind.ERROR: "bold #fe640b",
}

BROWSING_HINTS = (
    "[enter] attach  [n] new  [r] rename  [d] kill  [D] kill all  "
    "[t] templates  [a] auto-refresh  [q] quit"
)
TEMPLATE_HINTS = "[enter] launch  [n] new  [e] edit  [d] delete  [p] preview  [esc] back"
EDITOR_HINTS = "[H/J/K/L] split  [enter/e] edit command  [d] delete pane  [s] save  [esc] back"


def _hints(state: AppState, hints: str) -> Text:
    return Text(hints if state.show_help else "[?] help", style="dim")


def format_created(created: int | None) -> str:
    if created is None:
        return "unknown"
    return datetime.fromtimestamp(created).strftime("%H:%M %d/%m")


def sessions_table(state: AppState) -> Table:
    table = Table(title="tmux sessions", expand=True)
    table.add_column("", width=1)
    table.add_column("Name")
    table.add_column("Windows", justify="right")
    table.add_column("Created")
    for i, session in enumerate(state.sessions):
        marker = "●" if session.attached else "○"
        style = "reverse" if i == state.cursor and isinstance(state.mode, Browsing) else ""
        table.add_row(
            marker, session.name, str(session.windows), format_created(session.created), style=style
        )
    return table


def templates_table(state: AppState) -> Table:
    table = Table(title="Templates", expand=True)
    table.add_column("Name")
    table.add_column("Panes", justify="right")
    table.add_column("Description")
    for i, template in enumerate(state.templates):
        style = "reverse" if i == state.template_cursor else ""
        table.add_row(template.name, str(len(template.panes)), template.description, style=style)
    return table


def editor_panel(draft: Template, cursor: int, focused: bool = True) -> Panel:
    """Preview of the draft with the pane under the cursor highlighted."""
    selected_id = None
    if focused and 0 <= cursor < len(draft.panes):
        selected_id = draft.panes[cursor].id
    preview = render_preview(draft.panes, selected_id=selected_id)
    body = Group(preview.to_rich(), Text(""), Text(EDITOR_HINTS, style="dim"))
    return Panel(body, title=f"Editing: {draft.name}", border_style="#8839ef")


def render(state: AppState):
    """Renderable for the whole screen."""
    parts = []
    mode = state.mode

    if isinstance(mode, (Browsing, CreatingSession, RenamingSession)) or (
        isinstance(mode, Confirming) and not mode.return_to_templates
    ):
        parts.append(sessions_table(state))
        parts.append(_hints(state, BROWSING_HINTS))
    elif isinstance(mode, (TemplateBrowsing, Confirming)):
        parts.append(templates_table(state))
        if state.preview_mode and state.templates:
            template = state.templates[min(state.template_cursor, len(state.templates) - 1)]
            parts.append(render_preview(template.panes).to_rich())
        parts.append(_hints(state, TEMPLATE_HINTS))
    elif isinstance(mode, TemplateCreating):
        field = "name" if mode.focus == InputField.NAME else "description"
        parts.append(Text(f"New template - enter {field} (tab switches field)"))
        if mode.name:
            parts.append(Text(f"Name: {mode.name}"))
    elif isinstance(mode, TemplateEditing):
        parts.append(editor_panel(mode.draft, mode.cursor))
    elif isinstance(mode, PaneEditing):
        parts.append(editor_panel(mode.draft, mode.cursor, focused=False))
        index = mode.draft.find_index(mode.pane_id)
        if index >= 0:
            pane = mode.draft.panes[index]
            current = pane.command or "(empty)"
            parts.append(Text(f"Command for pane {pane.id} (current: {current})"))

    if isinstance(mode, CreatingSession):
        parts.append(Text("New session name (empty for auto-number):"))
    elif isinstance(mode, RenamingSession):
        parts.append(Text(f"Rename '{mode.target}' to:"))
    elif isinstance(mode, Confirming):
        if mode.action == ConfirmAction.KILL_ALL:
            question = "Kill ALL sessions?"
        elif mode.action == ConfirmAction.KILL_SESSION:
            question = f"Kill session '{mode.target}'?"
        else:
            question = f"Delete template '{mode.target}'?"
        parts.append(Panel(Text(f"{question} [y/n]", style="bold #fe640b")))

    if state.message:
        parts.append(Text(state.message, style=MESSAGE_STYLES[state.message_kind]))

    return Group(*parts)

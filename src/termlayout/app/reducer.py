"""Reducer: (state, event) -> (next state, effects).

Pure: no IO happens here. Validation runs before any effect is emitted,
so a rejected action never reaches tmux or the template file.
"""

from dataclasses import replace

from ..config import AUTO_REFRESH_INTERVAL
from ..errors import OutOfRangeError, ValidationError
from ..layout.models import Position, Template
from ..layout.normalizer import normalize_panes
from ..layout.splitter import delete_pane, split_pane
from ..telemetry import get_logger
from . import effects as fx
from .events import (
    EffectFailed,
    EffectSucceeded,
    Event,
    KeyPressed,
    QuitRequested,
    SessionsLoaded,
    TemplatesLoaded,
    TextSubmitted,
    Tick,
)
from .names import (
    find_template,
    generate_numeric_name,
    name_exists,
    template_session_name,
    validate_template_name,
)
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
    clamp_cursor,
)

logger = get_logger(__name__)

Result = tuple[AppState, list]

SPLIT_KEYS = {
    "H": Position.LEFT,
    "L": Position.RIGHT,
    "J": Position.DOWN,
    "K": Position.UP,
}


def update(state: AppState, event: Event) -> Result:
    """Apply one event.

    An out-of-range selection is a no-op: the state comes back unchanged.
    """
    try:
        return _update(state, event)
    except OutOfRangeError as e:
        logger.debug(f"[Reducer] ignored {type(event).__name__}: {e}")
        return state, []


def _update(state: AppState, event: Event) -> Result:
    if isinstance(event, KeyPressed):
        if state.message:
            state = replace(state, message="")
        return _on_key(state, event)

    if isinstance(event, TextSubmitted):
        if state.message:
            state = replace(state, message="")
        return _on_text(state, event.value)

    if isinstance(event, Tick):
        if state.auto_refresh and event.timestamp - state.last_refresh > AUTO_REFRESH_INTERVAL:
            return replace(state, last_refresh=event.timestamp), [fx.RefreshSessions()]
        return state, []

    if isinstance(event, SessionsLoaded):
        return (
            replace(
                state,
                sessions=tuple(event.sessions),
                cursor=clamp_cursor(state.cursor, len(event.sessions)),
                last_refresh=event.timestamp,
            ),
            [],
        )

    if isinstance(event, TemplatesLoaded):
        return (
            replace(
                state,
                templates=tuple(event.templates),
                template_cursor=clamp_cursor(state.template_cursor, len(event.templates)),
            ),
            [],
        )

    if isinstance(event, EffectSucceeded):
        return state.with_message(event.message, event.kind), []

    if isinstance(event, EffectFailed):
        return state.with_message(event.message, MessageKind.ERROR), []

    if isinstance(event, QuitRequested):
        return replace(state, quitting=True), []

    raise TypeError(f"unknown event: {event!r}")


# === Key handling per mode ===


def _on_key(state: AppState, event: KeyPressed) -> Result:
    mode = state.mode
    if isinstance(mode, Browsing):
        return _browsing_key(state, event.key)
    if isinstance(mode, TemplateBrowsing):
        return _template_browsing_key(state, event)
    if isinstance(mode, TemplateCreating):
        return _template_creating_key(state, mode, event.key)
    if isinstance(mode, TemplateEditing):
        return _template_editing_key(state, mode, event.key)
    if isinstance(mode, PaneEditing):
        if event.key == "esc":
            return replace(state, mode=TemplateEditing(draft=mode.draft, cursor=mode.cursor)), []
        return state, []
    if isinstance(mode, (CreatingSession, RenamingSession)):
        if event.key == "esc":
            return replace(state, mode=Browsing()), []
        return state, []
    if isinstance(mode, Confirming):
        return _confirming_key(state, mode, event.key)
    raise TypeError(f"unknown mode: {mode!r}")


def _browsing_key(state: AppState, key: str) -> Result:
    count = len(state.sessions)

    if key in ("ctrl+c", "q"):
        return replace(state, quitting=True), []
    if key in ("up", "k"):
        return replace(state, cursor=max(0, state.cursor - 1)), []
    if key in ("down", "j"):
        return replace(state, cursor=clamp_cursor(state.cursor + 1, count)), []
    if key == "g":
        return replace(state, cursor=0), []
    if key == "G":
        return replace(state, cursor=clamp_cursor(count - 1, count)), []
    if key in ("enter", " "):
        session = state.selected_session()
        return state, [fx.AttachSession(session.name), fx.Quit()]
    if key in ("n", "c"):
        return replace(state, mode=CreatingSession()), []
    if key == "r":
        session = state.selected_session()
        return replace(state, mode=RenamingSession(target=session.name)), []
    if key == "d":
        session = state.selected_session()
        return replace(state, mode=Confirming(ConfirmAction.KILL_SESSION, session.name)), []
    if key == "D":
        if count == 0:
            return state, []
        return replace(state, mode=Confirming(ConfirmAction.KILL_ALL)), []
    if key in ("ctrl+r", "f5"):
        return state, [fx.RefreshSessions(), fx.LoadTemplates(announce=True)]
    if key == "a":
        auto = not state.auto_refresh
        state = replace(state, auto_refresh=auto)
        if auto:
            return state.with_message("Auto-refresh enabled", MessageKind.SUCCESS), []
        return state.with_message("Auto-refresh disabled", MessageKind.INFO), []
    if key == "t":
        return replace(state, mode=TemplateBrowsing(), template_cursor=0), []
    if key in ("?", "h"):
        return replace(state, show_help=not state.show_help), []
    return state, []


def _template_browsing_key(state: AppState, event: KeyPressed) -> Result:
    key = event.key
    count = len(state.templates)

    if key in ("ctrl+c", "q", "esc"):
        return replace(state, mode=Browsing()), []
    if key in ("up", "k"):
        return replace(state, template_cursor=max(0, state.template_cursor - 1)), []
    if key in ("down", "j"):
        return replace(state, template_cursor=clamp_cursor(state.template_cursor + 1, count)), []
    if key in ("enter", " "):
        template = state.selected_template()
        session_name = template_session_name(template.name, event.timestamp)
        return state, [
            fx.MaterializeTemplate(session_name, template.copy()),
            fx.AttachSession(session_name),
            fx.Quit(),
        ]
    if key in ("n", "c"):
        return replace(state, mode=TemplateCreating(draft=Template.new_root())), []
    if key == "e":
        draft = state.selected_template().copy()
        normalize_panes(draft.panes)
        return replace(state, mode=TemplateEditing(draft=draft, cursor=0)), []
    if key == "d":
        template = state.selected_template()
        return (
            replace(
                state,
                mode=Confirming(
                    ConfirmAction.DELETE_TEMPLATE, template.name, return_to_templates=True
                ),
            ),
            [],
        )
    if key == "p":
        return replace(state, preview_mode=not state.preview_mode), []
    if key in ("?", "h"):
        return replace(state, show_help=not state.show_help), []
    return state, []


def _template_creating_key(state: AppState, mode: TemplateCreating, key: str) -> Result:
    if key == "tab":
        focus = InputField.DESCRIPTION if mode.focus == InputField.NAME else InputField.NAME
        return replace(state, mode=replace(mode, focus=focus)), []
    if key == "esc":
        return replace(state, mode=TemplateBrowsing()), []
    return state, []


def _template_editing_key(state: AppState, mode: TemplateEditing, key: str) -> Result:
    count = len(mode.draft.panes)

    if key in ("ctrl+c", "q", "esc"):
        return replace(state, mode=TemplateBrowsing()), []
    if key in ("up", "k"):
        return replace(state, mode=replace(mode, cursor=max(0, mode.cursor - 1))), []
    if key in ("down", "j"):
        return replace(state, mode=replace(mode, cursor=clamp_cursor(mode.cursor + 1, count))), []
    if key in ("enter", "e"):
        pane = mode.draft.pane_at(mode.cursor)
        return (
            replace(state, mode=PaneEditing(draft=mode.draft, cursor=mode.cursor, pane_id=pane.id)),
            [],
        )
    if key in SPLIT_KEYS:
        draft = mode.draft.copy()
        cursor = split_pane(draft, mode.cursor, SPLIT_KEYS[key])
        if cursor < 0:
            return state, []
        return replace(state, mode=TemplateEditing(draft=draft, cursor=cursor)), []
    if key == "d":
        draft = mode.draft.copy()
        try:
            cursor = delete_pane(draft, mode.cursor)
        except ValidationError as e:
            return state.with_message(str(e), MessageKind.ERROR), []
        return replace(state, mode=TemplateEditing(draft=draft, cursor=cursor)), []
    if key == "s":
        return _save_edited_template(state, mode.draft)
    return state, []


def _save_edited_template(state: AppState, draft: Template) -> Result:
    templates = list(state.templates)
    for i, template in enumerate(templates):
        if template.name == draft.name:
            templates[i] = draft.copy()
            break
    templates = tuple(templates)
    return (
        replace(state, templates=templates, mode=TemplateBrowsing()),
        [fx.SaveTemplates(templates, "Template saved")],
    )


def _confirming_key(state: AppState, mode: Confirming, key: str) -> Result:
    back = TemplateBrowsing() if mode.return_to_templates else Browsing()

    if key in ("n", "esc"):
        return replace(state, mode=back), []
    if key not in ("y", "enter"):
        return state, []

    state = replace(state, mode=back)
    if mode.action == ConfirmAction.KILL_SESSION:
        return state, [fx.KillSession(mode.target), fx.RefreshSessions()]
    if mode.action == ConfirmAction.KILL_ALL:
        return state, [fx.KillAllSessions(), fx.RefreshSessions()]

    # DELETE_TEMPLATE
    templates = tuple(t for t in state.templates if t.name != mode.target)
    state = replace(
        state,
        templates=templates,
        template_cursor=clamp_cursor(state.template_cursor, len(templates)),
    )
    return state, [
        fx.SaveTemplates(
            templates,
            f"Deleted template '{mode.target}'",
            failure_prefix="Failed to delete template",
        )
    ]


# === Submitted text per mode ===


def _on_text(state: AppState, value: str) -> Result:
    mode = state.mode
    if isinstance(mode, CreatingSession):
        return _submit_new_session(state, value)
    if isinstance(mode, RenamingSession):
        return _submit_rename(state, mode, value)
    if isinstance(mode, TemplateCreating):
        return _submit_template_field(state, mode, value)
    if isinstance(mode, PaneEditing):
        draft = mode.draft.copy()
        index = draft.find_index(mode.pane_id)
        if index >= 0:
            draft.panes[index].command = value.strip()
        return replace(state, mode=TemplateEditing(draft=draft, cursor=mode.cursor)), []
    return state, []


def _submit_new_session(state: AppState, value: str) -> Result:
    name = value.strip() or generate_numeric_name(state.sessions)
    if any(s.name == name for s in state.sessions):
        return state.with_message("Name already exists", MessageKind.ERROR), []

    state = replace(state, mode=Browsing())
    template = find_template(name, state.templates)
    if template is not None:
        create = fx.MaterializeTemplate(name, template.copy())
    else:
        create = fx.CreateSession(name)
    return state, [create, fx.AttachSession(name), fx.Quit()]


def _submit_rename(state: AppState, mode: RenamingSession, value: str) -> Result:
    name = value.strip()
    if not name:
        return replace(state, mode=Browsing()), []
    if name_exists(name, state.sessions, state.templates):
        return state.with_message("Name already exists", MessageKind.ERROR), []
    return (
        replace(state, mode=Browsing()),
        [fx.RenameSession(mode.target, name), fx.RefreshSessions()],
    )


def _submit_template_field(state: AppState, mode: TemplateCreating, value: str) -> Result:
    if mode.focus == InputField.NAME:
        try:
            name = validate_template_name(value, state.sessions, state.templates)
        except ValidationError as e:
            return state.with_message(str(e), MessageKind.ERROR), []
        return replace(state, mode=replace(mode, name=name, focus=InputField.DESCRIPTION)), []

    try:
        name = validate_template_name(mode.name, state.sessions, state.templates)
    except ValidationError as e:
        return state.with_message(str(e), MessageKind.ERROR), []

    template = mode.draft.copy()
    template.name = name
    template.description = value.strip()
    normalize_panes(template.panes)

    templates = state.templates + (template,)
    state = replace(
        state,
        templates=templates,
        template_cursor=len(templates) - 1,
        mode=TemplateBrowsing(),
    )
    return state, [fx.SaveTemplates(templates, f"Template '{name}' created")]

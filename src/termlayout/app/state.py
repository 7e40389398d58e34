"""Application state.

AppState is immutable: every event produces a new state. The current mode
is one of the variants below, each carrying only the fields that mode
needs. Template drafts held by editing modes are private copies; the
reducer copies a draft again before changing it.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from ..errors import OutOfRangeError
from ..layout.models import Template
from ..mux.base import SessionInfo


class MessageKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ConfirmAction(Enum):
    KILL_SESSION = "kill_session"
    KILL_ALL = "kill_all"
    DELETE_TEMPLATE = "delete_template"


class InputField(Enum):
    NAME = "name"
    DESCRIPTION = "description"


@dataclass(frozen=True)
class Browsing:
    """Session list."""


@dataclass(frozen=True)
class CreatingSession:
    """Waiting for a new session name (empty means auto-number)."""


@dataclass(frozen=True)
class RenamingSession:
    target: str


@dataclass(frozen=True)
class Confirming:
    action: ConfirmAction
    target: str = ""
    return_to_templates: bool = False


@dataclass(frozen=True)
class TemplateBrowsing:
    """Template list."""


@dataclass(frozen=True)
class TemplateCreating:
    draft: Template
    name: str = ""
    focus: InputField = InputField.NAME


@dataclass(frozen=True)
class TemplateEditing:
    draft: Template
    cursor: int = 0


@dataclass(frozen=True)
class PaneEditing:
    draft: Template
    cursor: int
    pane_id: int


Mode = Union[
    Browsing,
    CreatingSession,
    RenamingSession,
    Confirming,
    TemplateBrowsing,
    TemplateCreating,
    TemplateEditing,
    PaneEditing,
]


@dataclass(frozen=True)
class AppState:
    """Whole application state.

    Attributes:
        sessions: Live sessions as last listed
        templates: All templates, in file order
        cursor: Selected session index
        template_cursor: Selected template index
        mode: Current mode variant
        message: Last error/success message, cleared on the next key press
        message_kind: Severity of ``message``
        last_refresh: Timestamp of the last session listing
    """

    sessions: tuple[SessionInfo, ...] = ()
    templates: tuple[Template, ...] = ()
    cursor: int = 0
    template_cursor: int = 0
    mode: Mode = field(default_factory=Browsing)
    message: str = ""
    message_kind: MessageKind = MessageKind.INFO
    show_help: bool = False
    auto_refresh: bool = True
    preview_mode: bool = True
    last_refresh: float = 0.0
    quitting: bool = False

    def with_message(self, message: str, kind: MessageKind = MessageKind.INFO) -> "AppState":
        return replace(self, message=message, message_kind=kind)

    def selected_session(self) -> SessionInfo:
        return pick(self.sessions, self.cursor)

    def selected_template(self) -> Template:
        return pick(self.templates, self.template_cursor)


def pick(items, index: int):
    """``items[index]`` for a non-negative in-range index.

    Raises:
        OutOfRangeError: If index is outside ``items``.
    """
    if index < 0 or index >= len(items):
        raise OutOfRangeError(f"index {index} out of range ({len(items)} items)")
    return items[index]


def clamp_cursor(cursor: int, count: int) -> int:
    if count == 0:
        return 0
    return max(0, min(cursor, count - 1))

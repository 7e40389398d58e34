"""Side effects requested by the reducer.

Each effect knows the message shown when it succeeds and the prefix used
when it fails; the EffectRunner performs them in order and stops at the
first failure.
"""

from dataclasses import dataclass

from ..layout.models import Template
from .state import MessageKind


@dataclass(frozen=True)
class RefreshSessions:
    failure_prefix = "Failed to list sessions"


@dataclass(frozen=True)
class LoadTemplates:
    announce: bool = False
    failure_prefix = "Failed to load templates"


@dataclass(frozen=True)
class CreateSession:
    name: str
    failure_prefix = "Failed to create session"

    def success(self) -> tuple[str, MessageKind]:
        return f"Created session '{self.name}'", MessageKind.SUCCESS


@dataclass(frozen=True)
class MaterializeTemplate:
    session_name: str
    template: Template
    failure_prefix = "Failed to create session from template"

    def success(self) -> tuple[str, MessageKind]:
        return (
            f"Created session '{self.session_name}' from template '{self.template.name}'",
            MessageKind.SUCCESS,
        )


@dataclass(frozen=True)
class RenameSession:
    old: str
    new: str
    failure_prefix = "Failed to rename session"

    def success(self) -> tuple[str, MessageKind]:
        return f"Renamed '{self.old}' to '{self.new}'", MessageKind.SUCCESS


@dataclass(frozen=True)
class KillSession:
    name: str
    failure_prefix = "Failed to delete session"

    def success(self) -> tuple[str, MessageKind]:
        return f"Deleted session '{self.name}'", MessageKind.SUCCESS


@dataclass(frozen=True)
class KillAllSessions:
    failure_prefix = "Failed to kill all sessions"

    def success(self) -> tuple[str, MessageKind]:
        return "All sessions killed", MessageKind.WARNING


@dataclass(frozen=True)
class SaveTemplates:
    templates: tuple[Template, ...]
    message: str
    failure_prefix: str = "Failed to save template"

    def success(self) -> tuple[str, MessageKind]:
        return self.message, MessageKind.SUCCESS


@dataclass(frozen=True)
class AttachSession:
    name: str
    failure_prefix = "Failed to launch terminal"


@dataclass(frozen=True)
class Quit:
    failure_prefix = ""


Effect = (
    RefreshSessions
    | LoadTemplates
    | CreateSession
    | MaterializeTemplate
    | RenameSession
    | KillSession
    | KillAllSessions
    | SaveTemplates
    | AttachSession
    | Quit
)

"""Events fed into the reducer.

Key presses and submitted text come from the UI; the other events are
produced by the EffectRunner after it has executed effects.
"""

from dataclasses import dataclass, field
from datetime import datetime

from ..layout.models import Template
from ..mux.base import SessionInfo
from .state import MessageKind


def _now() -> float:
    return datetime.now().timestamp()


@dataclass(frozen=True)
class KeyPressed:
    """A key in bubbletea-style notation ("k", "enter", "ctrl+r", "H")."""

    key: str
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class TextSubmitted:
    """Text confirmed in the active input field."""

    value: str


@dataclass(frozen=True)
class Tick:
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class SessionsLoaded:
    sessions: tuple[SessionInfo, ...]
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class TemplatesLoaded:
    templates: tuple[Template, ...]


@dataclass(frozen=True)
class EffectSucceeded:
    message: str
    kind: MessageKind = MessageKind.SUCCESS


@dataclass(frozen=True)
class EffectFailed:
    message: str


@dataclass(frozen=True)
class QuitRequested:
    pass


Event = (
    KeyPressed
    | TextSubmitted
    | Tick
    | SessionsLoaded
    | TemplatesLoaded
    | EffectSucceeded
    | EffectFailed
    | QuitRequested
)

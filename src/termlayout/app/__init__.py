"""Application 模块

纯函数状态机 + 副作用执行：
- AppState 及各模式: 不可变应用状态
- update: (state, event) -> (state, effects)
- EffectRunner: 执行副作用并产生后续事件
- Application: 事件循环胶水
"""

from .events import (
    EffectFailed,
    EffectSucceeded,
    KeyPressed,
    QuitRequested,
    SessionsLoaded,
    TemplatesLoaded,
    TextSubmitted,
    Tick,
)
from .reducer import update
from .runner import Application, EffectRunner
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

__all__ = [
    # State
    "AppState",
    "Browsing",
    "CreatingSession",
    "RenamingSession",
    "Confirming",
    "ConfirmAction",
    "TemplateBrowsing",
    "TemplateCreating",
    "TemplateEditing",
    "PaneEditing",
    "InputField",
    "MessageKind",
    # Events
    "KeyPressed",
    "TextSubmitted",
    "Tick",
    "SessionsLoaded",
    "TemplatesLoaded",
    "EffectSucceeded",
    "EffectFailed",
    "QuitRequested",
    # Loop
    "update",
    "EffectRunner",
    "Application",
]

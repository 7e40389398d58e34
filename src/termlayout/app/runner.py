"""EffectRunner and Application loop glue.

EffectRunner performs effects in order and turns their outcome into
events. The first failing effect stops the batch; nothing already done is
undone and nothing is retried.
"""

from collections.abc import Callable
from pathlib import Path

from ..errors import ExternalCommandError, ValidationError
from ..materializer import TemplateMaterializer
from ..mux.base import Multiplexer
from ..store import load_templates, save_templates
from ..telemetry import get_logger, metrics
from ..terminal import attach_session
from . import effects as fx
from .events import (
    EffectFailed,
    EffectSucceeded,
    Event,
    QuitRequested,
    SessionsLoaded,
    TemplatesLoaded,
)
from .reducer import update
from .state import AppState, MessageKind

logger = get_logger(__name__)


class EffectRunner:
    """Executes reducer effects against tmux, the template file and the terminal."""

    def __init__(
        self,
        mux: Multiplexer,
        terminal: str,
        templates_path: Path | None = None,
        attach: Callable[[str, str], None] = attach_session,
    ):
        """
        Args:
            mux: Multiplexer used for sessions and materialization
            terminal: Terminal emulator used to attach sessions
            templates_path: Template file, default from config
            attach: Launcher called as attach(terminal, session_name)
        """
        self._mux = mux
        self._terminal = terminal
        self._templates_path = templates_path
        self._attach = attach
        self._materializer = TemplateMaterializer(mux)

    async def run(self, effects: list) -> list[Event]:
        """Run ``effects`` in order.

        Returns:
            Events describing the outcome, ending with EffectFailed if an
            effect failed (later effects are then skipped).
        """
        events: list[Event] = []
        for effect in effects:
            try:
                events.extend(await self._run_one(effect))
            except (ExternalCommandError, ValidationError, OSError) as e:
                logger.warning(f"[Runner] {type(effect).__name__} failed: {e}")
                events.append(EffectFailed(f"{effect.failure_prefix}: {e}"))
                break
        return events

    async def _run_one(self, effect) -> list[Event]:
        if isinstance(effect, fx.RefreshSessions):
            sessions = tuple(await self._mux.list_sessions())
            metrics.gauge("sessions.count", len(sessions))
            return [SessionsLoaded(sessions)]

        if isinstance(effect, fx.LoadTemplates):
            events: list[Event] = [TemplatesLoaded(tuple(load_templates(self._templates_path)))]
            if effect.announce:
                events.append(
                    EffectSucceeded("Sessions and templates refreshed", MessageKind.SUCCESS)
                )
            return events

        if isinstance(effect, fx.CreateSession):
            await self._mux.create_session(effect.name)
        elif isinstance(effect, fx.MaterializeTemplate):
            await self._materializer.materialize(effect.session_name, effect.template)
        elif isinstance(effect, fx.RenameSession):
            await self._mux.rename_session(effect.old, effect.new)
        elif isinstance(effect, fx.KillSession):
            await self._mux.kill_session(effect.name)
        elif isinstance(effect, fx.KillAllSessions):
            await self._mux.kill_all_sessions()
        elif isinstance(effect, fx.SaveTemplates):
            save_templates(list(effect.templates), self._templates_path)
        elif isinstance(effect, fx.AttachSession):
            self._attach(self._terminal, effect.name)
            return []
        elif isinstance(effect, fx.Quit):
            return [QuitRequested()]
        else:
            raise TypeError(f"unknown effect: {effect!r}")

        message, kind = effect.success()
        return [EffectSucceeded(message, kind)]


class Application:
    """Holds the current AppState and feeds events through reducer and runner."""

    def __init__(self, state: AppState, runner: EffectRunner):
        self.state = state
        self._runner = runner

    async def dispatch(self, event: Event) -> AppState:
        """Apply ``event`` and every follow-up event its effects produce."""
        pending = [event]
        while pending:
            current = pending.pop(0)
            self.state, effects = update(self.state, current)
            if effects:
                pending.extend(await self._runner.run(effects))
        return self.state

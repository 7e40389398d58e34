"""EffectRunner / Application 测试"""

from unittest.mock import Mock

import pytest

from termlayout.app import effects as fx
from termlayout.app.events import (
    EffectFailed,
    EffectSucceeded,
    KeyPressed,
    QuitRequested,
    SessionsLoaded,
    TemplatesLoaded,
    TextSubmitted,
)
from termlayout.app.runner import Application, EffectRunner
from termlayout.app.state import AppState, MessageKind, TemplateBrowsing
from termlayout.errors import ExternalCommandError
from termlayout.layout.models import Template
from termlayout.mux.base import SessionInfo
from termlayout.store import load_templates, save_templates
from termlayout.telemetry import metrics


@pytest.fixture
def templates_file(tmp_path):
    return tmp_path / "templates.json"


@pytest.fixture
def attach():
    return Mock()


@pytest.fixture
def runner(fake_mux, templates_file, attach):
    return EffectRunner(fake_mux, "kitty", templates_path=templates_file, attach=attach)


class TestEffectRunner:
    """副作用执行测试"""

    @pytest.mark.asyncio
    async def test_create_session(self, runner, fake_mux):
        events = await runner.run([fx.CreateSession("work")])

        assert events == [EffectSucceeded("Created session 'work'", MessageKind.SUCCESS)]
        assert fake_mux.calls == [("create_session", "work")]

    @pytest.mark.asyncio
    async def test_first_failure_stops_batch(self, runner, fake_mux, attach):
        fake_mux.fail_on["create_session"] = "duplicate session: work"

        events = await runner.run([fx.CreateSession("work"), fx.AttachSession("work"), fx.Quit()])

        assert events == [EffectFailed("Failed to create session: duplicate session: work")]
        attach.assert_not_called()

    @pytest.mark.asyncio
    async def test_attach_and_quit(self, runner, attach):
        events = await runner.run([fx.AttachSession("work"), fx.Quit()])

        attach.assert_called_once_with("kitty", "work")
        assert events == [QuitRequested()]

    @pytest.mark.asyncio
    async def test_attach_failure(self, runner, attach):
        attach.side_effect = ExternalCommandError(["kitty"], "No such file")

        events = await runner.run([fx.AttachSession("work"), fx.Quit()])

        assert events == [EffectFailed("Failed to launch terminal: No such file")]

    @pytest.mark.asyncio
    async def test_refresh_sessions(self, runner, fake_mux):
        fake_mux.sessions = [SessionInfo("0")]

        [event] = await runner.run([fx.RefreshSessions()])

        assert isinstance(event, SessionsLoaded)
        assert event.sessions == (SessionInfo("0"),)

    @pytest.mark.asyncio
    async def test_materialize(self, runner, fake_mux):
        template = Template.new_root("dev")
        template.panes[0].command = "vim"

        [event] = await runner.run([fx.MaterializeTemplate("dev-1", template)])

        assert event.message == "Created session 'dev-1' from template 'dev'"
        assert ("send_keys", "%0", "vim") in fake_mux.calls

    @pytest.mark.asyncio
    async def test_kill_all_is_warning(self, runner):
        [event] = await runner.run([fx.KillAllSessions()])
        assert event == EffectSucceeded("All sessions killed", MessageKind.WARNING)

    @pytest.mark.asyncio
    async def test_save_and_load_templates(self, runner, templates_file):
        templates = (Template.new_root("dev"),)

        [saved] = await runner.run([fx.SaveTemplates(templates, "Template saved")])
        assert saved == EffectSucceeded("Template saved")
        assert [t.name for t in load_templates(templates_file)] == ["dev"]

        loaded, announced = await runner.run([fx.LoadTemplates(announce=True)])
        assert isinstance(loaded, TemplatesLoaded)
        assert [t.name for t in loaded.templates] == ["dev"]
        assert announced.message == "Sessions and templates refreshed"

    @pytest.mark.asyncio
    async def test_save_failure_uses_effect_prefix(self, fake_mux, tmp_path, attach):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        runner = EffectRunner(fake_mux, "kitty", templates_path=blocker / "t.json", attach=attach)

        [event] = await runner.run(
            [
                fx.SaveTemplates(
                    (), "Deleted template 'dev'", failure_prefix="Failed to delete template"
                )
            ]
        )

        assert isinstance(event, EffectFailed)
        assert event.message.startswith("Failed to delete template: ")


class TestApplication:
    """reducer + runner 组合"""

    @pytest.mark.asyncio
    async def test_new_session_flow(self, runner, fake_mux, attach):
        fake_mux.sessions = [SessionInfo("0")]
        app = Application(AppState(sessions=(SessionInfo("0"),)), runner)

        await app.dispatch(KeyPressed("n"))
        state = await app.dispatch(TextSubmitted(""))

        assert fake_mux.calls_of("create_session") == [("create_session", "1")]
        attach.assert_called_once_with("kitty", "1")
        assert state.quitting
        assert state.message == "Created session '1'"

    @pytest.mark.asyncio
    async def test_kill_flow_refreshes(self, runner, fake_mux):
        fake_mux.sessions = [SessionInfo("0"), SessionInfo("work")]
        app = Application(AppState(sessions=tuple(fake_mux.sessions), cursor=1), runner)

        await app.dispatch(KeyPressed("d"))
        state = await app.dispatch(KeyPressed("y"))

        assert fake_mux.calls_of("kill_session") == [("kill_session", "work")]
        assert state.sessions == (SessionInfo("0"),)
        assert state.cursor == 0
        assert state.message == "Deleted session 'work'"

    @pytest.mark.asyncio
    async def test_failed_rename_keeps_sessions(self, runner, fake_mux):
        fake_mux.fail_on["rename_session"] = "can't find session: gone"
        app = Application(AppState(sessions=(SessionInfo("gone"),)), runner)

        await app.dispatch(KeyPressed("r"))
        state = await app.dispatch(TextSubmitted("new"))

        assert state.message == "Failed to rename session: can't find session: gone"
        assert state.message_kind == MessageKind.ERROR
        assert fake_mux.calls_of("list_sessions") == []

    @pytest.mark.asyncio
    async def test_edit_and_save_template(self, runner, templates_file):
        save_templates([Template.new_root("dev")], templates_file)
        app = Application(AppState(templates=tuple(load_templates(templates_file))), runner)

        for key in ("t", "e", "L", "s"):
            await app.dispatch(KeyPressed(key))

        assert isinstance(app.state.mode, TemplateBrowsing)
        assert app.state.message == "Template saved"
        [stored] = load_templates(templates_file)
        assert [p.position for p in stored.panes] == ["main", "right"]


@pytest.mark.asyncio
async def test_refresh_records_session_gauge(runner, fake_mux):
    fake_mux.sessions = [SessionInfo("a"), SessionInfo("b")]
    await runner.run([fx.RefreshSessions()])
    assert metrics.get_gauge("sessions.count") == 2

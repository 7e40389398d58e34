"""TemplateMaterializer 测试"""

import json

import pytest

from termlayout.errors import ExternalCommandError
from termlayout.layout.models import Pane, Template
from termlayout.materializer import SplitPlan, TemplateMaterializer, plan_split
from termlayout.mux.base import SplitAxis
from termlayout.store import load_templates
from termlayout.telemetry import metrics


def _template(*panes: Pane) -> Template:
    return Template(name="dev", panes=list(panes))


class TestPlanSplit:
    def test_right(self):
        plan = plan_split(Pane(id=2, position="right", parent=1, split_percent=30))
        assert plan == SplitPlan(axis=SplitAxis.VERTICAL, before=False, percent=30)

    def test_left_is_before(self):
        plan = plan_split(Pane(id=2, position="left", parent=1))
        assert plan == SplitPlan(axis=SplitAxis.VERTICAL, before=True, percent=None)

    def test_up_and_down(self):
        assert plan_split(Pane(id=2, position="up")).axis == SplitAxis.HORIZONTAL
        assert plan_split(Pane(id=2, position="up")).before
        assert plan_split(Pane(id=2, position="down")).axis == SplitAxis.HORIZONTAL
        assert not plan_split(Pane(id=2, position="down")).before

    def test_up_uses_position_order(self):
        plan = plan_split(Pane(id=2, position="up", parent=1, split_percent=25))
        assert plan == SplitPlan(axis=SplitAxis.HORIZONTAL, before=True, percent=25)

    @pytest.mark.parametrize("percent", [100, 150, -1])
    def test_out_of_range_percent_omitted(self, percent):
        plan = plan_split(Pane(id=2, position="right", parent=1, split_percent=percent))
        assert plan.percent is None

    def test_unknown_position_falls_back(self):
        plan = plan_split(Pane(id=2, position="diagonal", split_percent=0))
        assert plan == SplitPlan(axis=SplitAxis.VERTICAL, before=False, percent=None)


class TestMaterialize:
    """模板回放顺序测试"""

    @pytest.mark.asyncio
    async def test_single_root_pane(self, fake_mux):
        template = _template(Pane(id=1, command="htop"))

        result = await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        assert fake_mux.calls_of("create_session") == [("create_session", "dev-1")]
        assert fake_mux.calls_of("send_keys") == [("send_keys", "%0", "htop")]
        assert fake_mux.calls_of("split_pane") == []
        assert result.handles == {1: "%0"}
        assert result.root_handle == "%0"
        assert metrics.get_counter("materialize.ok") == 1

    @pytest.mark.asyncio
    async def test_child_with_percent(self, fake_mux):
        template = _template(
            Pane(id=1),
            Pane(id=2, position="right", parent=1, split_percent=30),
        )

        await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        assert fake_mux.calls_of("split_pane") == [
            ("split_pane", "%0", SplitAxis.VERTICAL, False, 30)
        ]

    @pytest.mark.asyncio
    async def test_default_percent_omitted(self, fake_mux):
        template = _template(
            Pane(id=1),
            Pane(id=2, position="down", parent=1, split_percent=50),
        )

        await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        [(_, _, axis, before, percent)] = fake_mux.calls_of("split_pane")
        assert axis == SplitAxis.HORIZONTAL
        assert before is False
        assert percent is None

    @pytest.mark.asyncio
    async def test_loaded_out_of_range_percent_uses_default(self, fake_mux, tmp_path):
        """文件中超出范围的占比不会传给 tmux"""
        path = tmp_path / "templates.json"
        path.write_text(
            json.dumps([
                {
                    "name": "dev",
                    "panes": [
                        {"id": 1, "position": "main"},
                        {"id": 2, "position": "right", "parent": 1, "split_percent": 150},
                    ],
                }
            ]),
            encoding="utf-8",
        )
        [template] = load_templates(path)

        await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        assert fake_mux.calls_of("split_pane") == [
            ("split_pane", "%0", SplitAxis.VERTICAL, False, None)
        ]

    @pytest.mark.asyncio
    async def test_unknown_parent_uses_root(self, fake_mux):
        template = _template(
            Pane(id=1),
            Pane(id=2, position="right", parent=1),
            Pane(id=3, position="down", parent=99),
        )

        result = await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        splits = fake_mux.calls_of("split_pane")
        assert splits[1][1] == "%0"
        assert result.handles == {1: "%0", 2: "%1", 3: "%2"}

    @pytest.mark.asyncio
    async def test_nested_splits_target_parent_handle(self, fake_mux):
        template = _template(
            Pane(id=1, command="vim"),
            Pane(id=2, position="right", parent=1, command="npm run dev"),
            Pane(id=3, position="down", parent=2, command="git status"),
        )

        await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        assert fake_mux.calls == [
            ("create_session", "dev-1"),
            ("list_panes", "dev-1"),
            ("send_keys", "%0", "vim"),
            ("split_pane", "%0", SplitAxis.VERTICAL, False, None),
            ("send_keys", "%1", "npm run dev"),
            ("split_pane", "%1", SplitAxis.HORIZONTAL, False, None),
            ("send_keys", "%2", "git status"),
            ("select_pane", "%0"),
        ]

    @pytest.mark.asyncio
    async def test_blank_commands_not_sent(self, fake_mux):
        template = _template(Pane(id=1, command="   "), Pane(id=2, position="right", parent=1))

        await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        assert fake_mux.calls_of("send_keys") == []
        assert fake_mux.ops()[-1] == "select_pane"

    @pytest.mark.asyncio
    async def test_empty_template_only_creates_session(self, fake_mux):
        result = await TemplateMaterializer(fake_mux).materialize("dev-1", _template())

        assert fake_mux.ops() == ["create_session"]
        assert result.root_handle is None

    @pytest.mark.asyncio
    async def test_failure_aborts_without_rollback(self, fake_mux):
        fake_mux.fail_on["split_pane"] = "no space for new pane"
        template = _template(
            Pane(id=1, command="vim"),
            Pane(id=2, position="right", parent=1, command="htop"),
            Pane(id=3, position="down", parent=1),
        )

        with pytest.raises(ExternalCommandError, match="no space for new pane"):
            await TemplateMaterializer(fake_mux).materialize("dev-1", template)

        assert fake_mux.ops() == ["create_session", "list_panes", "send_keys", "split_pane"]
        assert [s.name for s in fake_mux.sessions] == ["dev-1"]
        assert metrics.get_counter("materialize.error") == 1
        assert metrics.get_counter("materialize.ok") == 0

    @pytest.mark.asyncio
    async def test_create_failure(self, fake_mux):
        fake_mux.fail_on["create_session"] = "duplicate session: dev-1"

        with pytest.raises(ExternalCommandError):
            await TemplateMaterializer(fake_mux).materialize("dev-1", Template.new_root("dev"))

        assert fake_mux.ops() == ["create_session"]

    @pytest.mark.asyncio
    async def test_no_panes_listed(self, fake_mux):
        async def no_panes(session):
            return []

        fake_mux.list_panes = no_panes

        with pytest.raises(ExternalCommandError):
            await TemplateMaterializer(fake_mux).materialize("dev-1", Template.new_root("dev"))

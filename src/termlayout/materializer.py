"""TemplateMaterializer - 将模板回放为真实会话

职责：
- 按模板顺序依次创建 pane，维护 逻辑 id → 运行时句柄 映射
- 向每个 pane 发送命令
- 最后聚焦根 pane

不负责：
- 会话名校验（由调用方在调用前完成）
- 失败回滚（部分创建的会话保留原样，便于检查）
"""

from dataclasses import dataclass, field

from .config import DEFAULT_SPLIT_PERCENT
from .errors import ExternalCommandError
from .layout.models import Pane, Position, Template
from .mux.base import Multiplexer, SplitAxis
from .telemetry import get_logger, metrics, truncate_command

logger = get_logger(__name__)


@dataclass
class SplitPlan:
    """One split-window step derived from a pane."""

    axis: SplitAxis
    before: bool
    percent: int | None


@dataclass
class MaterializedSession:
    """Result of a successful materialization.

    Attributes:
        name: Session name
        handles: Logical pane id -> runtime handle
        root_handle: Handle of the root pane, None for an empty template
    """

    name: str
    handles: dict[int, str] = field(default_factory=dict)
    root_handle: str | None = None


def plan_split(pane: Pane) -> SplitPlan:
    """Derive split arguments from a pane's position and percent.

    The percent is only passed when it lies in 1-99 and differs from the
    default; letting tmux halve the pane avoids its rounding of an
    explicit 50.
    """
    try:
        position = Position(pane.position)
    except ValueError:
        position = None

    if position in (Position.UP, Position.DOWN):
        axis = SplitAxis.HORIZONTAL
    else:
        # left/right, and anything unrecognised, split side-by-side
        axis = SplitAxis.VERTICAL
    before = position is not None and position.is_before

    percent = None
    if 0 < pane.split_percent < 100 and pane.split_percent != DEFAULT_SPLIT_PERCENT:
        percent = pane.split_percent
    return SplitPlan(axis=axis, before=before, percent=percent)


class TemplateMaterializer:
    """Replays a template's split-tree against a Multiplexer.

    Every step awaits the previous one: each split targets a handle that an
    earlier step produced. The first failing call aborts the rest.
    """

    def __init__(self, mux: Multiplexer):
        self._mux = mux

    async def materialize(self, session_name: str, template: Template) -> MaterializedSession:
        """Build a live session named ``session_name`` from ``template``.

        Raises:
            ExternalCommandError: On the first failing external call. Panes
                already created are left in place.
        """
        result = MaterializedSession(name=session_name)
        logger.info(
            f"[Materializer] {template.name!r} -> session {session_name!r} "
            f"({len(template.panes)} panes)"
        )

        try:
            await self._mux.create_session(session_name)
            if not template.panes:
                return result

            handles = await self._mux.list_panes(session_name)
            if not handles:
                raise ExternalCommandError(
                    ["list-panes", "-t", session_name], f"no panes in session {session_name}"
                )
            root = template.panes[0]
            root_handle = handles[0]
            result.root_handle = root_handle
            result.handles[root.id] = root_handle
            await self._send_command(root_handle, root.command)

            for index in range(1, len(template.panes)):
                pane = template.panes[index]
                parent_handle = self._resolve_parent(template, index, result.handles, root_handle)
                plan = plan_split(pane)

                handle = await self._mux.split_pane(
                    parent_handle, plan.axis, before=plan.before, percent=plan.percent
                )
                metrics.inc("materialize.split")
                logger.debug(
                    f"[Materializer] pane {pane.id} ({pane.position}) split from "
                    f"{parent_handle} -> {handle}"
                )
                result.handles[pane.id] = handle
                await self._send_command(handle, pane.command)

            await self._mux.select_pane(root_handle)
        except ExternalCommandError as e:
            metrics.inc("materialize.error")
            logger.error(f"[Materializer] aborted {session_name!r}: {e.message}")
            raise

        metrics.inc("materialize.ok")
        return result

    def _resolve_parent(
        self,
        template: Template,
        index: int,
        handles: dict[int, str],
        root_handle: str,
    ) -> str:
        """Handle of the parent, if it was created earlier; else the root."""
        parent_id = template.panes[index].parent
        earlier_ids = {p.id for p in template.panes[:index]}
        if parent_id in earlier_ids and parent_id in handles:
            return handles[parent_id]
        logger.debug(
            f"[Materializer] pane {template.panes[index].id}: parent {parent_id} "
            f"not created earlier, using root"
        )
        return root_handle

    async def _send_command(self, handle: str, command: str) -> None:
        command = command.strip()
        if not command:
            return
        await self._mux.send_keys(handle, command)
        metrics.inc("materialize.send_keys")
        logger.debug(f"[Materializer] {handle} <- {truncate_command(command)}")

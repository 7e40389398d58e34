"""Pytest 配置"""

import pytest

from termlayout.errors import ExternalCommandError
from termlayout.mux.base import Multiplexer, SessionInfo
from termlayout.telemetry import metrics


@pytest.fixture
def anyio_backend():
    """指定 anyio 只使用 asyncio backend"""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_metrics():
    """每次测试前重置指标"""
    metrics.reset()
    yield
    metrics.reset()


class FakeMultiplexer(Multiplexer):
    """内存实现的 Multiplexer，记录每次调用

    Attributes:
        calls: (op, *args) 调用记录
        fail_on: 需要失败的操作名 -> 错误信息
        sessions: list_sessions 返回值
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_on: dict[str, str] = {}
        self.sessions: list[SessionInfo] = []
        self._next_handle = 0
        self._roots: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "fake"

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        if op in self.fail_on:
            raise ExternalCommandError([op, *map(str, args)], self.fail_on[op])

    def _new_handle(self) -> str:
        handle = f"%{self._next_handle}"
        self._next_handle += 1
        return handle

    def ops(self) -> list[str]:
        return [call[0] for call in self.calls]

    def calls_of(self, op: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == op]

    async def create_session(self, name: str) -> None:
        self._record("create_session", name)
        self._roots[name] = self._new_handle()
        self.sessions.append(SessionInfo(name=name))

    async def list_panes(self, session: str) -> list[str]:
        self._record("list_panes", session)
        root = self._roots.get(session)
        return [root] if root else []

    async def split_pane(self, parent, axis, before=False, percent=None) -> str:
        self._record("split_pane", parent, axis, before, percent)
        return self._new_handle()

    async def send_keys(self, handle: str, text: str) -> None:
        self._record("send_keys", handle, text)

    async def select_pane(self, handle: str) -> None:
        self._record("select_pane", handle)

    async def kill_session(self, name: str) -> None:
        self._record("kill_session", name)
        self.sessions = [s for s in self.sessions if s.name != name]

    async def kill_all_sessions(self) -> None:
        self._record("kill_all_sessions")
        self.sessions = []

    async def rename_session(self, old: str, new: str) -> None:
        self._record("rename_session", old, new)
        self.sessions = [SessionInfo(name=new) if s.name == old else s for s in self.sessions]

    async def list_sessions(self) -> list[SessionInfo]:
        self._record("list_sessions")
        return list(self.sessions)


@pytest.fixture
def fake_mux():
    """创建测试用 FakeMultiplexer"""
    return FakeMultiplexer()

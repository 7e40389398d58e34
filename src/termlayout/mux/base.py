"""Multiplexer 抽象接口

定义终端复用器的统一能力接口，TemplateMaterializer 只依赖此接口：
- tmux（TmuxClient）
- 测试中的内存实现

设计原则：
1. 最小接口：只定义物化模板和会话管理需要的操作
2. 失败即异常：修改类操作失败时抛出 ExternalCommandError
3. 异步优先：所有 IO 操作都是 async
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class SplitAxis(Enum):
    """分割轴

    - VERTICAL: 竖直分割线，左右并排（tmux -h）
    - HORIZONTAL: 水平分割线，上下堆叠（tmux -v）
    """

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class SessionInfo:
    """会话信息

    Attributes:
        name: 会话名
        windows: window 数量
        created: 创建时间（unix 秒），未知时为 None
        attached: 是否有客户端连接
    """

    name: str
    windows: int = 1
    created: int | None = None
    attached: bool = False


class Multiplexer(ABC):
    """终端复用器能力接口

    使用示例:
        mux = TmuxClient()
        await mux.create_session("work")
        [root] = await mux.list_panes("work")
        right = await mux.split_pane(root, SplitAxis.VERTICAL, percent=30)
        await mux.send_keys(right, "htop")
        await mux.select_pane(root)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """复用器名称（如 "tmux"）"""
        pass

    @abstractmethod
    async def create_session(self, name: str) -> None:
        """创建一个空的 detached 会话"""
        pass

    @abstractmethod
    async def list_panes(self, session: str) -> list[str]:
        """列出会话内所有 pane 的运行时句柄

        Returns:
            句柄列表（如 ["%0"]）
        """
        pass

    @abstractmethod
    async def split_pane(
        self,
        parent: str,
        axis: SplitAxis,
        before: bool = False,
        percent: int | None = None,
    ) -> str:
        """分割 pane

        Args:
            parent: 被分割 pane 的句柄
            axis: 分割轴
            before: 新 pane 放在左侧/上方
            percent: 新 pane 占比，None 表示使用默认对半分

        Returns:
            新 pane 的句柄
        """
        pass

    @abstractmethod
    async def send_keys(self, handle: str, text: str) -> None:
        """向 pane 输入文本并回车"""
        pass

    @abstractmethod
    async def select_pane(self, handle: str) -> None:
        """聚焦 pane"""
        pass

    @abstractmethod
    async def kill_session(self, name: str) -> None:
        """关闭会话"""
        pass

    @abstractmethod
    async def kill_all_sessions(self) -> None:
        """关闭所有会话"""
        pass

    @abstractmethod
    async def rename_session(self, old: str, new: str) -> None:
        """重命名会话"""
        pass

    @abstractmethod
    async def list_sessions(self) -> list[SessionInfo]:
        """列出所有会话，服务未运行时返回空列表"""
        pass

"""Multiplexer 模块

提供复用器能力接口和 tmux 实现：
- Multiplexer: 能力接口
- SessionInfo, SplitAxis: 数据结构
- TmuxClient: tmux 子进程实现
"""

from .base import Multiplexer, SessionInfo, SplitAxis
from .tmux import TmuxClient

__all__ = ["Multiplexer", "SessionInfo", "SplitAxis", "TmuxClient"]

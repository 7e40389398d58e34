"""termlayout 配置

配置分为以下几类：
- 布局配置：逻辑网格尺寸、预览画布尺寸
- 存储配置：模板文件位置
- 会话配置：自动刷新间隔、数字会话名范围
- 终端配置：终端模拟器探测顺序
- 日志配置
"""

import os
from pathlib import Path

# === 布局配置 ===
LAYOUT_GRID_W = 100  # 逻辑网格宽度
LAYOUT_GRID_H = 100  # 逻辑网格高度
DEFAULT_SPLIT_PERCENT = 50  # 新 pane 默认占比

# === 预览配置 ===
PREVIEW_ROWS = 12  # 预览画布行数
PREVIEW_COLS = 48  # 预览画布列数
PREVIEW_MIN_BOX_ROWS = 3  # 最小可绘制框高度
PREVIEW_MIN_BOX_COLS = 6  # 最小可绘制框宽度

# === 存储配置 ===
CONFIG_DIR = Path(
    os.environ.get("TERMLAYOUT_CONFIG_DIR", Path.home() / ".config" / "termlayout")
)
TEMPLATES_FILE = CONFIG_DIR / "templates.json"

# === 会话配置 ===
AUTO_REFRESH_INTERVAL = 5.0  # 会话列表自动刷新间隔（秒）
NUMERIC_NAME_MAX = 999  # 自动数字会话名上限

# === 终端配置 ===
TERMINAL_ENV_VARS = ["TERMLAYOUT_TERMINAL", "TERMINAL"]  # 按顺序检查
TERMINAL_CANDIDATES = [
    "kitty",
    "alacritty",
    "gnome-terminal",
    "xterm",
    "konsole",
    "terminator",
    "tilix",
]
FALLBACK_TERMINAL = "xterm"

# === 日志配置 ===
LOG_LEVEL = os.environ.get("TERMLAYOUT_LOG_LEVEL", "INFO")  # 日志级别
LOG_MAX_CMD_LEN = 120  # 命令日志截断长度

VERSION = "0.1.0"

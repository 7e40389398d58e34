"""Layout 模块

提供模板布局相关功能：
- Pane, Template, Position: 数据模型
- normalize_panes: 几何边界归一化
- split_pane, delete_pane: 交互式分割/删除
- rederive_geometry: 加载后重建几何
- GridRenderer, render_preview: 字符画预览
"""

from .geometry import rederive_geometry, resolve_parent_index
from .models import SPLIT_DIRECTIONS, Pane, Position, Template
from .normalizer import normalize_pane, normalize_panes
from .preview import GridRenderer, Preview, PreviewBox, map_box, render_preview
from .splitter import delete_pane, split_pane, split_sizes

__all__ = [
    # Models
    "Pane",
    "Position",
    "Template",
    "SPLIT_DIRECTIONS",
    # Normalizer
    "normalize_pane",
    "normalize_panes",
    # Splitter
    "split_pane",
    "split_sizes",
    "delete_pane",
    # Geometry
    "rederive_geometry",
    "resolve_parent_index",
    # Preview
    "GridRenderer",
    "Preview",
    "PreviewBox",
    "map_box",
    "render_preview",
]

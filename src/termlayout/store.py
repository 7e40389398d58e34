"""模板持久化模块

提供模板文件读写：
- 原子写入（temp + rename）
- pydantic 校验记录结构
- 损坏文件告警返回空列表，无效记录逐条跳过
- 加载后重建编辑几何
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator

from .config import DEFAULT_SPLIT_PERCENT, TEMPLATES_FILE
from .layout.geometry import rederive_geometry
from .layout.models import Pane, Position, Template
from .telemetry import get_logger, metrics

logger = get_logger(__name__)


class PaneRecord(BaseModel):
    """持久化的 pane 记录（不含几何）"""

    model_config = ConfigDict(extra="ignore")

    id: int
    command: str = ""
    position: str = Position.MAIN.value
    parent: int = 0
    split_percent: int = DEFAULT_SPLIT_PERCENT

    @field_validator("split_percent")
    @classmethod
    def _percent_in_range(cls, v: int) -> int:
        """超出 1-99 的占比回退为默认值"""
        if v < 1 or v > 99:
            return DEFAULT_SPLIT_PERCENT
        return v


class TemplateRecord(BaseModel):
    """持久化的模板记录"""

    model_config = ConfigDict(extra="ignore")

    name: str
    description: str = ""
    panes: list[PaneRecord] = []

    def to_template(self) -> Template:
        panes = [Pane(**p.model_dump()) for p in self.panes]
        return rederive_geometry(Template(name=self.name, description=self.description, panes=panes))


def _ensure_dir(path: Path) -> None:
    """确保目录存在"""
    path.mkdir(parents=True, exist_ok=True)


def load_templates(path: Path | None = None) -> list[Template]:
    """加载模板文件

    文件不存在、JSON 无效或顶层不是数组时返回空列表；
    单条记录校验失败时跳过该条，其余模板照常加载。

    Args:
        path: 文件路径，默认使用配置

    Returns:
        模板列表（几何已重建）
    """
    path = path or TEMPLATES_FILE

    if not path.exists():
        logger.debug(f"[Store] File not found: {path}")
        return []

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            logger.warning(f"[Store] Expected a JSON array in {path}")
            metrics.inc("store.error", {"op": "load", "reason": "schema"})
            return []

    except json.JSONDecodeError as e:
        logger.warning(f"[Store] Invalid JSON: {e}")
        metrics.inc("store.error", {"op": "load", "reason": "json"})
        return []

    except OSError as e:
        logger.error(f"[Store] Load failed: {e}")
        metrics.inc("store.error", {"op": "load", "reason": "io"})
        return []

    templates = []
    for index, item in enumerate(raw):
        try:
            record = TemplateRecord.model_validate(item)
        except PydanticValidationError as e:
            logger.warning(f"[Store] Skipping invalid template record #{index}: {e}")
            metrics.inc("store.error", {"op": "load", "reason": "schema"})
            continue
        templates.append(record.to_template())

    logger.info(f"[Store] Loaded {len(templates)} templates")
    return templates


def save_templates(templates: list[Template], path: Path | None = None) -> None:
    """保存所有模板

    使用 temp + rename 原子写入。

    Args:
        templates: 全部模板
        path: 保存路径，默认使用配置

    Raises:
        OSError: 写入失败（临时文件会被清理）
    """
    path = path or TEMPLATES_FILE

    data = [t.to_dict() for t in templates]
    json_bytes = json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")

    _ensure_dir(path.parent)

    # 原子写入：先写临时文件，再 rename
    fd, temp_path = tempfile.mkstemp(
        prefix="termlayout_templates_",
        suffix=".tmp",
        dir=path.parent,
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(json_bytes)
        os.replace(temp_path, path)
    except OSError:
        metrics.inc("store.error", {"op": "save"})
        # 清理临时文件
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    logger.info(f"[Store] Saved {len(templates)} templates")

"""Pane geometry normalizer.

Clamps each pane's geometry to the logical grid. Per-pane only: overlap
between distinct panes is neither detected nor resolved.
"""

from ..config import DEFAULT_SPLIT_PERCENT, LAYOUT_GRID_H, LAYOUT_GRID_W
from .models import Pane


def normalize_pane(pane: Pane, grid_w: int = LAYOUT_GRID_W, grid_h: int = LAYOUT_GRID_H) -> None:
    """Rewrite one pane in place so its bounds fit the grid."""
    if pane.split_percent <= 0:
        pane.split_percent = DEFAULT_SPLIT_PERCENT
    if pane.width < 1:
        pane.width = 1
    if pane.height < 1:
        pane.height = 1
    if pane.col < 0:
        pane.col = 0
    if pane.row < 0:
        pane.row = 0
    # keep at least one cell inside the grid so the shrink below leaves width >= 1
    if pane.col > grid_w - 1:
        pane.col = grid_w - 1
    if pane.row > grid_h - 1:
        pane.row = grid_h - 1
    if pane.col + pane.width > grid_w:
        pane.width = grid_w - pane.col
    if pane.row + pane.height > grid_h:
        pane.height = grid_h - pane.row


def normalize_panes(
    panes: list[Pane], grid_w: int = LAYOUT_GRID_W, grid_h: int = LAYOUT_GRID_H
) -> list[Pane]:
    """Normalize every pane in place. Idempotent.

    Returns:
        The same list, for chaining.
    """
    for pane in panes:
        normalize_pane(pane, grid_w, grid_h)
    return panes
